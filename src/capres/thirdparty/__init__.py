"""Discovery of optional third-party modules from their build descriptors."""

from .library_family import (
    OPENEXR_FAMILY,
    LibraryFamily,
    LibraryFamilyDecision,
    decide_library_family,
    resolve_library_family,
)
from .module_scanner import (
    DESCRIPTOR_EXTENSION,
    MODULE_BASE_MARKER,
    ModuleDescriptor,
    collect_modules,
    declaration_pattern,
    extract_module_name,
    find_module_descriptors,
    scan_modules,
)

__all__ = [
    "DESCRIPTOR_EXTENSION",
    "LibraryFamily",
    "LibraryFamilyDecision",
    "MODULE_BASE_MARKER",
    "ModuleDescriptor",
    "OPENEXR_FAMILY",
    "collect_modules",
    "declaration_pattern",
    "decide_library_family",
    "extract_module_name",
    "find_module_descriptors",
    "resolve_library_family",
    "scan_modules",
]
