"""Third-Party Module Scanner.

Discovers which optional modules a third-party source tree provides by
reading their build descriptors instead of hard-coding names. A descriptor
is a file named ``<prefix>*<extension>`` whose module is declared on a line
like:

    public class OpenEXR : ModuleRules

The first matching line of a file wins. Files without a declaration
contribute nothing.

File name matching is literal (no glob syntax) and case-sensitive on
every host. Callers that need to cover inconsistent spellings of a vendor
prefix pass each spelling separately (see collect_modules).
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from capres.errors import ModuleScanError

logger = logging.getLogger(__name__)

DESCRIPTOR_EXTENSION = ".Build.cs"
MODULE_BASE_MARKER = "ModuleRules"


@dataclass(frozen=True)
class ModuleDescriptor:
    """A module identifier and the descriptor file that declared it."""

    identifier: str
    path: Path


def declaration_pattern(base_marker: str = MODULE_BASE_MARKER) -> "re.Pattern[str]":
    """Regex matching ``class <Identifier> : <base_marker>`` at the start of a line."""
    return re.compile(rf"^\s*(?:public\s+)?class\s+([A-Za-z0-9_]+)\s*:\s*{re.escape(base_marker)}\b")


def extract_module_name(descriptor: Path, pattern: Optional["re.Pattern[str]"] = None) -> Optional[str]:
    """Return the identifier declared in a descriptor file, or None.

    Raises:
        ModuleScanError: If the file cannot be read
    """
    pattern = pattern or declaration_pattern()
    try:
        with open(descriptor, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                match = pattern.match(line)
                if match:
                    return match.group(1)
    except OSError as e:
        raise ModuleScanError(f"Cannot read build descriptor {descriptor}: {e}") from e
    return None


def _is_descriptor_name(filename: str, prefix: str, extension: str) -> bool:
    # Literal <prefix>*<extension>; prefix and extension may not overlap
    return len(filename) >= len(prefix) + len(extension) and filename.startswith(prefix) and filename.endswith(extension)


def _raise_walk_error(error: OSError) -> None:
    raise ModuleScanError(f"Cannot list {error.filename}: {error.strerror or error}") from error


def find_module_descriptors(
    root: Union[str, Path],
    prefix: str,
    extension: str = DESCRIPTOR_EXTENSION,
    base_marker: str = MODULE_BASE_MARKER,
) -> List[ModuleDescriptor]:
    """Recursively find descriptors under root and extract their identifiers.

    Args:
        root: Third-party source root; a missing root yields an empty list
        prefix: File name prefix (case-sensitive)
        extension: Descriptor file suffix
        base_marker: Base class name identifying a module declaration

    Returns:
        One ModuleDescriptor per file that declares a module, in walk order

    Raises:
        ModuleScanError: If a directory cannot be listed or a file cannot be read
    """
    root_path = Path(root)
    if not root_path.is_dir():
        logger.debug(f"Third-party root not found: {root_path}")
        return []

    pattern = declaration_pattern(base_marker)
    descriptors: List[ModuleDescriptor] = []

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_raise_walk_error):
        dirnames.sort()
        for fn in sorted(filenames):
            if not _is_descriptor_name(fn, prefix, extension):
                continue
            path = Path(dirpath) / fn
            identifier = extract_module_name(path, pattern)
            if identifier:
                logger.debug(f"Found module {identifier} in {path}")
                descriptors.append(ModuleDescriptor(identifier=identifier, path=path))
            else:
                logger.debug(f"No module declaration in {path}")

    return descriptors


def scan_modules(
    root: Union[str, Path],
    prefix: str,
    extension: str = DESCRIPTOR_EXTENSION,
    base_marker: str = MODULE_BASE_MARKER,
) -> frozenset[str]:
    """Deduplicated set of module identifiers declared under root for one prefix."""
    return frozenset(d.identifier for d in find_module_descriptors(root, prefix, extension, base_marker))


def collect_modules(
    root: Union[str, Path],
    prefixes: Iterable[str],
    extension: str = DESCRIPTOR_EXTENSION,
    base_marker: str = MODULE_BASE_MARKER,
) -> frozenset[str]:
    """Union of scan_modules over several prefix spellings, one pass per spelling."""
    modules: set[str] = set()
    for prefix in prefixes:
        modules.update(scan_modules(root, prefix, extension, base_marker))
    return frozenset(modules)
