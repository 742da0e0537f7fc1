"""Optional third-party library family resolution.

A family is a primary library plus a secondary library it depends on
(OpenEXR and Imath by default). The rule is two-level:

- primary modules are added as dependencies whenever any are found;
- secondary modules are only added when the primary is present;
- the family flag is enabled only when both module sets are non-empty.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from capres.errors import ModuleScanError
from capres.output import log_error

from .module_scanner import collect_modules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LibraryFamily:
    """Descriptor prefixes for one optional library family.

    Attributes:
        flag: Compile-time definition set when the family is usable
        primary_prefixes: Prefix spellings for the primary library, each scanned separately
        secondary_prefixes: Prefix spellings for the secondary library
    """

    flag: str
    primary_prefixes: tuple[str, ...]
    secondary_prefixes: tuple[str, ...]


# OpenEXR descriptors are spelled both ways across engine versions
OPENEXR_FAMILY = LibraryFamily(
    flag="WITH_OMNICAPTURE_OPENEXR",
    primary_prefixes=("OpenEXR", "OpenExr"),
    secondary_prefixes=("Imath",),
)


@dataclass(frozen=True)
class LibraryFamilyDecision:
    flag: str
    enabled: bool
    primary_modules: frozenset[str] = frozenset()
    secondary_modules: frozenset[str] = frozenset()
    dependency_modules: tuple[str, ...] = ()
    diagnostics: tuple[str, ...] = ()

    @property
    def definition(self) -> str:
        return f"{self.flag}={1 if self.enabled else 0}"


def decide_library_family(
    family: LibraryFamily,
    primary_modules: frozenset[str],
    secondary_modules: frozenset[str],
) -> LibraryFamilyDecision:
    """Apply the two-level enable rule to already-scanned module sets."""
    dependencies: list[str] = []
    if primary_modules:
        dependencies.extend(sorted(primary_modules))
        if secondary_modules:
            dependencies.extend(sorted(secondary_modules))

    return LibraryFamilyDecision(
        flag=family.flag,
        enabled=bool(primary_modules) and bool(secondary_modules),
        primary_modules=primary_modules,
        secondary_modules=secondary_modules,
        dependency_modules=tuple(dependencies),
    )


def resolve_library_family(
    third_party_dir: Optional[Union[str, Path]],
    family: LibraryFamily = OPENEXR_FAMILY,
) -> LibraryFamilyDecision:
    """Scan a third-party tree for a library family and decide its flag.

    A missing tree disables the family. A scan failure is reported and
    disables only this family; it is not raised.
    """
    if third_party_dir is None or not Path(third_party_dir).is_dir():
        logger.debug(f"No third-party directory for {family.flag}: {third_party_dir}")
        return decide_library_family(family, frozenset(), frozenset())

    try:
        primary = collect_modules(third_party_dir, family.primary_prefixes)
        secondary = collect_modules(third_party_dir, family.secondary_prefixes)
    except ModuleScanError as e:
        log_error(f"{family.flag} disabled: {e}")
        return LibraryFamilyDecision(flag=family.flag, enabled=False, diagnostics=(str(e),))

    logger.debug(f"{family.flag}: primary={sorted(primary)} secondary={sorted(secondary)}")
    return decide_library_family(family, primary, secondary)
