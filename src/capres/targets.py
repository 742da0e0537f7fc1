"""Target Platform Definitions.

A target platform is the platform the build is configured for, not the host
running capres. Capabilities declare which platform groups they apply to;
the resolver compares that against the target's group.
"""

from dataclasses import dataclass
from typing import List

from .errors import ProjectConfigError


@dataclass(frozen=True)
class TargetPlatform:
    """Build target identity.

    Attributes:
        name: Platform name as used in output directories (e.g. "Win64")
        group: Platform group (e.g. "Windows", "Unix")
        is_64bit: Whether the target is a 64-bit platform
    """

    name: str
    group: str
    is_64bit: bool = True

    def __str__(self) -> str:
        return self.name


KNOWN_TARGETS: dict[str, TargetPlatform] = {
    "Win64": TargetPlatform(name="Win64", group="Windows", is_64bit=True),
    "Win32": TargetPlatform(name="Win32", group="Windows", is_64bit=False),
    "Linux": TargetPlatform(name="Linux", group="Unix", is_64bit=True),
    "Mac": TargetPlatform(name="Mac", group="Apple", is_64bit=True),
}


def get_target(name: str) -> TargetPlatform:
    """Look up a known target platform by name.

    Raises:
        ProjectConfigError: If the name is not a known target
    """
    try:
        return KNOWN_TARGETS[name]
    except KeyError:
        known = ", ".join(sorted(KNOWN_TARGETS))
        raise ProjectConfigError(f"Unknown target platform '{name}' (known: {known})")


def list_targets() -> List[str]:
    return sorted(KNOWN_TARGETS)
