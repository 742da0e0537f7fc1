"""capres.ini project configuration.

Example:

    [capres]
    target = Win64
    layout = nvenc
    module_dir = Source/AVEncoder
    plugin_dir = Plugins/OmniCapture
    third_party_dir = C:/Engine/Source/ThirdParty
    stage = yes

    [library_family]
    flag = WITH_OMNICAPTURE_OPENEXR
    primary_prefixes = OpenEXR, OpenExr
    secondary_prefixes = Imath

    [platform_feature]
    flag = WITH_OMNI_NVENC
    platforms = Win64
    dependency_modules = AVEncoder, D3D11RHI, D3D12RHI

Either optional section may set ``enabled = false`` to skip it.

Relative paths are resolved against the directory holding the ini file.
When sdk_root is not given it defaults to the parent of module_dir, which
is where the SDK is placed next to the module's build descriptor.
"""

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from capres.capability.platform_feature import OMNI_NVENC_FEATURE, PlatformFeature
from capres.capability.probe import sdk_root_from_anchor
from capres.errors import ProjectConfigError
from capres.layouts import DEFAULT_LAYOUT, load_layout, load_layout_file
from capres.resolver import ResolveRequest
from capres.targets import get_target
from capres.thirdparty import OPENEXR_FAMILY, LibraryFamily

CONFIG_FILENAME = "capres.ini"
MAIN_SECTION = "capres"
FAMILY_SECTION = "library_family"
PLATFORM_FEATURE_SECTION = "platform_feature"


def _split_list(value: str) -> List[str]:
    return [item for item in value.replace(",", " ").split() if item]


def _getboolean(section: configparser.SectionProxy, key: str, default: bool = True) -> bool:
    try:
        return section.getboolean(key, fallback=default)
    except ValueError as e:
        raise ProjectConfigError(f"Invalid '{key}' value in [{section.name}]: {e}")


@dataclass(frozen=True)
class ProjectConfig:
    """Resolver options for one project.

    Attributes:
        project_dir: Project root (the ini directory when loaded from a file)
        target: Target platform name
        layout: Packaged SDK layout name
        layout_file: Custom layout JSON, overrides layout when set
        module_dir: Directory of the module whose build descriptor anchors the SDK
        sdk_root: Explicit SDK root
        plugin_dir: Plugin root receiving a staged runtime library copy
        third_party_dir: Third-party tree scanned for the library family
        stage: Whether to stage the runtime library
        library_family: Library family to resolve, or None to skip
        platform_feature: Platform-gated plugin feature, or None to skip
    """

    project_dir: Path
    target: str = "Win64"
    layout: str = DEFAULT_LAYOUT
    layout_file: Optional[Path] = None
    module_dir: Optional[Path] = None
    sdk_root: Optional[Path] = None
    plugin_dir: Optional[Path] = None
    third_party_dir: Optional[Path] = None
    stage: bool = True
    library_family: Optional[LibraryFamily] = field(default=OPENEXR_FAMILY)
    platform_feature: Optional[PlatformFeature] = field(default=OMNI_NVENC_FEATURE)

    def resolved_sdk_root(self) -> Path:
        if self.sdk_root is not None:
            return self.sdk_root
        return sdk_root_from_anchor(self.module_dir or self.project_dir)

    def to_request(self) -> ResolveRequest:
        """Build a ResolveRequest, loading the target and layout.

        Raises:
            ProjectConfigError: Unknown target
            LayoutConfigError: Unknown or malformed layout
        """
        layout = load_layout_file(self.layout_file) if self.layout_file else load_layout(self.layout)
        return ResolveRequest(
            target=get_target(self.target),
            layout=layout,
            sdk_root=self.resolved_sdk_root(),
            project_dir=self.project_dir,
            plugin_dir=self.plugin_dir,
            third_party_dir=self.third_party_dir,
            library_family=self.library_family,
            platform_feature=self.platform_feature,
            stage=self.stage,
        )


def _path_option(section: configparser.SectionProxy, key: str, base_dir: Path) -> Optional[Path]:
    value = section.get(key, "").strip()
    if not value:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def _parse_family(parser: configparser.ConfigParser) -> Optional[LibraryFamily]:
    if not parser.has_section(FAMILY_SECTION):
        return OPENEXR_FAMILY

    section = parser[FAMILY_SECTION]
    if not _getboolean(section, "enabled"):
        return None

    primary = _split_list(section.get("primary_prefixes", ""))
    secondary = _split_list(section.get("secondary_prefixes", ""))
    if not primary:
        raise ProjectConfigError(f"[{FAMILY_SECTION}] needs at least one primary_prefixes entry")

    return LibraryFamily(
        flag=section.get("flag", OPENEXR_FAMILY.flag).strip(),
        primary_prefixes=tuple(primary),
        secondary_prefixes=tuple(secondary),
    )


def _parse_platform_feature(parser: configparser.ConfigParser) -> Optional[PlatformFeature]:
    if not parser.has_section(PLATFORM_FEATURE_SECTION):
        return OMNI_NVENC_FEATURE

    section = parser[PLATFORM_FEATURE_SECTION]
    if not _getboolean(section, "enabled"):
        return None

    platforms = _split_list(section.get("platforms", ""))
    if not platforms:
        raise ProjectConfigError(f"[{PLATFORM_FEATURE_SECTION}] needs at least one platforms entry")

    return PlatformFeature(
        flag=section.get("flag", OMNI_NVENC_FEATURE.flag).strip(),
        platforms=tuple(platforms),
        dependency_modules=tuple(_split_list(section.get("dependency_modules", ""))),
    )


def load_project_config(ini_path: Path) -> ProjectConfig:
    """Parse a capres.ini file.

    Raises:
        ProjectConfigError: If the file cannot be read or is malformed
    """
    parser = configparser.ConfigParser()
    try:
        with open(ini_path, "r", encoding="utf-8") as f:
            parser.read_file(f)
    except OSError as e:
        raise ProjectConfigError(f"Cannot read {ini_path}: {e}")
    except configparser.Error as e:
        raise ProjectConfigError(f"Invalid {ini_path.name}: {e}")

    base_dir = ini_path.resolve().parent
    if not parser.has_section(MAIN_SECTION):
        return ProjectConfig(
            project_dir=base_dir,
            library_family=_parse_family(parser),
            platform_feature=_parse_platform_feature(parser),
        )

    section = parser[MAIN_SECTION]
    stage = _getboolean(section, "stage")

    return ProjectConfig(
        project_dir=_path_option(section, "project_dir", base_dir) or base_dir,
        target=section.get("target", "Win64").strip(),
        layout=section.get("layout", DEFAULT_LAYOUT).strip(),
        layout_file=_path_option(section, "layout_file", base_dir),
        module_dir=_path_option(section, "module_dir", base_dir),
        sdk_root=_path_option(section, "sdk_root", base_dir),
        plugin_dir=_path_option(section, "plugin_dir", base_dir),
        third_party_dir=_path_option(section, "third_party_dir", base_dir),
        stage=stage,
        library_family=_parse_family(parser),
        platform_feature=_parse_platform_feature(parser),
    )


def find_project_config(project_dir: Path) -> Optional[Path]:
    """Return project_dir/capres.ini if it exists."""
    candidate = project_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None
