"""
Type-safe SDK layout model.

An SDK layout names every artifact an optional capability needs and where it
sits relative to the SDK root:

    <root>/<interface_dir>/<header>
    <root>/<lib_dir>/<lib platform dir>/<import library 1>
    <root>/<lib_dir>/<lib platform dir>/<import library 2>
    <root>/<runtime platform dir>/<runtime library>

File names are compared byte-for-byte; no case folding is applied.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from capres.errors import LayoutConfigError
from capres.targets import TargetPlatform


def _string_list(layout_name: str, key: str, value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise LayoutConfigError(f"SDK layout '{layout_name}': '{key}' must be a list of strings, got {value!r}")
    return value


def _string_map(layout_name: str, key: str, value: Any) -> Dict[str, str]:
    if not isinstance(value, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        raise LayoutConfigError(f"SDK layout '{layout_name}': '{key}' must map platform names to directory names, got {value!r}")
    return dict(value)


@dataclass(frozen=True)
class SdkLayout:
    """
    Layout of an optional SDK tree.

    Attributes:
        name: Capability name (e.g. "nvenc")
        flag: Compile-time definition toggled by the capability
        interface_dir: Subdirectory holding the header
        header: Header file name
        lib_dir: Subdirectory holding per-platform import library directories
        import_libraries: The two import library file names
        runtime_library: Runtime shared library name for 64-bit targets
        runtime_library_32: Runtime shared library name for 32-bit targets
        platform_groups: Platform groups the capability applies to
        lib_platform_dirs: Per-platform name of the directory under lib_dir
            (defaults to the platform name)
        runtime_platform_dirs: Per-platform name of the runtime directory under
            the root (defaults to the platform name)
        system_libraries: Platform libraries linked alongside the SDK
        extra_delay_loads: Additional delay-loaded libraries registered with the SDK
    """

    name: str
    flag: str
    interface_dir: str
    header: str
    lib_dir: str
    import_libraries: tuple[str, str]
    runtime_library: str
    platform_groups: tuple[str, ...]

    runtime_library_32: str = ""
    lib_platform_dirs: Dict[str, str] = field(default_factory=dict)
    runtime_platform_dirs: Dict[str, str] = field(default_factory=dict)
    system_libraries: tuple[str, ...] = ()
    extra_delay_loads: tuple[str, ...] = ()

    def lib_platform_dir(self, target: TargetPlatform) -> str:
        return self.lib_platform_dirs.get(target.name, target.name)

    def runtime_platform_dir(self, target: TargetPlatform) -> str:
        return self.runtime_platform_dirs.get(target.name, target.name)

    def runtime_library_for(self, target: TargetPlatform) -> str:
        """Runtime library file name for the target's word size."""
        if not target.is_64bit and self.runtime_library_32:
            return self.runtime_library_32
        return self.runtime_library

    def applies_to(self, target: TargetPlatform) -> bool:
        return target.group in self.platform_groups

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SdkLayout":
        """
        Parse a layout from its JSON dictionary.

        Raises:
            LayoutConfigError: If required fields are missing or invalid
        """
        if not isinstance(data, dict):
            raise LayoutConfigError(f"SDK layout must be a JSON object, got {type(data).__name__}")

        try:
            name = data["name"]
            flag = data["flag"]
            header = data["header"]
            import_libraries = data["import_libraries"]
            runtime_library = data["runtime_library"]
        except KeyError as e:
            raise LayoutConfigError(f"Missing required field in SDK layout: {e}")

        import_libraries = _string_list(name, "import_libraries", import_libraries)
        if len(import_libraries) != 2:
            raise LayoutConfigError(f"SDK layout '{name}' must list exactly two import libraries, got {import_libraries!r}")

        platform_groups = _string_list(name, "platform_groups", data.get("platform_groups", []))
        if not platform_groups:
            raise LayoutConfigError(f"SDK layout '{name}' does not name any platform group")

        return cls(
            name=name,
            flag=flag,
            interface_dir=data.get("interface_dir", "Interface"),
            header=header,
            lib_dir=data.get("lib_dir", "Lib"),
            import_libraries=(import_libraries[0], import_libraries[1]),
            runtime_library=runtime_library,
            platform_groups=tuple(platform_groups),
            runtime_library_32=data.get("runtime_library_32", ""),
            lib_platform_dirs=_string_map(name, "lib_platform_dirs", data.get("lib_platform_dirs", {})),
            runtime_platform_dirs=_string_map(name, "runtime_platform_dirs", data.get("runtime_platform_dirs", {})),
            system_libraries=tuple(_string_list(name, "system_libraries", data.get("system_libraries", []))),
            extra_delay_loads=tuple(_string_list(name, "extra_delay_loads", data.get("extra_delay_loads", []))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "flag": self.flag,
            "interface_dir": self.interface_dir,
            "header": self.header,
            "lib_dir": self.lib_dir,
            "import_libraries": list(self.import_libraries),
            "runtime_library": self.runtime_library,
            "runtime_library_32": self.runtime_library_32,
            "platform_groups": list(self.platform_groups),
            "lib_platform_dirs": dict(self.lib_platform_dirs),
            "runtime_platform_dirs": dict(self.runtime_platform_dirs),
            "system_libraries": list(self.system_libraries),
            "extra_delay_loads": list(self.extra_delay_loads),
        }
