"""
Unit tests for the SDK layout loader and model.

Covers the packaged nvenc layout, custom layout files, and validation of
malformed definitions.
"""

import json

import pytest

from capres import layouts
from capres.errors import LayoutConfigError, ProjectConfigError
from capres.layouts import SdkLayout
from capres.targets import get_target, list_targets


def _layout_dict(**overrides):
    data = {
        "name": "api",
        "flag": "WITH_API",
        "header": "api.h",
        "import_libraries": ["a.lib", "b.lib"],
        "runtime_library": "api.dll",
        "platform_groups": ["Windows"],
    }
    data.update(overrides)
    return data


class TestLoadLayout:
    """Tests for layouts.load_layout()"""

    def test_load_nvenc_layout(self):
        layout = layouts.load_layout("nvenc")

        assert layout.name == "nvenc"
        assert layout.flag == "AVENCODER_VIDEO_ENCODER_AVAILABLE_NVENC"
        assert layout.header == "nvEncodeAPI.h"
        assert layout.import_libraries == ("nvencodeapi.lib", "nvcuvid.lib")
        assert layout.system_libraries == ("mfplat.lib", "mfuuid.lib")

    def test_default_layout_is_nvenc(self):
        assert layouts.load_layout().name == layouts.DEFAULT_LAYOUT

    def test_list_layouts(self):
        assert "nvenc" in layouts.list_layouts()

    def test_unknown_layout(self):
        with pytest.raises(LayoutConfigError, match="Unknown SDK layout 'nope'"):
            layouts.load_layout("nope")

    def test_load_layout_file(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text(json.dumps(_layout_dict()), encoding="utf-8")

        layout = layouts.load_layout_file(path)

        assert layout.interface_dir == "Interface"
        assert layout.lib_dir == "Lib"
        assert layout.runtime_library == "api.dll"

    def test_layout_file_with_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(LayoutConfigError, match="Invalid JSON"):
            layouts.load_layout_file(path)

    def test_missing_layout_file(self, tmp_path):
        with pytest.raises(LayoutConfigError, match="Cannot read"):
            layouts.load_layout_file(tmp_path / "missing.json")


class TestSdkLayoutModel:
    def test_missing_required_field(self):
        data = _layout_dict()
        del data["header"]

        with pytest.raises(LayoutConfigError, match="header"):
            SdkLayout.from_dict(data)

    def test_import_libraries_must_be_a_pair(self):
        with pytest.raises(LayoutConfigError, match="exactly two"):
            SdkLayout.from_dict(_layout_dict(import_libraries=["a.lib"]))

    def test_platform_groups_required(self):
        with pytest.raises(LayoutConfigError, match="platform group"):
            SdkLayout.from_dict(_layout_dict(platform_groups=[]))

    def test_platform_groups_given_as_string(self):
        with pytest.raises(LayoutConfigError, match="'platform_groups' must be a list of strings"):
            SdkLayout.from_dict(_layout_dict(platform_groups="Windows"))

    def test_import_libraries_given_as_string(self):
        with pytest.raises(LayoutConfigError, match="'import_libraries' must be a list of strings"):
            SdkLayout.from_dict(_layout_dict(import_libraries="ab"))

    def test_system_libraries_with_non_string_entry(self):
        with pytest.raises(LayoutConfigError, match="'system_libraries'"):
            SdkLayout.from_dict(_layout_dict(system_libraries=["mfplat.lib", 3]))

    @pytest.mark.parametrize("dirs", [["Win64"], "Win64", {"Win64": 64}])
    def test_platform_dirs_must_be_a_mapping(self, dirs):
        with pytest.raises(LayoutConfigError, match="'lib_platform_dirs' must map platform names"):
            SdkLayout.from_dict(_layout_dict(lib_platform_dirs=dirs))

    def test_runtime_platform_dirs_must_be_a_mapping(self):
        with pytest.raises(LayoutConfigError, match="'runtime_platform_dirs'"):
            SdkLayout.from_dict(_layout_dict(runtime_platform_dirs=["x64"]))

    def test_layout_must_be_an_object(self):
        with pytest.raises(LayoutConfigError, match="must be a JSON object, got list"):
            SdkLayout.from_dict([_layout_dict()])

    def test_layout_file_holding_a_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps(["api"]), encoding="utf-8")

        with pytest.raises(LayoutConfigError, match="JSON object"):
            layouts.load_layout_file(path)

    def test_platform_dirs_default_to_target_name(self):
        layout = SdkLayout.from_dict(_layout_dict())
        target = get_target("Win64")

        assert layout.lib_platform_dir(target) == "Win64"
        assert layout.runtime_platform_dir(target) == "Win64"

    def test_runtime_library_by_word_size(self):
        layout = layouts.load_layout("nvenc")

        assert layout.runtime_library_for(get_target("Win64")) == "nvEncodeAPI64.dll"
        assert layout.runtime_library_for(get_target("Win32")) == "nvEncodeAPI.dll"

    def test_32bit_falls_back_to_runtime_library(self):
        layout = SdkLayout.from_dict(_layout_dict())
        assert layout.runtime_library_for(get_target("Win32")) == "api.dll"

    def test_dict_round_trip(self):
        layout = layouts.load_layout("nvenc")
        assert SdkLayout.from_dict(layout.to_dict()) == layout


class TestTargets:
    def test_known_targets(self):
        assert list_targets() == ["Linux", "Mac", "Win32", "Win64"]

    def test_win32_is_32bit_windows(self):
        target = get_target("Win32")
        assert target.group == "Windows"
        assert not target.is_64bit
        assert str(target) == "Win32"

    def test_unknown_target(self):
        with pytest.raises(ProjectConfigError, match="Unknown target platform 'PS5'"):
            get_target("PS5")
