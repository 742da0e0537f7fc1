"""Unit tests for BuildSettings folding."""

import json
from pathlib import Path

from capres.build_settings import BuildSettings
from capres.capability import FeatureDecision, RuntimeDependency
from capres.thirdparty import LibraryFamilyDecision


def _enabled_decision() -> FeatureDecision:
    return FeatureDecision(
        flag="WITH_API",
        enabled=True,
        include_paths=(Path("/sdk/Interface"),),
        system_include_paths=(Path("/sdk/Interface"),),
        link_inputs=(Path("/sdk/Lib/Win64/a.lib"), Path("/sdk/Lib/Win64/b.lib")),
        delay_loads=("api.dll",),
        runtime_dependencies=(RuntimeDependency(Path("/sdk/Win64/api.dll"), "Binaries/Win64/api.dll"),),
    )


class TestBuildSettings:
    def test_empty_by_default(self):
        settings = BuildSettings()
        assert settings.definitions == ()
        assert not settings.is_defined("WITH_API")

    def test_with_feature_returns_new_value(self):
        base = BuildSettings()

        settings = base.with_feature(_enabled_decision())

        assert base.definitions == ()
        assert settings.definitions == ("WITH_API=1",)
        assert settings.is_defined("WITH_API")
        assert settings.link_inputs == (Path("/sdk/Lib/Win64/a.lib"), Path("/sdk/Lib/Win64/b.lib"))

    def test_folding_twice_does_not_duplicate(self):
        settings = BuildSettings().with_feature(_enabled_decision()).with_feature(_enabled_decision())

        assert settings.definitions == ("WITH_API=1",)
        assert settings.include_paths == (Path("/sdk/Interface"),)
        assert len(settings.runtime_dependencies) == 1

    def test_disabled_feature_defines_zero(self):
        decision = FeatureDecision(flag="WITH_API", enabled=False, diagnostics=("header api.h at /sdk/Interface/api.h",))

        settings = BuildSettings().with_feature(decision)

        assert settings.definitions == ("WITH_API=0",)
        assert not settings.is_defined("WITH_API")
        assert settings.diagnostics == ("header api.h at /sdk/Interface/api.h",)
        assert settings.link_inputs == ()

    def test_with_library_family(self):
        decision = LibraryFamilyDecision(
            flag="WITH_OMNICAPTURE_OPENEXR",
            enabled=True,
            primary_modules=frozenset({"OpenEXR"}),
            secondary_modules=frozenset({"Imath"}),
            dependency_modules=("OpenEXR", "Imath"),
        )

        settings = BuildSettings().with_feature(_enabled_decision()).with_library_family(decision)

        assert settings.definitions == ("WITH_API=1", "WITH_OMNICAPTURE_OPENEXR=1")
        assert settings.dependency_modules == ("OpenEXR", "Imath")

    def test_to_dict_is_json_serializable(self):
        settings = BuildSettings().with_feature(_enabled_decision())

        data = json.loads(json.dumps(settings.to_dict()))

        assert data["definitions"] == ["WITH_API=1"]
        assert data["runtime_dependencies"] == [{"source": str(Path("/sdk/Win64/api.dll")), "staged_path": "Binaries/Win64/api.dll"}]
