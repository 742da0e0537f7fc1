"""Unit tests for the feature configurator."""

from pathlib import Path

from capres.capability import (
    ArtifactRole,
    MissingArtifact,
    ResolvedPath,
    RuntimeDependency,
    Satisfied,
    Unsatisfied,
    configure_feature,
    is_capability_applicable,
    not_applicable_decision,
    probe_sdk,
    staged_runtime_path,
)
from capres.layouts import load_layout
from capres.targets import get_target


def _satisfied(root: Path, runtime_name: str = "api.dll") -> Satisfied:
    return Satisfied(
        artifacts=(
            ResolvedPath(root / "Interface" / "api.h", ArtifactRole.HEADER),
            ResolvedPath(root / "Lib" / "Win64" / "a.lib", ArtifactRole.IMPORT_LIBRARY),
            ResolvedPath(root / "Lib" / "Win64" / "b.lib", ArtifactRole.IMPORT_LIBRARY),
            ResolvedPath(root / "Win64" / runtime_name, ArtifactRole.RUNTIME_LIBRARY),
        )
    )


class TestConfigureFeature:
    def test_satisfied_enables_feature(self, api_layout, win64):
        root = Path("/sdk")

        decision = configure_feature(_satisfied(root), win64, api_layout)

        assert decision.enabled
        assert decision.definition == "WITH_API=1"
        assert decision.include_paths == (root / "Interface",)
        assert decision.system_include_paths == (root / "Interface",)
        assert decision.link_inputs == (root / "Lib" / "Win64" / "a.lib", root / "Lib" / "Win64" / "b.lib")
        assert decision.delay_loads == ("api.dll",)
        assert decision.runtime_dependencies == (RuntimeDependency(source=root / "Win64" / "api.dll", staged_path="Binaries/Win64/api.dll"),)
        assert decision.diagnostics == ()

    def test_unsatisfied_disables_feature_without_entries(self, api_layout, win64):
        missing = MissingArtifact(ArtifactRole.RUNTIME_LIBRARY, Path("/sdk/Win64/api.dll"), "runtime library")

        decision = configure_feature(Unsatisfied(missing=(missing,)), win64, api_layout)

        assert not decision.enabled
        assert decision.definition == "WITH_API=0"
        assert decision.include_paths == ()
        assert decision.system_include_paths == ()
        assert decision.link_inputs == ()
        assert decision.delay_loads == ()
        assert decision.runtime_dependencies == ()
        assert decision.diagnostics == (f"runtime library api.dll at {Path('/sdk/Win64/api.dll')}",)

    def test_every_missing_artifact_is_a_diagnostic(self, make_sdk, api_layout, win64):
        root = make_sdk(omit=["Interface/api.h", "Lib/Win64/a.lib", "Win64/api.dll"])

        decision = configure_feature(probe_sdk(root, api_layout, win64), win64, api_layout)

        assert len(decision.diagnostics) == 3
        assert decision.diagnostics[0].startswith("header api.h at ")

    def test_decision_is_deterministic(self, make_sdk, api_layout, win64):
        root = make_sdk()

        first = configure_feature(probe_sdk(root, api_layout, win64), win64, api_layout)
        second = configure_feature(probe_sdk(root, api_layout, win64), win64, api_layout)

        assert first == second

    def test_packaged_layout_adds_system_libraries_and_delay_loads(self):
        layout = load_layout("nvenc")
        target = get_target("Win64")
        root = Path("/sdk")

        decision = configure_feature(_satisfied(root, "nvEncodeAPI64.dll"), target, layout)

        assert decision.definition == "AVENCODER_VIDEO_ENCODER_AVAILABLE_NVENC=1"
        assert decision.system_libraries == ("mfplat.lib", "mfuuid.lib")
        assert decision.delay_loads == ("nvEncodeAPI64.dll", "Mfreadwrite.dll")
        assert decision.runtime_dependencies[0].staged_path == "Binaries/Win64/nvEncodeAPI64.dll"

    def test_packaged_layout_disabled_adds_nothing_extra(self):
        layout = load_layout("nvenc")
        missing = MissingArtifact(ArtifactRole.DIRECTORY, Path("/sdk"), "SDK root directory")

        decision = configure_feature(Unsatisfied(missing=(missing,)), get_target("Win64"), layout)

        assert decision.system_libraries == ()
        assert decision.delay_loads == ()


class TestApplicability:
    def test_windows_targets_apply(self, api_layout):
        assert is_capability_applicable(api_layout, get_target("Win64"))
        assert is_capability_applicable(api_layout, get_target("Win32"))

    def test_other_groups_do_not_apply(self, api_layout):
        assert not is_capability_applicable(api_layout, get_target("Linux"))
        assert not is_capability_applicable(api_layout, get_target("Mac"))

    def test_not_applicable_decision_is_empty(self, api_layout):
        decision = not_applicable_decision(api_layout)

        assert decision.definition == "WITH_API=0"
        assert decision.diagnostics == ()
        assert decision.probe is None

    def test_staged_runtime_path_uses_target_name(self):
        layout = load_layout("nvenc")
        assert staged_runtime_path(layout, get_target("Win32")) == "Binaries/Win32/nvEncodeAPI.dll"
