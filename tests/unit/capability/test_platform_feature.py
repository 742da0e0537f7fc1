"""Unit tests for platform-gated plugin features (WITH_OMNI_NVENC by default)."""

from capres.build_settings import BuildSettings
from capres.capability import OMNI_NVENC_FEATURE, PlatformFeature, decide_platform_feature
from capres.targets import get_target


class TestDecidePlatformFeature:
    def test_enabled_on_win64(self):
        decision = decide_platform_feature(OMNI_NVENC_FEATURE, get_target("Win64"))

        assert decision.enabled
        assert decision.definition == "WITH_OMNI_NVENC=1"
        assert decision.dependency_modules == ("AVEncoder", "D3D11RHI", "D3D12RHI")

    def test_disabled_on_linux(self):
        decision = decide_platform_feature(OMNI_NVENC_FEATURE, get_target("Linux"))

        assert not decision.enabled
        assert decision.definition == "WITH_OMNI_NVENC=0"
        assert decision.dependency_modules == ()

    def test_win32_is_not_win64(self):
        assert not decide_platform_feature(OMNI_NVENC_FEATURE, get_target("Win32")).enabled

    def test_custom_platforms(self):
        feature = PlatformFeature(flag="WITH_CAPTURE", platforms=("Win64", "Linux"))

        assert decide_platform_feature(feature, get_target("Linux")).enabled
        assert not decide_platform_feature(feature, get_target("Mac")).enabled


class TestFoldPlatformFeature:
    def test_enabled_adds_definition_and_modules(self):
        decision = decide_platform_feature(OMNI_NVENC_FEATURE, get_target("Win64"))

        settings = BuildSettings().with_platform_feature(decision)

        assert settings.definitions == ("WITH_OMNI_NVENC=1",)
        assert settings.dependency_modules == ("AVEncoder", "D3D11RHI", "D3D12RHI")

    def test_disabled_defines_zero_only(self):
        decision = decide_platform_feature(OMNI_NVENC_FEATURE, get_target("Linux"))

        settings = BuildSettings().with_platform_feature(decision)

        assert settings.definitions == ("WITH_OMNI_NVENC=0",)
        assert settings.dependency_modules == ()
