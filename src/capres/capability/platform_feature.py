"""Platform-gated plugin features.

Some plugin features depend only on the target platform, not on anything
found on disk: the OmniCapture encoder path is compiled in for Win64 and
compiled out everywhere else, together with the engine modules it links.
"""

from dataclasses import dataclass

from capres.targets import TargetPlatform


@dataclass(frozen=True)
class PlatformFeature:
    """A compile-time flag switched on for a fixed set of target platforms.

    Attributes:
        flag: Compile-time definition
        platforms: Target platform names the feature is enabled for
        dependency_modules: Modules added as dependencies when enabled
    """

    flag: str
    platforms: tuple[str, ...]
    dependency_modules: tuple[str, ...] = ()


OMNI_NVENC_FEATURE = PlatformFeature(
    flag="WITH_OMNI_NVENC",
    platforms=("Win64",),
    dependency_modules=("AVEncoder", "D3D11RHI", "D3D12RHI"),
)


@dataclass(frozen=True)
class PlatformFeatureDecision:
    flag: str
    enabled: bool
    dependency_modules: tuple[str, ...] = ()

    @property
    def definition(self) -> str:
        return f"{self.flag}={1 if self.enabled else 0}"


def decide_platform_feature(feature: PlatformFeature, target: TargetPlatform) -> PlatformFeatureDecision:
    """Enable the feature when target is one of its platforms."""
    if target.name in feature.platforms:
        return PlatformFeatureDecision(flag=feature.flag, enabled=True, dependency_modules=feature.dependency_modules)
    return PlatformFeatureDecision(flag=feature.flag, enabled=False)
