"""Feature Configurator.

Pure mapping from a probe verdict to a FeatureDecision. Nothing here touches
the filesystem; the resolver decides whether to probe at all and whether to
stage afterwards.
"""

from pathlib import PurePosixPath

from capres.layouts import SdkLayout
from capres.targets import TargetPlatform

from .models import FeatureDecision, ProbeResult, RuntimeDependency, Satisfied

BINARIES_DIR = "Binaries"


def is_capability_applicable(layout: SdkLayout, target: TargetPlatform) -> bool:
    """True if the target's platform group supports the capability at all."""
    return layout.applies_to(target)


def staged_runtime_path(layout: SdkLayout, target: TargetPlatform) -> str:
    """Location of the staged runtime library relative to a project or plugin root."""
    return str(PurePosixPath(BINARIES_DIR, target.name, layout.runtime_library_for(target)))


def not_applicable_decision(layout: SdkLayout) -> FeatureDecision:
    """Disabled decision for targets the capability does not support."""
    return FeatureDecision(flag=layout.flag, enabled=False)


def configure_feature(result: ProbeResult, target: TargetPlatform, layout: SdkLayout) -> FeatureDecision:
    """Derive the feature decision for a probe result.

    Args:
        result: Verdict from the dependency probe
        target: Target platform being configured
        layout: Layout the probe ran against

    Returns:
        Enabled decision with include/link/delay-load entries when the SDK is
        complete, otherwise a disabled decision listing every missing artifact.
    """
    if isinstance(result, Satisfied):
        runtime_name = result.runtime_library.name
        return FeatureDecision(
            flag=layout.flag,
            enabled=True,
            include_paths=(result.interface_dir,),
            system_include_paths=(result.interface_dir,),
            link_inputs=tuple(result.import_libraries),
            system_libraries=layout.system_libraries,
            delay_loads=(runtime_name,) + tuple(d for d in layout.extra_delay_loads if d != runtime_name),
            runtime_dependencies=(
                RuntimeDependency(
                    source=result.runtime_library,
                    staged_path=staged_runtime_path(layout, target),
                ),
            ),
            probe=result,
        )

    return FeatureDecision(flag=layout.flag, enabled=False, diagnostics=tuple(result.describe()), probe=result)
