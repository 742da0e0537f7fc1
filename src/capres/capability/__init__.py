"""Optional native capability detection: probe, configure, stage."""

from .configurator import configure_feature, is_capability_applicable, not_applicable_decision, staged_runtime_path
from .models import (
    ArtifactRole,
    FeatureDecision,
    MissingArtifact,
    ProbeResult,
    ResolvedPath,
    RuntimeDependency,
    Satisfied,
    Unsatisfied,
)
from .platform_feature import OMNI_NVENC_FEATURE, PlatformFeature, PlatformFeatureDecision, decide_platform_feature
from .probe import SdkProbe, probe_sdk, sdk_root_from_anchor
from .stager import (
    StagingJob,
    StagingOutcome,
    StagingReport,
    StagingStatus,
    make_staging_job,
    stage_file,
    stage_runtime,
    staging_destinations,
)

__all__ = [
    "ArtifactRole",
    "FeatureDecision",
    "MissingArtifact",
    "OMNI_NVENC_FEATURE",
    "PlatformFeature",
    "PlatformFeatureDecision",
    "ProbeResult",
    "ResolvedPath",
    "RuntimeDependency",
    "Satisfied",
    "SdkProbe",
    "StagingJob",
    "StagingOutcome",
    "StagingReport",
    "StagingStatus",
    "Unsatisfied",
    "configure_feature",
    "decide_platform_feature",
    "is_capability_applicable",
    "make_staging_job",
    "not_applicable_decision",
    "probe_sdk",
    "sdk_root_from_anchor",
    "stage_file",
    "stage_runtime",
    "staged_runtime_path",
    "staging_destinations",
]
