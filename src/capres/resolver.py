"""Capability Resolver - one build-configuration pass.

Flow:
    1. Skip the probe entirely when the capability does not apply to the target.
    2. Probe the SDK tree. An environment failure disables this capability
       only and is reported as a diagnostic.
    3. Configure the feature from the verdict.
    4. If enabled, stage the runtime library into the project and plugin
       Binaries/<platform> directories (best-effort).
    5. Resolve the optional third-party library family.
    6. Decide the platform-gated plugin feature.
    7. Fold every decision into one BuildSettings value.

Steps 2, 4 and 5 are reported as numbered phases in verbose output.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .build_settings import BuildSettings
from .capability import (
    OMNI_NVENC_FEATURE,
    FeatureDecision,
    PlatformFeature,
    PlatformFeatureDecision,
    StagingReport,
    configure_feature,
    decide_platform_feature,
    is_capability_applicable,
    make_staging_job,
    not_applicable_decision,
    probe_sdk,
    stage_runtime,
    staging_destinations,
)
from .capability.models import Satisfied
from .errors import ProbeEnvironmentError
from .layouts import SdkLayout
from .output import TimedLogger, log_detail, log_error, log_phase, log_warning
from .targets import TargetPlatform
from .thirdparty import OPENEXR_FAMILY, LibraryFamily, LibraryFamilyDecision, resolve_library_family

logger = logging.getLogger(__name__)

RESOLVE_PHASES = 3


@dataclass(frozen=True)
class ResolveRequest:
    """Inputs for one resolver run.

    Attributes:
        target: Platform being configured
        layout: SDK layout for the optional capability
        sdk_root: Root of the SDK tree (may not exist)
        project_dir: Project root; its Binaries/<platform> receives the runtime library
        plugin_dir: Plugin root; its Binaries/<platform> receives the runtime library
        third_party_dir: Third-party source tree scanned for the library family
        library_family: Family to resolve, or None to skip
        platform_feature: Platform-gated plugin feature, or None to skip
        stage: Whether to stage the runtime library when the capability is enabled
    """

    target: TargetPlatform
    layout: SdkLayout
    sdk_root: Path
    project_dir: Optional[Path] = None
    plugin_dir: Optional[Path] = None
    third_party_dir: Optional[Path] = None
    library_family: Optional[LibraryFamily] = OPENEXR_FAMILY
    platform_feature: Optional[PlatformFeature] = OMNI_NVENC_FEATURE
    stage: bool = True


@dataclass(frozen=True)
class ResolutionReport:
    """Result of a resolver run.

    Attributes:
        target: Platform that was configured
        feature: Capability decision (disabled and probe-less when not applicable)
        applicable: Whether the capability applies to the target at all
        library_family: Library family decision, or None when skipped
        settings: Aggregated settings for the build system
        staging: Staging report, or None when staging did not run
        platform_feature: Platform-gated feature decision, or None when skipped
    """

    target: TargetPlatform
    feature: FeatureDecision
    applicable: bool
    library_family: Optional[LibraryFamilyDecision]
    settings: BuildSettings
    staging: Optional[StagingReport] = None
    platform_feature: Optional[PlatformFeatureDecision] = None


def decide_capability(request: ResolveRequest) -> FeatureDecision:
    """Probe and configure the optional capability without side effects."""
    layout = request.layout
    target = request.target

    if not is_capability_applicable(layout, target):
        logger.debug(f"{layout.name} does not apply to {target} ({target.group}), skipping probe")
        return not_applicable_decision(layout)

    try:
        result = probe_sdk(request.sdk_root, layout, target)
    except ProbeEnvironmentError as e:
        log_error(f"{layout.name} disabled: {e}")
        return FeatureDecision(flag=layout.flag, enabled=False, diagnostics=(f"{layout.name} probe failed: {e}",))

    decision = configure_feature(result, target, layout)
    if not decision.enabled:
        log_warning(f"{layout.name} disabled, missing {len(decision.diagnostics)} artifact(s):")
        for line in decision.diagnostics:
            log_detail(line)
    return decision


def stage_capability(decision: FeatureDecision, request: ResolveRequest) -> Optional[StagingReport]:
    """Stage the runtime library of an enabled decision; None if nothing to stage."""
    if not decision.enabled or not isinstance(decision.probe, Satisfied):
        return None

    destinations = staging_destinations(request.project_dir, request.plugin_dir, request.target)
    if not destinations:
        logger.debug("No staging destinations configured")
        return None

    job = make_staging_job(decision.probe.runtime_library, destinations)
    report = stage_runtime(job)
    logger.debug(f"Staging {job.source.name}: {report.copied} copied, {report.up_to_date} up to date, {report.failed} failed")
    return report


def resolve(request: ResolveRequest) -> ResolutionReport:
    """Run one full resolution pass. Never raises for missing or unstageable artifacts."""
    applicable = is_capability_applicable(request.layout, request.target)

    with TimedLogger(f"Probing {request.layout.name} SDK", phase=(1, RESOLVE_PHASES), verbose_only=True) as timer:
        timer.detail(f"Root: {request.sdk_root}")
        decision = decide_capability(request)

    staging = None
    if request.stage:
        log_phase(2, RESOLVE_PHASES, f"Staging {request.layout.name} runtime library...", verbose_only=True)
        staging = stage_capability(decision, request)
    else:
        log_phase(2, RESOLVE_PHASES, "Staging disabled, skipping", verbose_only=True)

    family_decision = None
    if request.library_family is not None:
        log_phase(3, RESOLVE_PHASES, f"Scanning third-party modules for {request.library_family.flag}...", verbose_only=True)
        family_decision = resolve_library_family(request.third_party_dir, request.library_family)

    platform_decision = None
    if request.platform_feature is not None:
        platform_decision = decide_platform_feature(request.platform_feature, request.target)
        logger.debug(f"{platform_decision.definition} for {request.target}")

    settings = BuildSettings().with_feature(decision)
    if family_decision is not None:
        settings = settings.with_library_family(family_decision)
    if platform_decision is not None:
        settings = settings.with_platform_feature(platform_decision)

    return ResolutionReport(
        target=request.target,
        feature=decision,
        applicable=applicable,
        library_family=family_decision,
        settings=settings,
        staging=staging,
        platform_feature=platform_decision,
    )
