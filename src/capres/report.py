"""Rich summary of a resolution report.

Renders one table with a row per decision (capability and library family),
followed by missing artifacts and staging outcomes when there are any.
"""

from typing import Optional

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .capability.stager import StagingStatus
from .resolver import ResolutionReport

_STAGING_STYLES = {
    StagingStatus.COPIED: ("Copied", "green"),
    StagingStatus.UP_TO_DATE: ("Up to date", "dim"),
    StagingStatus.FAILED: ("Failed", "red bold"),
}


def _state_text(enabled: bool, applicable: bool = True) -> Text:
    if not applicable:
        return Text("Not applicable", style="dim")
    if enabled:
        return Text("✓ Enabled", style="green")
    return Text("✗ Disabled", style="yellow")


def _render_decisions(report: ResolutionReport) -> Table:
    table = Table(title=f"Optional capabilities for {report.target}", show_lines=False, expand=False)
    table.add_column("Flag", style="bold", no_wrap=True)
    table.add_column("State", no_wrap=True)
    table.add_column("Details")

    feature = report.feature
    if feature.enabled:
        details = ", ".join(p.name for p in feature.link_inputs)
    else:
        details = f"{len(feature.diagnostics)} issue(s)" if feature.diagnostics else ""
    table.add_row(feature.definition, _state_text(feature.enabled, report.applicable), details)

    family = report.library_family
    if family is not None:
        modules = ", ".join(family.dependency_modules) if family.dependency_modules else "no modules found"
        table.add_row(family.definition, _state_text(family.enabled), modules)

    platform = report.platform_feature
    if platform is not None:
        modules = ", ".join(platform.dependency_modules) if platform.enabled else f"not built for {report.target}"
        table.add_row(platform.definition, _state_text(platform.enabled), modules)

    return table


def _render_diagnostics(report: ResolutionReport) -> Optional[Text]:
    if not report.settings.diagnostics:
        return None
    text = Text("\nMissing or failed:\n", style="bold")
    for line in report.settings.diagnostics:
        text.append(f"  └ {line}\n", style="yellow")
    return text


def _render_staging(report: ResolutionReport) -> Optional[Table]:
    if report.staging is None or not report.staging.outcomes:
        return None
    table = Table(title=f"Staging {report.staging.source.name}", box=None, padding=(0, 1))
    table.add_column("Destination", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    for outcome in report.staging.outcomes:
        label, style = _STAGING_STYLES[outcome.status]
        status = Text(label, style=style)
        if outcome.error:
            status.append(f" ({outcome.error})", style="dim")
        table.add_row(str(outcome.destination), status)
    return table


def build_report_renderable(report: ResolutionReport) -> Group:
    parts = [_render_decisions(report)]
    diagnostics = _render_diagnostics(report)
    if diagnostics is not None:
        parts.append(diagnostics)
    staging = _render_staging(report)
    if staging is not None:
        parts.append(staging)
    return Group(*parts)


def render_report(report: ResolutionReport, console: Optional[Console] = None) -> None:
    """Print the report summary to console (a new Console when None)."""
    console = console if console is not None else Console()
    console.print(build_report_renderable(report))
