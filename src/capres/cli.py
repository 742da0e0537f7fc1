"""
Command-line interface for capres.

Provides the `capres` tool:

    capres probe <sdk_root>            Check an SDK tree and list missing artifacts
    capres scan <third_party_dir>      List module identifiers declared by descriptors
    capres resolve [project_dir]       Full pass: probe, configure, stage, scan
"""

import argparse
import dataclasses
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from capres import __version__
from capres.capability import probe_sdk
from capres.config import ProjectConfig, find_project_config, load_project_config
from capres.errors import CapresError
from capres.layouts import DEFAULT_LAYOUT, load_layout, load_layout_file
from capres.output import TimedLogger, init_timer, log, log_detail, log_error, log_header, log_success, log_warning, set_output_file, set_verbose
from capres.report import render_report
from capres.resolver import resolve
from capres.targets import get_target, list_targets
from capres.thirdparty import DESCRIPTOR_EXTENSION, MODULE_BASE_MARKER, find_module_descriptors

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNSATISFIED = 2


@dataclass
class ProbeArgs:
    """Arguments for the probe command."""

    sdk_root: Path
    target: str = "Win64"
    layout: str = DEFAULT_LAYOUT
    layout_file: Optional[Path] = None
    verbose: bool = False


@dataclass
class ScanArgs:
    """Arguments for the scan command."""

    third_party_dir: Path
    prefixes: List[str] = field(default_factory=list)
    extension: str = DESCRIPTOR_EXTENSION
    marker: str = MODULE_BASE_MARKER
    verbose: bool = False


@dataclass
class ResolveArgs:
    """Arguments for the resolve command. None means "use capres.ini or default"."""

    project_dir: Path
    config: Optional[Path] = None
    target: Optional[str] = None
    layout: Optional[str] = None
    layout_file: Optional[Path] = None
    sdk_root: Optional[Path] = None
    module_dir: Optional[Path] = None
    plugin_dir: Optional[Path] = None
    third_party_dir: Optional[Path] = None
    no_stage: bool = False
    json_output: bool = False
    output_file: Optional[Path] = None
    verbose: bool = False


def _configure_logging(verbose: bool) -> None:
    set_verbose(verbose)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def probe_command(args: ProbeArgs) -> int:
    """Probe an SDK tree.

    Examples:
        capres probe ThirdParty/NVENC
        capres probe ThirdParty/NVENC --target Win32
    """
    layout = load_layout_file(args.layout_file) if args.layout_file else load_layout(args.layout)
    target = get_target(args.target)

    result = probe_sdk(args.sdk_root, layout, target)
    if result.ok:
        log_success(f"✓ {layout.name} SDK complete for {target}")
        for artifact in result.artifacts:
            log_detail(f"{artifact.role}: {artifact.path}", verbose_only=True)
        return EXIT_OK

    log_warning(f"{layout.name} SDK incomplete for {target}:")
    for line in result.describe():
        log_detail(line)
    return EXIT_UNSATISFIED


def scan_command(args: ScanArgs) -> int:
    """List module identifiers declared under a third-party tree.

    Examples:
        capres scan Engine/Source/ThirdParty --prefix OpenEXR --prefix OpenExr
    """
    identifiers = set()
    for prefix in args.prefixes:
        for descriptor in find_module_descriptors(args.third_party_dir, prefix, args.extension, args.marker):
            log_detail(f"{descriptor.identifier} <- {descriptor.path}", verbose_only=True)
            identifiers.add(descriptor.identifier)

    if not identifiers:
        log(f"No modules found for prefix(es): {', '.join(args.prefixes)}")
    for identifier in sorted(identifiers):
        print(identifier)
    return EXIT_OK


def _project_config(args: ResolveArgs) -> ProjectConfig:
    ini_path = args.config or find_project_config(args.project_dir)
    if ini_path is not None:
        config = load_project_config(ini_path)
    else:
        config = ProjectConfig(project_dir=args.project_dir.resolve())

    overrides = {
        "target": args.target,
        "layout": args.layout,
        "layout_file": args.layout_file,
        "sdk_root": args.sdk_root,
        "module_dir": args.module_dir,
        "plugin_dir": args.plugin_dir,
        "third_party_dir": args.third_party_dir,
    }
    config = dataclasses.replace(config, **{k: v for k, v in overrides.items() if v is not None})
    if args.no_stage:
        config = dataclasses.replace(config, stage=False)
    return config


def _run_resolve(args: ResolveArgs) -> int:
    request = _project_config(args).to_request()

    if args.json_output:
        # Keep stdout clean for the JSON document
        init_timer(sys.stderr)
        report = resolve(request)
        print(json.dumps(report.settings.to_dict(), indent=2))
        return EXIT_OK

    log_header("capres", __version__)
    with TimedLogger(f"Resolving optional capabilities for {request.target}") as timer:
        timer.detail(f"SDK root: {request.sdk_root}")
        report = resolve(request)

    render_report(report)
    return EXIT_OK


def resolve_command(args: ResolveArgs) -> int:
    """Resolve optional capabilities for a project.

    Examples:
        capres resolve                              # Use ./capres.ini
        capres resolve MyGame --target Win64        # Explicit project and target
        capres resolve --sdk-root ThirdParty/NVENC --json
        capres resolve --output-file resolve.log    # Also write the log to a file
    """
    if args.output_file is None:
        return _run_resolve(args)

    try:
        log_file = open(args.output_file, "w", encoding="utf-8")
    except OSError as e:
        raise CapresError(f"Cannot open output file {args.output_file}: {e}")

    with log_file:
        set_output_file(log_file)
        try:
            return _run_resolve(args)
        finally:
            set_output_file(None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capres",
        description="Build-time resolver for optional native capabilities",
    )
    parser.add_argument("--version", action="version", version=f"capres {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    probe_parser = subparsers.add_parser("probe", help="Check an SDK tree for completeness")
    probe_parser.add_argument("sdk_root", type=Path, help="SDK root directory")
    probe_parser.add_argument("-t", "--target", default="Win64", choices=list_targets(), help="Target platform (default: Win64)")
    probe_parser.add_argument("-l", "--layout", default=DEFAULT_LAYOUT, help=f"Packaged SDK layout (default: {DEFAULT_LAYOUT})")
    probe_parser.add_argument("--layout-file", type=Path, default=None, help="Custom SDK layout JSON file")
    probe_parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")

    scan_parser = subparsers.add_parser("scan", help="List modules declared in a third-party tree")
    scan_parser.add_argument("third_party_dir", type=Path, help="Third-party source directory")
    scan_parser.add_argument("-p", "--prefix", dest="prefixes", action="append", required=True, help="Descriptor file prefix (repeatable)")
    scan_parser.add_argument("--extension", default=DESCRIPTOR_EXTENSION, help=f"Descriptor suffix (default: {DESCRIPTOR_EXTENSION})")
    scan_parser.add_argument("--marker", default=MODULE_BASE_MARKER, help=f"Module base class (default: {MODULE_BASE_MARKER})")
    scan_parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")

    resolve_parser = subparsers.add_parser("resolve", help="Probe, configure and stage optional capabilities")
    resolve_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    resolve_parser.add_argument("-c", "--config", type=Path, default=None, help="capres.ini path (default: <project_dir>/capres.ini)")
    resolve_parser.add_argument("-t", "--target", default=None, choices=list_targets(), help="Target platform")
    resolve_parser.add_argument("-l", "--layout", default=None, help="Packaged SDK layout")
    resolve_parser.add_argument("--layout-file", type=Path, default=None, help="Custom SDK layout JSON file")
    resolve_parser.add_argument("--sdk-root", type=Path, default=None, help="SDK root directory")
    resolve_parser.add_argument("--module-dir", type=Path, default=None, help="Module directory anchoring the SDK (SDK root defaults to its parent)")
    resolve_parser.add_argument("--plugin-dir", type=Path, default=None, help="Plugin directory also receiving the runtime library")
    resolve_parser.add_argument("--third-party-dir", type=Path, default=None, help="Third-party source directory to scan")
    resolve_parser.add_argument("--no-stage", action="store_true", help="Do not copy the runtime library")
    resolve_parser.add_argument("--json", dest="json_output", action="store_true", help="Print build settings as JSON")
    resolve_parser.add_argument("--output-file", type=Path, default=None, help="Also write the timestamped log to this file")
    resolve_parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the capres CLI. Returns the process exit code."""
    parser = _build_parser()
    parsed_args = parser.parse_args(argv)

    if not parsed_args.command:
        parser.print_help()
        return EXIT_OK

    _configure_logging(parsed_args.verbose)

    try:
        if parsed_args.command == "probe":
            return probe_command(
                ProbeArgs(
                    sdk_root=parsed_args.sdk_root,
                    target=parsed_args.target,
                    layout=parsed_args.layout,
                    layout_file=parsed_args.layout_file,
                    verbose=parsed_args.verbose,
                )
            )
        if parsed_args.command == "scan":
            return scan_command(
                ScanArgs(
                    third_party_dir=parsed_args.third_party_dir,
                    prefixes=parsed_args.prefixes,
                    extension=parsed_args.extension,
                    marker=parsed_args.marker,
                    verbose=parsed_args.verbose,
                )
            )
        return resolve_command(
            ResolveArgs(
                project_dir=parsed_args.project_dir,
                config=parsed_args.config,
                target=parsed_args.target,
                layout=parsed_args.layout,
                layout_file=parsed_args.layout_file,
                sdk_root=parsed_args.sdk_root,
                module_dir=parsed_args.module_dir,
                plugin_dir=parsed_args.plugin_dir,
                third_party_dir=parsed_args.third_party_dir,
                no_stage=parsed_args.no_stage,
                json_output=parsed_args.json_output,
                output_file=parsed_args.output_file,
                verbose=parsed_args.verbose,
            )
        )
    except CapresError as e:
        log_error(str(e))
        return EXIT_ERROR
    except KeyboardInterrupt:
        log_warning("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
