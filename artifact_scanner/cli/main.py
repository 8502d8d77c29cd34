"""
Main CLI entry point for artifact-scanner.

Provides command-line interface with YAML configuration support
and scan commands for HAR captures and live script URLs.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from colorama import init, Fore, Style

from ..__version__ import __version__
from ..exceptions import ArtifactScannerError
from ..extractors import (
    PatternLibrary, ScanOptions, load_patterns_file, patterns_from_config, scan,
)
from ..models import ArtifactKind, ScanProgress
from .config import load_config, create_default_config, validate_config

init()

KIND_CHOICES = {
    "endpoints": [ArtifactKind.ENDPOINT],
    "secrets": [ArtifactKind.SECRET],
    "all": [ArtifactKind.ENDPOINT, ArtifactKind.SECRET],
}


def print_ok(msg):
    """Print success message in green."""
    print(f"{Fore.GREEN}[OK] {msg}{Style.RESET_ALL}")


def print_error(msg):
    """Print error message in red."""
    print(f"{Fore.RED}[ERROR] {msg}{Style.RESET_ALL}", file=sys.stderr)


def print_warn(msg):
    """Print warning message in yellow."""
    print(f"{Fore.YELLOW}[WARN] {msg}{Style.RESET_ALL}")


def print_info(msg):
    """Print info message in cyan."""
    print(f"{Fore.CYAN}[INFO] {msg}{Style.RESET_ALL}")


def print_phase(phase_num, title):
    """Print phase header."""
    print(f"\n{Fore.GREEN}[PHASE {phase_num}] {title}{Style.RESET_ALL}")


def confidence_colour(confidence):
    if confidence >= 80:
        return Fore.LIGHTRED_EX
    if confidence >= 50:
        return Fore.YELLOW
    return Fore.LIGHTBLACK_EX


def _progress_printer(label):
    def on_progress(processed, total):
        pct = ScanProgress(processed, total).percent
        end = "\n" if processed >= total else "\r"
        print(f"{Fore.CYAN}  {label}... {processed}/{total} ({pct}%){Style.RESET_ALL}", end=end, flush=True)
    return on_progress


def build_scan_settings(args):
    """
    Resolve options, pattern library and kinds from CLI args and optional YAML config.

    Command-line values override the config file.
    """
    config = {}
    if args.config:
        print_info(f"Loading config from {args.config}")
        config = load_config(args.config)
        validate_config(config)

    scan_section = config.get("scan") or {}
    overrides = {
        "min_confidence": args.min_confidence,
        "workers": args.workers,
        "max_content_size": args.max_size,
    }
    options = replace(
        ScanOptions.from_config(config),
        **{k: v for k, v in overrides.items() if v is not None},
    )

    library = PatternLibrary.default()
    extra = patterns_from_config(config.get("patterns"))
    patterns_file = args.patterns_file or config.get("patterns_file")
    if patterns_file:
        extra += load_patterns_file(patterns_file)
    if extra:
        library = library.extend(extra)
        print_info(f"Loaded {len(extra)} extra patterns")

    kind = args.kind or scan_section.get("kind", "all")
    output = args.output or (config.get("output") or {}).get("report") or "artifact_report.json"
    return options, library, KIND_CHOICES[kind], output


def run_scans(resources, kinds, options, library):
    """Run one scan per kind and return {kind: [Finding, ...]}."""
    results = {}
    for kind in kinds:
        label = f"Extracting {kind.value}s"
        results[kind] = asyncio.run(
            scan(resources, _progress_printer(label), kind=kind, options=options, library=library)
        )
    return results


def report_results(results, output_file, limit=20):
    """Print a summary table and save the JSON report."""
    all_findings = []
    print_phase(3, "Scan Results")
    for kind, findings in results.items():
        all_findings.extend(findings)
        if findings:
            print(f"  {Fore.YELLOW}• {kind.value}s: {len(findings)} findings{Style.RESET_ALL}")
        else:
            print(f"  {Fore.LIGHTBLACK_EX}• {kind.value}s: 0 findings{Style.RESET_ALL}")
        for f in findings[:limit]:
            colour = confidence_colour(f.confidence)
            label = f.method if f.method else f.pattern_name
            print(f"    {colour}{f.confidence:>3}%{Style.RESET_ALL} {label:<8} {f.value[:80]}  "
                  f"{Fore.LIGHTBLACK_EX}{f.source_file.split('/')[-1]}{Style.RESET_ALL}")
        if len(findings) > limit:
            print(f"    {Fore.LIGHTBLACK_EX}... {len(findings) - limit} more in report{Style.RESET_ALL}")

    report = {"findings": [f.to_dict() for f in all_findings]}
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(report, fh, indent=2)
    if all_findings:
        print_ok(f"Total findings: {len(all_findings)}")
    else:
        print_warn("No findings above the confidence threshold")
    print_ok(f"Report saved to: {output_path}")
    return report


def cmd_scan_har(args):
    """Scan the script responses recorded in a HAR capture."""
    from ..sources import load_har

    try:
        print_phase(1, "Loading Capture")
        options, library, kinds, output = build_scan_settings(args)
        resources = load_har(args.har)
        print_info(f"Loaded {len(resources)} entries from {args.har}")

        print_phase(2, "Extracting Artifacts")
        results = run_scans(resources, kinds, options, library)
        report_results(results, output)
        return 0
    except (ArtifactScannerError, FileNotFoundError) as e:
        print_error(str(e))
        return 1


def cmd_scan_url(args):
    """Fetch and scan one or more script URLs."""
    from ..sources import RemoteResource, open_session

    try:
        print_phase(1, "Preparing Targets")
        options, library, kinds, output = build_scan_settings(args)
        with open_session() as session:
            # URLs given explicitly are scanned regardless of suffix
            resources = [
                RemoteResource(u, mime_type="application/javascript", session=session, timeout=args.timeout)
                for u in args.urls
            ]
            print_info(f"Targets: {len(resources)}")

            print_phase(2, "Extracting Artifacts")
            results = run_scans(resources, kinds, options, library)
        report_results(results, output)
        return 0
    except (ArtifactScannerError, FileNotFoundError) as e:
        print_error(str(e))
        return 1


def cmd_init_config(args):
    """Create default configuration file."""
    output = args.output or "artifact-scanner.yaml"
    try:
        create_default_config(output)
        print_ok(f"Created configuration file: {output}")
        print_info(f"Edit this file and use: artifact-scanner scan-har capture.har --config {output}")
        return 0
    except OSError as e:
        print_error(f"Failed to create config: {e}")
        return 1


def cmd_version(args):
    """Show version information."""
    from ..__version__ import __title__, __description__
    print(f"{Fore.CYAN}{__title__}{Style.RESET_ALL} v{Fore.GREEN}{__version__}{Style.RESET_ALL}")
    print(__description__)
    return 0


def _add_scan_options(p):
    p.add_argument("--kind", "-k", choices=sorted(KIND_CHOICES), help="Artifacts to extract (default: all)")
    p.add_argument("--min-confidence", type=int, help="Drop findings scoring below this (default: 30)")
    p.add_argument("--workers", type=int, help="Resources processed concurrently (default: 1)")
    p.add_argument("--max-size", type=int, help="Skip bodies longer than this many characters")
    p.add_argument("--patterns-file", help="Extra secret patterns in KEY=REGEX format")
    p.add_argument("--config", "-c", help="YAML configuration file")
    p.add_argument("--output", "-o", help="Output file for JSON report")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="artifact-scanner",
        description="Extract API endpoints and leaked secrets from captured script traffic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Log progress (-vv for debug)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    har_parser = subparsers.add_parser("scan-har", help="Scan script responses in a HAR capture")
    har_parser.add_argument("har", help="Path to .har file")
    _add_scan_options(har_parser)
    har_parser.set_defaults(func=cmd_scan_har)

    url_parser = subparsers.add_parser("scan-url", help="Fetch and scan script URLs")
    url_parser.add_argument("urls", nargs="+", help="Script URLs to fetch")
    url_parser.add_argument("--timeout", type=int, default=6, help="Request timeout in seconds")
    _add_scan_options(url_parser)
    url_parser.set_defaults(func=cmd_scan_url)

    config_parser = subparsers.add_parser("init-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", help="Output config file path")
    config_parser.set_defaults(func=cmd_init_config)

    version_parser = subparsers.add_parser("version", help="Show version information")
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
