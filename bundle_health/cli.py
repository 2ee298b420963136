"""
cli.py - Command-line entry point for bundle health checks.

Usage:
    bundle-health bundles/foundation.md
    bundle-health --comprehensive bundles/*.md
    bundle-health --json --strict bundles/foundation.md
    python -m bundle_health bundles/foundation.md

Exit Codes:
    0   Every bundle passed
    1   At least one error-level issue (or warning, with --strict)
    2   Invalid invocation or configuration
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from . import __version__
from .config import ConfigError, load_config
from .orchestrator import DEFAULT_FAST_CHECKS, create_default_orchestrator
from .render import format_report, reports_to_json
from .types import CheckMode, Report

logger = logging.getLogger(__name__)

# Exit codes per contract
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILED = 1
EXIT_FATAL_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bundle-health",
        description="Validate bundle definition files (YAML front matter + markdown body)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0 - All bundles passed
  1 - Validation failed (error-level issues, or warnings with --strict)
  2 - Invalid invocation or configuration

Examples:
  bundle-health bundles/foundation.md
  bundle-health --comprehensive bundles/*.md
  bundle-health --json bundles/foundation.md
        """,
    )

    parser.add_argument("paths", nargs="+", help="Bundle files to validate")

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--fast",
        dest="mode",
        action="store_const",
        const=CheckMode.FAST,
        help="Run local structural checks only (default)",
    )
    mode_group.add_argument(
        "--comprehensive",
        dest="mode",
        action="store_const",
        const=CheckMode.COMPREHENSIVE,
        help="Also run network-dependent checks",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output machine-readable JSON to stdout",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as failures for the exit code",
    )

    parser.add_argument(
        "--skip-check",
        action="append",
        default=[],
        metavar="NAME",
        help="Skip a default check by name (repeatable)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging with per-check timing",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bundle-health {__version__}",
    )

    return parser


def _exit_code(reports: Sequence[Report], strict: bool) -> int:
    if any(r.has_errors for r in reports):
        return EXIT_VALIDATION_FAILED
    if strict and any(r.warnings for r in reports):
        return EXIT_VALIDATION_FAILED
    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FATAL_ERROR

    mode = args.mode or config.mode
    strict = args.strict or config.strict
    as_json = args.json or config.output_format == "json"
    skip_checks = list(config.disabled_checks) + list(args.skip_check)

    known = {name for name, _ in DEFAULT_FAST_CHECKS}
    unknown = sorted(set(skip_checks) - known)
    if unknown:
        print(
            f"ERROR: unknown check name(s): {', '.join(unknown)} "
            f"(known: {', '.join(sorted(known))})",
            file=sys.stderr,
        )
        return EXIT_FATAL_ERROR

    logger.debug("Config from %s: mode=%s strict=%s skip=%s", config.source, mode.value, strict, skip_checks)

    orchestrator = create_default_orchestrator(skip_checks=skip_checks)
    reports = [orchestrator.run(path, mode=mode) for path in args.paths]

    if as_json:
        print(reports_to_json(reports))
    else:
        for report in reports:
            stream = sys.stdout if report.passed else sys.stderr
            print(format_report(report), file=stream)
        failed = sum(1 for r in reports if not r.passed)
        if failed:
            print(f"\nBundle validation FAILED ({failed} of {len(reports)} files).", file=sys.stderr)
        else:
            print(f"\nBundle validation PASSED ({len(reports)} files).")

    return _exit_code(reports, strict)
