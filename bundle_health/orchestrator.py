"""
orchestrator.py - Run registered health checks against one bundle file.

The orchestrator keeps two ordered collections of named checks:
- fast checks: need only the parsed front matter of the one file
- slow checks: may reach the network or resolve external resources

A run reads the file, splits off the front matter and executes the fast
checks, plus the slow checks in COMPREHENSIVE mode. Missing files, unreadable
files and unparseable front matter each end the run early with a single
issue. Nothing raised by a run escapes to the caller.

Usage:
    from bundle_health.orchestrator import create_default_orchestrator
    from bundle_health.types import CheckMode

    orchestrator = create_default_orchestrator()
    report = orchestrator.run(Path("bundles/foundation.md"))
    if not report.passed:
        for issue in report.errors:
            print(issue.code, issue.message)

    # Include network-dependent checks
    report = orchestrator.run(path, mode=CheckMode.COMPREHENSIVE)

Registration is not locked. Register all checks before running, and do not
register from one thread while another thread runs the same orchestrator.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .checks import (
    CheckFn,
    check_frontmatter_syntax,
    check_module_list_format,
    check_required_fields,
    classify_config,
)
from .frontmatter import FrontmatterSyntaxError, split_frontmatter
from .types import CheckMode, Issue, Report, Severity

logger = logging.getLogger(__name__)

YAML_SYNTAX_FIX_HINT = (
    "Check the front matter YAML: common causes are bad indentation, "
    "unquoted special characters (':', '#', '@', '*', '&') and tab characters "
    "(YAML indentation must use spaces)"
)


@dataclass(frozen=True)
class RegisteredCheck:
    """A check function registered under a name."""

    name: str
    fn: CheckFn


class HealthCheckOrchestrator:
    """Runs fast and slow checks against bundle files and builds Reports.

    Checks run in registration order. Registering the same name twice runs
    the check twice.
    """

    def __init__(self) -> None:
        self._fast_checks: List[RegisteredCheck] = []
        self._slow_checks: List[RegisteredCheck] = []

    @property
    def fast_checks(self) -> List[str]:
        """Names of registered fast checks, in order."""
        return [c.name for c in self._fast_checks]

    @property
    def slow_checks(self) -> List[str]:
        """Names of registered slow checks, in order."""
        return [c.name for c in self._slow_checks]

    def register_fast_check(self, name: str, check_fn: CheckFn) -> None:
        """Register a check that needs only the parsed file."""
        self._fast_checks.append(RegisteredCheck(name, check_fn))

    def register_slow_check(self, name: str, check_fn: CheckFn) -> None:
        """Register a network-dependent check, run only in COMPREHENSIVE mode.

        Slow checks manage their own timeouts; the orchestrator waits for
        each one to return.
        """
        self._slow_checks.append(RegisteredCheck(name, check_fn))

    def run(self, bundle_path: Union[str, Path], mode: CheckMode = CheckMode.FAST) -> Report:
        """Validate one bundle file.

        Args:
            bundle_path: Path to the bundle file.
            mode: FAST runs fast checks only; COMPREHENSIVE adds slow checks.

        Returns:
            A Report owned by the caller.
        """
        path = Path(bundle_path)
        mode = CheckMode(mode)
        report = Report(bundle_path=path, mode=mode)

        start = time.perf_counter()
        logger.debug("Validating %s (mode=%s)", path, mode.value)
        try:
            self._run_into(report, path, mode)
        finally:
            report.duration_ms = int((time.perf_counter() - start) * 1000)

        logger.debug(
            "Validated %s in %dms: %d issues, %d checks, passed=%s",
            path,
            report.duration_ms,
            len(report.issues),
            len(report.checks_run),
            report.passed,
        )
        return report

    def _run_into(self, report: Report, path: Path, mode: CheckMode) -> None:
        file_path = str(path)

        try:
            exists = path.exists()
        except OSError:
            # stat failed for a reason other than absence; let the read report it
            exists = True

        if not exists:
            logger.info("Bundle file not found: %s", path)
            report.add(
                Issue(
                    severity=Severity.ERROR,
                    code="FILE_NOT_FOUND",
                    message=f"bundle file not found: {path}",
                    file_path=file_path,
                    fix_hint="Check the path: the file does not exist or the path is misspelled",
                )
            )
            return

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.info("Failed to read bundle file %s: %s", path, e)
            report.add(
                Issue(
                    severity=Severity.ERROR,
                    code="FILE_READ_ERROR",
                    message=f"failed to read bundle file: {e}",
                    file_path=file_path,
                    fix_hint="Check file permissions and that the file is UTF-8 text",
                )
            )
            return

        try:
            config, body = split_frontmatter(content)
        except FrontmatterSyntaxError as e:
            line = e.line + 1 if e.line is not None else None
            logger.info("Front matter syntax error in %s (line %s): %s", path, line, e.message)
            message = f"YAML syntax error: {e.message}"
            if line is not None and e.column is not None:
                message = f"{message} (line {line}, column {e.column + 1})"
            report.add(
                Issue(
                    severity=Severity.ERROR,
                    code="YAML_SYNTAX",
                    message=message,
                    file_path=file_path,
                    line=line,
                    fix_hint=YAML_SYNTAX_FIX_HINT,
                )
            )
            return

        report.bundle_kind = classify_config(config)

        self._run_checks(self._fast_checks, report, config, body, path)
        if mode is CheckMode.COMPREHENSIVE:
            self._run_checks(self._slow_checks, report, config, body, path)

    def _run_checks(
        self,
        checks: List[RegisteredCheck],
        report: Report,
        config: Dict[str, Any],
        body: str,
        path: Path,
    ) -> None:
        for check in checks:
            report.checks_run.append(check.name)
            start = time.perf_counter()
            try:
                issues = check.fn(config, body, path)
                if not isinstance(issues, list):
                    raise TypeError(f"check returned {type(issues).__name__}, expected list")
            except Exception as e:
                logger.exception("Check '%s' raised while validating %s", check.name, path)
                report.add(
                    Issue(
                        severity=Severity.ERROR,
                        code="CHECK_INTERNAL_ERROR",
                        message=f"check '{check.name}' raised {type(e).__name__}: {e}",
                        file_path=str(path),
                        fix_hint="This is a defect in the check, not necessarily in the bundle; report it to the check's maintainers",
                    )
                )
                continue

            report.extend(issues)
            logger.debug(
                "Check '%s' finished in %.1fms with %d issues",
                check.name,
                (time.perf_counter() - start) * 1000,
                len(issues),
            )


# ============================================================================
# Default check set
# ============================================================================

DEFAULT_FAST_CHECKS = (
    ("frontmatter_syntax", check_frontmatter_syntax),
    ("required_fields", check_required_fields),
    ("module_list_format", check_module_list_format),
)


def create_default_orchestrator(skip_checks: Optional[Iterable[str]] = None) -> HealthCheckOrchestrator:
    """Build a new orchestrator with the standard checks registered.

    Fast checks, in order: frontmatter_syntax, required_fields,
    module_list_format. Each call returns an independent instance.

    Args:
        skip_checks: Check names to leave unregistered (e.g. ["module_list_format"]).

    Returns:
        A fresh HealthCheckOrchestrator.
    """
    skipped = set(skip_checks or [])
    orchestrator = HealthCheckOrchestrator()
    for name, check_fn in DEFAULT_FAST_CHECKS:
        if name in skipped:
            logger.debug("Skipping default check '%s'", name)
            continue
        orchestrator.register_fast_check(name, check_fn)
    return orchestrator
