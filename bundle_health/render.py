"""Render Reports as human-readable text or JSON."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from . import __version__
from .types import Issue, Report, Severity

# Issue template: [FAIL] CODE: location message
#   Fix: action
ISSUE_TEMPLATE = "{tag} {code}: {location} {message}"

JSON_SCHEMA_VERSION = "1.0.0"

_SEVERITY_TAGS = {
    Severity.ERROR: "[FAIL]",
    Severity.WARNING: "[WARN]",
    Severity.INFO: "[INFO]",
}


def format_location(issue: Issue) -> str:
    """Format 'path:line' (or just 'path') for an issue."""
    location = issue.file_path or "<unknown>"
    if issue.line is not None:
        location = f"{location}:{issue.line}"
    return location


def format_issue(issue: Issue) -> str:
    """Format one issue, with its fix hint indented underneath."""
    text = ISSUE_TEMPLATE.format(
        tag=_SEVERITY_TAGS[issue.severity],
        code=issue.code,
        location=format_location(issue) + ":",
        message=issue.message,
    )
    if issue.fix_hint:
        hint = issue.fix_hint.replace("\n", "\n       ")
        text = f"{text}\n  Fix: {hint}"
    return text


def format_report(report: Report) -> str:
    """Format a report for the terminal.

    Issues are listed in report order and followed by a one-line summary.
    """
    lines: List[str] = []
    for issue in report.issues:
        lines.append(format_issue(issue))

    status = "PASSED" if report.passed else "FAILED"
    summary = (
        f"{report.bundle_path}: {status} "
        f"({len(report.errors)} errors, {len(report.warnings)} warnings, "
        f"{len(report.infos)} info; {len(report.checks_run)} checks run)"
    )
    lines.append(summary)
    return "\n".join(lines)


def build_reports_json(reports: Sequence[Report]) -> Dict[str, Any]:
    """Build the JSON document for one or more reports."""
    failed = [r for r in reports if not r.passed]
    return {
        "version": JSON_SCHEMA_VERSION,
        "tool_version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "summary": {
            "status": "FAILED" if failed else "PASSED",
            "total": len(reports),
            "passed": len(reports) - len(failed),
            "failed": len(failed),
            "errors": sum(len(r.errors) for r in reports),
            "warnings": sum(len(r.warnings) for r in reports),
        },
        "reports": [r.to_dict() for r in reports],
    }


def reports_to_json(reports: Sequence[Report]) -> str:
    """Serialize reports to an indented JSON string."""
    return json.dumps(build_reports_json(reports), indent=2)
