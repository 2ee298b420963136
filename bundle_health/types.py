"""
types.py - Issue and report data model for bundle health checks.

An Issue describes one defect found in a bundle file. A Report collects the
issues for one file together with the names of the checks that ran.

Usage:
    from bundle_health.types import Issue, Report, Severity

    report = Report(bundle_path=Path("bundle.md"))
    report.add(Issue(Severity.ERROR, "MISSING_BUNDLE_NAME", "bundle.name is missing"))
    assert not report.passed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple


class Severity(str, Enum):
    """How badly an issue affects the bundle.

    ERROR blocks the bundle, WARNING will likely degrade it and INFO is a
    stylistic suggestion.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def is_blocking(self) -> bool:
        return self is Severity.ERROR


class CheckMode(str, Enum):
    """Which registered checks a run executes."""

    FAST = "fast"
    COMPREHENSIVE = "comprehensive"


class BundleKind(str, Enum):
    """Kind of definition file, decided from the parsed front matter."""

    BUNDLE = "bundle"
    AGENT = "agent"


@dataclass(frozen=True)
class Issue:
    """A single defect found in a bundle file.

    Attributes:
        severity: How badly the defect affects the bundle.
        code: Stable machine-readable identifier (e.g. MISSING_BUNDLE_NAME).
        message: Human-readable explanation.
        file_path: File the defect was found in, if known.
        line: 1-indexed line number, if known.
        fix_hint: Suggested remediation, if any.
    """

    severity: Severity
    code: str
    message: str
    file_path: Optional[str] = None
    line: Optional[int] = None
    fix_hint: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.severity, Severity):
            raise TypeError(f"severity must be a Severity, got {type(self.severity).__name__}")
        if not self.code:
            raise ValueError("Issue code must be non-empty")
        if not self.message:
            raise ValueError("Issue message must be non-empty")
        if self.line is not None and self.line < 1:
            raise ValueError(f"Issue line is 1-indexed, got {self.line}")

    @property
    def identity(self) -> Tuple[str, Optional[str], Optional[int], str]:
        """Tuple that distinguishes one issue from another."""
        return (self.code, self.file_path, self.line, self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert issue to dictionary for JSON serialization."""
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "file_path": self.file_path,
            "line": self.line,
            "fix_hint": self.fix_hint,
        }


@dataclass
class Report:
    """Issues found in one bundle file plus the checks that produced them.

    A Report is filled in by a single orchestrator run and handed to the
    caller when the run returns. Issue order is check execution order.

    Attributes:
        bundle_path: The file that was validated.
        issues: Issues in the order the checks reported them.
        checks_run: Names of checks that executed, in execution order.
        mode: Mode the run was executed in.
        bundle_kind: Classification of the parsed front matter (None if
            the run stopped before parsing succeeded).
        duration_ms: Wall-clock duration of the run.
    """

    bundle_path: Path
    issues: List[Issue] = field(default_factory=list)
    checks_run: List[str] = field(default_factory=list)
    mode: CheckMode = CheckMode.FAST
    bundle_kind: Optional[BundleKind] = None
    duration_ms: int = 0

    def add(self, issue: Issue) -> None:
        """Append a single issue."""
        self.issues.append(issue)

    def extend(self, issues: Iterable[Issue]) -> None:
        """Append issues, keeping their order."""
        self.issues.extend(issues)

    @property
    def has_errors(self) -> bool:
        """True if any issue is error-level."""
        return any(i.severity.is_blocking for i in self.issues)

    @property
    def passed(self) -> bool:
        """True if there are no errors (warnings and info never fail a bundle)."""
        return not self.has_errors

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    @property
    def infos(self) -> List[Issue]:
        return [i for i in self.issues if i.severity is Severity.INFO]

    def codes(self) -> List[str]:
        """Issue codes in report order."""
        return [i.code for i in self.issues]

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for JSON serialization."""
        return {
            "bundle_path": str(self.bundle_path),
            "mode": self.mode.value,
            "bundle_kind": self.bundle_kind.value if self.bundle_kind else None,
            "passed": self.passed,
            "has_errors": self.has_errors,
            "checks_run": list(self.checks_run),
            "issues": [i.to_dict() for i in self.issues],
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "info_count": len(self.infos),
            "duration_ms": self.duration_ms,
        }
