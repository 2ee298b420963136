"""
bundle_health - Health checks for bundle definition files.

Bundle files are markdown documents with a YAML front matter block. This
package reports structural defects in them before the host runtime loads
them:
- Types: Issue, Report, Severity, CheckMode
- Checks: pure functions (config, body, path) -> List[Issue]
- Orchestrator: runs fast checks, plus slow checks in COMPREHENSIVE mode

Usage:
    from bundle_health import CheckMode, create_default_orchestrator

    orchestrator = create_default_orchestrator()
    report = orchestrator.run("bundles/foundation.md")
    for issue in report.issues:
        print(issue.severity.value, issue.code, issue.message)

    # Register an extra network check
    orchestrator.register_slow_check("sources_reachable", check_sources)
    report = orchestrator.run("bundles/foundation.md", mode=CheckMode.COMPREHENSIVE)
"""

__version__ = "0.1.0"

from .types import (
    BundleKind,
    CheckMode,
    Issue,
    Report,
    Severity,
)

from .frontmatter import (
    FrontmatterSyntaxError,
    split_frontmatter,
)

from .checks import (
    CheckFn,
    check_frontmatter_syntax,
    check_module_list_format,
    check_required_fields,
    classify_config,
)

from .orchestrator import (
    HealthCheckOrchestrator,
    create_default_orchestrator,
)

__all__ = [
    "__version__",
    # Types
    "BundleKind",
    "CheckMode",
    "Issue",
    "Report",
    "Severity",
    # Front matter
    "FrontmatterSyntaxError",
    "split_frontmatter",
    # Checks
    "CheckFn",
    "check_frontmatter_syntax",
    "check_module_list_format",
    "check_required_fields",
    "classify_config",
    # Orchestrator
    "HealthCheckOrchestrator",
    "create_default_orchestrator",
]
