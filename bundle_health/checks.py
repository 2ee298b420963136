"""
checks.py - Structural checks run against parsed bundle front matter.

Every check has the same signature:

    check(config: Dict[str, Any], body: str, path: Path) -> List[Issue]

Checks are pure: they read only their arguments, never each other's output,
and report every defect they find instead of stopping at the first one.

Checks:
- check_frontmatter_syntax: confirms the front matter parsed
- check_required_fields: bundle files declare a non-empty bundle.name
- check_module_list_format: providers/tools/hooks are lists of {module: ...}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .types import BundleKind, Issue, Severity

CheckFn = Callable[[Dict[str, Any], str, Path], List[Issue]]

# Sections holding module entries, in reporting order
MODULE_LIST_SECTIONS = ("providers", "tools", "hooks")

AGENT_MARKER_KEY = "meta"

_YAML_TYPE_NAMES = {
    "dict": "mapping",
    "list": "list",
    "str": "string",
    "int": "integer",
    "float": "number",
    "bool": "boolean",
    "NoneType": "null",
    "date": "date",
    "datetime": "timestamp",
}


# ============================================================================
# Helpers
# ============================================================================

def classify_config(config: Dict[str, Any]) -> BundleKind:
    """Classify parsed front matter as an agent or a bundle definition.

    Agent files carry a top-level 'meta' section instead of 'bundle'.
    """
    if AGENT_MARKER_KEY in config:
        return BundleKind.AGENT
    return BundleKind.BUNDLE


def safe_get_stripped(value: Any) -> Optional[str]:
    """
    Safely extract and strip a value that might be None.

    Handles YAML null values (including tilde ~) gracefully.

    Returns:
        Stripped string if value is a non-empty string, None otherwise
    """
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def yaml_type_name(value: Any) -> str:
    """Name a parsed YAML value's type the way a bundle author would."""
    name = type(value).__name__
    return _YAML_TYPE_NAMES.get(name, name)


# ============================================================================
# Checks
# ============================================================================

def check_frontmatter_syntax(config: Dict[str, Any], body: str, path: Path) -> List[Issue]:
    """Confirm the front matter parsed.

    Checks only run after parsing succeeded, so there is nothing left to
    report here. Keeping the check registered records the confirmation in
    Report.checks_run.
    """
    return []


def check_required_fields(config: Dict[str, Any], body: str, path: Path) -> List[Issue]:
    """
    Every bundle file must declare a non-empty bundle.name.

    Agent files (those with a 'meta' section) use a different schema and are
    skipped. An empty or blank name counts as missing.

    Args:
        config: Parsed front matter.
        body: Markdown body (unused).
        path: Bundle file path, recorded on each issue.

    Returns:
        At most one issue.
    """
    if classify_config(config) is BundleKind.AGENT:
        return []

    file_path = str(path)

    if "bundle" not in config:
        return [
            Issue(
                severity=Severity.ERROR,
                code="MISSING_BUNDLE_SECTION",
                message="missing required 'bundle' section",
                file_path=file_path,
                fix_hint="Add a bundle section to the front matter:\n  bundle:\n    name: my-bundle",
            )
        ]

    bundle = config["bundle"]
    if not isinstance(bundle, dict):
        return [
            Issue(
                severity=Severity.ERROR,
                code="INVALID_BUNDLE_SECTION",
                message=f"'bundle' must be a mapping (got {yaml_type_name(bundle)})",
                file_path=file_path,
                fix_hint="Change 'bundle' to a mapping with a name:\n  bundle:\n    name: my-bundle",
            )
        ]

    if safe_get_stripped(bundle.get("name")) is None:
        return [
            Issue(
                severity=Severity.ERROR,
                code="MISSING_BUNDLE_NAME",
                message="missing required field 'bundle.name' (must be a non-empty string)",
                file_path=file_path,
                fix_hint="Add the 'name' field under the bundle section: `name: my-bundle`",
            )
        ]

    return []


def check_module_list_format(config: Dict[str, Any], body: str, path: Path) -> List[Issue]:
    """
    Validate the shape of the providers, tools and hooks sections.

    Each section is optional. When present it must be a list whose entries
    are mappings with a 'module' key. Issues come back in section order
    (providers, tools, hooks) and ascending index within each section.
    Agent files are skipped.

    Args:
        config: Parsed front matter.
        body: Markdown body (unused).
        path: Bundle file path, recorded on each issue.

    Returns:
        One issue per malformed section or entry.
    """
    if classify_config(config) is BundleKind.AGENT:
        return []

    file_path = str(path)
    issues: List[Issue] = []

    for section in MODULE_LIST_SECTIONS:
        if section not in config:
            continue

        entries = config[section]
        if not isinstance(entries, list):
            issues.append(
                Issue(
                    severity=Severity.ERROR,
                    code="INVALID_MODULE_LIST",
                    message=f"'{section}' must be a list (got {yaml_type_name(entries)})",
                    file_path=file_path,
                    fix_hint=f"Change '{section}' to a list of entries:\n  {section}:\n    - module: <module-name>",
                )
            )
            continue

        for index, entry in enumerate(entries):
            location = f"{section}[{index}]"

            if not isinstance(entry, dict):
                issues.append(
                    Issue(
                        severity=Severity.ERROR,
                        code="INVALID_MODULE_FORMAT",
                        message=f"{location} must be a mapping with a 'module' key (got {yaml_type_name(entry)})",
                        file_path=file_path,
                        fix_hint=_module_format_hint(section, entry),
                    )
                )
                continue

            if "module" not in entry:
                issues.append(
                    Issue(
                        severity=Severity.ERROR,
                        code="MISSING_MODULE_KEY",
                        message=f"{location} is missing required key 'module'",
                        file_path=file_path,
                        fix_hint=f"Add `module: <module-name>` to {location}",
                    )
                )

    return issues


def _module_format_hint(section: str, entry: Any) -> str:
    if isinstance(entry, (str, int, float, bool)):
        return f"Change `- {entry}` to `- module: {entry}` under '{section}'"
    return f"Replace the entry with a mapping: `- module: <module-name>` under '{section}'"
