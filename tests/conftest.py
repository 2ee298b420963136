"""
Test fixtures and utilities for bundle health tests.

This module provides reusable fixtures for writing bundle files into a
temporary directory, plus assertion helpers shared by the test modules.
"""

import sys
from pathlib import Path
from typing import List

import pytest

_repo_root = Path(__file__).parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

from bundle_health.config import reset_config  # noqa: E402
from bundle_health.orchestrator import create_default_orchestrator  # noqa: E402
from bundle_health.types import Report  # noqa: E402

# ============================================================================
# Sample Bundle Content
# ============================================================================

VALID_BUNDLE = """---
bundle:
  name: foundation
  version: 1.0.0
providers:
  - module: provider-anthropic
    config:
      default_model: claude-sonnet
tools:
  - module: tool-filesystem
  - module: tool-bash
hooks:
  - module: hooks-logging
---

# Foundation

Base bundle with the standard tools.
"""

VALID_AGENT = """---
meta:
  name: reviewer
  description: Reviews pull requests
tools:
  - module: tool-filesystem
---

You review code.
"""


def make_bundle(frontmatter: str, body: str = "\nBody text.\n") -> str:
    """Wrap YAML text in '---' delimiters followed by a body."""
    yaml_text = frontmatter.strip("\n")
    return f"---\n{yaml_text}\n---\n{body}"


# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep host config files and BUNDLE_HEALTH_* variables out of tests."""
    for var in (
        "BUNDLE_HEALTH_CONFIG",
        "BUNDLE_HEALTH_MODE",
        "BUNDLE_HEALTH_FORMAT",
        "BUNDLE_HEALTH_STRICT",
        "BUNDLE_HEALTH_DISABLED_CHECKS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


# ============================================================================
# Bundle File Fixtures
# ============================================================================


@pytest.fixture
def write_bundle(tmp_path):
    """
    Factory fixture: write content to a bundle file and return its path.

    Usage:
        path = write_bundle("---\\nbundle:\\n  name: x\\n---\\n")
        path = write_bundle(content, name="other.md")
    """

    def _write(content: str, name: str = "bundle.md") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def valid_bundle(write_bundle):
    """Path to a well-formed bundle file."""
    return write_bundle(VALID_BUNDLE, name="foundation.md")


@pytest.fixture
def orchestrator():
    """A fresh orchestrator with the default checks."""
    return create_default_orchestrator()


# ============================================================================
# Assertion Helpers
# ============================================================================


def assert_codes(report: Report, expected: List[str]):
    """Assert the report holds exactly these issue codes, in this order."""
    actual = report.codes()
    assert actual == expected, (
        f"Expected issue codes {expected}, got {actual}\n"
        + "\n".join(f"  {i.code}: {i.message}" for i in report.issues)
    )


def assert_passed(report: Report):
    """Assert the report passed with no issues at all."""
    assert report.passed, f"Expected report to pass, got: {report.codes()}"
    assert report.issues == []


def assert_failed_with(report: Report, code: str):
    """Assert the report failed and holds at least one issue with this code."""
    assert not report.passed, "Expected report to fail"
    assert code in report.codes(), f"Expected {code} in {report.codes()}"
