"""
Tests for splitting bundle files into front matter and body.

The splitter is the boundary between raw text and the checks: it either
returns a (config, body) pair or raises FrontmatterSyntaxError carrying a
0-indexed file position.
"""

import pytest

from bundle_health.frontmatter import FrontmatterSyntaxError, split_frontmatter

# ============================================================================
# Happy Path Tests
# ============================================================================


def test_splits_config_and_body():
    text = "---\nbundle:\n  name: foundation\n---\n\n# Title\n"
    config, body = split_frontmatter(text)

    assert config == {"bundle": {"name": "foundation"}}
    assert body == "\n# Title\n"


def test_no_frontmatter_returns_empty_config():
    """Files without an opening delimiter are all body."""
    text = "# Just markdown\n\nNo front matter here.\n"
    config, body = split_frontmatter(text)

    assert config == {}
    assert body == text


def test_empty_frontmatter_block():
    config, body = split_frontmatter("---\n---\nBody\n")

    assert config == {}
    assert body == "Body\n"


def test_comment_only_frontmatter_block():
    config, _ = split_frontmatter("---\n# nothing yet\n---\n")
    assert config == {}


def test_crlf_line_endings():
    text = "---\r\nbundle:\r\n  name: x\r\n---\r\nBody\r\n"
    config, body = split_frontmatter(text)

    assert config == {"bundle": {"name": "x"}}
    assert body == "Body\r\n"


def test_leading_bom_is_ignored():
    config, _ = split_frontmatter("\ufeff---\nbundle:\n  name: x\n---\n")
    assert config == {"bundle": {"name": "x"}}


def test_body_may_contain_horizontal_rules():
    """Only the first closing delimiter ends the block."""
    text = "---\nbundle:\n  name: x\n---\nIntro\n---\nMore\n"
    config, body = split_frontmatter(text)

    assert config == {"bundle": {"name": "x"}}
    assert body == "Intro\n---\nMore\n"


# ============================================================================
# Syntax Error Tests
# ============================================================================


def test_tab_indentation_raises_with_position():
    """Tabs cannot indent YAML; the error points at the offending file line."""
    text = "---\nbundle:\n\tname: x\n---\n"

    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter(text)

    # File line index 2 is "\tname: x" (0-indexed)
    assert exc_info.value.line == 2
    assert exc_info.value.column is not None


def test_unterminated_frontmatter():
    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter("---\nbundle:\n  name: x\n")

    assert "unterminated" in str(exc_info.value)
    assert exc_info.value.line == 0


def test_non_mapping_root():
    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter("---\n- a\n- b\n---\n")

    assert "mapping" in str(exc_info.value)
    assert exc_info.value.line == 1


def test_scalar_root():
    with pytest.raises(FrontmatterSyntaxError):
        split_frontmatter("---\njust a string\n---\n")


def test_unclosed_flow_sequence():
    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter("---\ntools: [a, b\n---\n")

    assert exc_info.value.line is not None


def test_syntax_error_is_value_error():
    """Callers that only know ValueError still catch syntax errors."""
    with pytest.raises(ValueError):
        split_frontmatter("---\nkey: [\n---\n")


def test_non_mapping_root_after_comments_points_at_value():
    """The reported line is where the root value starts, not the block start."""
    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter("---\n# owner: platform\n# reviewed\njust a string\n---\n")

    # File line index 3 is "just a string" (0-indexed)
    assert exc_info.value.line == 3
    assert exc_info.value.column == 0


# ============================================================================
# Value Construction Error Tests
# ============================================================================


def test_impossible_date_raises_syntax_error():
    """Timestamp-shaped scalars are built as dates; a bad day must not escape as ValueError."""
    text = "---\nbundle:\n  name: x\n  released: 2024-02-30\n---\n"

    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter(text)

    assert "invalid value" in str(exc_info.value)


def test_unhashable_key_raises_syntax_error():
    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter("---\n? [a]\n: b\n---\n")

    assert "unhashable" in str(exc_info.value)
    assert exc_info.value.line is not None


def test_deep_nesting_raises_syntax_error():
    text = "---\nbundle: " + "[" * 5000 + "]" * 5000 + "\n---\n"

    with pytest.raises(FrontmatterSyntaxError) as exc_info:
        split_frontmatter(text)

    assert "nested too deeply" in str(exc_info.value)
