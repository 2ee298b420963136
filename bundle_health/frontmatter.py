"""
frontmatter.py - Split a bundle file into YAML front matter and body.

A bundle file looks like:

    ---
    bundle:
      name: my-bundle
    providers:
      - module: provider-anthropic
    ---

    # Markdown body ...

The block between the two '---' lines is parsed with yaml.safe_load. Files
without an opening '---' have no front matter: the configuration is empty and
the whole text is the body.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"


class FrontmatterSyntaxError(ValueError):
    """Front matter could not be parsed.

    Attributes:
        line: 0-indexed line in the file where the problem was found, if known.
        column: 0-indexed column, if known.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


def _is_delimiter(line: str) -> bool:
    return line.rstrip("\r\n").rstrip() == DELIMITER


def split_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split raw file text into a configuration mapping and a body.

    Args:
        text: Full text of the bundle file.

    Returns:
        (config, body) where config is the parsed front matter mapping.

    Raises:
        FrontmatterSyntaxError: If the block is unterminated, is not valid
            YAML, or does not hold a mapping.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return {}, text

    closing = None
    for index in range(1, len(lines)):
        if _is_delimiter(lines[index]):
            closing = index
            break

    if closing is None:
        raise FrontmatterSyntaxError(
            "unterminated front matter: opening '---' has no closing '---'",
            line=0,
            column=0,
        )

    yaml_text = "".join(lines[1:closing])
    body = "".join(lines[closing + 1:])

    loader = yaml.SafeLoader(yaml_text)
    try:
        node = loader.get_single_node()
        data = loader.construct_document(node) if node is not None else None
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            # Shift by one for the opening delimiter line
            raise FrontmatterSyntaxError(_describe_yaml_error(e), line=mark.line + 1, column=mark.column)
        raise FrontmatterSyntaxError(_describe_yaml_error(e))
    except RecursionError:
        raise FrontmatterSyntaxError("front matter is nested too deeply to parse") from None
    except (ValueError, TypeError, OverflowError) as e:
        # Raised by scalar constructors, e.g. a timestamp with day 30 in February
        raise FrontmatterSyntaxError(f"invalid value: {e}") from e
    finally:
        loader.dispose()

    if data is None:
        return {}, body

    if not isinstance(data, dict):
        raise FrontmatterSyntaxError(
            f"front matter must be a mapping (got {type(data).__name__})",
            line=node.start_mark.line + 1,
            column=node.start_mark.column,
        )

    logger.debug("Parsed front matter with %d top-level keys", len(data))
    return data, body


def _describe_yaml_error(error: yaml.YAMLError) -> str:
    """One-line description of a YAML error, without PyYAML's position dump."""
    problem = getattr(error, "problem", None)
    context = getattr(error, "context", None)
    if problem and context:
        return f"{context}: {problem}"
    if problem:
        return str(problem)
    return str(error).splitlines()[0] if str(error) else type(error).__name__
