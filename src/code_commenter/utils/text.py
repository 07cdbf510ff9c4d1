"""Text helpers for placing comments in source files."""

import re

__all__ = [
    "get_indentation",
    "indent_lines",
    "is_line_start",
]

_INDENT_RE = re.compile(r"[ \t]*")


def get_indentation(source: str, line_number: int) -> str:
    """Return the leading whitespace of a line.

    Args:
        source: Source text
        line_number: 1-indexed line number

    Returns:
        Indentation string, "" for out-of-range lines
    """
    lines = source.split("\n")
    if line_number < 1 or line_number > len(lines):
        return ""
    match = _INDENT_RE.match(lines[line_number - 1])
    return match.group(0) if match else ""


def indent_lines(text: str, indent: str) -> str:
    """Prefix every line of text with indent, keeping empty lines empty."""
    return "\n".join(indent + line if line else line for line in text.split("\n"))


def is_line_start(source: str, offset: int) -> bool:
    """Check whether only whitespace precedes offset on its line."""
    line_start = source.rfind("\n", 0, offset) + 1
    return not source[line_start:offset].strip()
