"""Utility helpers for code-commenter."""

from code_commenter.utils.text import get_indentation, indent_lines, is_line_start

__all__ = [
    "get_indentation",
    "indent_lines",
    "is_line_start",
]
