"""Detection of documentation comments that already precede a node."""

from typing import Any


def has_leading_doc_comment(node: Any, source_text: str) -> bool:
    """Check whether a comment sits on the line directly above a node.

    Only the single line above the node's start line is inspected. A blank
    line there means no comment, a ``//`` line means a comment, and a line
    ending with ``*/`` counts when its ``/*`` opener is found scanning
    upward before any blank line.

    Args:
        node: SourceLocation, or any object with a ``loc`` SourceLocation
        source_text: Full source text

    Returns:
        True when a leading comment is present
    """
    loc = getattr(node, "loc", node)
    start_line = getattr(loc, "start_line", None)
    if not isinstance(start_line, int):
        return False

    lines = source_text.split("\n")
    above = start_line - 2  # 0-indexed line above the node
    if above < 0 or above >= len(lines):
        return False

    line = lines[above].strip()
    if not line:
        return False
    if line.startswith("//"):
        return True
    if line.endswith("*/"):
        for index in range(above, -1, -1):
            candidate = lines[index]
            if "/*" in candidate:
                return True
            if not candidate.strip():
                break
    return False
