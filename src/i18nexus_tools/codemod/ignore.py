"""
``i18n-ignore`` directive detection.
"""

from __future__ import annotations

from tree_sitter import Node

from ..parsing.nodes import is_comment_only_jsx_expression, node_text
from ..parsing.source import ParsedSource

IGNORE_TOKEN = "i18n-ignore"
LINES_ABOVE = 2


def _leading_comments(node: Node) -> list[Node]:
    """Comments directly before ``node``, JSX ``{/* */}`` containers included."""
    comments: list[Node] = []
    sibling = node.prev_sibling
    while sibling is not None:
        if sibling.type == "comment" or is_comment_only_jsx_expression(sibling):
            comments.append(sibling)
        elif sibling.type == "jsx_text" and not node_text(sibling).strip():
            pass
        else:
            break
        sibling = sibling.prev_sibling
    return comments


def has_leading_ignore(node: Node) -> bool:
    return any(IGNORE_TOKEN in node_text(comment) for comment in _leading_comments(node))


def has_ignore_directive(node: Node, parsed: ParsedSource) -> bool:
    """
    True when an ``i18n-ignore`` comment marks ``node``: as a leading
    comment of the node or of its parent, on one of the two source lines
    above it, or anywhere on its own line.
    """
    if has_leading_ignore(node):
        return True
    if node.parent is not None and has_leading_ignore(node.parent):
        return True

    row = node.start_point[0]
    return any(IGNORE_TOKEN in parsed.lines[index] for index in range(max(0, row - LINES_ABOVE), row + 1))
