"""
Inline Formatter - Markdown inline nodes to styled runs

Flattens one inline subtree into an ordered list of StyledRun objects.
Emphasis-like nodes switch on one flag of the FormattingContext for their
own subtree; the context is an immutable value passed down the recursion,
so nothing here holds "current formatting" state.

The function is total over the node space:
    - unknown containers recurse with the context unchanged
    - unknown leaves with a value become one plain run
    - anything else produces no runs

Hyperlinks are NOT produced here. The block composer decides which children
are links and wraps the runs from flatten_for_link() in a Hyperlink.
"""

import logging
from dataclasses import replace
from typing import List

from config.constants import (
    HYPERLINK_COLOR,
    HYPERLINK_STYLE,
    IMAGE_PLACEHOLDER_COLOR,
    MONOSPACE_FONT,
)
from core.markdown.mdast import Node, NodeType
from core.rendering.document_model import DEFAULT_CONTEXT, FormattingContext, StyledRun

logger = logging.getLogger(__name__)

# Node type → the one context flag it owns
EMPHASIS_FLAGS = {
    NodeType.EMPHASIS: "italic",
    NodeType.STRONG: "bold",
    NodeType.DELETE: "strike",
    NodeType.SUPERSCRIPT: "superscript",
    NodeType.SUBSCRIPT: "subscript",
}


def flatten_inline(node: Node, ctx: FormattingContext = DEFAULT_CONTEXT) -> List[StyledRun]:
    """
    Flatten an inline node into styled runs.

    Args:
        node: Inline AST node
        ctx: Formatting inherited from ancestors

    Returns:
        Runs in reading order (may be empty)
    """
    node_type = node.type

    if node_type == NodeType.TEXT:
        return [StyledRun.from_context(node.value, ctx)]

    elif node_type in EMPHASIS_FLAGS:
        inner = ctx.with_flag(EMPHASIS_FLAGS[node_type])
        return _flatten_children(node, inner)

    elif node_type == NodeType.INLINE_CODE:
        # Code keeps bold/italic only; strike and scripts never apply
        return [StyledRun(
            text=node.value,
            bold=ctx.bold,
            italic=ctx.italic,
            font=MONOSPACE_FONT,
        )]

    elif node_type == NodeType.BREAK:
        return [StyledRun(is_break=True)]

    elif node_type == NodeType.IMAGE:
        return [StyledRun(
            text=f"[Image: {node.alt or node.url}]",
            italic=True,
            color=IMAGE_PLACEHOLDER_COLOR,
        )]

    # Fallbacks (Link reached inside the recursion lands here too)
    children = getattr(node, "children", None)
    if children is not None:
        return _flatten_children(node, ctx)

    value = getattr(node, "value", None)
    if value:
        logger.debug(f"Inline fallback: literal '{node_type.value}' rendered as plain text")
        return [StyledRun(text=value)]

    return []


def _flatten_children(node: Node, ctx: FormattingContext) -> List[StyledRun]:
    runs: List[StyledRun] = []
    for child in node.children:
        runs.extend(flatten_inline(child, ctx))
    return runs


def flatten_for_link(node: Node, ctx: FormattingContext = DEFAULT_CONTEXT) -> List[StyledRun]:
    """
    Flatten a Link's subtree and apply hyperlink decoration to every run.

    Line breaks inside the link stay bare break markers.
    """
    runs = []
    for run in _flatten_children(node, ctx):
        if run.is_break:
            runs.append(run)
            continue
        runs.append(replace(
            run,
            color=HYPERLINK_COLOR,
            underline=True,
            char_style=HYPERLINK_STYLE,
        ))
    return runs
