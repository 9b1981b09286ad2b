"""Copy the selected part of a document into standalone block trees."""

from __future__ import annotations

from typing import List

from richtext_engine.document.nodes import Element, Node, Text
from richtext_engine.document.selection import Selection, SelectionScope, resolve_selection


def _clone_covered(scope: SelectionScope, node: Node) -> Node:
    if isinstance(node, Text):
        low, high = scope.local_range(node)
        return Text(node.content[low:high])
    if not isinstance(node, Element):
        raise ValueError(f"cannot copy node of type {type(node).__name__}")
    copy = node.clone_shallow()
    for child in node.children:
        if scope.covers(child):
            copy.append(_clone_covered(scope, child))
    return copy


def extract_selection(root: Element, selection: Selection) -> List[Element]:
    """Return copies of the covered blocks, trimmed to the selection.

    The document is not modified. A collapsed or unresolved selection
    yields an empty list.
    """

    scope = resolve_selection(root, selection)
    if scope is None or scope.collapsed:
        return []
    fragments: List[Element] = []
    for block in root.children:
        if isinstance(block, Element) and scope.covers(block):
            copy = _clone_covered(scope, block)
            if isinstance(copy, Element) and copy.text_content:
                fragments.append(copy)
    return fragments


__all__ = ["extract_selection"]
