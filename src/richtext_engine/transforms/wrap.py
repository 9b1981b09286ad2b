"""Wrap and unwrap substrings of a single text leaf."""

from __future__ import annotations

from typing import List, Sequence

from richtext_engine.document.nodes import Element, Node, Text
from richtext_engine.document.selection import BoundaryPoint
from richtext_engine.document.tags import InlineMarkTag


def wrap_range(leaf: Text, start: int, end: int, mark: InlineMarkTag) -> Text:
    """Wrap ``leaf.content[start:end]`` into a ``mark`` element.

    The leaf is replaced in its parent by the prefix text (if any), the
    new mark element, and the suffix text (if any). Returns the leaf
    inside the mark element.
    """

    text = leaf.content
    if not 0 <= start <= end <= len(text):
        raise ValueError(f"Invalid wrap range [{start}, {end}) for text of length {len(text)}")
    parent = leaf.parent
    if parent is None:
        raise ValueError("Cannot wrap a detached text leaf")

    inner = Text(text[start:end])
    replacement: List[Node] = []
    if start > 0:
        replacement.append(Text(text[:start]))
    replacement.append(Element(tag=mark, children=[inner]))
    if end < len(text):
        replacement.append(Text(text[end:]))
    parent.replace(leaf, replacement)
    return inner


def unwrap(element: Element) -> List[Node]:
    """Promote ``element``'s children into its parent, dropping the element."""

    parent = element.parent
    if parent is None:
        raise ValueError("Cannot unwrap a detached element")
    children = list(element.children)
    parent.replace(element, children)
    return children


def merge_text_runs(
    element: Element, points: Sequence[BoundaryPoint] = ()
) -> List[BoundaryPoint]:
    """Fuse adjacent text children of ``element``.

    Boundary points anchored to a merged-away leaf are moved onto the
    surviving leaf; the remapped points come back in input order.
    """

    remapped = list(points)
    previous: Text | None = None
    for child in list(element.children):
        if not isinstance(child, Text):
            previous = None
            continue
        if previous is None:
            previous = child
            continue
        shift = len(previous.content)
        previous.content += child.content
        remapped = [
            BoundaryPoint(previous, point.offset + shift) if point.leaf is child else point
            for point in remapped
        ]
        element.remove(child)
    return remapped


__all__ = ["wrap_range", "unwrap", "merge_text_runs"]
