"""Boundary split primitive.

``split_at`` builds a standalone copy of everything on one side of a
boundary point, keeping every intermediate element's tag. ``remove_one_side``
is its mutating companion: it truncates the original tree in place.
Running ``remove_one_side`` for the end boundary and then the start
boundary leaves the original node holding only the selected middle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from richtext_engine.document.nodes import Element, Node, Text, prune_empty
from richtext_engine.document.selection import BoundaryPoint


class Side(str, Enum):
    BEFORE = "before"
    AFTER = "after"


def _anchored_inside(ancestor: Element, leaf: Optional[Text]) -> bool:
    return leaf is not None and leaf is not ancestor and ancestor.contains(leaf)


def _parent_of(node: Node) -> Element:
    if node.parent is None:
        raise ValueError("boundary leaf is not attached under the split ancestor")
    return node.parent


def _siblings_on(side: Side, node: Node) -> List[Node]:
    parent = _parent_of(node)
    siblings = parent.children
    index = parent.index(node)
    return list(siblings[:index] if side is Side.BEFORE else siblings[index + 1 :])


def split_at(ancestor: Element, leaf: Text, offset: int, side: Side) -> Node:
    """Return a new tree holding the ``side`` part of ``ancestor``.

    If ``leaf`` does not live under ``ancestor`` the whole node belongs to
    one side and ``ancestor`` itself is returned. The original tree is not
    touched.
    """

    if not _anchored_inside(ancestor, leaf):
        return ancestor

    text = leaf.content
    clone: Node = Text(text[:offset] if side is Side.BEFORE else text[offset:])
    current: Node = leaf
    while current is not ancestor:
        parent = _parent_of(current)
        parent_clone = parent.clone_shallow()
        copies = [sibling.clone(deep=True) for sibling in _siblings_on(side, current)]
        if side is Side.BEFORE:
            parent_clone.extend(copies)
            parent_clone.append(clone)
        else:
            parent_clone.append(clone)
            parent_clone.extend(copies)
        clone = parent_clone
        current = parent
    return clone


def remove_one_side(ancestor: Element, leaf: Text, offset: int, side: Side) -> Element:
    """Detach everything on ``side`` of the boundary from ``ancestor`` in place."""

    if not _anchored_inside(ancestor, leaf):
        return ancestor

    text = leaf.content
    leaf.content = text[offset:] if side is Side.BEFORE else text[:offset]
    current: Node = leaf
    while current is not ancestor:
        parent = _parent_of(current)
        for sibling in _siblings_on(side, current):
            parent.remove(sibling)
        current = parent
    return ancestor


@dataclass
class Fragments:
    """Result of cutting a node at up to two boundaries.

    ``middle`` is the original node, truncated in place; ``before`` and
    ``after`` are fresh copies (``None`` when no boundary fell inside).
    """

    before: Optional[Element]
    middle: Element
    after: Optional[Element]
    start_split: bool = False
    end_split: bool = False

    @property
    def was_split(self) -> bool:
        return self.start_split or self.end_split

    def outer(self) -> tuple[Optional[Element], Optional[Element]]:
        """The before/after fragments, with empty ones dropped."""

        before = self.before if self.before is not None and self.before.text_content else None
        after = self.after if self.after is not None and self.after.text_content else None
        return before, after


def split_three_way(
    node: Element,
    start: Optional[BoundaryPoint],
    end: Optional[BoundaryPoint],
) -> Fragments:
    """Cut ``node`` at the boundaries that fall inside it.

    Both copies are taken before the original is truncated, end side first,
    so a shared boundary leaf ends up holding ``content[start:end]``.
    """

    inside_start = start if start is not None and _anchored_inside(node, start.leaf) else None
    inside_end = end if end is not None and _anchored_inside(node, end.leaf) else None

    before = after = None
    if inside_start is not None:
        before = split_at(node, inside_start.leaf, inside_start.offset, Side.BEFORE)
    if inside_end is not None:
        after = split_at(node, inside_end.leaf, inside_end.offset, Side.AFTER)

    if inside_end is not None:
        remove_one_side(node, inside_end.leaf, inside_end.offset, Side.AFTER)
    if inside_start is not None:
        remove_one_side(node, inside_start.leaf, inside_start.offset, Side.BEFORE)
    if inside_start is not None or inside_end is not None:
        prune_empty(node)
    for fragment in (before, after):
        if isinstance(fragment, Element):
            prune_empty(fragment)

    return Fragments(
        before=before if isinstance(before, Element) else None,
        middle=node,
        after=after if isinstance(after, Element) else None,
        start_split=inside_start is not None,
        end_split=inside_end is not None,
    )


def place_fragments(fragments: Fragments, middle: Sequence[Node]) -> List[Node]:
    """Put ``before``, ``middle`` and ``after`` where the original node sat.

    Empty outer fragments are dropped. Returns the nodes actually placed.
    """

    parent = fragments.middle.parent
    if parent is None:
        raise ValueError("fragment source is detached")
    before, after = fragments.outer()
    placed: List[Node] = []
    if before is not None:
        placed.append(before)
    placed.extend(node for node in middle if node.text_content)
    if after is not None:
        placed.append(after)
    parent.replace(fragments.middle, placed)
    return placed


__all__ = [
    "Side",
    "split_at",
    "remove_one_side",
    "Fragments",
    "split_three_way",
    "place_fragments",
]
