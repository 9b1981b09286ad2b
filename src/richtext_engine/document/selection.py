"""Boundary points, selections, and selection resolution against a tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from .errors import SelectionValidationError
from .nodes import Element, Node, Text
from .validation import ensure_point


@dataclass(frozen=True, slots=True)
class BoundaryPoint:
    """A text leaf plus an offset into its content."""

    leaf: Text
    offset: int


@dataclass(frozen=True, slots=True)
class Selection:
    start: BoundaryPoint
    end: BoundaryPoint

    @property
    def collapsed(self) -> bool:
        return self.start == self.end

    @classmethod
    def caret(cls, leaf: Text, offset: int) -> "Selection":
        point = BoundaryPoint(leaf, offset)
        return cls(point, point)

    @classmethod
    def between(
        cls, start_leaf: Text, start_offset: int, end_leaf: Text, end_offset: int
    ) -> "Selection":
        return cls(BoundaryPoint(start_leaf, start_offset), BoundaryPoint(end_leaf, end_offset))

    @classmethod
    def spanning(cls, element: Element) -> Optional["Selection"]:
        """Select the whole text of ``element``; ``None`` if it has no leaf."""

        first = element.first_text()
        last = element.last_text()
        if first is None or last is None:
            return None
        return cls.between(first, 0, last, len(last.content))


@dataclass(frozen=True)
class SelectionScope:
    """A selection resolved against a root, in document order.

    ``leaves`` lists every text leaf touched by the selection. For range
    selections both boundary leaves have a non-empty covered part.
    """

    start: BoundaryPoint
    end: BoundaryPoint
    leaves: Tuple[Text, ...]
    collapsed: bool = False
    _ids: FrozenSet[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_ids", frozenset(id(leaf) for leaf in self.leaves))

    @property
    def selection(self) -> Selection:
        return Selection(self.start, self.end)

    def covers(self, node: Node) -> bool:
        """Containment predicate: does any part of ``node`` lie in the selection?"""

        if isinstance(node, Text):
            return id(node) in self._ids
        if isinstance(node, Element):
            return any(id(leaf) in self._ids for leaf in node.iter_text())
        return False

    def local_range(self, leaf: Text) -> Tuple[int, int]:
        """Covered ``[start, end)`` inside ``leaf``; ``(0, 0)`` if not covered."""

        if id(leaf) not in self._ids:
            return (0, 0)
        low = self.start.offset if leaf is self.start.leaf else 0
        high = self.end.offset if leaf is self.end.leaf else len(leaf.content)
        return (low, max(low, high))


def resolve_selection(root: Element, selection: Selection) -> Optional[SelectionScope]:
    """Resolve ``selection`` under ``root``.

    Returns ``None`` when a boundary lies outside ``root`` or when a range
    selection covers no text at all. Backward selections are reordered and
    boundaries sitting on a leaf edge are moved onto the neighbouring
    covered leaf.
    """

    start = ensure_point(selection.start)
    end = ensure_point(selection.end)
    if not (root.contains(start.leaf) and root.contains(end.leaf)):
        return None

    leaves = list(root.iter_text())
    positions = {id(leaf): index for index, leaf in enumerate(leaves)}
    first = positions[id(start.leaf)]
    last = positions[id(end.leaf)]
    if (first, start.offset) > (last, end.offset):
        start, end = end, start
        first, last = last, first

    if start == end:
        return SelectionScope(start=start, end=end, leaves=(start.leaf,), collapsed=True)

    while first < last and start.offset >= len(leaves[first].content):
        first += 1
        start = BoundaryPoint(leaves[first], 0)
    while last > first and end.offset <= 0:
        last -= 1
        end = BoundaryPoint(leaves[last], len(leaves[last].content))
    if first == last and start.offset >= end.offset:
        return None
    return SelectionScope(start=start, end=end, leaves=tuple(leaves[first : last + 1]))


def _block_leaves(root: Element) -> List[List[Text]]:
    return [list(block.iter_text()) for block in root.children if isinstance(block, Element)]


def offset_of(root: Element, point: BoundaryPoint) -> int:
    """Map ``point`` to an offset in the root's plain text (blocks joined by newlines)."""

    running = 0
    for leaves in _block_leaves(root):
        for leaf in leaves:
            if leaf is point.leaf:
                return running + point.offset
            running += len(leaf.content)
        running += 1
    raise SelectionValidationError("Boundary leaf is not inside the root", point=point)


def point_at_offset(root: Element, offset: int) -> BoundaryPoint:
    """Inverse of :func:`offset_of`; out-of-range offsets are clamped."""

    blocks = _block_leaves(root)
    anchored = [leaves for leaves in blocks if leaves]
    if not anchored:
        raise SelectionValidationError("Document has no text leaf to anchor to")
    offset = max(0, offset)
    running = 0
    for leaves in blocks:
        block_length = sum(len(leaf.content) for leaf in leaves)
        if leaves and offset <= running + block_length:
            local = offset - running
            for leaf in leaves:
                if local <= len(leaf.content):
                    return BoundaryPoint(leaf, max(0, local))
                local -= len(leaf.content)
        running += block_length + 1
    tail = anchored[-1][-1]
    return BoundaryPoint(tail, len(tail.content))


def selection_from_offsets(root: Element, start: int, end: int) -> Selection:
    return Selection(point_at_offset(root, start), point_at_offset(root, end))


__all__ = [
    "BoundaryPoint",
    "Selection",
    "SelectionScope",
    "resolve_selection",
    "offset_of",
    "point_at_offset",
    "selection_from_offsets",
]
