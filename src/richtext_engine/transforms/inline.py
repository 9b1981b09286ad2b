"""Inline mark toggling (bold, italic) over an arbitrary text selection."""

from __future__ import annotations

from typing import List, Optional

from richtext_engine.document.nodes import (
    Element,
    Text,
    common_ancestor,
    has_ancestor_tagged,
    nearest_tagged,
    top_level_block,
)
from richtext_engine.document.selection import (
    BoundaryPoint,
    Selection,
    SelectionScope,
    resolve_selection,
)
from richtext_engine.document.tags import InlineMarkTag
from richtext_engine.runtime import telemetry

from .base import ToggleOutcome
from .split import place_fragments, split_three_way
from .wrap import merge_text_runs, unwrap, wrap_range


def toggle_inline_mark(
    root: Element,
    selection: Selection,
    mark: InlineMarkTag,
    *,
    merge_text: bool = True,
) -> Optional[ToggleOutcome]:
    """Apply ``mark`` over ``selection``, or clear it if it is already there.

    Clearing wins as soon as any covered element carries ``mark`` or the
    selection sits inside a ``mark`` element. Returns ``None`` when nothing
    changed (collapsed selection, selection outside ``root``, empty range).
    """

    if selection.collapsed:
        _noop("collapsed", mark)
        return None
    scope = resolve_selection(root, selection)
    if scope is None or scope.collapsed:
        _noop("unresolved", mark)
        return None

    walk_root = common_ancestor(scope.start.leaf, scope.end.leaf)
    if walk_root is None:
        _noop("unresolved", mark)
        return None

    enclosing = nearest_tagged(walk_root, mark, stop=root)
    if enclosing is not None and enclosing.parent is not None:
        walk_root = enclosing.parent
        clearing = True
    else:
        clearing = any(
            isinstance(node, Element) and node.tag is mark and scope.covers(node)
            for node in walk_root.iter_descendants()
        )
    telemetry.record_event(
        "inline.mode",
        level="debug",
        data={"tag": mark.value, "mode": "clear" if clearing else "apply"},
    )

    touched = _touched_blocks(root, scope.leaves)
    if clearing:
        restored = _clear(scope, mark, walk_root, merge_text=merge_text)
    else:
        restored = _apply(scope, mark, root)
    if restored is None:
        _noop("nothing_to_wrap", mark)
        return None
    return ToggleOutcome(selection=restored, applied=not clearing, updated=touched)


def _apply(scope: SelectionScope, mark: InlineMarkTag, root: Element) -> Optional[Selection]:
    first: Optional[Text] = None
    last: Optional[Text] = None
    for leaf in scope.leaves:
        low, high = scope.local_range(leaf)
        if low == high or has_ancestor_tagged(leaf, mark, stop=root):
            continue
        inner = wrap_range(leaf, low, high, mark)
        if first is None:
            first = inner
        last = inner
    if first is None or last is None:
        return None
    return Selection.between(first, 0, last, len(last.content))


def _clear(
    scope: SelectionScope,
    mark: InlineMarkTag,
    walk_root: Element,
    *,
    merge_text: bool,
) -> Selection:
    start, end = scope.start, scope.end
    start_split = end_split = False
    spliced: List[Element] = []

    pending: List[Element] = [walk_root]
    while pending:
        element = pending.pop()
        for child in list(element.children):
            if not isinstance(child, Element) or not scope.covers(child):
                continue
            if child.tag is not mark:
                pending.append(child)
                continue
            fragments = split_three_way(child, start, end)
            if fragments.was_split:
                place_fragments(fragments, list(fragments.middle.children))
            else:
                unwrap(child)
            start_split = start_split or fragments.start_split
            end_split = end_split or fragments.end_split
            if not any(seen is element for seen in spliced):
                spliced.append(element)

    new_start = BoundaryPoint(start.leaf, 0) if start_split else start
    new_end = BoundaryPoint(end.leaf, len(end.leaf.content)) if end_split else end
    if merge_text:
        for parent in spliced:
            new_start, new_end = merge_text_runs(parent, [new_start, new_end])
    return Selection(new_start, new_end)


def _touched_blocks(root: Element, leaves: tuple[Text, ...]) -> tuple[Element, ...]:
    blocks: List[Element] = []
    for leaf in leaves:
        block = top_level_block(root, leaf)
        if block is not None and not any(block is seen for seen in blocks):
            blocks.append(block)
    return tuple(blocks)


def _noop(reason: str, mark: InlineMarkTag) -> None:
    telemetry.record_event(
        "toggle.noop", level="debug", data={"reason": reason, "tag": mark.value}
    )


__all__ = ["toggle_inline_mark"]
