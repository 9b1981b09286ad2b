"""Block type toggling (headings, paragraph) for carets and ranges."""

from __future__ import annotations

from typing import List, Optional

from richtext_engine.document.nodes import Element, rename, retagged, top_level_block
from richtext_engine.document.selection import BoundaryPoint, Selection, resolve_selection
from richtext_engine.document.tags import BlockTag
from richtext_engine.runtime import telemetry

from .base import ToggleOutcome
from .split import place_fragments, split_three_way


def _target_for(block: Element, target: BlockTag, clear_to: BlockTag) -> BlockTag:
    return clear_to if block.tag is target else target


def toggle_block_type(
    root: Element,
    selection: Selection,
    target: BlockTag,
    *,
    clear_to: BlockTag = BlockTag.PARAGRAPH,
) -> Optional[ToggleOutcome]:
    """Retype the blocks touched by ``selection``.

    Each block decides on its own: a block already tagged ``target`` goes
    back to ``clear_to``, anything else becomes ``target``. With a range
    selection only the selected part of a block is retyped; the parts
    before and after keep the old tag as separate sibling blocks.
    """

    scope = resolve_selection(root, selection)
    if scope is None:
        telemetry.record_event(
            "toggle.noop", level="debug", data={"reason": "unresolved", "tag": target.value}
        )
        return None

    if scope.collapsed:
        block = top_level_block(root, scope.start.leaf)
        if block is None or not block.is_block:
            return None
        new_tag = _target_for(block, target, clear_to)
        if new_tag is block.tag:
            _unchanged(target)
            return None
        renamed = rename(block, new_tag)
        return ToggleOutcome(
            selection=scope.selection,
            applied=renamed.tag is target,
            added=(renamed,),
            removed=(block,),
        )

    covered = [
        child
        for child in root.children
        if isinstance(child, Element) and child.is_block and scope.covers(child)
    ]
    added: List[Element] = []
    removed: List[Element] = []
    applied = False
    start, end = scope.start, scope.end
    start_split = end_split = False

    for block in covered:
        new_tag = _target_for(block, target, clear_to)
        if new_tag is block.tag:
            continue
        applied = applied or new_tag is target
        fragments = split_three_way(block, start, end)
        if not fragments.was_split:
            added.append(rename(block, new_tag))
            removed.append(block)
            continue
        start_split = start_split or fragments.start_split
        end_split = end_split or fragments.end_split
        middle = retagged(block, new_tag)
        placed = place_fragments(fragments, [middle])
        removed.append(block)
        added.extend(node for node in placed if isinstance(node, Element))

    if not removed:
        _unchanged(target)
        return None

    new_start = BoundaryPoint(start.leaf, 0) if start_split else start
    new_end = BoundaryPoint(end.leaf, len(end.leaf.content)) if end_split else end
    telemetry.record_event(
        "block.retyped",
        level="debug",
        data={"tag": target.value, "blocks": len(covered), "fragments": len(added)},
    )
    return ToggleOutcome(
        selection=Selection(new_start, new_end),
        applied=applied,
        added=tuple(added),
        removed=tuple(removed),
    )


def _unchanged(target: BlockTag) -> None:
    telemetry.record_event(
        "toggle.noop", level="debug", data={"reason": "tag_unchanged", "tag": target.value}
    )


__all__ = ["toggle_block_type"]
