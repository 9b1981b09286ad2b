"""Peripheral collaborators that react to document changes.

These run after the togglers have finished: they restore presentation
classes on the nodes a change touched, keep the root holding at least one
block, and answer "which tags are active here" for toolbars.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

from richtext_engine.document import (
    BlockTag,
    Document,
    DocumentChange,
    Element,
    InlineMarkTag,
    Node,
    Selection,
    Tag,
    Text,
    build,
    resolve_selection,
)
from richtext_engine.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover - typing only
    from richtext_engine.session import EditingSession

CLASS_MAP: Mapping[Tag, str] = MappingProxyType(
    {
        BlockTag.HEADING1: "header1-text",
        BlockTag.HEADING2: "header2-text",
        BlockTag.PARAGRAPH: "",
        InlineMarkTag.BOLD: "bold-text",
        InlineMarkTag.ITALIC: "italic-text",
    }
)


def apply_presentation(node: Node) -> int:
    """Set the mapped class on ``node`` and every element below it.

    Inline ``style`` attributes are dropped. Returns the number of elements
    visited.
    """

    if not isinstance(node, Element):
        return 0
    visited = 0
    for element in [node, *node.iter_descendants()]:
        if not isinstance(element, Element) or element.tag is None:
            continue
        visited += 1
        element.attributes.pop("style", None)
        css_class = CLASS_MAP.get(element.tag, "")
        if css_class:
            element.attributes["class"] = css_class
        else:
            element.attributes.pop("class", None)
    return visited


def ensure_editable_content(document: Document, *, keep_populated: bool = True) -> List[Element]:
    """Normalise the top level of ``document`` in place.

    Runs of top-level text leaves and inline marks are wrapped into one
    paragraph each. With ``keep_populated`` an empty document gets an empty
    paragraph so a caret has somewhere to live. Returns the blocks added.
    """

    added: List[Element] = []
    stray: List[Node] = []

    def flush(before: Optional[Node]) -> None:
        if not stray:
            return
        paragraph = Element(tag=BlockTag.PARAGRAPH)
        if before is None:
            document.append(paragraph)
        else:
            document.insert_before(paragraph, before)
        paragraph.extend(list(stray))
        added.append(paragraph)
        stray.clear()

    for child in list(document.children):
        if isinstance(child, Element) and child.is_block:
            flush(child)
        else:
            stray.append(child)
    flush(None)

    if keep_populated and not document.children:
        added.append(document.append(build(BlockTag.PARAGRAPH, "")))  # type: ignore[arg-type]
    return added


def _enclosing_tags(leaf: Text, root: Element) -> frozenset[Tag]:
    tags = set()
    for ancestor in leaf.ancestors():
        if ancestor is root:
            break
        if ancestor.tag is not None:
            tags.add(ancestor.tag)
    return frozenset(tags)


def active_tags_at(root: Element, selection: Selection) -> frozenset[Tag]:
    """Tags around a caret, or the tags shared by every selected leaf."""

    scope = resolve_selection(root, selection)
    if scope is None:
        return frozenset()
    if scope.collapsed:
        return _enclosing_tags(scope.start.leaf, root)
    shared: Optional[frozenset[Tag]] = None
    for leaf in scope.leaves:
        low, high = scope.local_range(leaf)
        if low == high:
            continue
        tags = _enclosing_tags(leaf, root)
        shared = tags if shared is None else shared & tags
    return shared or frozenset()


class PresentationSync:
    """Keeps classes and root content in shape after every change."""

    def __init__(self, session: "EditingSession") -> None:
        self.session = session
        self.applied: Dict[str, int] = {"changes": 0, "elements": 0}
        self._normalise_root()
        self.applied["elements"] += apply_presentation(session.document)
        session.bus.subscribe("document.changed", self._on_change)

    def _normalise_root(self) -> List[Element]:
        document = self.session.document
        added = ensure_editable_content(
            document, keep_populated=self.session.config.keep_root_populated
        )
        if added:
            telemetry.record_event(
                "presentation.normalised", level="debug", data={"added": len(added)}
            )
        if added and self.session.current_selection() is None:
            anchor = added[0].first_text()
            if anchor is not None:
                self.session.select(Selection.caret(anchor, 0))
        return added

    def _on_change(self, payload: object) -> None:
        if not isinstance(payload, DocumentChange):
            return
        touched: List[Node] = [*payload.added, *payload.updated, *self._normalise_root()]
        visited = sum(apply_presentation(node) for node in touched if node.parent is not None)
        self.applied["changes"] += 1
        self.applied["elements"] += visited


__all__ = [
    "CLASS_MAP",
    "apply_presentation",
    "ensure_editable_content",
    "active_tags_at",
    "PresentationSync",
]
