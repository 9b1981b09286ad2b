"""Adapter boundary types for exchanging documents and selections with a host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Protocol, Tuple

from .errors import EditableRootMissingError, SelectionValidationError
from .nodes import Document, Element, Text
from .selection import Selection, offset_of, selection_from_offsets
from .tags import InlineMarkTag, Tag


class EditorHost(Protocol):
    """What the engine consumes from the surface it runs inside."""

    def editable_root(self) -> Optional[Document]:
        """Return the single root element that bounds every block."""
        ...

    def current_selection(self) -> Optional[Selection]:
        """Return the active selection, or ``None`` when there is none."""
        ...

    def replace_selection(self, selection: Selection) -> None:
        """Atomically swap the host's active selection."""
        ...


class MemoryHost:
    """In-process host holding a document and its selection."""

    def __init__(
        self,
        document: Optional[Document] = None,
        *,
        selection: Optional[Selection] = None,
    ) -> None:
        self.document = document
        self.selection = selection
        self.selection_updates = 0

    def editable_root(self) -> Optional[Document]:
        return self.document

    def current_selection(self) -> Optional[Selection]:
        return self.selection

    def replace_selection(self, selection: Selection) -> None:
        self.selection = selection
        self.selection_updates += 1

    def select_offsets(self, start: int, end: Optional[int] = None) -> Selection:
        """Select by plain-text offsets (blocks joined by newlines)."""

        if self.document is None:
            raise EditableRootMissingError("Host has no document to select in")
        selection = selection_from_offsets(
            self.document, start, start if end is None else end
        )
        self.replace_selection(selection)
        return selection


@dataclass(slots=True)
class DocumentChange:
    """Payload of the ``document.changed`` notification."""

    label: str
    version: int
    added: Tuple[Element, ...] = ()
    removed: Tuple[Element, ...] = ()
    updated: Tuple[Element, ...] = ()
    selection: Optional[Selection] = None


@dataclass(frozen=True, slots=True)
class RunView:
    text: str
    marks: FrozenSet[InlineMarkTag] = frozenset()


@dataclass(frozen=True, slots=True)
class BlockView:
    tag: Optional[Tag]
    runs: Tuple[RunView, ...]

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(slots=True)
class DocumentMirror:
    """Host-friendly snapshot describing the document and selection."""

    version: int
    text: str
    blocks: Tuple[BlockView, ...]
    selection: Optional[Tuple[int, int]] = None
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def capture(
        cls, document: Document, selection: Optional[Selection] = None
    ) -> "DocumentMirror":
        return cls(
            version=document.version,
            text=document.plain_text,
            blocks=tuple(_block_view(block) for block in document.blocks),
            selection=_selection_offsets(document, selection),
        )


def _block_view(block: Element) -> BlockView:
    runs: List[RunView] = []
    for leaf in block.iter_text():
        if not leaf.content:
            continue
        runs.append(RunView(text=leaf.content, marks=_marks_of(leaf, block)))
    return BlockView(tag=block.tag, runs=tuple(runs))


def _marks_of(leaf: Text, block: Element) -> FrozenSet[InlineMarkTag]:
    marks = set()
    for ancestor in leaf.ancestors():
        if ancestor is block:
            break
        if isinstance(ancestor.tag, InlineMarkTag):
            marks.add(ancestor.tag)
    return frozenset(marks)


def _selection_offsets(
    document: Document, selection: Optional[Selection]
) -> Optional[Tuple[int, int]]:
    if selection is None:
        return None
    if not (document.contains(selection.start.leaf) and document.contains(selection.end.leaf)):
        return None
    start = offset_of(document, selection.start)
    end = offset_of(document, selection.end)
    return (min(start, end), max(start, end))


__all__ = [
    "EditorHost",
    "MemoryHost",
    "DocumentChange",
    "DocumentMirror",
    "BlockView",
    "RunView",
    "EditableRootMissingError",
    "SelectionValidationError",
]
