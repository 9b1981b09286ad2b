"""Editing session: the one place that reads and replaces the selection."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Set

from richtext_engine.config import EngineConfig
from richtext_engine.document import (
    BlockTag,
    Document,
    DocumentChange,
    DocumentMirror,
    EditableRootMissingError,
    EditorHost,
    Element,
    InlineMarkTag,
    Selection,
    Tag,
    selection_from_offsets,
)
from richtext_engine.presentation import active_tags_at
from richtext_engine.runtime import telemetry
from richtext_engine.transforms import (
    ToggleOutcome,
    extract_selection,
    toggle_block_type,
    toggle_inline_mark,
)

DOCUMENT_CHANGED = "document.changed"
SELECTION_CHANGED = "selection.changed"

Transform = Callable[[Document, Selection], Optional[ToggleOutcome]]


class ChangeBus:
    """Minimal event bus carrying change notifications to collaborators."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


class EditingSession:
    """Resolves the host selection once per action and runs a toggle on it.

    A toggle that is already running is not started again from inside a
    change notification; the nested call is logged and skipped.
    """

    def __init__(
        self,
        host: EditorHost,
        *,
        bus: Optional[ChangeBus] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        document = host.editable_root()
        if document is None:
            raise EditableRootMissingError("Host did not provide an editable root")
        self.host = host
        self.document: Document = document
        self.bus = bus or ChangeBus()
        self.config = config or EngineConfig()
        self._active: Set[str] = set()

    def current_selection(self) -> Optional[Selection]:
        return self.host.current_selection()

    def toggle_inline_mark(self, mark: InlineMarkTag) -> None:
        self._run(
            "inline",
            mark,
            lambda root, selection: toggle_inline_mark(
                root, selection, mark, merge_text=self.config.merge_text
            ),
        )

    def toggle_block_type(self, block: BlockTag) -> None:
        self._run(
            "block",
            block,
            lambda root, selection: toggle_block_type(
                root, selection, block, clear_to=self.config.clear_block_tag
            ),
        )

    def active_tags(self) -> frozenset[Tag]:
        """Tags enclosing the current selection (toolbar state)."""

        selection = self.host.current_selection()
        if selection is None:
            return frozenset()
        return active_tags_at(self.document, selection)

    def copy_selection(self) -> List[Element]:
        selection = self.host.current_selection()
        if selection is None:
            return []
        return extract_selection(self.document, selection)

    def select(self, selection: Selection) -> None:
        self.host.replace_selection(selection)
        self.bus.emit(SELECTION_CHANGED, selection)

    def select_offsets(self, start: int, end: Optional[int] = None) -> Selection:
        selection = selection_from_offsets(self.document, start, start if end is None else end)
        self.select(selection)
        return selection

    def notify_external_change(
        self,
        label: str,
        *,
        added: Sequence[Element] = (),
        removed: Sequence[Element] = (),
    ) -> DocumentChange:
        """Announce a mutation made outside the togglers (paste, host edits)."""

        self.document.version += 1
        change = DocumentChange(
            label=label,
            version=self.document.version,
            added=tuple(added),
            removed=tuple(removed),
            selection=self.host.current_selection(),
        )
        self.bus.emit(DOCUMENT_CHANGED, change)
        return change

    def mirror(self) -> DocumentMirror:
        return DocumentMirror.capture(self.document, self.host.current_selection())

    def _run(self, kind: str, tag: Tag, transform: Transform) -> None:
        key = f"{kind}::{tag.value}"
        if key in self._active:
            telemetry.record_event(
                "toggle.reentrant", level="warning", data={"kind": kind, "tag": tag.value}
            )
            return
        selection = self.host.current_selection()
        if selection is None:
            telemetry.record_event(
                "toggle.noop", level="debug", data={"reason": "no_selection", "tag": tag.value}
            )
            return

        self._active.add(key)
        try:
            with telemetry.span(f"toggle::{key}", component=True) as handle:
                outcome = transform(self.document, selection)
                if outcome is None:
                    handle.note("noop")
                    return
                self.host.replace_selection(outcome.selection)
                self.document.version += 1
                handle.add_metadata("version", self.document.version)
                handle.add_metadata("applied", outcome.applied)
                change = DocumentChange(
                    label=f"{'apply' if outcome.applied else 'clear'}::{tag.value}",
                    version=self.document.version,
                    added=outcome.added,
                    removed=outcome.removed,
                    updated=outcome.updated,
                    selection=outcome.selection,
                )
                self.bus.emit(DOCUMENT_CHANGED, change)
        finally:
            self._active.discard(key)


__all__ = ["ChangeBus", "EditingSession", "DOCUMENT_CHANGED", "SELECTION_CHANGED"]
