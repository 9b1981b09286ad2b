"""Minimal Textual adapter that wires an EditingSession into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from richtext_engine.commands import CommandRegistry, KeyChord, load_default_commands
from richtext_engine.document import DocumentMirror
from richtext_engine.session import DOCUMENT_CHANGED, SELECTION_CHANGED, EditingSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_document: Callable[[DocumentMirror], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


_MOVES = {"left", "right", "home", "end"}


class TextualEditorAdapter:
    """Bridges key presses and session events to a Textual-friendly surface.

    The caret is tracked as an anchor/focus pair of plain-text offsets so
    that shift+arrow extends a selection in either direction.
    """

    def __init__(
        self,
        session: EditingSession,
        hooks: TextualUIHooks,
        *,
        commands: Optional[CommandRegistry] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.commands = commands or load_default_commands(CommandRegistry())
        self._anchor = 0
        self._focus = 0
        self._sync_offsets()
        for event in (DOCUMENT_CHANGED, SELECTION_CHANGED):
            session.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )
        self._refresh_document()

    @property
    def offsets(self) -> tuple[int, int]:
        return self._anchor, self._focus

    def handle_textual_key(self, key: str, *, modifiers: Iterable[str] = ()) -> bool:
        """Run the command or caret move bound to ``key``; ``False`` if unbound."""

        parsed = KeyChord.parse(key)
        chord = KeyChord(parsed.key, (*parsed.modifiers, *modifiers))
        self._log_state("key ->", chord=chord.token)

        command = self.commands.resolve(chord)
        if command is not None:
            self.commands.execute(command.id, self.session)
            self.hooks.update_status(command.description or command.id)
            self._after_action()
            return True
        if chord.key in _MOVES and set(chord.modifiers) <= {"shift"}:
            self._move(chord.key, extend="shift" in chord.modifiers)
            return True
        return False

    def run_command(self, name: str) -> bool:
        """Run a command by id or by tag name (``"strong"``, ``"h1"``...)."""

        try:
            command = self.commands.get_command(name)
        except KeyError:
            command = self.commands.command_for_tag(name)
        if command is None:
            return False
        self.commands.execute(command.id, self.session)
        self.hooks.update_status(command.description or command.id)
        self._after_action()
        return True

    def select_range(self, start: int, end: int) -> None:
        self._anchor, self._focus = start, end
        self.session.select_offsets(start, end)
        self._refresh_document()

    def _move(self, direction: str, *, extend: bool) -> None:
        length = len(self.session.document.plain_text)
        if direction == "left":
            focus = self._focus - 1
        elif direction == "right":
            focus = self._focus + 1
        elif direction == "home":
            focus = 0
        else:
            focus = length
        self._focus = max(0, min(length, focus))
        if not extend:
            self._anchor = self._focus
        self.session.select_offsets(self._anchor, self._focus)
        self._refresh_document()

    def _after_action(self) -> None:
        self._sync_offsets()
        self._refresh_document()

    def _sync_offsets(self) -> None:
        selection = self.session.mirror().selection
        if selection is not None:
            self._anchor, self._focus = selection

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)
        if name == DOCUMENT_CHANGED:
            self._sync_offsets()

    def _refresh_document(self) -> None:
        self.hooks.update_document(self.session.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        return {
            "anchor": self._anchor,
            "focus": self._focus,
            "version": self.session.document.version,
            "active": sorted(tag.value for tag in self.session.active_tags()),
        }


__all__ = ["TextualEditorAdapter", "TextualUIHooks"]
