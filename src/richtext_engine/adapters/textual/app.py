"""Executable Textual app that hosts the rich-text engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text as RichText
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use richtext_engine.adapters.textual.app"
    ) from exc

from richtext_engine.config import EngineConfig
from richtext_engine.document import (
    BlockTag,
    Document,
    DocumentMirror,
    InlineMarkTag,
    MemoryHost,
    Selection,
)
from richtext_engine.presentation import PresentationSync
from richtext_engine.runtime import telemetry
from richtext_engine.session import EditingSession

from .controller import TextualEditorAdapter, TextualUIHooks

DEFAULT_TEXT = "hello world\nsecond paragraph"

BLOCK_STYLES: Dict[Optional[str], str] = {
    BlockTag.HEADING1.value: "bold underline magenta",
    BlockTag.HEADING2.value: "bold cyan",
    BlockTag.PARAGRAPH.value: "",
}

MARK_STYLES: Dict[str, str] = {
    InlineMarkTag.BOLD.value: "bold",
    InlineMarkTag.ITALIC.value: "italic",
}


def create_session(text: str = DEFAULT_TEXT) -> EditingSession:
    """Build a session over an in-memory host with the caret at the start."""

    document = Document.from_text(text)
    host = MemoryHost(document)
    first = document.first_text()
    if first is not None:
        host.replace_selection(Selection.caret(first, 0))
    session = EditingSession(host, config=EngineConfig.from_env())
    PresentationSync(session)
    return session


def render_mirror(mirror: DocumentMirror) -> RichText:
    """Render a mirror as styled text, with the selection in reverse video."""

    rendered = RichText()
    for index, block in enumerate(mirror.blocks):
        if index:
            rendered.append("\n")
        block_start = len(rendered)
        for run in block.runs:
            style = " ".join(MARK_STYLES[mark.value] for mark in sorted(run.marks))
            rendered.append(run.text, style=style or None)
        block_style = BLOCK_STYLES.get(block.tag.value if block.tag else None, "")
        if block_style:
            rendered.stylize(block_style, block_start, len(rendered))
    if mirror.selection is not None:
        start, end = mirror.selection
        rendered.stylize("reverse", start, max(end, start + 1))
    return rendered


@dataclass
class UIState:
    document_text: str = ""
    status_text: str = ""
    toolbar_text: str = ""


class RichTextApp(App[None]):
    """Minimal Textual UI embedding the formatting engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#document-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#toolbar {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, text: str = DEFAULT_TEXT) -> None:
        super().__init__()
        self._state = UIState()
        self._text = text
        self.session: EditingSession | None = None
        self.adapter: TextualEditorAdapter | None = None
        self._document_widget: Static | None = None
        self._toolbar_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="document-area"):
            self._document_widget = Static("", id="document-view")
            yield self._document_widget
        self._toolbar_widget = Static("", id="toolbar")
        self._status_widget = Static("", id="status-line")
        yield self._toolbar_widget
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self.session = create_session(self._text)
        hooks = TextualUIHooks(
            update_document=self._update_document,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in {"ctrl+c", "ctrl+q"}:
            return
        if self.adapter.handle_textual_key(event.key):
            event.stop()

    def _update_document(self, mirror: DocumentMirror) -> None:
        self._state.document_text = mirror.text
        if self._document_widget:
            self._document_widget.update(render_mirror(mirror))
        self._update_toolbar()

    def _update_toolbar(self) -> None:
        if not self.session:
            return
        active = sorted(tag.value for tag in self.session.active_tags())
        self._state.toolbar_text = " ".join(f"[{name}]" for name in active)
        if self._toolbar_widget:
            self._toolbar_widget.update(RichText(self._state.toolbar_text))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "document.changed":
            self._update_status(getattr(payload, "label", name))

    def _log_line(self, line: str) -> None:
        telemetry.record_event("ui.line", level="debug", data={"line": line})


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the rich-text engine Textual demo.")
    parser.add_argument(
        "--text",
        default=os.environ.get("RICHTEXT_ENGINE_DEMO_TEXT", DEFAULT_TEXT),
        help="Initial document text, one paragraph per line",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="telelog preset to use instead of the environment configuration",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = RichTextApp(text=args.text.replace("\\n", "\n"))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
