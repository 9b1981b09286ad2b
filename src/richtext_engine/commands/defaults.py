"""Built-in formatting commands and their key bindings."""

from __future__ import annotations

from typing import Iterable

from richtext_engine.document.tags import BlockTag, InlineMarkTag, Tag

from .models import Binding, Command, KeyChord
from .registry import CommandRegistry


def _inline(mark: InlineMarkTag):
    return lambda session: session.toggle_inline_mark(mark)


def _block(block: BlockTag):
    return lambda session: session.toggle_block_type(block)


def _copy(session):
    return session.copy_selection()


def _command(command_id: str, tag: Tag, description: str) -> Command:
    handler = _inline(tag) if isinstance(tag, InlineMarkTag) else _block(tag)
    return Command(id=command_id, handler=handler, description=description, tag=tag)


DEFAULT_COMMANDS: tuple[Command, ...] = (
    _command("format.bold", InlineMarkTag.BOLD, "Toggle bold"),
    _command("format.italic", InlineMarkTag.ITALIC, "Toggle italic"),
    _command("block.heading1", BlockTag.HEADING1, "Toggle heading 1"),
    _command("block.heading2", BlockTag.HEADING2, "Toggle heading 2"),
    _command("block.paragraph", BlockTag.PARAGRAPH, "Turn into paragraph"),
    Command(id="edit.copy", handler=_copy, description="Copy selected content"),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding("format.bold", KeyChord.parse("ctrl+b"), "format.bold", "Bold"),
    Binding("format.italic", KeyChord.parse("ctrl+i"), "format.italic", "Italic"),
    Binding("block.heading1", KeyChord.parse("ctrl+1"), "block.heading1", "Heading 1"),
    Binding("block.heading2", KeyChord.parse("ctrl+2"), "block.heading2", "Heading 2"),
    Binding("block.paragraph", KeyChord.parse("ctrl+0"), "block.paragraph", "Paragraph"),
    Binding("edit.copy", KeyChord.parse("ctrl+shift+c"), "edit.copy", "Copy"),
)


def load_default_commands(
    registry: CommandRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
) -> CommandRegistry:
    """Register the built-in commands and bindings."""

    for command in DEFAULT_COMMANDS:
        registry.register_command(command, replace=replace)
    for binding in DEFAULT_BINDINGS:
        registry.register_binding(binding, replace=replace)
    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)
    return registry


__all__ = ["load_default_commands", "DEFAULT_COMMANDS", "DEFAULT_BINDINGS"]
