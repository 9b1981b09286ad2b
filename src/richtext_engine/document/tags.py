"""Closed tag taxonomy for block and inline-mark elements."""

from __future__ import annotations

from enum import Enum
from typing import Union


class BlockTag(str, Enum):
    """Tags allowed on root-level structural nodes."""

    HEADING1 = "h1"
    HEADING2 = "h2"
    PARAGRAPH = "p"


class InlineMarkTag(str, Enum):
    """Tags applicable to spans of text within a block."""

    BOLD = "strong"
    ITALIC = "i"


Tag = Union[BlockTag, InlineMarkTag]

_ALIASES = {
    "heading1": BlockTag.HEADING1,
    "heading2": BlockTag.HEADING2,
    "paragraph": BlockTag.PARAGRAPH,
    "bold": InlineMarkTag.BOLD,
    "b": InlineMarkTag.BOLD,
    "italic": InlineMarkTag.ITALIC,
    "em": InlineMarkTag.ITALIC,
}


def is_block_tag(tag: object) -> bool:
    return isinstance(tag, BlockTag)


def is_mark_tag(tag: object) -> bool:
    return isinstance(tag, InlineMarkTag)


def parse_tag(name: str) -> Tag:
    """Resolve a tag from its value (``"h1"``) or a friendly alias (``"bold"``)."""

    key = name.strip().lower()
    if not key:
        raise ValueError("tag name cannot be empty")
    for enum_cls in (BlockTag, InlineMarkTag):
        try:
            return enum_cls(key)
        except ValueError:
            continue
    try:
        return _ALIASES[key]
    except KeyError as exc:
        raise ValueError(f"Unknown tag '{name}'") from exc


__all__ = [
    "BlockTag",
    "InlineMarkTag",
    "Tag",
    "is_block_tag",
    "is_mark_tag",
    "parse_tag",
]
