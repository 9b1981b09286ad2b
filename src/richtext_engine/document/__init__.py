"""Document tree, selections, and the host boundary."""

from .errors import EditableRootMissingError, SelectionValidationError
from .nodes import (
    Document,
    Element,
    Node,
    Text,
    build,
    common_ancestor,
    has_ancestor_tagged,
    nearest_tagged,
    prune_empty,
    rename,
    retagged,
    top_level_block,
)
from .selection import (
    BoundaryPoint,
    Selection,
    SelectionScope,
    offset_of,
    point_at_offset,
    resolve_selection,
    selection_from_offsets,
)
from .sync import BlockView, DocumentChange, DocumentMirror, EditorHost, MemoryHost, RunView
from .tags import BlockTag, InlineMarkTag, Tag, is_block_tag, is_mark_tag, parse_tag
from .validation import ensure_point

__all__ = [
    "BlockTag",
    "InlineMarkTag",
    "Tag",
    "is_block_tag",
    "is_mark_tag",
    "parse_tag",
    "Node",
    "Text",
    "Element",
    "Document",
    "build",
    "rename",
    "retagged",
    "prune_empty",
    "top_level_block",
    "nearest_tagged",
    "has_ancestor_tagged",
    "common_ancestor",
    "BoundaryPoint",
    "Selection",
    "SelectionScope",
    "resolve_selection",
    "offset_of",
    "point_at_offset",
    "selection_from_offsets",
    "EditorHost",
    "MemoryHost",
    "DocumentChange",
    "DocumentMirror",
    "BlockView",
    "RunView",
    "EditableRootMissingError",
    "SelectionValidationError",
    "ensure_point",
]
