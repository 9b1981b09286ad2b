"""Selection-scoped tree transformations."""

from .base import ToggleOutcome
from .block import toggle_block_type
from .extract import extract_selection
from .inline import toggle_inline_mark
from .split import (
    Fragments,
    Side,
    place_fragments,
    remove_one_side,
    split_at,
    split_three_way,
)
from .wrap import merge_text_runs, unwrap, wrap_range

__all__ = [
    "ToggleOutcome",
    "toggle_block_type",
    "toggle_inline_mark",
    "extract_selection",
    "Side",
    "Fragments",
    "split_at",
    "remove_one_side",
    "split_three_way",
    "place_fragments",
    "wrap_range",
    "unwrap",
    "merge_text_runs",
]
