"""Result type shared by the togglers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from richtext_engine.document.nodes import Element
from richtext_engine.document.selection import Selection


@dataclass(slots=True)
class ToggleOutcome:
    """What a toggle did: the selection to restore plus top-level churn."""

    selection: Selection
    applied: bool
    added: Tuple[Element, ...] = ()
    removed: Tuple[Element, ...] = ()
    updated: Tuple[Element, ...] = ()


__all__ = ["ToggleOutcome"]
