"""Exceptions raised at the document/host boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .selection import BoundaryPoint


class SelectionValidationError(RuntimeError):
    """Raised when a host hands over a boundary point outside its leaf."""

    def __init__(self, message: str, *, point: Optional["BoundaryPoint"] = None) -> None:
        super().__init__(message)
        self.point = point


class EditableRootMissingError(RuntimeError):
    """Raised when an editing session cannot locate its editable root."""


__all__ = ["SelectionValidationError", "EditableRootMissingError"]
