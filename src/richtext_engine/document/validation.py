"""Validation helpers shared by selection resolution and hosts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import SelectionValidationError

if TYPE_CHECKING:  # pragma: no cover
    from .selection import BoundaryPoint


def ensure_point(point: "BoundaryPoint") -> "BoundaryPoint":
    length = len(point.leaf.content)
    if point.offset < 0 or point.offset > length:
        raise SelectionValidationError("Offset out of range", point=point)
    return point
