"""Validation helpers shared across buffer services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .coords import Offset
from .sync import BufferValidationError

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document


def ensure_offset(document: "Document", offset: Offset, *, inclusive: bool) -> int:
    """Return the index of ``offset`` or raise if it is invalid or out of range.

    ``inclusive`` allows the index one past the last character (insertion point).
    """

    if not offset.is_valid:
        raise BufferValidationError("Offset is invalid", location=offset)
    index = offset.require()
    limit = len(document.text) if inclusive else len(document.text) - 1
    if index < 0 or index > limit:
        raise BufferValidationError("Offset out of range", location=offset)
    return index
