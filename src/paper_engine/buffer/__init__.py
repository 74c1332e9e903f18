"""Document, coordinate and multi-cursor abstractions."""

from .buffer import Buffer, Transaction
from .coords import (
    INVALID,
    TO_LINE_END,
    Address,
    Length,
    Offset,
    Position,
    Region,
    ScrollOrigin,
    Section,
)
from .document import Document, RenderedLines
from .marks import (
    BACKSPACE,
    LINE_BREAK,
    Adjustment,
    Edge,
    EditClass,
    EditRecord,
    EditReport,
    Mark,
    MarkSet,
)
from .sync import BufferMirror, BufferValidationError
from .validation import ensure_offset

__all__ = [
    "Address",
    "Adjustment",
    "BACKSPACE",
    "Buffer",
    "BufferMirror",
    "BufferValidationError",
    "Document",
    "Edge",
    "EditClass",
    "EditRecord",
    "EditReport",
    "INVALID",
    "LINE_BREAK",
    "Length",
    "Mark",
    "MarkSet",
    "Offset",
    "Position",
    "Region",
    "RenderedLines",
    "ScrollOrigin",
    "Section",
    "TO_LINE_END",
    "Transaction",
    "ensure_offset",
]
