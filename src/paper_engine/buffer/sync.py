"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    path: str
    marks: tuple[Any, ...]
    scroll_line: int
    attributes: dict[str, str] = field(default_factory=dict)


class BufferValidationError(RuntimeError):
    """Raised when a position or offset falls outside the document."""

    def __init__(self, message: str, *, location: Optional[object] = None) -> None:
        super().__init__(message)
        self.location = location
