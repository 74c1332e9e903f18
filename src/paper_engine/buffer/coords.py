"""Positions, offsets, lengths and sections used across the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from .sync import BufferValidationError

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """1-based line, 0-based column location in a document."""

    line: int = 1
    column: int = 0

    def shifted(self, *, lines: int = 0, columns: int = 0) -> "Position":
        return Position(self.line + lines, self.column + columns)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class Offset:
    """Absolute character index into a document, or invalid.

    Arithmetic is total: anything involving an invalid offset, or producing a
    negative index, yields ``INVALID``.
    """

    index: Optional[int] = 0

    @property
    def is_valid(self) -> bool:
        return self.index is not None

    def require(self) -> int:
        if self.index is None:
            raise BufferValidationError("Offset is invalid")
        return self.index

    def __add__(self, other: int) -> "Offset":
        if self.index is None:
            return INVALID
        moved = self.index + other
        if moved < 0:
            return INVALID
        return Offset(moved)

    def __sub__(self, other: int) -> "Offset":
        return self + (-other)

    def __str__(self) -> str:
        return "[invalid]" if self.index is None else f"[{self.index}]"


INVALID = Offset(None)


class LineEnd(Enum):
    """Length sentinel meaning "through the end of the containing line"."""

    TO_LINE_END = "eol"

    def __repr__(self) -> str:
        return "TO_LINE_END"


TO_LINE_END = LineEnd.TO_LINE_END

Length = Union[int, LineEnd]


@dataclass(frozen=True, slots=True)
class Section:
    """A range of text starting at ``start`` and spanning ``length`` characters."""

    start: Position
    length: Length = TO_LINE_END

    @classmethod
    def line(cls, line: int) -> "Section":
        return cls(Position(line, 0), TO_LINE_END)

    def resolve_length(self, document: "Document") -> int:
        if self.length is TO_LINE_END:
            return max(document.line_length(self.start) - self.start.column, 0)
        return int(self.length)

    def end(self, document: "Document") -> Position:
        return self.start.shifted(columns=self.resolve_length(document))


@dataclass(frozen=True, slots=True)
class Address:
    """0-based screen row and column."""

    row: int
    column: int


@dataclass(frozen=True, slots=True)
class Region:
    """Screen rectangle of a single row starting at ``start``."""

    start: Address
    length: Length = TO_LINE_END

    @classmethod
    def row(cls, row: int) -> "Region":
        return cls(Address(row, 0), TO_LINE_END)


@dataclass(frozen=True, slots=True)
class ScrollOrigin:
    """Viewport anchor: first displayed line index and gutter width."""

    line: int = 0
    column: int = 0

    def address_of(self, position: Position) -> Optional[Address]:
        row = position.line - 1 - self.line
        if row < 0:
            return None
        return Address(row, self.column + position.column)

    def region_of(self, section: Section) -> Optional[Region]:
        address = self.address_of(section.start)
        if address is None:
            return None
        return Region(address, section.length)


__all__ = [
    "Address",
    "INVALID",
    "Length",
    "LineEnd",
    "Offset",
    "Position",
    "Region",
    "ScrollOrigin",
    "Section",
    "TO_LINE_END",
]
