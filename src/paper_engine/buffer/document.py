"""Core document storage for paper_engine buffers."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

from .coords import INVALID, Offset, Position, ScrollOrigin
from .validation import ensure_offset

if TYPE_CHECKING:  # pragma: no cover
    from paper_engine.io.explorer import Explorer


class RenderedLines:
    """Restartable view over the displayed lines of a document.

    Every iteration starts again at the scroll origin captured at creation.
    """

    def __init__(self, document: "Document") -> None:
        self._document = document
        self._first = document.origin.line

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        for number in range(self._first + 1, self._document.line_count + 1):
            yield number, self._document.display_line(number)


@dataclass(slots=True)
class Document:
    """Text content plus its line index and viewport scroll origin."""

    text: str = ""
    path: str = ""
    origin: ScrollOrigin = field(default_factory=ScrollOrigin)
    version: int = 0
    dirty: bool = False
    _line_starts: List[int] = field(default_factory=lambda: [0], repr=False)

    def __post_init__(self) -> None:
        self.relayout()

    @classmethod
    def from_text(cls, text: str, *, path: str = "") -> "Document":
        document = cls()
        document.load(text, path)
        return document

    def load(self, text: str, path: str) -> None:
        """Replace the content and reset the viewport to the first line."""

        self.text = text
        self.path = path
        self.version += 1
        self.dirty = False
        self.origin = ScrollOrigin(0, self.origin.column)
        self.relayout()

    def relayout(self) -> None:
        """Recompute line starts, line count and gutter width."""

        self._line_starts = _line_starts(self.text)
        gutter = len(str(self.line_count)) + 1
        line = min(self.origin.line, self.line_count)
        self.origin = ScrollOrigin(line, gutter)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    @property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    def line(self, number: int) -> Optional[str]:
        if number < 1 or number > self.line_count:
            return None
        start = self._line_starts[number - 1]
        if number == self.line_count:
            return self.text[start:]
        return self.text[start : self._line_starts[number] - 1]

    def line_length(self, position: Position) -> int:
        text = self.line(position.line)
        return 0 if text is None else len(text)

    def position_to_offset(self, position: Position) -> Offset:
        if position.line < 1 or position.line > self.line_count:
            return INVALID
        return Offset(self._line_starts[position.line - 1]) + position.column

    def offset_to_position(self, offset: Offset) -> Optional[Position]:
        if not offset.is_valid:
            return None
        index = offset.require()
        if index > len(self.text):
            return None
        line = bisect_right(self._line_starts, index)
        return Position(line, index - self._line_starts[line - 1])

    def scroll(self, delta: int) -> None:
        line = max(0, min(self.origin.line + delta, self.line_count))
        self.origin = ScrollOrigin(line, self.origin.column)

    def insert(self, offset: Offset, char: str) -> None:
        index = ensure_offset(self, offset, inclusive=True)
        self.text = self.text[:index] + char + self.text[index:]
        self._touch(index, 1, char == "\n")

    def remove(self, offset: Offset) -> str:
        index = ensure_offset(self, offset, inclusive=False)
        removed = self.text[index]
        self.text = self.text[:index] + self.text[index + 1 :]
        self._touch(index, -1, removed == "\n")
        return removed

    def display_line(self, number: int) -> str:
        """Return line ``number`` prefixed with its right-aligned line number."""

        digits = max(self.origin.column - 1, 1)
        return f"{number:>{digits}} {self.line(number) or ''}"

    def persist(self, explorer: "Explorer") -> None:
        explorer.write(self.path, self.text)
        self.dirty = False

    def render_lines(self) -> RenderedLines:
        return RenderedLines(self)

    def _touch(self, index: int, delta: int, restructured: bool) -> None:
        self.version += 1
        self.dirty = True
        if restructured:
            # Line count changed; the gutter waits for relayout().
            self._line_starts = _line_starts(self.text)
            return
        self._line_starts = [
            start if start <= index else start + delta for start in self._line_starts
        ]


def _line_starts(text: str) -> List[int]:
    starts = [0]
    for index, char in enumerate(text):
        if char == "\n":
            starts.append(index + 1)
    return starts
