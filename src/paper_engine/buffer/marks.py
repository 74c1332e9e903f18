"""Multi-cursor marks and the adjustment pass that keeps them consistent.

Every keystroke in edit mode is applied at every live mark. Marks are visited
in creation order (which ``MarkSet.set_marks`` makes document order) and each
one is first moved by the running total of the adjustments made by the marks
before it, then edits the document at its own location and adds its own
adjustment to the total.

Column deltas are keyed by line numbers *after* the line delta of the same
adjustment has been applied, so composing two adjustments re-keys the
earlier column deltas by the later line delta.

Marks that end a pass on the same location are merged, so distinct marks
always edit distinct characters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .coords import Offset, Position, Section
from .document import Document

BACKSPACE = "\b"
LINE_BREAK = "\n"


class Edge(str, Enum):
    """Which end of a section a mark is placed at."""

    START = "start"
    END = "end"


class EditClass(str, Enum):
    INSERT = "insert"
    BACKSPACE = "backspace"
    # Restructures line boundaries; needs a full redraw.
    LINE_BREAK = "line_break"


def classify(char: str) -> EditClass:
    if char == BACKSPACE:
        return EditClass.BACKSPACE
    if char in (LINE_BREAK, "\r"):
        return EditClass.LINE_BREAK
    return EditClass.INSERT


@dataclass(slots=True)
class Mark:
    """One cursor: a position and the offset that denotes the same location."""

    position: Position
    offset: Offset

    @classmethod
    def at(cls, position: Position, document: Document) -> "Mark":
        return cls(position=position, offset=document.position_to_offset(position))

    def shift(self, adjustment: "Adjustment") -> None:
        line = self.position.line + adjustment.line_delta
        column = self.position.column + adjustment.columns.get(line, 0)
        self.position = Position(line, column)
        self.offset = self.offset + adjustment.offset_delta

    def __str__(self) -> str:
        return f"{self.position}{self.offset}"


@dataclass(slots=True)
class Adjustment:
    """Net effect of one or more edits on the marks that follow them."""

    offset_delta: int = 0
    line_delta: int = 0
    columns: Dict[int, int] = field(default_factory=dict)
    kind: Optional[EditClass] = None
    char: Optional[str] = None

    def __add__(self, other: "Adjustment") -> "Adjustment":
        columns = {
            line + other.line_delta: delta for line, delta in self.columns.items()
        }
        for line, delta in other.columns.items():
            columns[line] = columns.get(line, 0) + delta
        return Adjustment(
            offset_delta=self.offset_delta + other.offset_delta,
            line_delta=self.line_delta + other.line_delta,
            columns={line: delta for line, delta in columns.items() if delta},
            kind=other.kind or self.kind,
            char=other.char if other.kind else self.char,
        )

    @property
    def requires_full_redraw(self) -> bool:
        return self.kind is EditClass.LINE_BREAK


@dataclass(frozen=True, slots=True)
class EditRecord:
    """What happened at one mark during a pass.

    ``point`` is the position the character was inserted at (or, for a
    backspace, the position the mark ended on). ``kind`` is ``None`` when the
    mark was skipped by the guard.
    """

    index: int
    kind: Optional[EditClass]
    char: Optional[str]
    point: Position
    mark: Position

    @property
    def skipped(self) -> bool:
        return self.kind is None


@dataclass(frozen=True, slots=True)
class EditReport:
    records: tuple[EditRecord, ...]
    total: Adjustment

    @property
    def requires_full_redraw(self) -> bool:
        return any(record.kind is EditClass.LINE_BREAK for record in self.records)

    @property
    def applied(self) -> tuple[EditRecord, ...]:
        return tuple(record for record in self.records if not record.skipped)


class MarkSet:
    """Ordered collection of live marks."""

    def __init__(self, marks: Iterable[Mark] = ()) -> None:
        self._marks: List[Mark] = list(marks)

    def __iter__(self) -> Iterator[Mark]:
        return iter(self._marks)

    def __len__(self) -> int:
        return len(self._marks)

    def __getitem__(self, index: int) -> Mark:
        return self._marks[index]

    def positions(self) -> tuple[Position, ...]:
        return tuple(mark.position for mark in self._marks)

    def clear(self) -> None:
        self._marks.clear()

    def set_marks(
        self, edge: Edge, sections: Sequence[Section], document: Document
    ) -> None:
        """Rebuild the set with one mark per section.

        Sections that yield the same location produce a single mark.
        """

        marks = []
        for section in sorted(sections, key=lambda item: item.start):
            position = section.start
            if edge is Edge.END:
                position = section.end(document)
            marks.append(Mark.at(position, document))
        self._marks = _merged(marks)

    def apply(self, char: str, document: Document) -> EditReport:
        """Apply ``char`` at every mark and keep all marks consistent."""

        kind = classify(char)
        total = Adjustment()
        records: List[EditRecord] = []
        for index, mark in enumerate(self._marks):
            mark.shift(total)
            adjustment, point = _edit_at(mark, kind, char, document)
            if adjustment is None:
                records.append(
                    EditRecord(index, None, None, mark.position, mark.position)
                )
                continue
            total = total + adjustment
            records.append(
                EditRecord(
                    index, adjustment.kind, adjustment.char, point, mark.position
                )
            )

        # Marks that met during the pass now edit the same character.
        self._marks = _merged(self._marks)
        report = EditReport(records=tuple(records), total=total)
        if report.requires_full_redraw:
            document.relayout()
        return report


def _merged(marks: Sequence[Mark]) -> List[Mark]:
    """Drop marks at the same location as an earlier one, keeping order."""

    seen = set()
    merged: List[Mark] = []
    for mark in marks:
        key = (mark.position, mark.offset)
        if key in seen:
            continue
        seen.add(key)
        merged.append(mark)
    return merged


def _edit_at(
    mark: Mark, kind: EditClass, char: str, document: Document
) -> tuple[Optional[Adjustment], Position]:
    """Edit ``document`` at ``mark``, move the mark and return its adjustment."""

    position = mark.position
    if not mark.offset.is_valid:
        return None, position

    if kind is EditClass.BACKSPACE:
        target = mark.offset - 1
        if not target.is_valid:
            return None, position
        if position.column == 0 and position.line > 1:
            previous = position.line - 1
            merged_column = document.line_length(Position(previous, 0))
            document.remove(target)
            mark.position = Position(previous, merged_column)
            mark.offset = target
            return (
                Adjustment(
                    offset_delta=-1,
                    line_delta=-1,
                    columns={previous: merged_column} if merged_column else {},
                    kind=EditClass.LINE_BREAK,
                ),
                mark.position,
            )
        document.remove(target)
        mark.position = position.shifted(columns=-1)
        mark.offset = target
        return (
            Adjustment(
                offset_delta=-1,
                columns={position.line: -1},
                kind=EditClass.BACKSPACE,
            ),
            mark.position,
        )

    if kind is EditClass.LINE_BREAK:
        document.insert(mark.offset, LINE_BREAK)
        mark.position = Position(position.line + 1, 0)
        mark.offset = mark.offset + 1
        return (
            Adjustment(
                offset_delta=1,
                line_delta=1,
                columns={position.line + 1: -position.column}
                if position.column
                else {},
                kind=EditClass.LINE_BREAK,
                char=LINE_BREAK,
            ),
            position,
        )

    document.insert(mark.offset, char)
    mark.position = position.shifted(columns=1)
    mark.offset = mark.offset + 1
    return (
        Adjustment(
            offset_delta=1,
            columns={position.line: 1},
            kind=EditClass.INSERT,
            char=char,
        ),
        position,
    )


__all__ = [
    "Adjustment",
    "BACKSPACE",
    "Edge",
    "EditClass",
    "EditRecord",
    "EditReport",
    "LINE_BREAK",
    "Mark",
    "MarkSet",
    "classify",
]
