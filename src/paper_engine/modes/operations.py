"""Operations produced by modes and applied in order by the run loop."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from paper_engine.buffer.coords import Section
from paper_engine.buffer.marks import Edge


class ModeName(str, Enum):
    DISPLAY = "display"
    COMMAND = "command"
    FILTER = "filter"
    ACTION = "action"
    EDIT = "edit"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ChangeMode:
    mode: ModeName


@dataclass(frozen=True, slots=True)
class ExecuteCommand:
    """Run the current sketch as a command."""


@dataclass(frozen=True, slots=True)
class ScrollDown:
    pass


@dataclass(frozen=True, slots=True)
class ScrollUp:
    pass


@dataclass(frozen=True, slots=True)
class AddToSketch:
    text: str


@dataclass(frozen=True, slots=True)
class EditBuffer:
    """Apply ``char`` at every mark."""

    char: str


@dataclass(frozen=True, slots=True)
class SetMarks:
    edge: Edge


Operation = Union[
    ChangeMode, ExecuteCommand, ScrollDown, ScrollUp, AddToSketch, EditBuffer, SetMarks
]


@dataclass(frozen=True, slots=True)
class Enhancement:
    """Replacement working set used for live highlighting."""

    sections: Tuple[Section, ...]


__all__ = [
    "AddToSketch",
    "ChangeMode",
    "EditBuffer",
    "Enhancement",
    "ExecuteCommand",
    "ModeName",
    "Operation",
    "ScrollDown",
    "ScrollUp",
    "SetMarks",
]
