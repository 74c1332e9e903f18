"""Render-diff changes handed to a renderer and the renderer protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol, Union

from paper_engine.buffer.coords import Address, Region

if TYPE_CHECKING:  # pragma: no cover
    from paper_engine.modes.base_mode import KeyInput


class Color(str, Enum):
    NORMAL = "normal"
    HIGHLIGHT = "highlight"


@dataclass(frozen=True, slots=True)
class InsertChar:
    char: str


@dataclass(frozen=True, slots=True)
class ReplaceRow:
    text: str


@dataclass(frozen=True, slots=True)
class Clear:
    pass


@dataclass(frozen=True, slots=True)
class SetColor:
    color: Color


@dataclass(frozen=True, slots=True)
class Alert:
    message: str


Change = Union[InsertChar, ReplaceRow, Clear, SetColor, Alert]

SCREEN = Region(Address(0, 0))


@dataclass(frozen=True, slots=True)
class Edit:
    """A single change applied to a screen region."""

    region: Region
    change: Change

    @classmethod
    def clear(cls) -> "Edit":
        return cls(SCREEN, Clear())

    @classmethod
    def alert(cls, message: str) -> "Edit":
        return cls(SCREEN, Alert(message))


class RendererError(RuntimeError):
    """Raised when the terminal cannot be initialized or written to."""


class Renderer(Protocol):
    def init(self) -> None:
        ...

    def close(self) -> None:
        ...

    def apply(self, edit: Edit) -> None:
        ...

    def viewport_height(self) -> int:
        ...

    def receive_input(self) -> Optional["KeyInput"]:
        """Return the next key, or ``None`` once the input source is exhausted."""
        ...


__all__ = [
    "Alert",
    "Change",
    "Clear",
    "Color",
    "Edit",
    "InsertChar",
    "Renderer",
    "RendererError",
    "ReplaceRow",
    "SCREEN",
    "SetColor",
]
