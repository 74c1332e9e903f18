"""Modes, the operations they produce, and dispatch logic."""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .action_mode import ActionMode
from .command_mode import CommandMode
from .display_mode import DisplayMode
from .edit_mode import EditMode
from .filter_mode import FilterMode
from .operations import (
    AddToSketch,
    ChangeMode,
    EditBuffer,
    Enhancement,
    ExecuteCommand,
    ModeName,
    Operation,
    ScrollDown,
    ScrollUp,
    SetMarks,
)

__all__ = [
    "ActionMode",
    "AddToSketch",
    "ChangeMode",
    "CommandMode",
    "DisplayMode",
    "EditBuffer",
    "EditMode",
    "Enhancement",
    "ExecuteCommand",
    "FilterMode",
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeName",
    "ModeResult",
    "Operation",
    "ScrollDown",
    "ScrollUp",
    "SetMarks",
]
