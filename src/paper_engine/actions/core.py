"""Core action implementations shared across modes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from paper_engine.buffer.marks import Edge
from paper_engine.filters import SEPARATOR
from paper_engine.modes.base_mode import ModeContext, ModeResult
from paper_engine.modes.operations import (
    AddToSketch,
    ChangeMode,
    ExecuteCommand,
    ModeName,
    ScrollDown,
    ScrollUp,
    SetMarks,
)

if TYPE_CHECKING:  # pragma: no cover
    from paper_engine.keymaps.models import KeyMatch


def enter_command_mode(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        operations=(ChangeMode(ModeName.COMMAND),),
        message="enter_command",
    )


def enter_filter_mode(context: ModeContext, match: KeyMatch) -> ModeResult:
    """Enter filter mode with the trigger key as the first sketch character."""

    del context
    return ModeResult(
        consumed=True,
        operations=(ChangeMode(ModeName.FILTER), AddToSketch(match.key)),
        message="enter_filter",
    )


def exit_to_display_mode(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        operations=(ChangeMode(ModeName.DISPLAY),),
        message="exit_to_display",
    )


def scroll_down(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, operations=(ScrollDown(),), status="scroll")


def scroll_up(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, operations=(ScrollUp(),), status="scroll")


def submit_command(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        operations=(ExecuteCommand(), ChangeMode(ModeName.DISPLAY)),
        status="command_submit",
    )


def join_filters(context: ModeContext, match: KeyMatch) -> ModeResult:
    """Start a new filter token that narrows the current matches."""

    del context, match
    return ModeResult(
        consumed=True, operations=(AddToSketch(SEPARATOR),), status="editing"
    )


def enter_action_mode(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        operations=(ChangeMode(ModeName.ACTION),),
        message="enter_action",
    )


def mark_section_starts(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        operations=(SetMarks(Edge.START), ChangeMode(ModeName.EDIT)),
        message="enter_edit",
    )


def mark_section_ends(context: ModeContext, match: KeyMatch) -> ModeResult:
    del context, match
    return ModeResult(
        consumed=True,
        operations=(SetMarks(Edge.END), ChangeMode(ModeName.EDIT)),
        message="enter_edit",
    )


__all__ = [
    "enter_action_mode",
    "enter_command_mode",
    "enter_filter_mode",
    "exit_to_display_mode",
    "join_filters",
    "mark_section_ends",
    "mark_section_starts",
    "scroll_down",
    "scroll_up",
    "submit_command",
]
