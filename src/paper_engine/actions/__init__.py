"""Actions bound to keys, and the command mini-language."""

from .command import CommandOutcome, execute_command
from .core import (
    enter_action_mode,
    enter_command_mode,
    enter_filter_mode,
    exit_to_display_mode,
    join_filters,
    mark_section_ends,
    mark_section_starts,
    scroll_down,
    scroll_up,
    submit_command,
)

__all__ = [
    "CommandOutcome",
    "enter_action_mode",
    "enter_command_mode",
    "enter_filter_mode",
    "execute_command",
    "exit_to_display_mode",
    "join_filters",
    "mark_section_ends",
    "mark_section_starts",
    "scroll_down",
    "scroll_up",
    "submit_command",
]
