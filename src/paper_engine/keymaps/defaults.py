"""Built-in keymaps that seed each mode with the default transition table."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from paper_engine.actions import core as core_actions

from .models import ActionRef, Binding
from .registry import KeymapRegistry

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="core.enter_command",
        handler=core_actions.enter_command_mode,
        description="Enter command mode",
    ),
    ActionRef(
        id="core.enter_filter",
        handler=core_actions.enter_filter_mode,
        description="Enter filter mode seeded with the trigger key",
    ),
    ActionRef(
        id="core.exit_to_display",
        handler=core_actions.exit_to_display_mode,
        description="Return to display mode",
    ),
    ActionRef(
        id="core.scroll_down",
        handler=core_actions.scroll_down,
        description="Scroll down a quarter of the viewport",
    ),
    ActionRef(
        id="core.scroll_up",
        handler=core_actions.scroll_up,
        description="Scroll up a quarter of the viewport",
    ),
    ActionRef(
        id="command.submit",
        handler=core_actions.submit_command,
        description="Execute the command sketch",
    ),
    ActionRef(
        id="filter.join",
        handler=core_actions.join_filters,
        description="Narrow the current matches with another filter",
    ),
    ActionRef(
        id="filter.commit",
        handler=core_actions.enter_action_mode,
        description="Select the filtered sections",
    ),
    ActionRef(
        id="action.mark_starts",
        handler=core_actions.mark_section_starts,
        description="Place a mark at the start of every section",
    ),
    ActionRef(
        id="action.mark_ends",
        handler=core_actions.mark_section_ends,
        description="Place a mark at the end of every section",
    ),
)


def _bind(mode: str, key: str, action_id: str, description: str) -> Binding:
    name = key.lower() if len(key) > 1 else key
    return Binding(
        id=f"{mode}.{name}",
        mode=mode,
        key=key,
        action_id=action_id,
        description=description,
        source="defaults",
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _bind("display", ".", "core.enter_command", "Enter command mode"),
    _bind("display", "#", "core.enter_filter", "Filter by line range"),
    _bind("display", "/", "core.enter_filter", "Filter by pattern"),
    _bind("display", "j", "core.scroll_down", "Scroll down"),
    _bind("display", "k", "core.scroll_up", "Scroll up"),
    _bind("command", "ENTER", "command.submit", "Execute the command"),
    _bind("command", "ESC", "core.exit_to_display", "Cancel the command"),
    _bind("filter", "ENTER", "filter.commit", "Select the filtered sections"),
    _bind("filter", "TAB", "filter.join", "Add another filter"),
    _bind("filter", "ESC", "core.exit_to_display", "Cancel the filter"),
    _bind("action", "i", "action.mark_starts", "Edit at section starts"),
    _bind("action", "I", "action.mark_ends", "Edit at section ends"),
    _bind("action", "ESC", "core.exit_to_display", "Leave action mode"),
    _bind("edit", "ESC", "core.exit_to_display", "Stop editing"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode."""

    allowed = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if per_mode_overrides:
        for mode, bindings in per_mode_overrides.items():
            for binding in bindings:
                if binding.mode != mode:
                    raise ValueError(
                        f"Override binding '{binding.id}' must target mode '{mode}'"
                    )
                registry.register_binding(binding, replace=True)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = ["DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "load_default_keymaps"]
