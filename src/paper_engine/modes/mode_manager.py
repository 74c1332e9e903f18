"""Mode manager: active mode, sketch and the transition table."""

from __future__ import annotations

from typing import Dict, FrozenSet, Mapping, Optional, Type

from paper_engine.keymaps import KeymapRegistry, load_default_keymaps

from .action_mode import ActionMode
from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .command_mode import CommandMode
from .display_mode import DisplayMode
from .edit_mode import EditMode
from .filter_mode import FilterMode
from .operations import Enhancement, ModeName

TRANSITIONS: Mapping[ModeName, FrozenSet[ModeName]] = {
    ModeName.DISPLAY: frozenset({ModeName.COMMAND, ModeName.FILTER}),
    ModeName.COMMAND: frozenset({ModeName.DISPLAY}),
    ModeName.FILTER: frozenset({ModeName.ACTION, ModeName.DISPLAY}),
    ModeName.ACTION: frozenset({ModeName.EDIT, ModeName.DISPLAY}),
    ModeName.EDIT: frozenset({ModeName.DISPLAY}),
}

DEFAULT_MODES: tuple[Type[Mode], ...] = (
    DisplayMode,
    CommandMode,
    FilterMode,
    ActionMode,
    EditMode,
)


class ModeTransitionError(RuntimeError):
    """Raised when a transition is not in the transition table."""

    def __init__(self, current: ModeName, target: ModeName) -> None:
        super().__init__(f"Cannot switch from '{current}' to '{target}'")
        self.current = current
        self.target = target


class ModeManager:
    """Owns the active mode and the sketch, and dispatches key events."""

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        load_defaults: bool = True,
        register_defaults: bool = True,
    ) -> None:
        self.context = context
        self.keymap_registry = keymap_registry or KeymapRegistry()
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self._modes: Dict[ModeName, Mode] = {}
        self._active: ModeName = ModeName.DISPLAY
        self._sketch: list[str] = []
        self.context.extras.setdefault("mode_manager", self)
        if register_defaults:
            for mode_cls in DEFAULT_MODES:
                self.register_mode(mode_cls)

    @property
    def active_name(self) -> ModeName:
        return self._active

    @property
    def active_mode(self) -> Optional[Mode]:
        return self._modes.get(self._active)

    @property
    def sketch(self) -> str:
        return "".join(self._sketch)

    def register_mode(self, mode_cls: Type[Mode], /, **mode_kwargs: object) -> Mode:
        mode = mode_cls(self.context, self.keymap_registry, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        return mode

    def can_switch(self, name: ModeName) -> bool:
        return name in TRANSITIONS[self._active]

    def switch_mode(self, name: ModeName) -> None:
        """Move to ``name``, running exit/enter hooks and clearing the sketch."""

        name = ModeName(name)
        if name == self._active:
            return
        if not self.can_switch(name):
            raise ModeTransitionError(self._active, name)
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self._active
        current = self._modes.get(previous)
        if current is not None:
            current.on_exit(name)
        self._active = name
        self._sketch.clear()
        self._modes[name].on_enter(previous)
        self.context.telemetry.record_event(
            "mode.switch", data={"from": previous.value, "to": name.value}
        )
        self.context.bus.emit("mode.switch", name)

    def add_to_sketch(self, text: str) -> None:
        for char in text:
            if char == "\b":
                if self._sketch:
                    self._sketch.pop()
            else:
                self._sketch.append(char)

    def handle_key(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError(f"Mode '{self._active}' is not registered")
        with self.context.telemetry.span(
            name=f"mode::{mode.name.value}",
            component=True,
            metadata={"key": key.key, "mode": mode.name.value},
        ):
            return mode.handle_key(key)

    def enhance(self) -> Optional[Enhancement]:
        mode = self.active_mode
        if mode is None:
            return None
        return mode.enhance(self.sketch)


__all__ = ["DEFAULT_MODES", "ModeManager", "ModeTransitionError", "TRANSITIONS"]
