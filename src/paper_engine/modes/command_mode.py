"""Command mode: collect a command in the sketch until Enter or Escape."""

from __future__ import annotations

from typing import Optional

from .base_mode import KeyInput, Mode, ModeResult, typed
from .operations import ModeName


class CommandMode(Mode):
    name = ModeName.COMMAND

    def on_enter(self, previous: Optional[ModeName]) -> None:
        del previous
        self.context.bus.emit("command.start", None)

    def on_exit(self, next_mode: Optional[ModeName]) -> None:
        del next_mode
        self.context.bus.emit("command.stop", None)

    def fallback(self, key: KeyInput) -> ModeResult:
        return typed(key) or super().fallback(key)
