"""Edit mode: every typed character is applied at every mark."""

from __future__ import annotations

from .base_mode import KeyInput, Mode, ModeResult, typed
from .operations import ModeName


class EditMode(Mode):
    name = ModeName.EDIT

    def fallback(self, key: KeyInput) -> ModeResult:
        return typed(key, edit_buffer=True) or super().fallback(key)
