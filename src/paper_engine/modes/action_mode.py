"""Action mode: choose where marks go on the filtered sections."""

from __future__ import annotations

from .base_mode import Mode
from .operations import ModeName


class ActionMode(Mode):
    name = ModeName.ACTION
