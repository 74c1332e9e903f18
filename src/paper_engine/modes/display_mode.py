"""Display mode: view the document, scroll, or start a command or filter."""

from __future__ import annotations

from .base_mode import Mode
from .operations import ModeName


class DisplayMode(Mode):
    name = ModeName.DISPLAY
