"""Filter mode: narrow the working set while highlighting every match."""

from __future__ import annotations

from typing import Optional

from .base_mode import KeyInput, Mode, ModeResult, typed
from .operations import Enhancement, ModeName


class FilterMode(Mode):
    name = ModeName.FILTER

    def fallback(self, key: KeyInput) -> ModeResult:
        return typed(key) or super().fallback(key)

    def enhance(self, sketch: str) -> Optional[Enhancement]:
        document = self.context.buffer.document
        with self.context.telemetry.span(
            "modes::filter_enhance", metadata={"sketch": sketch}
        ) as span:
            sections = self.context.filters.apply(sketch, document)
            span.add_metadata("sections", len(sections))
        return Enhancement(tuple(sections))
