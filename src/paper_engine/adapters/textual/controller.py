"""Textual renderer adapter: an in-memory row grid plus UI callbacks."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Deque, Dict, Iterable, List, Optional

from rich.text import Text

from paper_engine.buffer.coords import TO_LINE_END, Length
from paper_engine.buffer.sync import BufferMirror
from paper_engine.modes import KeyInput
from paper_engine.render import (
    Alert,
    Clear,
    Color,
    Edit,
    InsertChar,
    RendererError,
    ReplaceRow,
    SetColor,
)

if TYPE_CHECKING:  # pragma: no cover
    from paper_engine.runtime.paper import Paper, StepResult

HIGHLIGHT_STYLE = "reverse"


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[Text], None]
    update_status: Callable[[str], None] = _noop
    show_sketch: Callable[[str], None] = _noop
    alert: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualPaperAdapter:
    """Renderer that keeps the screen as rows of text with highlight spans."""

    def __init__(self, hooks: TextualUIHooks, *, height: int = 24) -> None:
        self.hooks = hooks
        self.height = height
        self.rows: List[str] = []
        self.highlights: Dict[int, List[tuple[int, int]]] = {}
        self.alerts: List[str] = []
        self.active = False
        self.paper: Optional["Paper"] = None
        self._inputs: Deque[KeyInput] = deque()

    def bind(self, paper: "Paper") -> None:
        self.paper = paper

    def init(self) -> None:
        self.active = True

    def close(self) -> None:
        self.active = False

    def viewport_height(self) -> int:
        return self.height

    def resize(self, height: int) -> None:
        self.height = max(height, 1)

    def feed(self, *keys: KeyInput) -> None:
        self._inputs.extend(keys)

    def receive_input(self) -> Optional[KeyInput]:
        if not self._inputs:
            return None
        return self._inputs.popleft()

    def apply(self, edit: Edit) -> None:
        if not self.active:
            raise RendererError("Renderer used before init()")
        change = edit.change
        row = edit.region.start.row
        column = edit.region.start.column
        if isinstance(change, Clear):
            self.rows.clear()
            self.highlights.clear()
        elif isinstance(change, ReplaceRow):
            self._ensure_row(row)
            self.rows[row] = change.text
            self.highlights.pop(row, None)
        elif isinstance(change, InsertChar):
            self._ensure_row(row)
            text = self.rows[row].ljust(column)
            self.rows[row] = text[:column] + change.char + text[column:]
        elif isinstance(change, SetColor):
            self._set_color(row, column, edit.region.length, change.color)
        elif isinstance(change, Alert):
            self.alerts.append(change.message)
            self.hooks.alert(change.message)
        self.hooks.log(f"edit -> {row}:{column} {change!r}")

    def render(self) -> Text:
        text = Text()
        for index, row in enumerate(self.rows):
            if index:
                text.append("\n")
            line = Text(row)
            for start, end in self.highlights.get(index, ()):
                line.stylize(HIGHLIGHT_STYLE, start, end)
            text.append_text(line)
        return text

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> "StepResult":
        """Translate a Textual key event into a KeyInput and step the editor."""

        if self.paper is None:
            raise RendererError("Adapter is not bound to an editor")
        key_input = KeyInput(
            key=key, text=text, modifiers=tuple(str(mod).upper() for mod in modifiers)
        )
        self.hooks.log(f"key -> {key_input.key!r} mode={self.paper.mode.value}")
        result = self.paper.step(key_input)
        self.refresh()
        return result

    def refresh(self) -> None:
        self.hooks.update_view(self.render())
        if self.paper is not None:
            mirror = self.paper.buffer.mirror(
                attributes={"mode": self.paper.mode.value}
            )
            self.hooks.update_status(_status_line(mirror))
            self.hooks.show_sketch(self.paper.sketch)

    def _ensure_row(self, row: int) -> None:
        while len(self.rows) <= row:
            self.rows.append("")

    def _set_color(self, row: int, column: int, length: Length, color: Color) -> None:
        if color is Color.NORMAL:
            self.highlights.pop(row, None)
            return
        self._ensure_row(row)
        if length is TO_LINE_END:
            end = max(len(self.rows[row]), column)
        else:
            end = column + int(length)
        self.highlights.setdefault(row, []).append((column, end))


def _status_line(mirror: BufferMirror) -> str:
    parts = [mirror.attributes.get("mode", ""), mirror.path or "[no file]"]
    if mirror.marks:
        parts.append(f"{len(mirror.marks)} marks")
    return "  ".join(parts)


__all__ = ["HIGHLIGHT_STYLE", "TextualPaperAdapter", "TextualUIHooks"]
