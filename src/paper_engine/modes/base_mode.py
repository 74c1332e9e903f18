"""Base classes and shared utilities for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from paper_engine.buffer import Buffer, Section
from paper_engine.filters import FilterChain
from paper_engine.io.config import Settings
from paper_engine.runtime.telemetry import Telemetry

from .keymap_helpers import CHAR_KEYS, key_to_char, key_to_token
from .operations import AddToSketch, EditBuffer, Enhancement, ModeName, Operation

if TYPE_CHECKING:  # pragma: no cover
    from paper_engine.io.explorer import Explorer
    from paper_engine.keymaps import KeyMatch, KeymapRegistry


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to modes."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @classmethod
    def from_char(cls, char: str) -> "KeyInput":
        named = CHAR_KEYS.get(char)
        if named is not None:
            return cls(key=named)
        return cls(key=char, text=char)

    @property
    def char(self) -> Optional[str]:
        return key_to_char(self)


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``."""

    consumed: bool
    operations: Tuple[Operation, ...] = ()
    status: str = "ok"
    message: Optional[str] = None


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode and action can access."""

    buffer: Buffer
    filters: FilterChain
    bus: "ModeBus"
    telemetry: Telemetry
    explorer: Optional["Explorer"] = None
    settings: Settings = field(default_factory=Settings)
    working_set: List[Section] = field(default_factory=list)
    extras: Dict[str, object] = field(default_factory=dict)


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class Mode:
    """Base class all concrete editor modes inherit from.

    A key bound in the registry for this mode runs its action; any other key
    goes to :meth:`fallback`.
    """

    name: ModeName = ModeName.DISPLAY

    def __init__(self, context: ModeContext, registry: "KeymapRegistry") -> None:
        self.context = context
        self.registry = registry

    def on_enter(
        self, previous: Optional[ModeName]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(
        self, next_mode: Optional[ModeName]
    ) -> None:  # pragma: no cover - default no-op
        del next_mode

    def handle_key(self, key: KeyInput) -> ModeResult:
        match = self.registry.lookup(self.name, key_to_token(key))
        if match is not None:
            return self._execute_match(match)
        return self.fallback(key)

    def fallback(self, key: KeyInput) -> ModeResult:
        del key
        return ModeResult(consumed=False, status="miss", message="unhandled")

    def enhance(self, sketch: str) -> Optional[Enhancement]:
        """Return a replacement working set for highlighting, if this mode has one."""

        del sketch
        return None

    def _execute_match(self, match: "KeyMatch") -> ModeResult:
        with self.context.telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ModeResult):
            return outcome
        return ModeResult(consumed=True)


def typed(key: KeyInput, *, edit_buffer: bool = False) -> Optional[ModeResult]:
    """Append the typed character to the sketch (and the buffer, in edit mode)."""

    char = key.char
    if char is None:
        return None
    operations: List[Operation] = [AddToSketch(char)]
    if edit_buffer:
        operations.append(EditBuffer(char))
    return ModeResult(consumed=True, operations=tuple(operations), status="editing")
