"""Dataclasses describing keymap bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution."""

    id: str
    handler: Callable[..., object]
    telemetry_name: str | None = None
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a single key token in one mode with an action."""

    id: str
    mode: str
    key: str
    action_id: str
    description: str = ""
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.key:
            raise ValueError("binding key cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        # Accept enum members for the mode.
        object.__setattr__(self, "mode", str(getattr(self.mode, "value", self.mode)))


@dataclass(frozen=True, slots=True)
class KeyMatch:
    """A binding that matched a key together with its resolved action."""

    binding: Binding
    action: ActionRef

    @property
    def key(self) -> str:
        return self.binding.key


__all__ = [
    "ActionRef",
    "Binding",
    "KeyMatch",
]
