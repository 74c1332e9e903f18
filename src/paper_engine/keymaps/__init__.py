"""Declarative keymap registry and default bindings."""

from .models import ActionRef, Binding, KeyMatch
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .defaults import DEFAULT_ACTIONS, DEFAULT_BINDINGS, load_default_keymaps

__all__ = [
    "ActionRef",
    "Binding",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "KeyMatch",
    "KeymapConflictError",
    "KeymapRegistry",
    "RegistryStats",
    "load_default_keymaps",
]
