"""Keymap registry responsible for storing actions and bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from .models import ActionRef, Binding, KeyMatch


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding claims a key already bound in its mode."""

    def __init__(self, binding: Binding, existing: Binding):
        super().__init__(
            f"Binding '{binding.id}' conflicts with '{existing.id}' "
            f"on key '{binding.key}' in mode '{binding.mode}'"
        )
        self.binding = binding
        self.existing = existing


class KeymapRegistry:
    """Owns action references and the per-mode key index."""

    def __init__(self) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._mode_index: Dict[str, Dict[str, str]] = {}
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if not replace and action.id in self._actions:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        if binding.action_id not in self._actions:
            raise KeyError(
                f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
            )

        existing_id = self._mode_index.get(binding.mode, {}).get(binding.key)
        if existing_id is not None and existing_id != binding.id:
            if not replace:
                raise KeymapConflictError(binding, self._bindings[existing_id])
            self.unregister_binding(existing_id)

        if binding.id in self._bindings:
            if not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")
            self.unregister_binding(binding.id)

        self._bindings[binding.id] = binding
        self._mode_index.setdefault(binding.mode, {})[binding.key] = binding.id
        self._revision += 1
        return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(binding_id, None)
        if binding is None:
            return None
        keys = self._mode_index.get(binding.mode, {})
        keys.pop(binding.key, None)
        if not keys:
            self._mode_index.pop(binding.mode, None)
        self._revision += 1
        return binding

    def lookup(self, mode: str, key: str) -> Optional[KeyMatch]:
        """Return the binding for ``key`` in ``mode`` with its action, if any."""

        binding_id = self._mode_index.get(mode, {}).get(key)
        if binding_id is None:
            return None
        binding = self._bindings[binding_id]
        return KeyMatch(binding=binding, action=self.get_action(binding.action_id))

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is None:
            yield from self._bindings.values()
            return
        for binding_id in self._mode_index.get(mode, {}).values():
            yield self._bindings[binding_id]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted(self._mode_index)),
        )


__all__ = [
    "KeymapConflictError",
    "KeymapRegistry",
    "RegistryStats",
]
