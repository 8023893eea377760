"""Registry holding tabline actions and the keys bound to them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence

from tabline_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyStroke


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding reuses keys already bound in the same mode."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns action references and binding metadata."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._mode_index: Dict[str, Dict[str, str]] = {}
        self._logger_name = logger_name

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"action_id": action.id},
        ):
            if not replace and action.id in self._actions:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.id] = action
            return action

    def unregister_action(self, action_id: str) -> Optional[ActionRef]:
        action = self._actions.pop(action_id, None)
        if action is None:
            return None
        for binding in [b for b in self._bindings.values() if b.action_id == action_id]:
            self.unregister_binding(binding.id)
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )

            conflicts = self.detect_conflicts(binding)
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)

            for conflict in conflicts:
                self.unregister_binding(conflict.id)
            existing = self._bindings.get(binding.id)
            if existing is not None:
                if not replace:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                self.unregister_binding(existing.id)

            self._bindings[binding.id] = binding
            self._mode_index.setdefault(binding.mode, {})[
                binding.key_signature
            ] = binding.id
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(binding_id, None)
        if binding is None:
            return None
        by_signature = self._mode_index.get(binding.mode, {})
        if by_signature.get(binding.key_signature) == binding.id:
            by_signature.pop(binding.key_signature)
        if not by_signature:
            self._mode_index.pop(binding.mode, None)
        return binding

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        match_id = self._mode_index.get(binding.mode, {}).get(binding.key_signature)
        if match_id is None or match_id == binding.id:
            return []
        return [self._bindings[match_id]]

    def lookup(self, mode: str, tokens: Sequence[str]) -> Optional[ActionRef]:
        """Return the action bound to ``tokens`` in ``mode``, if any."""

        signature = " ".join(KeyStroke.parse(token).token for token in tokens)
        binding_id = self._mode_index.get(mode, {}).get(signature)
        if binding_id is None:
            return None
        return self._actions.get(self._bindings[binding_id].action_id)

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if mode is None or binding.mode == mode:
                yield binding

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted(self._mode_index)),
        )


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
