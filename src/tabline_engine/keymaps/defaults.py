"""Tabline actions and the keys bound to them by default."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

if TYPE_CHECKING:  # pragma: no cover
    from tabline_engine.engine import TablineEngine

NORMAL_MODE = "normal"
BINDING_SOURCE = "tabline"

ACTION_NEXT = "tabline.next"
ACTION_PREVIOUS = "tabline.previous"
ACTION_CLOSE_CURRENT = "tabline.close_current"

DEFAULT_KEYS: tuple[tuple[str, str, str], ...] = (
    ("tab", ACTION_NEXT, "Next buffer"),
    ("shift+tab", ACTION_PREVIOUS, "Previous buffer"),
    ("alt+c", ACTION_CLOSE_CURRENT, "Close buffer"),
)


def tabline_actions(engine: "TablineEngine") -> tuple[ActionRef, ...]:
    return (
        ActionRef(id=ACTION_NEXT, handler=engine.select_next, description="Next buffer"),
        ActionRef(
            id=ACTION_PREVIOUS,
            handler=engine.select_previous,
            description="Previous buffer",
        ),
        ActionRef(
            id=ACTION_CLOSE_CURRENT,
            handler=engine.close_current,
            description="Close buffer",
        ),
    )


def default_bindings(keys: Iterable[tuple[str, str, str]] = DEFAULT_KEYS) -> list[Binding]:
    return [
        Binding(
            id=f"{NORMAL_MODE}.{action_id}",
            mode=NORMAL_MODE,
            sequence=KeySequence.from_strings(key),
            action_id=action_id,
            description=description,
            source=BINDING_SOURCE,
        )
        for key, action_id, description in keys
    ]


def install_tabline_keymaps(
    registry: KeymapRegistry, engine: "TablineEngine"
) -> list[Binding]:
    """Register the tabline actions and their default keys, replacing old ones."""

    for action in tabline_actions(engine):
        registry.register_action(action, replace=True)
    return [
        registry.register_binding(binding, replace=True)
        for binding in default_bindings()
    ]


def remove_tabline_keymaps(registry: KeymapRegistry) -> None:
    for _key, action_id, _description in DEFAULT_KEYS:
        registry.unregister_action(action_id)


__all__ = [
    "NORMAL_MODE",
    "ACTION_NEXT",
    "ACTION_PREVIOUS",
    "ACTION_CLOSE_CURRENT",
    "DEFAULT_KEYS",
    "tabline_actions",
    "default_bindings",
    "install_tabline_keymaps",
    "remove_tabline_keymaps",
]
