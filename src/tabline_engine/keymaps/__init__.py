"""Key bindings for tabline navigation actions."""

from .defaults import (
    ACTION_CLOSE_CURRENT,
    ACTION_NEXT,
    ACTION_PREVIOUS,
    NORMAL_MODE,
    default_bindings,
    install_tabline_keymaps,
    remove_tabline_keymaps,
)
from .models import ActionRef, Binding, KeySequence, KeyStroke
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "NORMAL_MODE",
    "ACTION_NEXT",
    "ACTION_PREVIOUS",
    "ACTION_CLOSE_CURRENT",
    "default_bindings",
    "install_tabline_keymaps",
    "remove_tabline_keymaps",
]
