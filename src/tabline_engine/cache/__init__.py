"""Memoization layers for registered styles and resolved icons."""

from .highlights import HighlightCache
from .icons import (
    DEFAULT_ICON_ROLE,
    ByFilenameProvider,
    ByFiletypeProvider,
    IconCache,
    IconProvider,
    NoIconProvider,
)

__all__ = [
    "HighlightCache",
    "IconCache",
    "IconProvider",
    "NoIconProvider",
    "ByFiletypeProvider",
    "ByFilenameProvider",
    "DEFAULT_ICON_ROLE",
]
