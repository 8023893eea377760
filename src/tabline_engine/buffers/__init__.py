"""Buffer snapshot building and display names."""

from .snapshot import (
    NO_NAME,
    BufferSnapshot,
    SnapshotBuilder,
    base_name,
    disambiguate,
    extension,
    parent_segment,
)

__all__ = [
    "NO_NAME",
    "BufferSnapshot",
    "SnapshotBuilder",
    "base_name",
    "disambiguate",
    "extension",
    "parent_segment",
]
