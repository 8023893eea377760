"""Displayable-buffer listing and display-name disambiguation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from tabline_engine.host.boundary import HostBoundary
from tabline_engine.runtime import telemetry

NO_NAME = "[No Name]"


def base_name(path: str) -> str:
    return os.path.basename(path)


def extension(path: str) -> str:
    return os.path.splitext(base_name(path))[1].lstrip(".")


def parent_segment(path: str) -> str:
    head = os.path.dirname(path)
    if not head:
        return "."
    return os.path.basename(head)


def disambiguate(path: str, snapshot_paths: Iterable[str]) -> str:
    """Return the label for ``path`` among every path of the snapshot.

    ``snapshot_paths`` includes ``path`` itself. When two or more share the
    same base name the immediate parent directory is prefixed. Only one level
    is added, so three files named alike in same-named parents stay
    ambiguous.
    """

    name = base_name(path)
    if not name:
        return NO_NAME
    count = sum(1 for other in snapshot_paths if base_name(other) == name)
    if count > 1:
        return f"{parent_segment(path)}/{name}"
    return name


@dataclass(frozen=True, slots=True)
class BufferSnapshot:
    """Ordered displayable buffers plus the paths captured while listing."""

    ids: tuple[int, ...] = ()
    paths: Mapping[int, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[int]:
        return iter(self.ids)

    def __contains__(self, buffer_id: object) -> bool:
        return buffer_id in self.ids

    def index_of(self, buffer_id: int) -> Optional[int]:
        try:
            return self.ids.index(buffer_id)
        except ValueError:
            return None

    def path(self, buffer_id: int) -> str:
        return self.paths.get(buffer_id, "")

    def display_name(self, buffer_id: int) -> str:
        return disambiguate(
            self.path(buffer_id), (self.path(other) for other in self.ids)
        )


class SnapshotBuilder:
    """Queries the host buffer registry and keeps only displayable buffers."""

    def __init__(
        self, boundary: HostBoundary, *, logger_name: str | None = None
    ) -> None:
        self._boundary = boundary
        self._logger_name = logger_name

    def is_displayable(self, buffer_id: int, *, hide_misc: bool) -> bool:
        if not self._boundary.is_usable(buffer_id):
            return False
        if not hide_misc:
            return True
        name = self._boundary.buffer_name(buffer_id)
        if not name.ok or not name.value:
            return False
        return not self._boundary.is_directory(name.value).value_or(True)

    def list_displayable(self, *, hide_misc: bool) -> tuple[int, ...]:
        listed = self._boundary.list_buffers()
        if not listed.ok:
            return ()
        return tuple(
            buffer_id
            for buffer_id in listed.value_or(())
            if self.is_displayable(buffer_id, hide_misc=hide_misc)
        )

    def build(self, *, hide_misc: bool) -> BufferSnapshot:
        with telemetry.span(
            "tabline::snapshot",
            logger_name=self._logger_name,
            metadata={"hide_misc": hide_misc},
        ) as handle:
            ids = self.list_displayable(hide_misc=hide_misc)
            paths = {
                buffer_id: self._boundary.buffer_name(buffer_id).value_or("")
                for buffer_id in ids
            }
            handle.add_metadata("count", len(ids))
        return BufferSnapshot(ids=ids, paths=paths)

    def display_name(self, buffer_id: int, snapshot_ids: Sequence[int]) -> str:
        """Label ``buffer_id`` against a freshly queried set of sibling paths."""

        path = self._boundary.buffer_name(buffer_id)
        if not path.ok:
            return NO_NAME
        siblings = [
            self._boundary.buffer_name(other).value_or("") for other in snapshot_ids
        ]
        return disambiguate(path.value_or(""), siblings)


__all__ = [
    "NO_NAME",
    "base_name",
    "extension",
    "parent_segment",
    "disambiguate",
    "BufferSnapshot",
    "SnapshotBuilder",
]
