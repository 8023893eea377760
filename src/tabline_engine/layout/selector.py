"""Greedy selection of the contiguous buffer run that fits the tabline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

RESERVED_MARGIN = 20
MIN_BUDGET = 50


def width_budget(viewport_width: int) -> int:
    return max(viewport_width - RESERVED_MARGIN, MIN_BUDGET)


@dataclass(frozen=True, slots=True)
class VisibleSet:
    """Contiguous slice of the snapshot chosen for display."""

    buffers: tuple[int, ...] = ()
    has_left_overflow: bool = False
    has_right_overflow: bool = False

    def __len__(self) -> int:
        return len(self.buffers)

    def __contains__(self, buffer_id: object) -> bool:
        return buffer_id in self.buffers

    @classmethod
    def from_range(cls, ids: Sequence[int], first: int, last: int) -> "VisibleSet":
        """Slice ``ids[first:last + 1]`` and derive the overflow flags."""

        return cls(
            buffers=tuple(ids[first : last + 1]),
            has_left_overflow=first > 0,
            has_right_overflow=last < len(ids) - 1,
        )


def select_visible(
    snapshot: Sequence[int],
    active: Optional[int],
    *,
    budget: int,
    min_visible: int,
    max_visible: int,
    cost: Callable[[int], int],
) -> VisibleSet:
    """Grow a run outward from ``active`` until the width budget is spent.

    Each round tries the left neighbour first, then the right one. A
    neighbour is admitted when it fits in ``budget`` or while fewer than
    ``min_visible`` buffers are shown; a refused direction stays closed for
    the rest of the pass. ``max_visible`` of 0 means no cap. ``cost`` must be
    deterministic because the renderer is called again for the final string.
    """

    ids = tuple(snapshot)
    total = len(ids)
    if active is None or active not in ids:
        # stale current buffer, e.g. in the middle of a delete
        if not ids:
            return VisibleSet()
        return VisibleSet.from_range(ids, 0, 0)

    if total <= min_visible:
        return VisibleSet(buffers=ids)

    target_min = max(min_visible, 1)
    cap = max_visible if max_visible > 0 else None

    def below_cap() -> bool:
        return cap is None or count < cap

    def present(index: Optional[int]) -> bool:
        return index is not None and 0 <= index < total

    center = ids.index(active)
    first = last = center
    used = cost(active)
    count = 1
    left: Optional[int] = center - 1
    right: Optional[int] = center + 1

    while below_cap() and (present(left) or present(right)):
        added = False

        if present(left):
            assert left is not None
            width = cost(ids[left])
            if used + width <= budget or count < target_min:
                first = left
                used += width
                count += 1
                left -= 1
                added = True
            else:
                left = None

        if below_cap() and present(right):
            assert right is not None
            width = cost(ids[right])
            if used + width <= budget or count < target_min:
                last = right
                used += width
                count += 1
                right += 1
                added = True
            else:
                right = None

        if not added and count >= target_min:
            break

    return VisibleSet.from_range(ids, first, last)


__all__ = [
    "RESERVED_MARGIN",
    "MIN_BUDGET",
    "VisibleSet",
    "width_budget",
    "select_visible",
]
