"""Width-constrained selection of the visible buffer run."""

from .selector import (
    MIN_BUDGET,
    RESERVED_MARGIN,
    VisibleSet,
    select_visible,
    width_budget,
)

__all__ = [
    "MIN_BUDGET",
    "RESERVED_MARGIN",
    "VisibleSet",
    "select_visible",
    "width_budget",
]
