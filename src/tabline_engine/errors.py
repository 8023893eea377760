"""Error kinds raised and absorbed by the tabline engine."""

from __future__ import annotations

from typing import Any, Optional


class TablineError(RuntimeError):
    """Base class for every error the engine reports."""


class HostQueryFailure(TablineError):
    """A single host query (buffer, style, viewport) failed."""

    def __init__(self, query: str, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Host query '{query}' failed{detail}")
        self.query = query
        self.cause = cause


class InvalidConfig(TablineError):
    """A configuration field was out of range or of the wrong type."""

    def __init__(self, key: str, value: Any, reason: str) -> None:
        super().__init__(f"{key}: {reason} (got {value!r})")
        self.key = key
        self.value = value
        self.reason = reason


class RenderPipelineFailure(TablineError):
    """The snapshot/select/render pipeline raised; the rebuild is discarded."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Tabline update failed: {cause}")
        self.cause = cause


class ActionFailure(TablineError):
    """A click, close or navigation action could not complete."""

    def __init__(
        self,
        action: str,
        reason: str,
        *,
        buffer_id: Optional[int] = None,
        level: str = "warning",
    ) -> None:
        super().__init__(reason)
        self.action = action
        self.buffer_id = buffer_id
        self.reason = reason
        self.level = level


__all__ = [
    "TablineError",
    "HostQueryFailure",
    "InvalidConfig",
    "RenderPipelineFailure",
    "ActionFailure",
]
