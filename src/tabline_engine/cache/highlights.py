"""Style registration cache keyed by derived style name."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from tabline_engine.host.boundary import HostBoundary
from tabline_engine.runtime import telemetry


class HighlightCache:
    """Registers each style name with the host at most once.

    A name stays bound to the colors it was first registered with until
    ``clear()``; callers derive names from the semantic role so the same role
    always collapses onto one entry.
    """

    def __init__(self, boundary: HostBoundary, *, logger_name: str | None = None) -> None:
        self._boundary = boundary
        self._registered: Dict[str, bool] = {}
        self._logger_name = logger_name

    def ensure_style(
        self,
        name: str,
        fg: Optional[str],
        bg: Optional[str],
        attrs: Optional[Mapping[str, object]] = None,
    ) -> str:
        if name in self._registered:
            return name

        result = self._boundary.set_style(name, fg, bg, attrs or {})
        if result.ok:
            self._registered[name] = True
            telemetry.record_event(
                "highlight.register",
                level="debug",
                data={"name": name, "fg": fg, "bg": bg},
                logger_name=self._logger_name,
            )
        # unregistered names still render with the host's default look
        return name

    def __contains__(self, name: object) -> bool:
        return name in self._registered

    def __len__(self) -> int:
        return len(self._registered)

    def clear(self) -> None:
        self._registered.clear()


__all__ = ["HighlightCache"]
