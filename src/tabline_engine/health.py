"""Health report describing whether a tabline engine is wired up correctly."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Literal

from tabline_engine.cache.icons import NoIconProvider
from tabline_engine.engine import TablineEngine

Level = Literal["ok", "warn", "error", "info"]

NARROW_WIDTH = 80


@dataclass(frozen=True, slots=True)
class HealthEntry:
    level: Level
    message: str
    advice: tuple[str, ...] = ()


@dataclass(slots=True)
class HealthSection:
    title: str
    entries: list[HealthEntry] = field(default_factory=list)

    def add(self, level: Level, message: str, *advice: str) -> None:
        self.entries.append(HealthEntry(level, message, tuple(advice)))


@dataclass(slots=True)
class HealthReport:
    sections: list[HealthSection] = field(default_factory=list)

    def start(self, title: str) -> HealthSection:
        section = HealthSection(title)
        self.sections.append(section)
        return section

    def entries(self) -> Iterator[HealthEntry]:
        for section in self.sections:
            yield from section.entries

    def count(self, level: Level) -> int:
        return sum(1 for entry in self.entries() if entry.level == level)

    @property
    def healthy(self) -> bool:
        return self.count("error") == 0

    def render(self) -> str:
        lines: list[str] = []
        for section in self.sections:
            lines.append(f"{section.title}")
            for entry in section.entries:
                lines.append(f"  - {entry.level.upper()} {entry.message}")
                lines.extend(f"    - {tip}" for tip in entry.advice)
        return "\n".join(lines)


def run_health_check(engine: TablineEngine) -> HealthReport:
    report = HealthReport()
    boundary = engine.boundary

    section = report.start("Tabline Configuration")
    if not engine.is_enabled:
        section.add(
            "warn",
            "Tabline is not enabled",
            "Call engine.setup({'enabled': True}) during startup",
        )
        return report
    section.add("ok", "Tabline is enabled")

    section = report.start("Icon Providers")
    provider = engine.icons.provider
    if isinstance(provider, NoIconProvider):
        section.add(
            "warn",
            "No icon provider found",
            "Pass icon_provider= when creating the engine for file icons",
            "Icons will not be displayed without a provider",
        )
    else:
        section.add("ok", f"Icon provider '{provider.name}' is configured")

    section = report.start("Buffer Status")
    listed_ids = boundary.list_buffers()
    if not listed_ids.ok:
        section.add("error", "Failed to list buffers")
        return report
    valid = [b for b in listed_ids.value_or(()) if boundary.is_valid(b).value_or(False)]
    listed = [b for b in valid if boundary.is_listed(b).value_or(False)]
    section.add("info", f"Total valid buffers: {len(valid)}")
    section.add("info", f"Listed buffers: {len(listed)}")
    if listed:
        section.add("ok", f"Found {len(listed)} listed buffer(s)")
    else:
        section.add(
            "warn",
            "No listed buffers found",
            "This is normal right after startup",
            "Open some files to see the tabline in action",
        )

    section = report.start("Display")
    if engine.source_installed:
        section.add("ok", "Display is reading from the tabline engine")
    else:
        section.add(
            "error",
            "Display has no tabline source",
            "Try calling setup again",
        )
    width = boundary.viewport_width()
    section.add("info", f"Viewport width: {width} columns")
    if width < NARROW_WIDTH:
        section.add(
            "warn",
            "Viewport is narrow",
            "Fewer buffers fit; overflow markers will show the rest",
        )

    return report


__all__ = [
    "HealthEntry",
    "HealthSection",
    "HealthReport",
    "run_health_check",
]
