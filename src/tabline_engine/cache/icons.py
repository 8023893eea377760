"""Icon providers and the per-filetype icon cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

from tabline_engine.runtime import telemetry

DEFAULT_ICON_ROLE = "Normal"

Icon = Tuple[str, str]  # (glyph, style role)
FiletypeLookup = Callable[[str], Optional[Icon]]
FilenameLookup = Callable[[str, str], Optional[Icon]]


class IconProvider(Protocol):
    """Anything able to turn buffer metadata into an icon."""

    name: str

    def lookup(self, filename: str, extension: str, filetype: str) -> Optional[Icon]:
        ...


@dataclass(frozen=True, slots=True)
class NoIconProvider:
    """No icon library is available; every buffer renders without a glyph."""

    name: str = "none"

    def lookup(self, filename: str, extension: str, filetype: str) -> Optional[Icon]:
        del filename, extension, filetype
        return None


@dataclass(frozen=True, slots=True)
class ByFiletypeProvider:
    """Provider keyed on filetype, optionally falling back to the filename.

    Buffers without a filetype go through ``by_filename`` when given.
    """

    by_filetype: FiletypeLookup
    by_filename: Optional[FilenameLookup] = None
    name: str = "filetype"

    def lookup(self, filename: str, extension: str, filetype: str) -> Optional[Icon]:
        if filetype:
            return self.by_filetype(filetype)
        if self.by_filename is not None:
            return self.by_filename(filename, extension)
        return None


@dataclass(frozen=True, slots=True)
class ByFilenameProvider:
    """Provider keyed on the file name and extension."""

    by_filename: FilenameLookup
    name: str = "filename"

    def lookup(self, filename: str, extension: str, filetype: str) -> Optional[Icon]:
        del filetype
        return self.by_filename(filename, extension)


class IconCache:
    """Caches resolved icons by filetype (or extension when untyped)."""

    def __init__(
        self,
        provider: Optional[IconProvider] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        self.provider: IconProvider = provider or NoIconProvider()
        self._icons: Dict[str, Icon] = {}
        self._logger_name = logger_name

    def resolve(self, filename: str, extension: str, filetype: str) -> Icon:
        key = filetype if filetype else extension
        cached = self._icons.get(key)
        if cached is not None:
            return cached

        icon: Icon = ("", DEFAULT_ICON_ROLE)
        try:
            found = self.provider.lookup(filename, extension, filetype)
        except Exception as exc:
            telemetry.get_logger(self._logger_name).debug(
                f"icon lookup via {self.provider.name} failed for {key!r}: {exc}"
            )
            found = None
        if found:
            glyph, role = found
            icon = (glyph or "", role or DEFAULT_ICON_ROLE)

        self._icons[key] = icon
        telemetry.record_event(
            "icon.resolve",
            level="debug",
            data={"key": key, "glyph": icon[0], "role": icon[1]},
            logger_name=self._logger_name,
        )
        return icon

    def __contains__(self, key: object) -> bool:
        return key in self._icons

    def __len__(self) -> int:
        return len(self._icons)

    def clear(self) -> None:
        self._icons.clear()


__all__ = [
    "DEFAULT_ICON_ROLE",
    "Icon",
    "IconProvider",
    "NoIconProvider",
    "ByFiletypeProvider",
    "ByFilenameProvider",
    "IconCache",
]
