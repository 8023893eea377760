from __future__ import annotations

from typing import Optional

from tabline_engine.cache import (
    ByFilenameProvider,
    ByFiletypeProvider,
    HighlightCache,
    IconCache,
    NoIconProvider,
)
from tabline_engine.host import HostBoundary, MemoryHost


def make_cache() -> tuple[MemoryHost, HighlightCache]:
    host = MemoryHost()
    return host, HighlightCache(HostBoundary(host))


def test_highlight_registered_once_per_name() -> None:
    host, cache = make_cache()

    first = cache.ensure_style("TabLineActive", "#ffffff", "#000000")
    second = cache.ensure_style("TabLineActive", "#111111", "#222222")

    assert first == second == "TabLineActive"
    assert host.style_writes == ["TabLineActive"]
    assert host.styles["TabLineActive"].fg == "#ffffff"


def test_highlight_clear_forces_reregistration() -> None:
    host, cache = make_cache()
    cache.ensure_style("TabLineFill", "#ffffff", "#000000")

    cache.clear()
    cache.ensure_style("TabLineFill", "#eeeeee", "#000000")

    assert host.style_writes == ["TabLineFill", "TabLineFill"]
    assert host.styles["TabLineFill"].fg == "#eeeeee"


def test_highlight_failed_registration_is_retried() -> None:
    host, cache = make_cache()
    host.fail("set_style")

    name = cache.ensure_style("TabLineFill", "#ffffff", "#000000")

    assert name == "TabLineFill"
    assert "TabLineFill" not in cache

    host.heal()
    cache.ensure_style("TabLineFill", "#ffffff", "#000000")
    assert "TabLineFill" in cache
    assert len(cache) == 1


def test_icon_cache_without_provider() -> None:
    cache = IconCache()

    assert isinstance(cache.provider, NoIconProvider)
    assert cache.resolve("main.py", "py", "python") == ("", "Normal")


def test_icon_cache_memoizes_by_filetype() -> None:
    calls: list[str] = []

    def by_filetype(filetype: str) -> Optional[tuple[str, str]]:
        calls.append(filetype)
        return ("λ", "Identifier")

    cache = IconCache(ByFiletypeProvider(by_filetype))

    assert cache.resolve("a.py", "py", "python") == ("λ", "Identifier")
    assert cache.resolve("b.py", "py", "python") == ("λ", "Identifier")
    assert calls == ["python"]
    assert "python" in cache


def test_icon_cache_keys_on_extension_without_filetype() -> None:
    cache = IconCache(ByFilenameProvider(lambda name, ext: ("¶", "String")))

    cache.resolve("README.md", "md", "")

    assert "md" in cache
    assert len(cache) == 1


def test_icon_provider_error_yields_empty_icon() -> None:
    def broken(filetype: str) -> Optional[tuple[str, str]]:
        raise LookupError(filetype)

    cache = IconCache(ByFiletypeProvider(broken))

    assert cache.resolve("x.lua", "lua", "lua") == ("", "Normal")
    assert "lua" in cache


def test_filetype_provider_falls_back_to_filename() -> None:
    provider = ByFiletypeProvider(
        lambda ft: ("☾", "Function"),
        by_filename=lambda name, ext: ("◆", ext),
    )

    assert provider.lookup("data.json", "json", "") == ("◆", "json")
    assert provider.lookup("init.lua", "lua", "lua") == ("☾", "Function")


def test_icon_cache_clear() -> None:
    cache = IconCache(ByFilenameProvider(lambda name, ext: ("¶", "String")))
    cache.resolve("a.md", "md", "markdown")

    cache.clear()

    assert len(cache) == 0
