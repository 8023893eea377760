from __future__ import annotations

from typing import Optional

from tabline_engine.buffers import SnapshotBuilder
from tabline_engine.cache import ByFiletypeProvider, HighlightCache, IconCache
from tabline_engine.color import blend
from tabline_engine.config import TablineConfig, validate_config
from tabline_engine.host import HostBoundary, MemoryHost
from tabline_engine.layout import VisibleSet
from tabline_engine.render import (
    ACTIVE_STYLE,
    INACTIVE_STYLE,
    SegmentRenderer,
    TablineAssembler,
    icon_style_name,
)

THEME = {
    "Normal": ("#c0caf5", "#1a1b26"),
    "Identifier": ("#7aa2f7", "#1a1b26"),
}


def python_icon(filetype: str) -> Optional[tuple[str, str]]:
    return ("λ", "Identifier") if filetype == "python" else None


def make_renderer(
    host: MemoryHost, config: TablineConfig = TablineConfig()
) -> tuple[SegmentRenderer, HighlightCache]:
    boundary = HostBoundary(host)
    highlights = HighlightCache(boundary)
    renderer = SegmentRenderer(
        boundary,
        highlights,
        IconCache(ByFiletypeProvider(python_icon)),
        lambda: config,
    )
    return renderer, highlights


def make_host() -> tuple[MemoryHost, int, int]:
    host = MemoryHost(theme=THEME)
    first = host.open_buffer("/proj/main.py", filetype="python")
    second = host.open_buffer("/proj/notes.txt", enter=False)
    return host, first, second


def snapshot_of(host: MemoryHost):
    return SnapshotBuilder(HostBoundary(host)).build(hide_misc=True)


def test_active_segment_markup() -> None:
    host, first, _second = make_host()
    renderer, _ = make_renderer(host)

    segment = renderer.render(first, snapshot_of(host), first)

    icon_style = icon_style_name(first, True)
    assert segment == (
        f"%{first}@tabline_click@%#{ACTIVE_STYLE}#  "
        f"%#{icon_style}#λ %#{ACTIVE_STYLE}#main.py"
        f" %{first}@tabline_close@×%X  %#TabLineSeparator#│%*"
    )


def test_inactive_segment_without_icon() -> None:
    host, first, second = make_host()
    renderer, _ = make_renderer(host)

    segment = renderer.render(second, snapshot_of(host), first)

    assert segment.startswith(f"%{second}@tabline_click@%#{INACTIVE_STYLE}#  ")
    assert f"%#{icon_style_name(second, False)}#%#{INACTIVE_STYLE}#notes.txt" in segment


def test_modified_buffer_shows_indicator_instead_of_close() -> None:
    host, first, _second = make_host()
    host.buffer(first).modified = True
    renderer, _ = make_renderer(host)

    segment = renderer.render(first, snapshot_of(host), first)

    assert "main.py ●  " in segment
    assert "tabline_close" not in segment


def test_render_is_idempotent() -> None:
    host, first, second = make_host()
    renderer, _ = make_renderer(host)
    snapshot = snapshot_of(host)

    assert renderer.render(second, snapshot, first) == renderer.render(
        second, snapshot, first
    )
    assert renderer.render(first, snapshot, first) == renderer.render(
        first, snapshot, first
    )


def test_styles_derive_from_normal_colors() -> None:
    host, first, second = make_host()
    renderer, _ = make_renderer(host)
    snapshot = snapshot_of(host)

    renderer.render(first, snapshot, first)
    renderer.render(second, snapshot, first)

    active = host.styles[ACTIVE_STYLE]
    inactive = host.styles[INACTIVE_STYLE]
    assert active.bg == blend("#ffffff", "#1a1b26", 0.12)
    assert active.fg == "#c0caf5"
    assert active.attrs == {"bold": False}
    assert inactive.fg == blend("#c0caf5", "#1a1b26", 0.5)
    assert inactive.bg == "#1a1b26"
    assert host.styles[icon_style_name(first, True)].fg == "#7aa2f7"


def test_inactive_icon_is_tinted_toward_background() -> None:
    host = MemoryHost(theme=THEME)
    active = host.open_buffer("/proj/a.txt")
    other = host.open_buffer("/proj/b.py", filetype="python", enter=False)
    renderer, _ = make_renderer(host)

    renderer.render(other, snapshot_of(host), active)

    assert host.styles[icon_style_name(other, False)].fg == blend(
        "#7aa2f7", "#1a1b26", 0.7
    )


def test_missing_normal_style_uses_fallback_colors() -> None:
    host = MemoryHost(theme={})
    first = host.open_buffer("/proj/a.txt")
    renderer, _ = make_renderer(host)

    renderer.render(first, snapshot_of(host), first)

    assert host.styles[ACTIVE_STYLE].fg == "#c0caf5"


def test_custom_glyphs_and_padding() -> None:
    host, first, _second = make_host()
    config = validate_config(
        {"separator": "|", "close": "x", "style": {"padding": " "}}
    ).config
    renderer, _ = make_renderer(host, config)

    segment = renderer.render(first, snapshot_of(host), first)

    assert segment.endswith(" %#TabLineSeparator#|%*")
    assert "@tabline_close@x%X" in segment


def test_assembler_adds_overflow_markers_and_fill() -> None:
    host = MemoryHost(theme=THEME)
    ids = [host.open_buffer(f"/proj/f{i}.txt", enter=False) for i in range(5)]
    renderer, highlights = make_renderer(host)
    assembler = TablineAssembler(renderer, highlights)
    snapshot = snapshot_of(host)
    visible = VisibleSet.from_range(ids, 1, 3)

    line = assembler.assemble(snapshot, visible, ids[2])

    assert line.startswith("%#TabLineOverflow#   ‹  ")
    assert "%#TabLineOverflow#  ›   " in line
    assert line.endswith("%#TabLineFill#%=")
    assert f"%{ids[0]}@" not in line
    assert f"%{ids[2]}@tabline_click@" in line


def test_assembler_without_overflow() -> None:
    host = MemoryHost(theme=THEME)
    ids = [host.open_buffer(f"/proj/f{i}.txt", enter=False) for i in range(2)]
    renderer, highlights = make_renderer(host)
    assembler = TablineAssembler(renderer, highlights)

    line = assembler.assemble(snapshot_of(host), VisibleSet(tuple(ids)), ids[0])

    assert line.startswith("%#TabLineOverflow#  %")
    assert "›" not in line
