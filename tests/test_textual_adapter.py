from __future__ import annotations

from typing import List

from rich.style import Style

from tabline_engine import ManualDeferrer, TablineEngine
from tabline_engine.adapters.textual import (
    TextualHost,
    TextualTablineAdapter,
    TextualUIHooks,
    statusline_to_text,
    tokenize,
)
from tabline_engine.adapters.textual.markup import Align, ClickEnd, ClickStart, StyleSwitch


def make_adapter() -> tuple[TextualTablineAdapter, TextualHost, ManualDeferrer, List[str]]:
    updates: List[str] = []
    hooks = TextualUIHooks(update_tabline=lambda: updates.append("tabline"))
    host = TextualHost(hooks)
    deferrer = ManualDeferrer()
    engine = TablineEngine(host, defer=deferrer)
    return TextualTablineAdapter(engine, host), host, deferrer, updates


def test_tokenize_statusline_items() -> None:
    tokens = list(tokenize("%3@tabline_click@%#TabLineActive#  a.py%X%*100%%%="))

    assert tokens == [
        ClickStart(3, "tabline_click"),
        StyleSwitch("TabLineActive"),
        "  a.py",
        ClickEnd(),
        StyleSwitch(None),
        "100%",
        Align(),
    ]


def test_tokenize_keeps_unknown_items_literal() -> None:
    assert list(tokenize("50%d %#Unclosed")) == ["50%d %#Unclosed"]


def test_statusline_to_text_styles_and_clicks() -> None:
    styles = {"A": Style(color="red"), "B": Style(color="blue")}

    text = statusline_to_text(
        "%#A#one%1@go@two%X%*three",
        lambda name: styles[name],
        click_action=lambda handler, buffer_id: f"app.{handler}({buffer_id})",
    )

    assert text.plain == "onetwothree"
    assert text.no_wrap
    clicked = [
        span for span in text.spans if isinstance(span.style, Style) and span.style.meta
    ]
    assert len(clicked) == 1
    assert text.plain[clicked[0].start : clicked[0].end] == "two"
    assert clicked[0].style.meta["@click"] == "app.go(1)"


def test_adapter_renders_engine_output() -> None:
    adapter, host, deferrer, updates = make_adapter()
    host.open_buffer("/p/a.py")
    host.open_buffer("/p/b.py")

    adapter.engine.setup()
    deferrer.drain()

    text = adapter.render()
    assert updates == ["tabline"]
    assert "a.py" in text.plain and "b.py" in text.plain
    assert "%" not in text.plain


def test_adapter_routes_keys_to_tabline_actions() -> None:
    adapter, host, deferrer, _ = make_adapter()
    first = host.open_buffer("/p/a.py")
    second = host.open_buffer("/p/b.py")
    adapter.engine.setup()
    deferrer.drain()

    assert adapter.handle_key("tab")
    assert host.get_current_buffer() == first
    assert adapter.handle_key("tab", modifiers=("shift",))
    assert host.get_current_buffer() == second
    assert not adapter.handle_key("x")


def test_adapter_routes_clicks() -> None:
    adapter, host, deferrer, _ = make_adapter()
    first = host.open_buffer("/p/a.py")
    second = host.open_buffer("/p/b.py")
    adapter.engine.setup()
    deferrer.drain()

    assert adapter.handle_click("tabline_click", first)
    assert host.get_current_buffer() == first
    assert adapter.handle_click("tabline_close", second)
    deferrer.drain()
    assert not host.is_valid(second)
    assert not adapter.handle_click("unknown", first)
    assert adapter.click_action("unknown", first) is None
    assert adapter.click_action("tabline_click", first) == (
        f"app.tabline_click('tabline_click', {first})"
    )


def test_notifications_reach_hooks() -> None:
    notes: List[tuple[str, str]] = []
    hooks = TextualUIHooks(
        update_tabline=lambda: None,
        notify=lambda message, level: notes.append((level, message)),
    )
    host = TextualHost(hooks)
    engine = TablineEngine(host, defer=ManualDeferrer())

    engine.handle_click(7)

    assert notes == [("warning", "Buffer 7 is no longer available")]


def test_statusline_fill_pads_to_width() -> None:
    fill = Style(bgcolor="blue")
    styles = {"Fill": fill}

    text = statusline_to_text("left%#Fill#%=right", lambda name: styles[name], width=20)

    assert text.plain == "left" + " " * 11 + "right"
    padding = [span for span in text.spans if span.start == 4]
    assert padding and padding[0].style == fill


def test_statusline_fill_ignored_without_width() -> None:
    text = statusline_to_text("a%=b", lambda name: Style())

    assert text.plain == "ab"


def test_adapter_render_fills_viewport_width() -> None:
    adapter, host, deferrer, _ = make_adapter()
    host.open_buffer("/p/a.py")
    adapter.engine.setup()
    deferrer.drain()

    assert adapter.render().cell_len == host.viewport_width()
