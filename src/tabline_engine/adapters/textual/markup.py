"""Translate statusline markup into ``rich.text.Text`` for Textual widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Union

from rich.style import Style
from rich.text import Text

StyleResolver = Callable[[str], Style]
ClickAction = Callable[[str, int], Optional[str]]


@dataclass(frozen=True, slots=True)
class StyleSwitch:
    name: Optional[str]  # None resets to the default style


@dataclass(frozen=True, slots=True)
class ClickStart:
    buffer_id: int
    handler: str


@dataclass(frozen=True, slots=True)
class ClickEnd:
    pass


@dataclass(frozen=True, slots=True)
class Align:
    pass


Token = Union[str, StyleSwitch, ClickStart, ClickEnd, Align]


def tokenize(markup: str) -> Iterator[Token]:
    """Split markup into literal runs and control items.

    Recognised items: ``%#Name#``, ``%*``, ``%N@handler@``, ``%X``, ``%=``
    and ``%%``. Anything else after ``%`` is kept as literal text.
    """

    literal: list[str] = []
    index = 0
    length = len(markup)

    def flush() -> Iterator[str]:
        if literal:
            yield "".join(literal)
            literal.clear()

    while index < length:
        char = markup[index]
        if char != "%" or index + 1 >= length:
            literal.append(char)
            index += 1
            continue

        nxt = markup[index + 1]
        if nxt == "%":
            literal.append("%")
            index += 2
        elif nxt == "#":
            end = markup.find("#", index + 2)
            if end == -1:
                literal.append(markup[index:])
                break
            yield from flush()
            yield StyleSwitch(markup[index + 2 : end])
            index = end + 1
        elif nxt == "*":
            yield from flush()
            yield StyleSwitch(None)
            index += 2
        elif nxt == "X":
            yield from flush()
            yield ClickEnd()
            index += 2
        elif nxt == "=":
            yield from flush()
            yield Align()
            index += 2
        elif nxt.isdigit():
            at = index + 1
            while at < length and markup[at].isdigit():
                at += 1
            close = markup.find("@", at + 1) if at < length and markup[at] == "@" else -1
            if close == -1:
                literal.append(markup[index:at])
                index = at
                continue
            yield from flush()
            yield ClickStart(int(markup[index + 1 : at]), markup[at + 1 : close])
            index = close + 1
        else:
            literal.append(char)
            index += 1

    yield from flush()


def statusline_to_text(
    markup: str,
    resolve_style: StyleResolver,
    *,
    click_action: Optional[ClickAction] = None,
    width: Optional[int] = None,
) -> Text:
    """Build a ``Text`` whose spans carry the resolved styles.

    ``click_action(handler, buffer_id)`` returns a Textual action string such
    as ``"app.tabline_click(3)"``; it is attached as ``@click`` meta so the
    clicked span triggers the action. With ``width`` set, the first ``%=``
    is padded with spaces in the style active at that point so the text
    fills ``width`` cells; later ``%=`` items are ignored.
    """

    left = Text(no_wrap=True, overflow="crop")
    right = Text(no_wrap=True, overflow="crop")
    target = left
    fill_style: Optional[Style] = None
    style = Style()
    click: Optional[Style] = None

    for token in tokenize(markup):
        if isinstance(token, str):
            target.append(token, style=style + click if click else style)
        elif isinstance(token, StyleSwitch):
            style = resolve_style(token.name) if token.name else Style()
        elif isinstance(token, ClickStart):
            action = click_action(token.handler, token.buffer_id) if click_action else None
            click = Style(meta={"@click": action}) if action else None
        elif isinstance(token, ClickEnd):
            click = None
        elif isinstance(token, Align) and target is left:
            fill_style = style
            target = right

    if fill_style is not None and width is not None:
        gap = width - left.cell_len - right.cell_len
        if gap > 0:
            left.append(" " * gap, style=fill_style)
    left.append_text(right)
    return left


__all__ = [
    "StyleSwitch",
    "ClickStart",
    "ClickEnd",
    "Align",
    "tokenize",
    "statusline_to_text",
]
