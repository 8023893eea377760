"""Executable Textual app that shows the tabline over a set of files."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.widgets import Footer, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use tabline_engine.adapters.textual.app"
    ) from exc

from tabline_engine.buffers.snapshot import extension
from tabline_engine.cache.icons import ByFilenameProvider
from tabline_engine.config import parse_command_args
from tabline_engine.engine import TablineEngine
from tabline_engine.runtime import telemetry

from .controller import TextualHost, TextualTablineAdapter, TextualUIHooks

DEMO_ICONS = {
    "py": ("λ", "Identifier"),
    "lua": ("☾", "Function"),
    "md": ("¶", "String"),
    "toml": ("⚙", "Type"),
    "json": ("◆", "Constant"),
}

DEMO_THEMES = (
    {
        "Normal": ("#c0caf5", "#1a1b26"),
        "Identifier": ("#7aa2f7", "#1a1b26"),
        "Function": ("#bb9af7", "#1a1b26"),
        "String": ("#9ece6a", "#1a1b26"),
        "Type": ("#2ac3de", "#1a1b26"),
        "Constant": ("#ff9e64", "#1a1b26"),
    },
    {
        "Normal": ("#4c4f69", "#eff1f5"),
        "Identifier": ("#1e66f5", "#eff1f5"),
        "Function": ("#8839ef", "#eff1f5"),
        "String": ("#40a02b", "#eff1f5"),
        "Type": ("#04a5e5", "#eff1f5"),
        "Constant": ("#fe640b", "#eff1f5"),
    },
)

FILETYPES = {"py": "python", "lua": "lua", "md": "markdown", "toml": "toml"}


def demo_icon(filename: str, ext: str) -> Optional[tuple[str, str]]:
    del filename
    return DEMO_ICONS.get(ext)


class TablineApp(App[None]):
    """Minimal Textual UI that renders the tabline above a buffer preview."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#tabline {
		height: 1;
	}

	#buffer-view {
		height: 1fr;
		padding: 1 2;
	}
	"""

    BINDINGS = [
        Binding("tab", "tabline_key('tab')", "Next", priority=True),
        Binding("shift+tab", "tabline_key('shift+tab')", "Previous", priority=True),
        Binding("alt+c", "tabline_key('alt+c')", "Close", priority=True),
        Binding("m", "toggle_modified", "Modified"),
        Binding("t", "cycle_theme", "Theme"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, paths: Sequence[str], *, options: Optional[dict] = None) -> None:
        super().__init__()
        self._paths = list(paths)
        self._options = options or {}
        self._theme_index = 0
        self._tabline: Static | None = None
        self._body: Static | None = None
        self.tabline_host = TextualHost(
            TextualUIHooks(
                update_tabline=self._refresh_tabline,
                notify=self._notify,
                log=self._log_line,
            )
        )
        self.tabline_host.apply_theme(DEMO_THEMES[0])
        self.engine = TablineEngine(
            self.tabline_host,
            defer=lambda task: self.call_later(task),
            icon_provider=ByFilenameProvider(demo_icon),
        )
        self.adapter = TextualTablineAdapter(self.engine, self.tabline_host)
        self.logger = telemetry.get_logger("tabline_engine.textual")

    def compose(self) -> ComposeResult:
        self._tabline = Static("", id="tabline")
        self._body = Static("", id="buffer-view")
        yield self._tabline
        yield self._body
        yield Footer()

    def on_mount(self) -> None:
        for path in self._paths:
            ft = FILETYPES.get(extension(path), "")
            self.tabline_host.open_buffer(os.path.abspath(path), filetype=ft)
            if os.path.isdir(path):
                self.tabline_host.directories.add(os.path.abspath(path))
        self.tabline_host.resize(self.size.width)
        self.engine.setup({"enabled": True, **self._options})

    def on_resize(self, event: events.Resize) -> None:
        self.adapter.resize(event.size.width)

    def action_tabline_key(self, key: str) -> None:
        self.adapter.handle_key(key)

    def action_tabline_click(self, handler: str, buffer_id: int) -> None:
        self.adapter.handle_click(handler, buffer_id)

    def action_toggle_modified(self) -> None:
        current = self.engine.boundary.current_buffer().value_or(None)
        if current is not None:
            self.tabline_host.set_modified(current, not self.tabline_host.buffer(current).modified)

    def action_cycle_theme(self) -> None:
        self._theme_index = (self._theme_index + 1) % len(DEMO_THEMES)
        self.tabline_host.apply_theme(DEMO_THEMES[self._theme_index])

    def _refresh_tabline(self) -> None:
        if self._tabline is not None:
            self._tabline.update(self.adapter.render())
        if self._body is not None:
            self._body.update(self._describe_current())

    def _describe_current(self) -> str:
        current = self.engine.boundary.current_buffer().value_or(None)
        if current is None:
            return "No buffers"
        buf = self.tabline_host.buffer(current)
        path = Path(buf.path)
        state = "modified" if buf.modified else "saved"
        preview = ""
        if path.is_file():
            with path.open(encoding="utf-8", errors="replace") as handle:
                preview = "".join(handle.readlines()[:40])
        return f"{buf.path} [{state}]\n\n{preview}"

    def _notify(self, message: str, level: str) -> None:
        severity = {"warning": "warning", "error": "error"}.get(level, "information")
        self.notify(message, severity=severity)

    def _log_line(self, line: str) -> None:
        self.logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the tabline Textual demo.")
    parser.add_argument("paths", nargs="*", help="Files to open as buffers")
    parser.add_argument(
        "--set",
        dest="settings",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Tabline option, e.g. --set min_visible=4 --set style.padding=' '",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    app = TablineApp(args.paths, options=parse_command_args(args.settings))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
