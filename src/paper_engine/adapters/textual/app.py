"""Executable Textual app that hosts the paper editor."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Sequence, Tuple

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static

from paper_engine.io.config import (
    ConfigWatcher,
    Settings,
    SettingsChannel,
    default_config_path,
)
from paper_engine.io.explorer import LocalExplorer
from paper_engine.modes.keymap_helpers import BACKSPACE_KEY, ENTER, ESC, TAB
from paper_engine.render import RendererError
from paper_engine.runtime.paper import Paper, SettingInput
from paper_engine.runtime.telemetry import Telemetry

from .controller import TextualPaperAdapter, TextualUIHooks

VERBOSITY = ("INFO", "DEBUG")

# Rows taken by the header, status line, sketch line and footer.
_CHROME_ROWS = 4

_NAMED_KEYS = {
    "escape": ESC,
    "enter": ENTER,
    "return": ENTER,
    "tab": TAB,
    "backspace": BACKSPACE_KEY,
}


@dataclass
class UIState:
    status_text: str = ""
    sketch_text: str = ""


class PaperApp(App[None]):
    """Textual UI embedding the paper editor."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#document-view {
		height: 1fr;
		border: round $accent;
		content-align: left top;
		overflow: hidden;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#sketch-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        telemetry: Telemetry,
        path: Optional[str] = None,
        config_path: Optional[Path] = None,
        log_level: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.telemetry = telemetry
        self._path = path
        self._state = UIState()
        self.channel = SettingsChannel()
        self.watcher: ConfigWatcher | None = None
        if config_path is not None:
            self.watcher = ConfigWatcher(config_path, self.channel, telemetry=telemetry)
        self.adapter = TextualPaperAdapter(
            TextualUIHooks(
                update_view=self._update_view,
                update_status=self._update_status,
                show_sketch=self._show_sketch,
                alert=self._alert,
            )
        )
        settings = self.watcher.settings if self.watcher else Settings()
        if log_level:
            settings = replace(settings, log_level=log_level)
        self.paper = Paper(
            self.adapter,
            LocalExplorer(),
            telemetry=telemetry,
            settings=settings,
            channel=self.channel,
        )
        self.adapter.bind(self.paper)
        self._view_widget: Static | None = None
        self._status_widget: Static | None = None
        self._sketch_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="document-area"):
            self._view_widget = Static("", id="document-view")
            yield self._view_widget
        self._status_widget = Static("", id="status-line")
        self._sketch_widget = Static("", id="sketch-line")
        yield self._status_widget
        yield self._sketch_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.adapter.resize(self.size.height - _CHROME_ROWS)
        self.paper.start(self._path)
        self.adapter.refresh()
        if self.watcher is not None:
            self.watcher.start()
        self.set_interval(0.1, self._poll_settings)

    async def on_unmount(self) -> None:
        if self.watcher is not None:
            self.watcher.stop()
        self.paper.close()

    def on_resize(self, event: events.Resize) -> None:
        self.adapter.resize(event.size.height - _CHROME_ROWS)

    async def on_key(self, event: events.Key) -> None:
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        result = self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()
        if result.quit:
            self.exit()

    def _poll_settings(self) -> None:
        for setting in self.channel.drain():
            self.paper.step(SettingInput(setting))

    def _update_view(self, text: Text) -> None:
        if self._view_widget:
            self._view_widget.update(text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_sketch(self, sketch: str) -> None:
        self._state.sketch_text = sketch
        if self._sketch_widget:
            self._sketch_widget.update(Text(sketch))

    def _alert(self, message: str) -> None:
        self.notify(message, severity="warning")

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key in {"ctrl+c", "ctrl+q"}:
            return None
        if key in _NAMED_KEYS:
            return (_NAMED_KEYS[key], None, ())
        modifiers = []
        if bool(getattr(event, "ctrl", False)):
            modifiers.append("CTRL")
        if bool(getattr(event, "alt", False) or getattr(event, "meta", False)):
            modifiers.append("ALT")
        if event.character and event.is_printable:
            return (event.character, event.character, ())
        return (key.upper(), None, tuple(modifiers))


def _log_level(verbose: int) -> Optional[str]:
    """Map repeated ``-v`` flags to a level; without any the environment decides."""

    if verbose <= 0:
        return None
    return VERBOSITY[min(verbose, len(VERBOSITY)) - 1]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="paper", description="Edit a file with filters and multiple marks."
    )
    parser.add_argument("file", nargs="?", help="File to open on startup")
    parser.add_argument(
        "--config",
        type=Path,
        default=default_config_path(),
        help="Settings file to read and watch (default: %(default)s)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Raise the log level (repeatable: -v INFO, -vv DEBUG)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    # The terminal belongs to the UI; logs go to PAPER_ENGINE_LOG_FILE.
    os.environ.setdefault("PAPER_ENGINE_DISABLE_CONSOLE", "1")
    level = _log_level(args.verbose)
    telemetry = Telemetry.from_env(level=level)
    app = PaperApp(
        telemetry=telemetry,
        path=args.file,
        config_path=args.config,
        log_level=level,
    )
    try:
        app.run()
    except RendererError as exc:
        telemetry.record_event("renderer.failure", level="error", data={"error": exc})
        raise SystemExit(f"paper: {exc}") from exc


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
