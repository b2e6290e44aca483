"""Progress screen shown while the scan runs."""

from __future__ import annotations

import time

from rich.filesize import decimal
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static

from pardu.fs.progress import ScanProgress

REFRESH_INTERVAL_S = 0.5
PATH_WIDTH = 40


def shorten_path(path: str, width: int = PATH_WIDTH) -> str:
    if len(path) <= width:
        return path
    return "..." + path[len(path) - (width - 3) :]


class ScanningScreen(Screen[None]):
    DEFAULT_CSS = """
    ScanningScreen {
        align: center middle;
    }

    ScanningScreen > Vertical {
        width: 70;
        height: auto;
        border: round $primary;
        background: $surface;
        padding: 1 2;
    }
    """

    def __init__(self, progress: ScanProgress, root_path: str) -> None:
        self.progress = progress
        self.root_path = root_path
        self._ticks = 0
        self._started = time.monotonic()
        super().__init__()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self.status_text(), markup=False, id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.set_interval(REFRESH_INTERVAL_S, self._tick)

    def status_text(self) -> str:
        snapshot = self.progress.snapshot()
        dots = "." * (self._ticks % 7)
        path = shorten_path(snapshot.current_path or self.root_path)
        elapsed = int(time.monotonic() - self._started)
        return (
            f"Scanning {dots:<6}\n"
            f"Path: {path}\n"
            f"Size: {decimal(snapshot.total_size)}    Items: {snapshot.total_items}\n"
            f"Time {elapsed}s"
        )

    def _tick(self) -> None:
        self._ticks += 1
        self.query_one("#status", Static).update(self.status_text())
