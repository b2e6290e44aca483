"""pardu Textual application shell."""

from __future__ import annotations

import asyncio
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header

from pardu.config.models import AppSettings
from pardu.config.store import SettingsStore
from pardu.fs.entry import FileNode
from pardu.fs.pool import ScanError
from pardu.fs.progress import ScanProgress
from pardu.fs.scanner import scan_directory
from pardu.runtime_logging import configure_runtime_logging
from pardu.screens.browser import BrowserScreen
from pardu.screens.scanning import ScanningScreen


class ParduApp(App[None]):
    TITLE = "pardu"
    SUB_TITLE = "Parallel disk usage browser"

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        root_path: Path,
        concurrency: int | None = None,
        threshold_mb: int | None = None,
        settings: AppSettings | None = None,
        log_level: str | None = None,
        log_file: str | Path | None = None,
    ) -> None:
        self.root_path = root_path.expanduser().resolve()
        self.logger = configure_runtime_logging(level=log_level, log_file=log_file)
        self.settings = settings if settings is not None else SettingsStore().load()

        scan_settings = self.settings.scan.with_overrides(concurrency=concurrency, threshold_mb=threshold_mb)
        self.concurrency = scan_settings.concurrency
        self.threshold = scan_settings.threshold_bytes
        self.progress = ScanProgress()
        self.scan_result: list[FileNode] | None = None

        self.logger.info(
            "app.initialized",
            root_path=str(self.root_path),
            concurrency=self.concurrency,
            threshold=self.threshold,
        )
        super().__init__()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        self.theme = self.settings.appearance.theme
        self.sub_title = str(self.root_path)
        self.push_screen(ScanningScreen(self.progress, str(self.root_path)))
        self.run_worker(self._scan_and_browse(), group="scan", exclusive=True)

    async def _scan_and_browse(self) -> None:
        try:
            entries = await asyncio.to_thread(
                scan_directory,
                self.root_path,
                self.concurrency,
                self.threshold,
                progress=self.progress,
            )
        except ScanError as exc:
            self.logger.error("app.scan.failed", root_path=str(self.root_path), error=str(exc))
            self.exit(return_code=1, message=str(exc))
            return

        self.scan_result = entries
        parent = entries[0].parent if entries else None
        await self.switch_screen(
            BrowserScreen(
                entries,
                parent,
                root_path=str(self.root_path),
                settings=self.settings.browser,
            )
        )
