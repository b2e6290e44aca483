from __future__ import annotations

import asyncio
import tempfile
import unittest
import warnings
from pathlib import Path
from typing import Any
from unittest.mock import patch

from textual.widgets import Button, DataTable

from pardu.app import ParduApp
from pardu.config.models import AppSettings
from pardu.fs.entry import FileNode
from pardu.fs.grouping import MB
from pardu.fs.pool import ScanError
from pardu.screens.browser import BrowserScreen, usage_bar
from pardu.screens.modals import DeleteConfirmModal, HelpModal
from pardu.screens.scanning import shorten_path

warnings.filterwarnings("ignore", category=ResourceWarning)


def sized_file(path: Path, size: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        handle.truncate(size)


class HelperTests(unittest.TestCase):
    def test_usage_bar(self) -> None:
        self.assertEqual(usage_bar(100, 100), "[" + "#" * 20 + "]")
        self.assertEqual(usage_bar(100, 50), "[" + "#" * 10 + " " * 10 + "]")
        self.assertEqual(usage_bar(0, 0), "[" + " " * 20 + "]")

    def test_shorten_path(self) -> None:
        self.assertEqual(shorten_path("/short"), "/short")
        long_path = "/" + "x" * 60
        shortened = shorten_path(long_path)
        self.assertEqual(len(shortened), 40)
        self.assertTrue(shortened.startswith("..."))
        self.assertTrue(long_path.endswith(shortened[3:]))


class ParduAppE2ETests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        sized_file(self.root / "a.txt", 2 * MB)
        sized_file(self.root / "b.txt", MB // 2)
        sized_file(self.root / "sub" / "c.txt", 10 * MB)

    async def asyncTearDown(self) -> None:
        self.tmp.cleanup()

    def _make_app(self, **kwargs: Any) -> ParduApp:
        settings = kwargs.pop("settings", None) or AppSettings()
        return ParduApp(
            root_path=self.root,
            concurrency=2,
            settings=settings,
            log_level="off",
            **kwargs,
        )

    async def _wait_for_browser(self, app: ParduApp, pilot) -> BrowserScreen:  # noqa: ANN001
        for _ in range(100):
            if isinstance(app.screen, BrowserScreen):
                await pilot.pause()
                return app.screen
            await pilot.pause(0.05)
        raise AssertionError("browser screen never appeared")

    def _select(self, screen: BrowserScreen, name: str) -> FileNode:
        entry = next(item for item in screen.entries if item.name == name)
        screen.query_one(DataTable).move_cursor(row=screen.entries.index(entry) + screen.row_offset)
        return entry

    async def test_scan_lands_on_browser_sorted_by_size(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            screen = await self._wait_for_browser(app, pilot)
            table = screen.query_one(DataTable)

            self.assertEqual(table.row_count, 3)
            self.assertEqual([entry.name for entry in screen.entries], ["sub", "a.txt", "<Files smaller than 1MB>"])
            self.assertFalse(screen.can_go_up())
            self.assertIn(str(self.root), screen.location_text())
            self.assertIsNotNone(app.scan_result)

    async def test_navigate_into_directory_and_back(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            screen = await self._wait_for_browser(app, pilot)
            sub = next(entry for entry in screen.entries if entry.name == "sub")

            screen.open_directory(sub)
            await pilot.pause()
            table = screen.query_one(DataTable)
            self.assertIs(screen.current, sub)
            self.assertTrue(screen.can_go_up())
            self.assertEqual(table.row_count, 2)
            self.assertEqual([entry.name for entry in screen.entries], ["c.txt"])

            screen.action_go_up()
            await pilot.pause()
            self.assertTrue(screen.current is not None and screen.current.is_root())
            self.assertEqual(table.row_count, 3)
            self.assertIs(screen.selected_entry(), sub)

    async def test_delete_without_confirmation(self) -> None:
        settings = AppSettings()
        settings.browser.confirm_delete = False
        app = self._make_app(settings=settings)
        async with app.run_test() as pilot:
            screen = await self._wait_for_browser(app, pilot)
            self._select(screen, "a.txt")
            await pilot.pause()

            screen.action_delete()
            await pilot.pause()

            self.assertFalse((self.root / "a.txt").exists())
            self.assertEqual(screen.query_one(DataTable).row_count, 2)
            assert screen.current is not None
            self.assertEqual(screen.current.size(), 10 * MB + MB // 2)
            self.assertEqual(screen.current.count(), 4)

    async def test_delete_with_confirmation_modal(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            screen = await self._wait_for_browser(app, pilot)
            self._select(screen, "sub")
            await pilot.pause()

            screen.action_delete()
            await pilot.pause(0.1)
            self.assertIsInstance(app.screen, DeleteConfirmModal)
            app.screen.query_one("#confirm", Button).press()
            await pilot.pause(0.1)

            self.assertIs(app.screen, screen)
            self.assertFalse((self.root / "sub").exists())
            self.assertEqual([entry.name for entry in screen.entries], ["a.txt", "<Files smaller than 1MB>"])

    async def test_cancelled_delete_keeps_entry(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            screen = await self._wait_for_browser(app, pilot)
            self._select(screen, "a.txt")
            await pilot.pause()

            screen.action_delete()
            await pilot.pause(0.1)
            app.screen.query_one("#cancel", Button).press()
            await pilot.pause(0.1)

            self.assertTrue((self.root / "a.txt").exists())
            self.assertEqual(len(screen.entries), 3)

    async def test_failed_delete_leaves_tree_untouched(self) -> None:
        settings = AppSettings()
        settings.browser.confirm_delete = False
        app = self._make_app(settings=settings)
        with patch.object(FileNode, "delete", side_effect=PermissionError(13, "Permission denied")):
            with patch.object(app, "notify") as notify_mock:
                async with app.run_test() as pilot:
                    screen = await self._wait_for_browser(app, pilot)
                    self._select(screen, "a.txt")
                    await pilot.pause()
                    screen.action_delete()
                    await pilot.pause()

                    self.assertEqual(len(screen.entries), 3)
                    assert screen.current is not None
                    self.assertEqual(screen.current.count(), 5)

        self.assertTrue((self.root / "a.txt").exists())
        notify_mock.assert_called()
        args, kwargs = notify_mock.call_args
        self.assertIn("Could not delete a.txt", args[0])
        self.assertEqual(kwargs.get("severity"), "error")

    async def test_cycle_sort_and_help(self) -> None:
        app = self._make_app()
        async with app.run_test() as pilot:
            screen = await self._wait_for_browser(app, pilot)

            screen.action_cycle_sort()
            await pilot.pause()
            self.assertEqual(screen.sort_by, "items")
            self.assertEqual(screen.entries[0].name, "sub")

            screen.action_cycle_sort()
            await pilot.pause()
            self.assertEqual(screen.sort_by, "name")
            self.assertEqual([entry.name for entry in screen.entries][0], "<Files smaller than 1MB>")

            screen.action_help()
            await pilot.pause(0.1)
            self.assertIsInstance(app.screen, HelpModal)
            app.screen.query_one("#close", Button).press()
            await pilot.pause(0.1)
            self.assertIs(app.screen, screen)

    async def test_command_line_values_override_scan_settings(self) -> None:
        settings = AppSettings()
        settings.scan.threshold_mb = 4
        settings.scan.concurrency = 7

        app = ParduApp(root_path=self.root, threshold_mb=2, settings=settings, log_level="off")
        self.assertEqual(app.threshold, 2 * MB)
        self.assertEqual(app.concurrency, 7)

        app = ParduApp(root_path=self.root, concurrency=1, settings=settings, log_level="off")
        self.assertEqual(app.threshold, 4 * MB)
        self.assertEqual(app.concurrency, 1)

    async def test_scan_failure_exits_with_error(self) -> None:
        app = self._make_app()
        with patch("pardu.app.scan_directory", side_effect=ScanError("boom")):
            async with app.run_test():
                for _ in range(40):
                    if app.return_code is not None:
                        break
                    await asyncio.sleep(0.05)

        self.assertEqual(app.return_code, 1)


if __name__ == "__main__":
    unittest.main()
