"""Directory listing screen for navigating and pruning a scanned tree."""

from __future__ import annotations

from rich.filesize import decimal
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from pardu.config.models import BrowserSettings, SortKey
from pardu.fs.entry import ROOT_LABEL, FileNode
from pardu.runtime_logging import get_runtime_logger
from pardu.screens.modals import KEY_HELP, DeleteConfirmModal, HelpModal

BAR_WIDTH = 20
UP_ROW_KEY = "up"
SORT_ORDER: tuple[SortKey, ...] = ("size", "items", "name")


def usage_bar(largest: int, part: int, width: int = BAR_WIDTH) -> str:
    filled = round(part / largest * width) if largest > 0 else 0
    return "[" + "#" * filled + " " * (width - filled) + "]"


def sort_entries(entries: list[FileNode], sort_by: SortKey) -> list[FileNode]:
    if sort_by == "name":
        return sorted(entries, key=lambda entry: entry.name.lower())
    if sort_by == "items":
        return sorted(entries, key=lambda entry: entry.count(), reverse=True)
    return sorted(entries, key=lambda entry: entry.size(), reverse=True)


class BrowserScreen(Screen[None]):
    BINDINGS = [
        Binding("backspace", "go_up", "Back"),
        Binding("d", "delete", "Delete"),
        Binding("s", "cycle_sort", "Sort"),
        Binding("question_mark", "help", "Help"),
    ]

    DEFAULT_CSS = """
    BrowserScreen DataTable {
        height: 1fr;
    }

    BrowserScreen #location {
        height: 1;
        padding: 0 1;
    }

    BrowserScreen #keys {
        height: 1;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        entries: list[FileNode],
        parent: FileNode | None,
        *,
        root_path: str,
        settings: BrowserSettings,
    ) -> None:
        self.entries = list(entries)
        self.current = parent
        self.root_path = root_path
        self.settings = settings
        self.sort_by: SortKey = settings.sort_by
        self.logger = get_runtime_logger()
        super().__init__()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", markup=False, id="location")
        yield DataTable(cursor_type="row", id="entries")
        yield Static(KEY_HELP, markup=False, id="keys")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_columns("Name", "Size", "", "Items")
        self.render_entries()
        table.focus()

    @property
    def row_offset(self) -> int:
        return 1 if self.can_go_up() else 0

    def can_go_up(self) -> bool:
        return self.current is not None and not self.current.is_root()

    def render_entries(self, select: FileNode | None = None) -> None:
        self.entries = sort_entries(self.entries, self.sort_by)
        table = self.query_one(DataTable)
        table.clear()

        if self.can_go_up():
            table.add_row(Text(ROOT_LABEL), "", "", "", key=UP_ROW_KEY)

        largest = max((entry.size() for entry in self.entries), default=0)
        for index, entry in enumerate(self.entries):
            size = entry.size()
            name_style = "bold deep_sky_blue1" if entry.is_dir else ""
            table.add_row(
                Text(entry.label(), style=name_style),
                Text(decimal(size), justify="right"),
                Text(usage_bar(largest, size)),
                Text(str(entry.count()), justify="right"),
                key=str(index),
            )

        if select is not None and select in self.entries:
            table.move_cursor(row=self.entries.index(select) + self.row_offset)

        self.query_one("#location", Static).update(self.location_text())

    def location_text(self) -> str:
        if self.current is None:
            return self.root_path
        return f"{decimal(self.current.size())}  {self.current.path()}"

    def selected_entry(self) -> FileNode | None:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        index = table.cursor_row - self.row_offset
        if index < 0 or index >= len(self.entries):
            return None
        return self.entries[index]

    def open_directory(self, directory: FileNode) -> None:
        self.current = directory
        self.entries = list(directory.children)
        self.render_entries()
        self.query_one(DataTable).move_cursor(row=0)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value == UP_ROW_KEY:
            self.action_go_up()
            return
        entry = self.selected_entry()
        if entry is not None and entry.is_dir:
            self.open_directory(entry)

    def action_go_up(self) -> None:
        if not self.can_go_up():
            return
        assert self.current is not None
        previous = self.current
        self.current = previous.parent
        assert self.current is not None
        self.entries = list(self.current.children)
        self.render_entries(select=previous)

    def action_cycle_sort(self) -> None:
        position = SORT_ORDER.index(self.sort_by)
        self.sort_by = SORT_ORDER[(position + 1) % len(SORT_ORDER)]
        self.render_entries(select=self.selected_entry())
        self.notify(f"Sorted by {self.sort_by}")

    def action_help(self) -> None:
        self.app.push_screen(HelpModal())

    def action_delete(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            return
        if not self.settings.confirm_delete:
            self.delete_entry(entry)
            return

        def _on_close(confirmed: bool | None) -> None:
            if confirmed:
                self.delete_entry(entry)

        self.app.push_screen(DeleteConfirmModal(entry.name), callback=_on_close)

    def delete_entry(self, entry: FileNode) -> bool:
        path = entry.path()
        try:
            entry.delete()
        except OSError as exc:
            self.logger.error("browser.delete.failed", path=path, error=str(exc))
            self.notify(f"Could not delete {entry.name}: {exc}", severity="error")
            return False

        self.entries = [item for item in self.entries if item is not entry]
        if self.current is not None:
            self.current.set_children(self.entries)
        self.logger.info("browser.delete.succeeded", path=path)
        self.render_entries()
        return True
