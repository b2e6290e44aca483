"""Modal screens for delete confirmation and help."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from pardu.version import __version__

KEY_HELP = "[enter] open    [backspace] back    [d] delete    [s] sort    [?] help    [ctrl+c] quit"


class DeleteConfirmModal(ModalScreen[bool]):
    DEFAULT_CSS = """
    DeleteConfirmModal {
        align: center middle;
    }

    DeleteConfirmModal > Vertical {
        width: 70;
        height: auto;
        border: round $error;
        background: $surface;
        padding: 1;
    }

    DeleteConfirmModal Horizontal {
        height: auto;
    }

    DeleteConfirmModal Button {
        width: 1fr;
        margin: 1 1 0 1;
    }
    """

    def __init__(self, name: str) -> None:
        self.target_name = name
        super().__init__()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(f'Are you sure you want to delete "{self.target_name}"?', markup=False, id="question")
            with Horizontal():
                yield Button("Cancel", id="cancel", variant="primary")
                yield Button("Delete", id="confirm", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm")


class HelpModal(ModalScreen[None]):
    DEFAULT_CSS = """
    HelpModal {
        align: center middle;
    }

    HelpModal > Vertical {
        width: 90;
        height: auto;
        border: round $accent;
        background: $surface;
        padding: 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(f"[b]pardu {__version__}[/b]\n\nParallel disk usage browser", markup=True)
            yield Static(KEY_HELP, markup=False, id="keys")
            yield Button("OK", id="close", variant="primary")

    def on_button_pressed(self, _event: Button.Pressed) -> None:
        self.dismiss(None)
