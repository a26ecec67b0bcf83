"""Modal dialogs for the editor: confirmation and file path prompts."""

from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label


class ConfirmScreen(ModalScreen[bool]):
    """Ask a yes/no question. Dismisses with True on confirm."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog_box"):
            yield Label(self.question, id="dialog_question")
            with Horizontal(id="dialog_buttons"):
                yield Button("Yes", variant="error", id="btn_yes")
                yield Button("No", id="btn_no")

    def on_mount(self) -> None:
        self.query_one("#btn_no", Button).focus()

    @on(Button.Pressed, "#btn_yes")
    def _yes(self, event: Button.Pressed) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#btn_no")
    def _no(self, event: Button.Pressed) -> None:
        self.dismiss(False)

    def action_cancel(self) -> None:
        self.dismiss(False)


class PathPromptScreen(ModalScreen[Optional[str]]):
    """Prompt for a file path. Dismisses with None on cancel."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    def __init__(self, title: str, value: str = "") -> None:
        super().__init__()
        self.title_text = title
        self.initial_value = value

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog_box"):
            yield Label(self.title_text, id="dialog_question")
            yield Input(value=self.initial_value, placeholder="Path to sermon file…", id="path_input")
            with Horizontal(id="dialog_buttons"):
                yield Button("OK", variant="primary", id="btn_ok")
                yield Button("Cancel", id="btn_cancel")

    def on_mount(self) -> None:
        self.query_one("#path_input", Input).focus()

    def _submit(self, value: str) -> None:
        value = value.strip()
        self.dismiss(value if value else None)

    @on(Input.Submitted, "#path_input")
    def _submitted(self, event: Input.Submitted) -> None:
        self._submit(event.value)

    @on(Button.Pressed, "#btn_ok")
    def _ok(self, event: Button.Pressed) -> None:
        self._submit(self.query_one("#path_input", Input).value)

    @on(Button.Pressed, "#btn_cancel")
    def _cancel(self, event: Button.Pressed) -> None:
        self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
