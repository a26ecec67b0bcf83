"""Sermon editor screen.

Scripture and main idea at the top, stopwatch beside them, and the
seven section cards below. Live mode highlights one section at a time,
moved with the arrow keys, and suppresses editing.
"""

from pathlib import Path
from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Label, Static, TextArea

from sprout.app.config import AppConfig
from sprout.app.logging_config import get_logger
from sprout.app.models import Document, GeneratedContent, Section
from sprout.app.screens.dialogs import ConfirmScreen, PathPromptScreen
from sprout.app.screens.section_card import SectionCard
from sprout.app.sections import SECTION_ROWS, SectionId
from sprout.app.services.generation import GenerationBridge, GenerationError
from sprout.app.services.navigation import LiveNavigator
from sprout.app.services.timer import SermonTimer, format_clock
from sprout.app.state import EditorStore
from sprout.app.storage import InvalidImportFormat, export_document, read_import_file

logger = get_logger(__name__)


class SectionList(VerticalScroll, can_focus=False):
    """Scrollable column of section rows."""


class EditorScreen(Screen):
    """Screen for writing and presenting a sermon."""

    BINDINGS = [
        Binding("ctrl+l", "toggle_live", "Live", priority=True),
        Binding("ctrl+g", "generate", "Generate", priority=True),
        Binding("ctrl+s", "export", "Export", priority=True),
        Binding("ctrl+o", "import", "Import", priority=True),
        Binding("ctrl+t", "reset_timer", "Reset Timer", priority=True),
        Binding("ctrl+r", "reset", "Clear All", priority=True),
        Binding("f2", "toggle_section", "Collapse"),
        Binding("down", "advance", "Next", show=False),
        Binding("right", "advance", "Next", show=False),
        Binding("up", "retreat", "Previous", show=False),
        Binding("left", "retreat", "Previous", show=False),
    ]

    def __init__(
        self,
        store: EditorStore,
        navigator: LiveNavigator,
        timer: SermonTimer,
        bridge: GenerationBridge,
        config: AppConfig,
    ):
        """Initialize the screen.

        Args:
            store: Editor state store
            navigator: Live mode navigator
            timer: Sermon stopwatch
            bridge: Draft generation bridge
            config: Application configuration
        """
        super().__init__()
        self.store = store
        self.navigator = navigator
        self.timer = timer
        self.bridge = bridge
        self.config = config
        self.generating = False

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        document = self.store.document
        yield Header()

        with Horizontal(id="top"):
            with Vertical(id="scripture"):
                yield Input(value=document.reference, placeholder="Reference...", id="reference")
                yield TextArea(document.verses, soft_wrap=True, id="verses")
            with Vertical(id="timer_panel"):
                yield Static(f"Local {format_clock()}", id="clock")
                yield Static(self.timer.display, id="elapsed")
                yield Label("", id="live_status")

        with Horizontal(id="statement_row"):
            yield Label("ONE POINT", id="statement_label")
            yield Input(value=document.statement, placeholder="State your main idea...", id="statement")
            yield Button("Generate", id="btn_generate", variant="primary")

        with SectionList(id="sections"):
            for row in SECTION_ROWS:
                with Horizontal(classes="section-row"):
                    for section_id in row:
                        yield SectionCard(document.section(section_id))

        yield Footer()

    def on_mount(self) -> None:
        """Handle mount event."""
        logger.info("EditorScreen mounted")
        self.store.add_listener("section", self._on_section_changed)
        self.store.add_listener("document", self._on_document_replaced)
        self.store.add_listener("save_failed", self._on_save_failed)
        self.navigator.set_scroll_callback(self._scroll_to_section)

        # Clock and stopwatch tick independently
        self.set_interval(1.0, self._tick_clock)
        self.set_interval(1.0, self._tick_timer)
        self._refresh_live()

    def on_unmount(self) -> None:
        self.store.remove_listener("section", self._on_section_changed)
        self.store.remove_listener("document", self._on_document_replaced)
        self.store.remove_listener("save_failed", self._on_save_failed)
        self.navigator.set_scroll_callback(None)

    def _card(self, section_id: SectionId) -> SectionCard:
        return self.query_one(f"#{section_id.value}", SectionCard)

    # Store -> view

    def _on_section_changed(self, section: Section) -> None:
        self._card(section.id).update_section(section)

    def _on_document_replaced(self, document: Document) -> None:
        reference = self.query_one("#reference", Input)
        if reference.value != document.reference:
            reference.value = document.reference

        verses = self.query_one("#verses", TextArea)
        if verses.text != document.verses:
            verses.load_text(document.verses)

        statement = self.query_one("#statement", Input)
        if statement.value != document.statement:
            statement.value = document.statement

        for section in document.ordered_sections():
            self._card(section.id).update_section(section)

    def _on_save_failed(self, error: OSError) -> None:
        self.notify(f"Could not save changes: {error}", severity="error")

    # View -> store

    def on_input_changed(self, event: Input.Changed) -> None:
        """Write reference and main idea edits through to the store."""
        if event.input.id == "reference" and event.value != self.store.reference:
            self.store.set_reference(event.value)
        elif event.input.id == "statement" and event.value != self.store.statement:
            self.store.set_statement(event.value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Write scripture edits through to the store."""
        if event.text_area.id == "verses" and event.text_area.text != self.store.verses:
            self.store.set_verses(event.text_area.text)

    def on_section_card_content_changed(self, event: SectionCard.ContentChanged) -> None:
        if self.navigator.is_active:
            return
        self.store.set_section_content(event.section_id, event.text)

    def on_section_card_header_clicked(self, event: SectionCard.HeaderClicked) -> None:
        if self.navigator.is_active:
            self.navigator.activate(event.section_id)
            self._refresh_live()
        else:
            self.store.toggle_expanded(event.section_id)

    def on_section_card_selected(self, event: SectionCard.Selected) -> None:
        if self.navigator.is_active:
            self.navigator.activate(event.section_id)
            self._refresh_live()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "btn_generate":
            self.action_generate()

    # Live mode

    def _refresh_live(self) -> None:
        live = self.navigator.is_active
        cursor = self.navigator.cursor

        for card in self.query(SectionCard):
            card.set_live(live, card.section_id == cursor)

        self.query_one("#reference", Input).disabled = live
        self.query_one("#verses", TextArea).disabled = live
        self.query_one("#statement", Input).disabled = live
        self.query_one("#btn_generate", Button).disabled = live

        status = self.query_one("#live_status", Label)
        status.update("[bold red]● LIVE[/bold red]" if live else "")
        self.set_class(live, "live")

    def _scroll_to_section(self, section_id: SectionId) -> None:
        self.query_one("#sections", SectionList).scroll_to_center(self._card(section_id))

    def action_toggle_live(self) -> None:
        """Enter or leave live mode; the stopwatch follows live mode."""
        if self.navigator.toggle():
            self.timer.start()
            self.set_focus(None)
            self._scroll_to_section(self.navigator.cursor)
        else:
            self.timer.stop()
        self._refresh_live()
        self._update_elapsed()

    def action_advance(self) -> None:
        if self.navigator.advance():
            self._refresh_live()

    def action_retreat(self) -> None:
        if self.navigator.retreat():
            self._refresh_live()

    # Timer

    def _tick_clock(self) -> None:
        self.query_one("#clock", Static).update(f"Local {format_clock()}")

    def _tick_timer(self) -> None:
        self.timer.tick()
        self._update_elapsed()

    def _update_elapsed(self) -> None:
        elapsed = self.query_one("#elapsed", Static)
        elapsed.update(self.timer.display)
        elapsed.set_class(self.timer.running, "running")

    def action_reset_timer(self) -> None:
        """Zero the stopwatch, leaving live mode if it was running."""
        if self.timer.running and self.navigator.is_active:
            self.navigator.disable()
            self._refresh_live()
        self.timer.reset()
        self._update_elapsed()

    # Sections

    def action_toggle_section(self) -> None:
        """Collapse or expand the section being edited."""
        focused = self.focused
        while focused is not None and not isinstance(focused, SectionCard):
            focused = focused.parent
        if focused is not None:
            self.store.toggle_expanded(focused.section_id)

    # Generation

    def action_generate(self) -> None:
        """Generate a full draft in the background."""
        if self.navigator.is_active:
            return
        if self.generating or self.bridge.is_busy:
            self.notify("A draft is already being generated", severity="warning")
            return

        reference, verses, statement = self.store.reference, self.store.verses, self.store.statement
        if not reference.strip() and not verses.strip():
            self.notify("Please provide a Book Reference or paste Verses.", severity="error")
            return

        self.generating = True
        self.query_one("#btn_generate", Button).label = "Generating..."
        self.notify("Generating sermon draft...")
        self.run_worker(
            lambda: self._generate(reference, verses, statement),
            thread=True,
            group="generation",
        )

    def _generate(self, reference: str, verses: str, statement: str) -> None:
        """Run generation off the UI thread (worker)."""
        generated: Optional[GeneratedContent] = None
        error: Optional[str] = None
        try:
            generated = self.bridge.generate(reference, verses, statement)
        except GenerationError as e:
            logger.warning(f"Generation failed: {e}")
            error = str(e)
        except Exception as e:
            logger.exception(f"Unexpected error during generation: {e}")
            error = f"Unexpected error: {e}"
        finally:
            self.app.call_from_thread(self._finish_generation, generated, error)

    def _finish_generation(self, generated: Optional[GeneratedContent], error: Optional[str]) -> None:
        self.generating = False
        self.query_one("#btn_generate", Button).label = "Generate"
        if generated is None:
            self.notify(f"Failed to generate content. Please try again. ({error})", severity="error")
            return
        self.store.apply_generated(generated)
        self.notify("Draft generated")

    # Files

    def action_export(self) -> None:
        """Export the sermon to the export directory."""
        try:
            path = export_document(self.store.document, self.config.export_dir)
        except OSError as e:
            logger.error(f"Export failed: {e}")
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"Saved to {path}")

    def action_import(self) -> None:
        """Prompt for a sermon file and load it."""
        self.app.push_screen(
            PathPromptScreen("Load sermon file", str(self.config.export_dir) + "/"),
            self._import_from,
        )

    def _import_from(self, value: Optional[str]) -> None:
        if not value:
            return
        try:
            data = read_import_file(Path(value).expanduser())
        except InvalidImportFormat as e:
            logger.warning(f"Import rejected: {e}")
            self.notify("Invalid file format", severity="error")
            return
        self.store.replace_all(data)
        self.notify(f"Loaded {value}")

    def action_reset(self) -> None:
        """Clear all data after confirmation."""
        self.app.push_screen(
            ConfirmScreen("Are you sure you want to clear all data?"),
            self._reset_confirmed,
        )

    def _reset_confirmed(self, confirmed: Optional[bool]) -> None:
        if self.store.reset(lambda: bool(confirmed)):
            self.notify("All data cleared")
