"""Section card widget.

One sermon section: a clickable header with label, title and subtitle,
and a text area holding the section content.
"""

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Static, TextArea

from sprout.app.models import Section
from sprout.app.sections import SectionId


class SectionHeader(Static):
    """Card header; clicking it toggles or activates the section."""

    def __init__(self, section: Section, **kwargs):
        super().__init__(**kwargs)
        self.section_id = section.id
        self._section = section

    def render_header(self, section: Section) -> str:
        marker = "▾" if section.expanded else "▸"
        return (
            f"{marker} [bold]{section.label}[/bold]  {section.title}\n"
            f"[dim]{section.subtitle}[/dim]"
        )

    def on_mount(self) -> None:
        self.update(self.render_header(self._section))

    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.post_message(SectionCard.HeaderClicked(self.section_id))


class SectionCard(Vertical):
    """Editor card for one section."""

    class HeaderClicked(Message):
        """The card header was clicked."""

        def __init__(self, section_id: SectionId) -> None:
            super().__init__()
            self.section_id = section_id

    class Selected(Message):
        """The card body was clicked."""

        def __init__(self, section_id: SectionId) -> None:
            super().__init__()
            self.section_id = section_id

    class ContentChanged(Message):
        """The user edited the section text."""

        def __init__(self, section_id: SectionId, text: str) -> None:
            super().__init__()
            self.section_id = section_id
            self.text = text

    def __init__(self, section: Section):
        """Initialize the card.

        Args:
            section: Section to display
        """
        super().__init__(id=section.id.value, classes=f"section-card color-{section.color}")
        self.section_id = section.id
        self._section = section

    def compose(self) -> ComposeResult:
        yield SectionHeader(self._section, classes="section-header")
        yield TextArea(self._section.content, soft_wrap=True, classes="section-text")

    def on_mount(self) -> None:
        self._apply_expanded(self._section.expanded)

    @property
    def text_area(self) -> TextArea:
        return self.query_one(".section-text", TextArea)

    def _apply_expanded(self, expanded: bool) -> None:
        self.set_class(not expanded, "collapsed")
        self.text_area.display = expanded

    def update_section(self, section: Section) -> None:
        """Refresh the card from the stored section.

        Args:
            section: Current state of this card's section
        """
        self._section = section
        header = self.query_one(SectionHeader)
        header.update(header.render_header(section))
        self._apply_expanded(section.expanded)

        text_area = self.text_area
        if text_area.text != section.content:
            text_area.load_text(section.content)

    def set_live(self, live: bool, active: bool) -> None:
        """Apply live mode presentation.

        Args:
            live: Whether live mode is on
            active: Whether this card holds the live cursor
        """
        self.set_class(live and active, "active")
        self.set_class(live and not active, "dimmed")
        self.text_area.disabled = live

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        if event.text_area.text != self._section.content:
            self.post_message(self.ContentChanged(self.section_id, event.text_area.text))

    def on_click(self, event: events.Click) -> None:
        self.post_message(self.Selected(self.section_id))
