"""Editor state for sprout.

Owns the sermon document and every mutation of it. Each change is
written through to the snapshot storage and announced to listeners.

While live mode is active the presentation layer must not route edit
events into the store; the store itself has no notion of live mode.
"""

from typing import Any, Callable, Optional, Union

from sprout.app.logging_config import get_logger
from sprout.app.models import Document, GeneratedContent, Section, merge_document
from sprout.app.sections import SECTION_ORDER, SectionId, coerce_section_id
from sprout.app.storage import SnapshotStorage

logger = get_logger(__name__)

SectionKey = Union[str, SectionId]


class EditorStore:
    """Single writer of the sermon document.

    Listeners subscribe by property name and are notified after the
    change has been saved. Properties: "reference", "verses",
    "statement", "section" (payload: the changed Section),
    "document" (payload: the whole Document after a replacement) and
    "save_failed" (payload: the OSError raised by the storage).

    A storage failure never propagates. The change stays in memory and
    the error is kept in ``save_error`` until the next successful save.
    """

    def __init__(self, storage: SnapshotStorage, document: Optional[Document] = None):
        """Initialize the store.

        Args:
            storage: Snapshot storage written after every mutation
            document: Initial document (defaults to loading from storage)
        """
        self.storage = storage
        self._document = document if document is not None else storage.load()
        self._listeners: dict[str, list[Callable]] = {}
        # Last storage failure, None once a save succeeds
        self.save_error: Optional[OSError] = None

    @property
    def document(self) -> Document:
        """Get a copy of the current document."""
        return self._document.copy()

    @property
    def reference(self) -> str:
        return self._document.reference

    @property
    def verses(self) -> str:
        return self._document.verses

    @property
    def statement(self) -> str:
        return self._document.statement

    def section(self, section_id: SectionKey) -> Optional[Section]:
        """Get a copy of a section, or None for an unknown id."""
        key = coerce_section_id(section_id)
        if key is None:
            return None
        return self.document.sections[key]

    def add_listener(self, property_name: str, callback: Callable) -> None:
        """Add a listener for a property change.

        Args:
            property_name: Name of the property to watch
            callback: Function to call with the new value
        """
        self._listeners.setdefault(property_name, []).append(callback)

    def remove_listener(self, property_name: str, callback: Callable) -> None:
        """Remove a property change listener.

        Args:
            property_name: Name of the property
            callback: Callback to remove
        """
        if property_name in self._listeners:
            self._listeners[property_name] = [
                cb for cb in self._listeners[property_name] if cb != callback
            ]

    def _notify(self, property_name: str, value: Any) -> None:
        for callback in self._listeners.get(property_name, []):
            try:
                callback(value)
            except Exception:
                logger.exception(f"Listener for '{property_name}' failed")

    def _save(self) -> bool:
        """Write the snapshot, reporting failure to "save_failed" listeners.

        The in-memory document is kept either way; the next successful
        save persists it.
        """
        try:
            self.storage.save(self._document)
        except OSError as e:
            logger.exception(f"Failed to save snapshot to {self.storage.path}")
            self.save_error = e
            self._notify("save_failed", e)
            return False
        self.save_error = None
        return True

    def _commit(self, property_name: str, value: Any) -> None:
        """Persist the document and notify listeners."""
        self._save()
        self._notify(property_name, value)

    def set_reference(self, text: str) -> None:
        """Set the book reference."""
        self._document.reference = text
        self._commit("reference", text)

    def set_verses(self, text: str) -> None:
        """Set the scripture text."""
        self._document.verses = text
        self._commit("verses", text)

    def set_statement(self, text: str) -> None:
        """Set the one-line main idea."""
        self._document.statement = text
        self._commit("statement", text)

    def set_section_content(self, section_id: SectionKey, text: str) -> bool:
        """Replace the content of one section.

        Args:
            section_id: Section to edit
            text: New content (any string, including empty)

        Returns:
            True if the section exists and was updated
        """
        key = coerce_section_id(section_id)
        if key is None:
            logger.debug(f"Ignoring content for unknown section: {section_id!r}")
            return False

        section = self._document.sections[key]
        section.content = text
        self._commit("section", self.section(key))
        return True

    def toggle_expanded(self, section_id: SectionKey) -> bool:
        """Flip the expanded flag of one section.

        Args:
            section_id: Section to toggle

        Returns:
            True if the section exists and was toggled
        """
        key = coerce_section_id(section_id)
        if key is None:
            logger.debug(f"Ignoring toggle for unknown section: {section_id!r}")
            return False

        section = self._document.sections[key]
        section.expanded = not section.expanded
        self._commit("section", self.section(key))
        return True

    def replace_all(self, data: Union[Document, dict]) -> Document:
        """Replace the whole document.

        Used by file import. Raw data goes through the same default-merge
        as loading, so missing sections keep their defaults.

        Args:
            data: Snapshot dictionary or Document

        Returns:
            The new document
        """
        if isinstance(data, Document):
            data = data.to_dict()
        self._document = merge_document(data)
        logger.info("Document replaced")
        self._commit("document", self.document)
        return self.document

    def apply_generated(self, content: GeneratedContent) -> None:
        """Overwrite the statement and every section content at once.

        Args:
            content: Complete generated draft
        """
        document = self._document.copy()
        document.statement = content.statement
        for section_id in SECTION_ORDER:
            document.sections[section_id].content = content.sections[section_id]

        self._document = document
        logger.info("Applied generated draft to all sections")
        self._commit("document", self.document)

    def reset(self, confirm: Callable[[], bool]) -> bool:
        """Clear everything back to defaults after confirmation.

        Args:
            confirm: Asks the user to confirm; returns True to proceed

        Returns:
            True if the document was reset
        """
        if not confirm():
            logger.debug("Reset cancelled")
            return False

        self._document = Document.default()
        try:
            self.storage.clear()
        except OSError as e:
            logger.exception(f"Failed to clear snapshot at {self.storage.path}")
            self.save_error = e
            self._notify("save_failed", e)
        else:
            self.save_error = None
        logger.info("Document reset to defaults")
        self._notify("document", self.document)
        return True
