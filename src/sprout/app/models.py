"""Data models for the sermon document.

Provides dataclasses for Section, Document and GeneratedContent with
serialization to/from the snapshot dictionary shape, and the typed
default-merge used by load and import.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from sprout.app.sections import SECTION_ORDER, SectionId, coerce_section_id, get_spec


@dataclass
class Section:
    """One section of the sermon framework.

    Attributes:
        id: Stable section identifier
        label: Short tag (e.g., "INTRO")
        title: Section title
        subtitle: One-line description of the section's purpose
        placeholder: Help text shown while empty
        color: Presentation-only color tag
        content: Freeform text written by the user
        expanded: Whether the section card is expanded
    """

    id: SectionId
    label: str
    title: str
    subtitle: str
    placeholder: str
    color: str
    content: str = ""
    expanded: bool = True

    @classmethod
    def default(cls, section_id: SectionId) -> "Section":
        """Create a section at its registry defaults.

        Args:
            section_id: Section to create

        Returns:
            Section with empty content, expanded
        """
        spec = get_spec(section_id)
        return cls(
            id=spec.id,
            label=spec.label,
            title=spec.title,
            subtitle=spec.subtitle,
            placeholder=spec.placeholder,
            color=spec.color,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert the editable part of the section to a dictionary."""
        return {"content": self.content, "expanded": self.expanded}


def default_sections() -> dict[SectionId, Section]:
    """Build a fresh mapping of every registered section at its defaults."""
    return {section_id: Section.default(section_id) for section_id in SECTION_ORDER}


@dataclass
class Document:
    """The complete editable sermon.

    Attributes:
        reference: Book reference (e.g., "John 3:16-21")
        verses: Scripture text pasted by the user
        statement: The one-line main idea ("one point")
        sections: Mapping of every registered section id to its Section
    """

    reference: str = ""
    verses: str = ""
    statement: str = ""
    sections: dict[SectionId, Section] = field(default_factory=default_sections)

    @classmethod
    def default(cls) -> "Document":
        """Create an empty document with every section at its defaults."""
        return cls()

    def section(self, section_id: SectionId) -> Section:
        """Get a section by id."""
        return self.sections[section_id]

    def ordered_sections(self) -> list[Section]:
        """Get sections in display order."""
        return [self.sections[section_id] for section_id in SECTION_ORDER]

    def copy(self) -> "Document":
        """Copy the document without sharing any Section instance."""
        return Document(
            reference=self.reference,
            verses=self.verses,
            statement=self.statement,
            sections={key: replace(value) for key, value in self.sections.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert the document to the snapshot dictionary shape.

        Returns:
            {reference, verses, statement, sections: {id: {content, expanded}}}
        """
        return {
            "reference": self.reference,
            "verses": self.verses,
            "statement": self.statement,
            "sections": {
                section.id.value: section.to_dict() for section in self.ordered_sections()
            },
        }


# Keys written by the web editor
_FIELD_ALIASES = {
    "reference": ("reference", "bookReference"),
    "verses": ("verses",),
    "statement": ("statement", "onePoint"),
}


def _read_text(data: dict, name: str) -> str:
    for key in _FIELD_ALIASES[name]:
        value = data.get(key)
        if isinstance(value, str):
            return value
    return ""


def merge_document(data: Any) -> Document:
    """Merge raw snapshot data onto a default document.

    Only ``content`` and ``expanded`` of registered sections are taken from
    the data; every other section field stays at its registry default.
    Unknown section ids and unknown fields are ignored, and values of the
    wrong type fall back to the default.

    Args:
        data: Parsed snapshot (normally a dict)

    Returns:
        Document with all registered sections present
    """
    document = Document.default()
    if not isinstance(data, dict):
        return document

    document.reference = _read_text(data, "reference")
    document.verses = _read_text(data, "verses")
    document.statement = _read_text(data, "statement")

    raw_sections = data.get("sections")
    if not isinstance(raw_sections, dict):
        return document

    for key, raw in raw_sections.items():
        section_id = coerce_section_id(key)
        if section_id is None or not isinstance(raw, dict):
            continue

        section = document.sections[section_id]
        content = raw.get("content")
        if isinstance(content, str):
            section.content = content

        expanded = raw.get("expanded", raw.get("isExpanded"))
        if isinstance(expanded, bool):
            section.expanded = expanded

    return document


@dataclass(frozen=True)
class GeneratedContent:
    """A complete generated draft.

    Attributes:
        statement: Generated (or kept) one-line main idea
        sections: Generated text for every registered section
    """

    statement: str
    sections: dict[SectionId, str]

    @classmethod
    def from_dict(cls, data: Any) -> Optional["GeneratedContent"]:
        """Create from a response dictionary.

        Every section id and ``statement`` are required and must be strings.
        ``onePoint`` is accepted in place of ``statement``.

        Args:
            data: Parsed response payload

        Returns:
            GeneratedContent, or None if any required field is missing
        """
        if not isinstance(data, dict):
            return None

        statement = data.get("statement", data.get("onePoint"))
        if not isinstance(statement, str):
            return None

        sections = {}
        for section_id in SECTION_ORDER:
            text = data.get(section_id.value)
            if not isinstance(text, str):
                return None
            sections[section_id] = text

        return cls(statement=statement, sections=sections)

    def to_dict(self) -> dict[str, str]:
        """Convert to the flat response dictionary shape."""
        result = {"statement": self.statement}
        for section_id in SECTION_ORDER:
            result[section_id.value] = self.sections[section_id]
        return result
