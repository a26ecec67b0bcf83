"""Section registry for the sermon framework.

Defines the fixed, ordered set of sermon sections, how they are grouped
on screen, and the default metadata each section starts with.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class SectionId(Enum):
    """Identifiers of the sermon sections, in display order."""

    INTRO = "intro"
    ME = "me"
    WE1 = "we1"
    GOD = "god"
    YOU = "you"
    WE2 = "we2"
    OUT = "out"


@dataclass(frozen=True)
class SectionSpec:
    """Static metadata for one section.

    Attributes:
        id: Stable section identifier
        label: Short tag shown on the card (e.g., "ME")
        title: Section title (e.g., "ORIENTATION")
        subtitle: One-line description of the section's purpose
        placeholder: Help text shown while the section is empty
        color: Color tag, only meaningful to the presentation layer
    """

    id: SectionId
    label: str
    title: str
    subtitle: str
    placeholder: str
    color: str


SECTION_SPECS: dict[SectionId, SectionSpec] = {
    SectionId.INTRO: SectionSpec(
        id=SectionId.INTRO,
        label="INTRO",
        title="INTRODUCTION",
        subtitle="Hook the audience and introduce the topic.",
        placeholder=(
            "Hook the audience and introduce the topic. Start with a story, "
            "a question, or a tension that grabs attention..."
        ),
        color="cyan",
    ),
    SectionId.ME: SectionSpec(
        id=SectionId.ME,
        label="ME",
        title="ORIENTATION",
        subtitle="Here is a problem I have or have had. (Builds Rapport)",
        placeholder="Here is a problem I have or have had. (Builds Rapport)",
        color="indigo",
    ),
    SectionId.WE1: SectionSpec(
        id=SectionId.WE1,
        label="WE",
        title="IDENTIFICATION",
        subtitle="Here is how this affects all of us. (Builds Tension)",
        placeholder="Here is how this affects all of us. (Builds Tension)",
        color="violet",
    ),
    SectionId.GOD: SectionSpec(
        id=SectionId.GOD,
        label="GOD",
        title="ILLUMINATION",
        subtitle="Here is what God says about it. (Resolves Tension)",
        placeholder="Here is what God says about it. (Resolves Tension)",
        color="amber",
    ),
    SectionId.YOU: SectionSpec(
        id=SectionId.YOU,
        label="YOU",
        title="APPLICATION",
        subtitle="Here is what you should do. (Challenge)",
        placeholder="Here is what you should do. (Challenge)",
        color="orange",
    ),
    SectionId.WE2: SectionSpec(
        id=SectionId.WE2,
        label="WE",
        title="INSPIRATION",
        subtitle="Here is what happens if we all do this. (Vision)",
        placeholder="Here is what happens if we all do this. (Vision)",
        color="emerald",
    ),
    SectionId.OUT: SectionSpec(
        id=SectionId.OUT,
        label="OUT",
        title="CONCLUSION",
        subtitle="Summarize the main point and land the plane.",
        placeholder="Summarize the main point and land the plane.",
        color="rose",
    ),
}

SECTION_ORDER: tuple[SectionId, ...] = tuple(SectionId)

# Sections sharing a row are shown side by side
SECTION_ROWS: tuple[tuple[SectionId, ...], ...] = (
    (SectionId.INTRO,),
    (SectionId.ME, SectionId.WE1),
    (SectionId.GOD,),
    (SectionId.YOU, SectionId.WE2),
    (SectionId.OUT,),
)


def coerce_section_id(value: Union[str, SectionId, None]) -> Optional[SectionId]:
    """Map a raw identifier to a registered section.

    Args:
        value: Section identifier string (e.g., "we1") or SectionId

    Returns:
        Matching SectionId, or None if the identifier is not registered
    """
    if isinstance(value, SectionId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return SectionId(value)
    except ValueError:
        return None


def get_spec(section_id: SectionId) -> SectionSpec:
    """Get the registry metadata for a section."""
    return SECTION_SPECS[section_id]
