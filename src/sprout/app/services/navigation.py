"""Live mode navigation for sprout.

A single-selection cursor over the ordered sermon sections, moved by
directional commands while live mode is on.
"""

from enum import Enum, auto
from typing import Callable, Optional, Sequence, Union

from sprout.app.logging_config import get_logger
from sprout.app.sections import SECTION_ORDER, SectionId, coerce_section_id

logger = get_logger(__name__)


class LiveState(Enum):
    """Live mode state."""

    INACTIVE = auto()
    ACTIVE = auto()


class LiveNavigator:
    """Cursor over sections while presenting.

    Inactive until enabled. Enabling always starts at the first section
    in display order; disabling discards the cursor. Moves clamp at both
    ends with no wraparound, and every real move requests a scroll to the
    target section through the ``on_scroll`` callback.

    Attributes:
        order: Sections in display order
    """

    def __init__(
        self,
        order: Sequence[SectionId] = SECTION_ORDER,
        on_scroll: Optional[Callable[[SectionId], None]] = None,
    ):
        """Initialize the navigator.

        Args:
            order: Sections in display order
            on_scroll: Called with the target section after each move
        """
        if not order:
            raise ValueError("Navigation order cannot be empty")
        self.order = tuple(order)
        self._on_scroll = on_scroll
        self._cursor: Optional[SectionId] = None

    def set_scroll_callback(self, on_scroll: Optional[Callable[[SectionId], None]]) -> None:
        """Set the scroll request callback."""
        self._on_scroll = on_scroll

    @property
    def state(self) -> LiveState:
        return LiveState.ACTIVE if self._cursor is not None else LiveState.INACTIVE

    @property
    def is_active(self) -> bool:
        return self._cursor is not None

    @property
    def cursor(self) -> Optional[SectionId]:
        """Active section, or None when inactive."""
        return self._cursor

    def enable(self) -> SectionId:
        """Enter live mode.

        Returns:
            The active section
        """
        if self._cursor is None:
            self._cursor = self.order[0]
            logger.info(f"Live mode on, cursor at {self._cursor.value}")
        return self._cursor

    def disable(self) -> None:
        """Leave live mode and discard the cursor."""
        if self._cursor is not None:
            logger.info(f"Live mode off (cursor was {self._cursor.value})")
        self._cursor = None

    def toggle(self) -> bool:
        """Toggle live mode.

        Returns:
            True if live mode is now active
        """
        if self.is_active:
            self.disable()
        else:
            self.enable()
        return self.is_active

    def _move_to(self, index: int) -> bool:
        index = max(0, min(index, len(self.order) - 1))
        target = self.order[index]
        if target == self._cursor:
            return False

        self._cursor = target
        logger.debug(f"Cursor moved to {target.value}")
        if self._on_scroll:
            self._on_scroll(target)
        return True

    def advance(self) -> bool:
        """Move to the next section.

        Returns:
            True if the cursor moved
        """
        if self._cursor is None:
            return False
        return self._move_to(self.order.index(self._cursor) + 1)

    def retreat(self) -> bool:
        """Move to the previous section.

        Returns:
            True if the cursor moved
        """
        if self._cursor is None:
            return False
        return self._move_to(self.order.index(self._cursor) - 1)

    def activate(self, section_id: Union[str, SectionId]) -> bool:
        """Jump directly to a section (e.g., selected with the mouse).

        Args:
            section_id: Section to activate

        Returns:
            True if the cursor moved
        """
        key = coerce_section_id(section_id)
        if self._cursor is None or key is None or key not in self.order:
            return False
        return self._move_to(self.order.index(key))
