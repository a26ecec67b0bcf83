"""Sermon stopwatch and clock display.

The stopwatch counts whole seconds: every tick adds exactly one second
while running, independent of wall-clock time. Missed ticks are not
caught up. The clock is a separate display of the local time.
"""

from datetime import datetime
from typing import Optional

from sprout.app.logging_config import get_logger

logger = get_logger(__name__)


def format_elapsed(seconds: int) -> str:
    """Format elapsed seconds as MM:SS.

    Minutes keep counting past 59 (e.g., 75:03).
    """
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def format_clock(now: Optional[datetime] = None) -> str:
    """Format the local time as HH:MM."""
    now = now or datetime.now()
    return now.strftime("%H:%M")


class SermonTimer:
    """Elapsed-time counter with pause semantics.

    Attributes:
        elapsed: Whole seconds counted so far
        running: Whether ticks are being counted
    """

    def __init__(self) -> None:
        self.elapsed = 0
        self.running = False

    def start(self) -> None:
        """Start counting (resumes from the current elapsed value)."""
        self.running = True

    def stop(self) -> None:
        """Stop counting, keeping the elapsed value."""
        self.running = False

    def toggle(self) -> bool:
        """Toggle running.

        Returns:
            True if now running
        """
        self.running = not self.running
        return self.running

    def tick(self) -> int:
        """Advance by one second if running.

        Returns:
            Elapsed seconds after the tick
        """
        if self.running:
            self.elapsed += 1
        return self.elapsed

    def reset(self) -> None:
        """Stop and zero the counter."""
        logger.debug(f"Timer reset at {format_elapsed(self.elapsed)}")
        self.running = False
        self.elapsed = 0

    @property
    def display(self) -> str:
        """Elapsed time as MM:SS."""
        return format_elapsed(self.elapsed)
