"""Main TUI application for Sprout.

Textual-based application for preachers to draft a sermon in the
seven-part framework and present it in live mode.
"""

from typing import Optional

from textual.app import App

from sprout.app.config import AppConfig
from sprout.app.logging_config import get_logger
from sprout.app.screens.editor import EditorScreen
from sprout.app.services.generation import GenerationBridge
from sprout.app.services.navigation import LiveNavigator
from sprout.app.services.timer import SermonTimer
from sprout.app.state import EditorStore
from sprout.app.storage import SnapshotStorage

logger = get_logger(__name__)


class SproutApp(App):
    """Sprout sermon editor.

    Composes the editor store, live navigator, stopwatch and generation
    bridge, and hands them to the editor screen.
    """

    CSS_PATH = "screens/app.tcss"
    TITLE = "Sprout"
    SUB_TITLE = "Communicating for a Change"

    def __init__(
        self,
        config: AppConfig,
        bridge: Optional[GenerationBridge] = None,
        *args,
        **kwargs,
    ):
        """Initialize the application.

        Args:
            config: Application configuration
            bridge: Generation bridge (defaults to one built from config)
        """
        super().__init__(*args, **kwargs)

        self.config = config
        self.config.ensure_directories()

        self.storage = SnapshotStorage(config.data_dir)
        self.store = EditorStore(self.storage)
        self.navigator = LiveNavigator()
        self.timer = SermonTimer()
        self.bridge = bridge or GenerationBridge(
            model=config.model,
            api_base=config.api_base,
            timeout=config.timeout_seconds,
        )

    def on_mount(self) -> None:
        """Handle app mount event."""
        logger.info(f"App mounted, snapshot at {self.storage.path}")
        self.push_screen(
            EditorScreen(self.store, self.navigator, self.timer, self.bridge, self.config)
        )
