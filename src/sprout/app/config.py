"""Configuration management for sprout.

Handles loading and saving TOML configuration stored in:
- macOS/Linux: ~/.config/sprout/config.toml (XDG_CONFIG_HOME)
- Windows: %APPDATA%\\sprout\\config.toml
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import tomllib
import tomli_w

from sprout.app.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_API_BASE = "https://openrouter.ai/api/v1"


def get_app_config_dir() -> Path:
    """Get the platform-specific config directory for sprout.

    Returns:
        Path to the config directory
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "sprout"
        return Path.home() / "AppData" / "Roaming" / "sprout"

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "sprout"
    return Path.home() / ".config" / "sprout"


def get_app_config_path() -> Path:
    """Get the path to the config.toml file."""
    return get_app_config_dir() / "config.toml"


@dataclass
class AppConfig:
    """Configuration for sprout.

    The OpenRouter API key is never stored here; it is read from the
    OPENROUTER_API_KEY environment variable.

    Attributes:
        data_dir: Directory holding the persisted sermon snapshot
        export_dir: Default directory for exported sermon files
        log_dir: Directory for session logs
        model: LLM model identifier used for generation
        api_base: OpenAI-compatible API base URL
        timeout_seconds: Request timeout for generation calls
    """

    # Storage
    data_dir: Path = field(default_factory=lambda: get_app_config_dir() / "data")
    export_dir: Path = field(default_factory=lambda: Path.home() / "Sprout")

    # Logging
    log_dir: Path = field(default_factory=lambda: get_app_config_dir() / "logs")

    # Generation
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: float = 60.0

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AppConfig":
        """Load configuration from TOML file.

        Args:
            path: Path to config file (defaults to standard location)

        Returns:
            AppConfig instance with loaded values

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        if path is None:
            path = get_app_config_path()

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        config = cls()

        if "storage" in data:
            storage = data["storage"]
            if "data_dir" in storage:
                config.data_dir = Path(storage["data_dir"]).expanduser()
            if "export_dir" in storage:
                config.export_dir = Path(storage["export_dir"]).expanduser()

        if "app" in data:
            if "log_dir" in data["app"]:
                config.log_dir = Path(data["app"]["log_dir"]).expanduser()

        if "generation" in data:
            generation = data["generation"]
            config.model = generation.get("model", config.model)
            config.api_base = generation.get("api_base", config.api_base)
            config.timeout_seconds = float(
                generation.get("timeout_seconds", config.timeout_seconds)
            )

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to TOML file.

        Args:
            path: Path to save config (defaults to standard location)
        """
        if path is None:
            path = get_app_config_path()

        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "storage": {
                "data_dir": str(self.data_dir),
                "export_dir": str(self.export_dir),
            },
            "app": {
                "log_dir": str(self.log_dir),
            },
            "generation": {
                "model": self.model,
                "api_base": self.api_base,
                "timeout_seconds": self.timeout_seconds,
            },
        }

        with open(path, "wb") as f:
            tomli_w.dump(data, f)

    def ensure_directories(self) -> None:
        """Ensure the data and log directories exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)


def ensure_app_config_exists(path: Optional[Path] = None) -> AppConfig:
    """Ensure config file exists, creating default if needed.

    Args:
        path: Config file path (defaults to standard location)

    Returns:
        AppConfig instance
    """
    config_path = path or get_app_config_path()

    if config_path.exists():
        try:
            return AppConfig.load(config_path)
        except (tomllib.TOMLDecodeError, ValueError) as e:
            logger.warning(f"Config at {config_path} is unreadable, rewriting defaults: {e}")

    config = AppConfig()
    config.save(config_path)
    return config
