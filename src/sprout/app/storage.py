"""Snapshot persistence for the sermon document.

The whole document lives in a single JSON snapshot under one storage key.
Also provides export/import of the same shape as standalone files.
"""

import json
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Optional

from sprout.app.logging_config import get_logger
from sprout.app.models import Document, merge_document

logger = get_logger(__name__)

STORAGE_KEY = "sprout_sermon_data"


class CorruptSnapshot(Exception):
    """The stored snapshot could not be parsed."""


class InvalidImportFormat(Exception):
    """An imported file is not a valid sermon snapshot."""


def _default_file_mode() -> int:
    """Mode a plain ``open(path, "w")`` would create under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_json_atomic(path: Path, data: Any, indent: Optional[int] = None) -> None:
    """Write JSON to a temp file beside ``path`` and move it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        # mkstemp creates owner-only files
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class SnapshotStorage:
    """Load/save of the full document to a single storage slot.

    Attributes:
        data_dir: Directory holding the snapshot file
        key: Storage key, used as the snapshot file stem
    """

    def __init__(self, data_dir: Path, key: str = STORAGE_KEY):
        """Initialize the storage.

        Args:
            data_dir: Directory holding the snapshot file
            key: Storage key
        """
        self.data_dir = Path(data_dir)
        self.key = key

    @property
    def path(self) -> Path:
        """Path of the snapshot file."""
        return self.data_dir / f"{self.key}.json"

    def exists(self) -> bool:
        """Check whether a snapshot has been written."""
        return self.path.exists()

    def read_raw(self) -> Optional[Any]:
        """Read the parsed snapshot.

        Returns:
            Parsed JSON, or None if no snapshot exists

        Raises:
            CorruptSnapshot: If the snapshot cannot be read or parsed
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptSnapshot(f"Cannot read snapshot {self.path}: {e}") from e

    def load(self) -> Document:
        """Load the document, falling back to defaults.

        A missing or corrupt snapshot yields the default document; this
        method never raises for snapshot content.

        Returns:
            Document merged onto registry defaults
        """
        try:
            raw = self.read_raw()
        except CorruptSnapshot as e:
            logger.warning(f"{e}; starting from defaults")
            return Document.default()

        if raw is None:
            logger.debug(f"No snapshot at {self.path}; starting from defaults")
            return Document.default()

        logger.debug(f"Loaded snapshot from {self.path}")
        return merge_document(raw)

    def save(self, document: Document) -> None:
        """Write the full document snapshot.

        Args:
            document: Document to persist
        """
        _write_json_atomic(self.path, document.to_dict())

    def clear(self) -> None:
        """Delete the snapshot."""
        self.path.unlink(missing_ok=True)
        logger.info(f"Cleared snapshot {self.path}")


def default_export_name(today: Optional[date] = None) -> str:
    """Build the default export file name.

    Args:
        today: Date to stamp (defaults to today)

    Returns:
        File name like "sprout-sermon-2024-01-31.json"
    """
    today = today or date.today()
    return f"sprout-sermon-{today.isoformat()}.json"


def export_document(document: Document, path: Path) -> Path:
    """Export the document to a standalone JSON file.

    Args:
        document: Document to export
        path: Destination file, or a directory to place a dated file in
            (a path without a suffix is treated as a directory)

    Returns:
        Path of the written file
    """
    path = Path(path)
    if path.is_dir() or not path.suffix:
        path = path / default_export_name()

    _write_json_atomic(path, document.to_dict(), indent=2)
    logger.info(f"Exported sermon to {path}")
    return path


def read_import_file(path: Path) -> dict:
    """Read a sermon file for import.

    Args:
        path: File to import

    Returns:
        Parsed snapshot dictionary (not yet merged)

    Raises:
        InvalidImportFormat: If the file is unreadable, not JSON, or not an object
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidImportFormat(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidImportFormat(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidImportFormat(f"{path} does not contain a sermon object")

    return data
