"""Shared fixtures for app tests."""

import pytest

from sprout.app.config import AppConfig
from sprout.app.state import EditorStore
from sprout.app.storage import SnapshotStorage


@pytest.fixture
def data_dir(tmp_path):
    """Temporary snapshot directory."""
    return tmp_path / "data"


@pytest.fixture
def storage(data_dir):
    """Snapshot storage in a temporary directory."""
    return SnapshotStorage(data_dir)


@pytest.fixture
def store(storage):
    """Editor store backed by temporary storage."""
    return EditorStore(storage)


@pytest.fixture
def app_config(tmp_path):
    """App configuration with every directory under tmp_path."""
    return AppConfig(
        data_dir=tmp_path / "data",
        export_dir=tmp_path / "exports",
        log_dir=tmp_path / "logs",
        model="test/model",
        api_base="http://localhost:9999/v1",
        timeout_seconds=5.0,
    )


@pytest.fixture
def generated_payload():
    """A complete generation response payload."""
    return {
        "statement": "Grace goes first.",
        "intro": "Have you ever been given something you did not earn?",
        "me": "I used to keep score.",
        "we1": "We all keep score.",
        "god": "John 3:16 says God gave first.",
        "you": "This week, give first.",
        "we2": "Imagine a church that gives first.",
        "out": "Grace goes first.",
    }
