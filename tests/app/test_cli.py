"""Tests for the sprout CLI commands."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sprout import __version__
from sprout.app.main import app
from sprout.app.models import GeneratedContent
from sprout.app.sections import SectionId
from sprout.app.services.generation import GenerationFailed
from sprout.app.state import EditorStore
from sprout.app.storage import SnapshotStorage

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path, app_config):
    """Config file pointing every directory under tmp_path."""
    path = tmp_path / "config.toml"
    app_config.save(path)
    return path


@pytest.fixture
def saved_store(app_config):
    """Store with a saved sermon in the configured data dir."""
    store = EditorStore(SnapshotStorage(app_config.data_dir))
    store.set_reference("Luke 15")
    store.set_verses("There was a man who had two sons.")
    store.set_statement("The father runs")
    store.set_section_content("god", "The father ran to him.")
    return store


def reload(app_config) -> EditorStore:
    return EditorStore(SnapshotStorage(app_config.data_dir))


class TestMain:
    """Tests for the top-level command."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["show", "--config", str(tmp_path / "missing.toml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestShowCommand:
    """Tests for 'show' command."""

    def test_show_saved_sermon(self, config_path, saved_store):
        result = runner.invoke(app, ["show", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "Luke 15" in result.output
        assert "The father runs" in result.output
        assert "The father ran to him." in result.output
        assert "ILLUMINATION" in result.output

    def test_show_escapes_markup(self, config_path, app_config):
        store = reload(app_config)
        store.set_statement("[bold]not markup[/bold]")

        result = runner.invoke(app, ["show", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "[bold]not markup[/bold]" in result.output


class TestExportImportCommands:
    """Tests for 'export' and 'import' commands."""

    def test_export_to_file(self, tmp_path, config_path, saved_store):
        destination = tmp_path / "backup.json"

        result = runner.invoke(app, ["export", str(destination), "--config", str(config_path)])

        assert result.exit_code == 0
        assert json.loads(destination.read_text(encoding="utf-8"))["reference"] == "Luke 15"

    def test_export_defaults_to_export_dir(self, config_path, app_config, saved_store):
        result = runner.invoke(app, ["export", "--config", str(config_path)])

        assert result.exit_code == 0
        files = list(app_config.export_dir.glob("sprout-sermon-*.json"))
        assert len(files) == 1

    def test_import_replaces_sermon(self, tmp_path, config_path, app_config, saved_store):
        source = tmp_path / "other.json"
        source.write_text(
            json.dumps({"reference": "Jonah 1", "sections": {"intro": {"content": "Run"}}}),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["import", str(source), "--config", str(config_path)])

        assert result.exit_code == 0
        store = reload(app_config)
        assert store.reference == "Jonah 1"
        assert store.verses == ""
        assert store.section(SectionId.INTRO).content == "Run"
        assert store.section(SectionId.GOD).content == ""

    def test_import_invalid_file(self, tmp_path, config_path, app_config, saved_store):
        source = tmp_path / "bad.json"
        source.write_text("not json", encoding="utf-8")

        result = runner.invoke(app, ["import", str(source), "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Invalid file format" in result.output
        assert reload(app_config).reference == "Luke 15"

    def test_import_unwritable_data_dir(self, tmp_path, config_path, app_config):
        app_config.data_dir.parent.mkdir(parents=True, exist_ok=True)
        app_config.data_dir.write_text("not a directory", encoding="utf-8")
        source = tmp_path / "other.json"
        source.write_text(json.dumps({"reference": "Jonah 1"}), encoding="utf-8")

        result = runner.invoke(app, ["import", str(source), "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Could not save sermon" in result.output


class TestResetCommand:
    """Tests for 'reset' command."""

    def test_reset_with_yes(self, config_path, app_config, saved_store):
        result = runner.invoke(app, ["reset", "--yes", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "All data cleared" in result.output
        assert reload(app_config).reference == ""

    def test_reset_declined(self, config_path, app_config, saved_store):
        result = runner.invoke(app, ["reset", "--config", str(config_path)], input="n\n")

        assert result.exit_code == 0
        assert "Are you sure you want to clear all data?" in result.output
        assert "Reset cancelled" in result.output
        assert reload(app_config).reference == "Luke 15"

    def test_reset_confirmed(self, config_path, app_config, saved_store):
        result = runner.invoke(app, ["reset", "--config", str(config_path)], input="y\n")

        assert result.exit_code == 0
        assert reload(app_config).statement == ""


class TestGenerateCommand:
    """Tests for 'generate' command."""

    def test_generate_applies_draft(self, config_path, app_config, saved_store, generated_payload):
        draft = GeneratedContent.from_dict(generated_payload)

        with patch(
            "sprout.app.services.generation.GenerationBridge.generate", return_value=draft
        ) as mock_generate:
            result = runner.invoke(app, ["generate", "--config", str(config_path)])

        assert result.exit_code == 0
        mock_generate.assert_called_once_with(
            "Luke 15", "There was a man who had two sons.", "The father runs"
        )
        store = reload(app_config)
        assert store.statement == "Grace goes first."
        assert store.section(SectionId.WE1).content == "We all keep score."

    def test_generate_failure(self, config_path, app_config, saved_store):
        with patch(
            "sprout.app.services.generation.GenerationBridge.generate",
            side_effect=GenerationFailed("boom"),
        ):
            result = runner.invoke(app, ["generate", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Failed to generate content" in result.output
        assert reload(app_config).section(SectionId.GOD).content == "The father ran to him."
