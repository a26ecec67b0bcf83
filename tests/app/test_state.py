"""Tests for the editor state store."""

import json
from unittest.mock import MagicMock

import pytest

from sprout.app.models import Document, GeneratedContent, Section
from sprout.app.sections import SECTION_ORDER, SectionId
from sprout.app.state import EditorStore
from sprout.app.storage import SnapshotStorage


@pytest.fixture
def counting_storage(storage):
    """Storage wrapper that counts saves."""
    mock = MagicMock(wraps=storage)
    mock.load.return_value = Document.default()
    return mock


def read_snapshot(storage: SnapshotStorage) -> dict:
    return json.loads(storage.path.read_text(encoding="utf-8"))


class TestEditorStoreInit:
    """Tests for store construction."""

    def test_loads_from_storage(self, storage):
        document = Document(reference="Acts 2")
        storage.save(document)

        store = EditorStore(storage)

        assert store.reference == "Acts 2"

    def test_explicit_document(self, storage):
        store = EditorStore(storage, Document(statement="Given"))

        assert store.statement == "Given"

    def test_document_is_a_copy(self, store):
        document = store.document
        document.reference = "changed"
        document.sections[SectionId.GOD].content = "changed"

        assert store.reference == ""
        assert store.section("god").content == ""


class TestSetters:
    """Tests for field setters."""

    def test_set_reference_saves(self, store, storage):
        store.set_reference("Luke 15")

        assert store.reference == "Luke 15"
        assert read_snapshot(storage)["reference"] == "Luke 15"

    def test_set_verses_saves(self, store, storage):
        store.set_verses("There was a man who had two sons.")

        assert read_snapshot(storage)["verses"] == "There was a man who had two sons."

    def test_set_statement_accepts_empty(self, store, storage):
        store.set_statement("Something")
        store.set_statement("")

        assert store.statement == ""
        assert read_snapshot(storage)["statement"] == ""

    def test_one_save_per_mutation(self, counting_storage):
        store = EditorStore(counting_storage)

        store.set_reference("a")
        store.set_verses("b")
        store.set_statement("c")
        store.set_section_content("intro", "d")
        store.toggle_expanded("intro")

        assert counting_storage.save.call_count == 5

    def test_set_section_content(self, store, storage):
        assert store.set_section_content("we1", "We all feel it") is True

        assert store.section(SectionId.WE1).content == "We all feel it"
        assert read_snapshot(storage)["sections"]["we1"]["content"] == "We all feel it"

    def test_set_section_content_accepts_enum(self, store):
        store.set_section_content(SectionId.OUT, "Land the plane")

        assert store.section("out").content == "Land the plane"

    def test_unknown_section_is_noop(self, counting_storage):
        store = EditorStore(counting_storage)
        before = store.document

        assert store.set_section_content("outro", "text") is False
        assert store.toggle_expanded("outro") is False

        assert store.document == before
        counting_storage.save.assert_not_called()

    def test_section_unknown_id(self, store):
        assert store.section("nope") is None


class TestToggleExpanded:
    """Tests for expand/collapse."""

    def test_toggle_twice_restores_flag(self, store):
        store.set_section_content("we1", "content")
        original = store.section("we1").expanded

        store.toggle_expanded("we1")
        assert store.section("we1").expanded is (not original)
        assert store.section("we1").content == "content"

        store.toggle_expanded("we1")
        assert store.section("we1").expanded is original
        assert store.section("we1").content == "content"

    def test_toggle_persists(self, store, storage):
        store.toggle_expanded("god")

        assert read_snapshot(storage)["sections"]["god"]["expanded"] is False


class TestRoundTrip:
    """Tests for save/load after arbitrary edits."""

    def test_reload_matches(self, store, storage):
        store.set_reference("Gen 1")
        store.set_verses("In the beginning")
        store.set_statement("God starts it")
        store.set_section_content("intro", "Beginnings")
        store.set_section_content("we2", "")
        store.toggle_expanded("me")

        assert EditorStore(storage).document == store.document


class TestReplaceAll:
    """Tests for whole-document replacement."""

    def test_partial_import_keeps_other_sections(self, store):
        store.set_section_content("me", "existing")
        data = {
            "reference": "Jonah 1",
            "sections": {
                "intro": {"content": "Run"},
                "god": {"content": "Pursues"},
                "out": {"content": "Go"},
            },
        }

        document = store.replace_all(data)

        assert document.reference == "Jonah 1"
        assert document.sections[SectionId.INTRO].content == "Run"
        assert document.sections[SectionId.GOD].content == "Pursues"
        assert document.sections[SectionId.OUT].content == "Go"
        # last loaded file wins; absent sections fall back to defaults
        for section_id in (SectionId.ME, SectionId.WE1, SectionId.YOU, SectionId.WE2):
            assert document.sections[section_id] == Section.default(section_id)

    def test_replace_all_saves_once(self, counting_storage):
        store = EditorStore(counting_storage)

        store.replace_all({"reference": "x"})

        assert counting_storage.save.call_count == 1

    def test_replace_with_document(self, store):
        document = Document(reference="Ruth 1")
        document.sections[SectionId.YOU].content = "Stay"

        store.replace_all(document)

        assert store.document == document

    def test_notifies_document_listeners(self, store):
        callback = MagicMock()
        store.add_listener("document", callback)

        store.replace_all({"statement": "New"})

        callback.assert_called_once()
        assert callback.call_args[0][0].statement == "New"


class TestApplyGenerated:
    """Tests for applying generated drafts."""

    def test_overwrites_statement_and_all_sections(self, store, generated_payload):
        store.set_reference("John 3")
        store.toggle_expanded("me")
        generated = GeneratedContent.from_dict(generated_payload)

        store.apply_generated(generated)

        document = store.document
        assert document.statement == "Grace goes first."
        assert document.reference == "John 3"
        assert document.sections[SectionId.ME].expanded is False
        for section_id in SECTION_ORDER:
            assert document.sections[section_id].content == generated_payload[section_id.value]

    def test_listeners_see_complete_update(self, store, generated_payload):
        """Verify no listener observes a partially applied draft."""
        seen = []
        store.add_listener("section", lambda section: seen.append(("section", section.id)))
        store.add_listener(
            "document",
            lambda document: seen.append(
                ("document", [s.content for s in document.ordered_sections()])
            ),
        )

        store.apply_generated(GeneratedContent.from_dict(generated_payload))

        assert seen == [("document", [generated_payload[s.value] for s in SECTION_ORDER])]

    def test_single_save(self, counting_storage, generated_payload):
        store = EditorStore(counting_storage)

        store.apply_generated(GeneratedContent.from_dict(generated_payload))

        assert counting_storage.save.call_count == 1
        saved = counting_storage.save.call_args[0][0]
        assert saved.sections[SectionId.GOD].content == generated_payload["god"]


class TestReset:
    """Tests for reset with confirmation."""

    def test_confirmed_reset(self, store, storage):
        store.set_reference("Job 1")
        store.set_section_content("intro", "Suffering")

        assert store.reset(lambda: True) is True

        assert store.document == Document.default()
        assert not storage.exists()

    def test_declined_reset(self, store, storage):
        store.set_reference("Job 1")

        assert store.reset(lambda: False) is False

        assert store.reference == "Job 1"
        assert storage.exists()

    def test_reset_notifies(self, store):
        callback = MagicMock()
        store.add_listener("document", callback)

        store.reset(lambda: True)

        callback.assert_called_once_with(Document.default())


class TestListeners:
    """Tests for change listeners."""

    def test_property_listeners(self, store):
        reference = MagicMock()
        section = MagicMock()
        store.add_listener("reference", reference)
        store.add_listener("section", section)

        store.set_reference("Eph 2")
        store.set_section_content("god", "By grace")

        reference.assert_called_once_with("Eph 2")
        changed = section.call_args[0][0]
        assert changed.id is SectionId.GOD
        assert changed.content == "By grace"

    def test_remove_listener(self, store):
        callback = MagicMock()
        store.add_listener("statement", callback)
        store.remove_listener("statement", callback)

        store.set_statement("x")

        callback.assert_not_called()

    def test_failing_listener_does_not_break_mutation(self, store, storage):
        store.add_listener("verses", MagicMock(side_effect=RuntimeError("boom")))
        after = MagicMock()
        store.add_listener("verses", after)

        store.set_verses("still saved")

        assert store.verses == "still saved"
        assert read_snapshot(storage)["verses"] == "still saved"
        after.assert_called_once_with("still saved")


class TestSaveFailure:
    """Tests for storage errors during mutations."""

    @pytest.fixture
    def blocked_storage(self, tmp_path):
        """Storage whose data directory is a regular file."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        return SnapshotStorage(blocker)

    def test_setter_does_not_raise(self, blocked_storage):
        store = EditorStore(blocked_storage)
        reference = MagicMock()
        failed = MagicMock()
        store.add_listener("reference", reference)
        store.add_listener("save_failed", failed)

        store.set_reference("John 3")

        assert store.reference == "John 3"
        assert isinstance(store.save_error, OSError)
        reference.assert_called_once_with("John 3")
        failed.assert_called_once_with(store.save_error)

    def test_every_mutation_reports_failure(self, blocked_storage, generated_payload):
        store = EditorStore(blocked_storage)
        failed = MagicMock()
        store.add_listener("save_failed", failed)

        store.set_verses("v")
        store.set_statement("s")
        store.set_section_content("god", "g")
        store.toggle_expanded("god")
        store.replace_all({"reference": "r"})
        store.apply_generated(GeneratedContent.from_dict(generated_payload))

        assert failed.call_count == 6
        assert store.statement == "Grace goes first."

    def test_reset_clear_failure(self, blocked_storage):
        store = EditorStore(blocked_storage, Document(reference="Job 1"))
        failed = MagicMock()
        store.add_listener("save_failed", failed)

        assert store.reset(lambda: True) is True

        assert store.document == Document.default()
        failed.assert_called_once()

    def test_error_cleared_after_successful_save(self, tmp_path):
        blocker = tmp_path / "data"
        blocker.write_text("in the way", encoding="utf-8")
        storage = SnapshotStorage(blocker)
        store = EditorStore(storage)

        store.set_reference("Acts 2")
        assert store.save_error is not None

        blocker.unlink()
        store.set_verses("When the day of Pentecost arrived")

        assert store.save_error is None
        assert read_snapshot(storage)["reference"] == "Acts 2"
