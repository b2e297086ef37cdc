"""Tests for the JSON record store."""

import json

import pytest

from inkflow.exceptions import (
    ErrorCode,
    RecordNotFoundError,
    RecordParseError,
    StorageError,
)
from inkflow.models.schema import default_notebooks
from inkflow.storage.record_store import RecordStore, parse_notebooks, parse_notes
from tests.fakes import make_note, notes_payload


class TestRecordStore:
    """Tests for RecordStore load/save."""

    @pytest.fixture
    def store(self, test_config):
        return RecordStore(test_config)

    def test_load_missing_notes_is_not_found(self, store):
        """Missing notes.json raises RecordNotFoundError and is not created."""
        with pytest.raises(RecordNotFoundError) as exc:
            store.load_notes()

        assert exc.value.message == "Notes file not found"
        assert exc.value.code == ErrorCode.RECORD_NOT_FOUND
        assert not store.notes_path.exists()

    def test_load_missing_notebooks_is_not_found(self, store):
        with pytest.raises(RecordNotFoundError) as exc:
            store.load_notebooks()
        assert exc.value.message == "Notebooks file not found"
        assert not store.notebooks_path.exists()

    def test_load_creates_data_dir(self, store, data_dir):
        assert not data_dir.exists()
        with pytest.raises(RecordNotFoundError):
            store.load_notes()
        assert data_dir.is_dir()

    def test_save_then_load_is_verbatim(self, store):
        """Payloads are stored and returned byte-for-byte."""
        payload = '[ {"id": "1",   "anything": true} ]\n'
        store.save_notes(payload)
        assert store.load_notes() == payload

    def test_save_notebooks_verbatim(self, store, data_dir):
        payload = '[{"id":"1","name":"Work","color":"#2196f3"}]'
        store.save_notebooks(payload)
        assert (data_dir / "notebooks.json").read_text(encoding="utf-8") == payload
        assert store.load_notebooks() == payload

    def test_save_overwrites(self, store):
        store.save_notes("[1]")
        store.save_notes("[2]")
        assert store.load_notes() == "[2]"

    def test_unicode_payload(self, store):
        payload = json.dumps([make_note(title="メモ ✨")], ensure_ascii=False)
        store.save_notes(payload)
        assert store.load_notes() == payload

    def test_read_error_is_storage_error(self, store):
        """A notes path that is a directory surfaces as a storage error."""
        store.notes_path.mkdir(parents=True)
        with pytest.raises(StorageError) as exc:
            store.load_notes()
        assert exc.value.code == ErrorCode.STORAGE_READ_FAILED

    def test_write_error_is_storage_error(self, store):
        store.notes_path.mkdir(parents=True)
        with pytest.raises(StorageError) as exc:
            store.save_notes("[]")
        assert exc.value.code == ErrorCode.STORAGE_WRITE_FAILED

    def test_typed_round_trip(self, store):
        store.write_notebooks(default_notebooks())
        assert store.read_notebooks() == default_notebooks()

        store.save_notes(notes_payload(make_note(tags=["x"])))
        notes = store.read_notes()
        assert notes[0].tags == ["x"]


class TestParsing:
    """Tests for the collection parsers."""

    def test_parse_notes(self):
        notes = parse_notes(notes_payload(make_note(), make_note(id="2")))
        assert [n.id for n in notes] == ["1", "2"]

    def test_parse_notes_rejects_malformed_json(self):
        with pytest.raises(RecordParseError) as exc:
            parse_notes("[{not json")
        assert exc.value.code == ErrorCode.RECORD_PARSE_FAILED
        assert exc.value.record_kind == "notes"

    def test_parse_notes_rejects_wrong_shape(self):
        with pytest.raises(RecordParseError):
            parse_notes('{"id": "1"}')

    def test_parse_notebooks_rejects_missing_fields(self):
        with pytest.raises(RecordParseError):
            parse_notebooks('[{"id": "1"}]')
