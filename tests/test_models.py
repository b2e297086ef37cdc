"""Tests for the data models."""

import json

import pytest
from pydantic import ValidationError

from inkflow.models.schema import (
    Note,
    Notebook,
    NoteStatus,
    default_notebooks,
    default_notes,
    notebooks_to_json,
    notes_to_json,
)
from tests.fakes import make_note


class TestNote:
    """Tests for the Note model."""

    def test_accepts_camel_case_wire_names(self):
        note = Note.model_validate(make_note(notebookId="nb7", createdAt=5, updatedAt=9))
        assert note.notebook_id == "nb7"
        assert note.created_at == 5
        assert note.updated_at == 9

    def test_accepts_snake_case_names(self):
        note = Note(
            id="a", title="t", content="", notebook_id="nb", created_at=1, updated_at=2
        )
        assert note.notebook_id == "nb"

    def test_status_and_pinned_default(self):
        """Notes serialized without status/pinned still load."""
        raw = make_note()
        del raw["status"]
        del raw["pinned"]
        note = Note.model_validate(raw)
        assert note.status == NoteStatus.NONE.value
        assert note.pinned is False

    def test_missing_required_field_rejected(self):
        raw = make_note()
        del raw["title"]
        with pytest.raises(ValidationError):
            Note.model_validate(raw)

    def test_status_is_opaque(self):
        """Statuses outside the UI's set are stored untouched."""
        note = Note.model_validate(make_note(status="draft"))
        assert note.status == "draft"

    def test_serializes_with_wire_names(self):
        note = Note.model_validate(make_note(tags=["a", "b"]))
        data = json.loads(notes_to_json([note]))
        assert data[0]["notebookId"] == "nb1"
        assert data[0]["createdAt"] == 0
        assert data[0]["tags"] == ["a", "b"]
        assert "notebook_id" not in data[0]


class TestDefaults:
    """Tests for the built-in records."""

    def test_default_notebooks(self):
        notebooks = default_notebooks()
        assert [nb.name for nb in notebooks] == ["Daily Notes", "Work", "Learning"]
        assert notebooks[0].color == "#4caf50"

    def test_default_notes_reference_default_notebooks(self):
        notebook_ids = {nb.id for nb in default_notebooks()}
        for note in default_notes():
            assert note.notebook_id in notebook_ids

    def test_default_notes_timestamps(self):
        welcome, cheat_sheet = default_notes()
        assert welcome.title == "Welcome to InkFlow"
        assert welcome.created_at - cheat_sheet.created_at == 86_400_000
        assert cheat_sheet.tags == ["Reference", "Markdown"]

    def test_notebooks_round_trip_through_json(self):
        payload = notebooks_to_json(default_notebooks())
        loaded = [Notebook.model_validate(nb) for nb in json.loads(payload)]
        assert loaded == default_notebooks()
