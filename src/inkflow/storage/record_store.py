"""JSON record store for notes and notebooks.

Reads and writes the serialized collections verbatim. The typed helpers
(``read_notes`` and friends) parse through the pydantic models for
callers that need structured records.
"""
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from inkflow.config import InkflowConfig, get_config
from inkflow.exceptions import (
    ErrorCode,
    RecordNotFoundError,
    RecordParseError,
    StorageError,
)
from inkflow.models.schema import (
    Note,
    Notebook,
    NotebookList,
    NoteList,
    notebooks_to_json,
    notes_to_json,
)

logger = logging.getLogger(__name__)


def parse_notes(payload: str) -> List[Note]:
    """Deserialize a JSON note collection.

    Raises:
        RecordParseError: If the payload is not a valid note list.
    """
    try:
        return NoteList.validate_json(payload)
    except PydanticValidationError as e:
        raise RecordParseError(
            f"Failed to parse notes: {e}", record_kind="notes", original_error=e
        ) from e


def parse_notebooks(payload: str) -> List[Notebook]:
    """Deserialize a JSON notebook collection."""
    try:
        return NotebookList.validate_json(payload)
    except PydanticValidationError as e:
        raise RecordParseError(
            f"Failed to parse notebooks: {e}",
            record_kind="notebooks",
            original_error=e,
        ) from e


class RecordStore:
    """Pass-through persistence of the notes and notebooks files.

    Args:
        cfg: Configuration providing the data directory and file names.
            Defaults to the global config.
    """

    def __init__(self, cfg: Optional[InkflowConfig] = None) -> None:
        self.config = cfg or get_config()

    @property
    def notes_path(self) -> Path:
        return self.config.get_notes_path()

    @property
    def notebooks_path(self) -> Path:
        return self.config.get_notebooks_path()

    # ------------------------------------------------------------------
    # Raw payloads
    # ------------------------------------------------------------------

    def load_notes(self) -> str:
        """Return the serialized note collection exactly as stored.

        Raises:
            RecordNotFoundError: If notes.json does not exist. The file is
                not created.
            StorageError: If the file exists but cannot be read.
        """
        return self._read(self.notes_path, "notes")

    def save_notes(self, payload: str) -> None:
        """Store the serialized note collection verbatim."""
        self._write(self.notes_path, payload)

    def load_notebooks(self) -> str:
        return self._read(self.notebooks_path, "notebooks")

    def save_notebooks(self, payload: str) -> None:
        self._write(self.notebooks_path, payload)

    # ------------------------------------------------------------------
    # Typed helpers
    # ------------------------------------------------------------------

    def read_notes(self) -> List[Note]:
        return parse_notes(self.load_notes())

    def write_notes(self, notes: List[Note]) -> None:
        self.save_notes(notes_to_json(notes))

    def read_notebooks(self) -> List[Notebook]:
        return parse_notebooks(self.load_notebooks())

    def write_notebooks(self, notebooks: List[Notebook]) -> None:
        self.save_notebooks(notebooks_to_json(notebooks))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_data_dir(self) -> None:
        try:
            self.config.ensure_data_dir()
        except OSError as e:
            raise StorageError(
                str(e),
                operation="create_data_dir",
                path=str(self.config.data_dir),
                code=ErrorCode.STORAGE_WRITE_FAILED,
                original_error=e,
            ) from e

    def _read(self, path: Path, record_kind: str) -> str:
        self._ensure_data_dir()
        if not path.exists():
            raise RecordNotFoundError(record_kind, str(path))
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise StorageError(
                str(e),
                operation="read",
                path=str(path),
                code=ErrorCode.STORAGE_READ_FAILED,
                original_error=e,
            ) from e

    def _write(self, path: Path, payload: str) -> None:
        self._ensure_data_dir()
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as e:
            raise StorageError(
                str(e),
                operation="write",
                path=str(path),
                code=ErrorCode.STORAGE_WRITE_FAILED,
                original_error=e,
            ) from e
        logger.debug(f"Saved {len(payload)} characters to {path.name}")
