"""Operation surface of the InkFlow data layer.

One method per UI command. Each returns a string payload on success and
raises an ``InkflowError`` subclass on failure; the error's ``message``
is the text handed back to the UI.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from inkflow.config import InkflowConfig, get_config
from inkflow.exceptions import RecordNotFoundError
from inkflow.models.schema import Note, default_notebooks, default_notes
from inkflow.observability import timed_operation
from inkflow.storage.git_wrapper import GitOperator, GitRunner, SubprocessGitRunner
from inkflow.storage.markdown_exporter import ExportResult, MarkdownExporter
from inkflow.storage.record_store import RecordStore

logger = logging.getLogger(__name__)


def search_notes(notes: List[Note], query: str) -> List[Note]:
    """Filter notes by a case-insensitive substring of title, content or tag.

    A blank query matches every note.
    """
    if not query.strip():
        return list(notes)

    lower_query = query.lower()
    return [
        note
        for note in notes
        if lower_query in note.title.lower()
        or lower_query in note.content.lower()
        or any(lower_query in tag.lower() for tag in note.tags)
    ]


class InkflowService:
    """Stateless facade over the record store, exporter and git operator."""

    def __init__(
        self,
        cfg: Optional[InkflowConfig] = None,
        record_store: Optional[RecordStore] = None,
        exporter: Optional[MarkdownExporter] = None,
        git_runner: Optional[GitRunner] = None,
    ) -> None:
        self.config = cfg or get_config()
        self.record_store = record_store or RecordStore(self.config)
        self.exporter = exporter or MarkdownExporter(cfg=self.config)
        self.git = GitOperator(
            git_runner
            or SubprocessGitRunner(
                executable=self.config.git_executable,
                timeout=self.config.git_timeout,
            )
        )

    # Record store -------------------------------------------------------

    def load_notes(self) -> str:
        with timed_operation("load_notes"):
            return self.record_store.load_notes()

    def save_notes(self, notes_json: str) -> None:
        with timed_operation("save_notes"):
            self.record_store.save_notes(notes_json)

    def load_notebooks(self) -> str:
        with timed_operation("load_notebooks"):
            return self.record_store.load_notebooks()

    def save_notebooks(self, notebooks_json: str) -> None:
        with timed_operation("save_notebooks"):
            self.record_store.save_notebooks(notebooks_json)

    def ensure_defaults(self) -> Dict[str, bool]:
        """Write the built-in notebooks and notes where no file exists yet.

        Returns:
            Which collections were seeded, keyed by ``notes``/``notebooks``.
        """
        seeded = {"notes": False, "notebooks": False}
        with timed_operation("ensure_defaults") as op:
            if not self.record_store.notebooks_path.exists():
                self.record_store.write_notebooks(default_notebooks())
                seeded["notebooks"] = True
            if not self.record_store.notes_path.exists():
                self.record_store.write_notes(default_notes())
                seeded["notes"] = True
            op.update(seeded)
        if any(seeded.values()):
            logger.info(f"Seeded default records: {seeded}")
        return seeded

    def search_notes(self, query: str) -> List[Note]:
        """Search the stored notes. A missing notes file yields no results."""
        with timed_operation("search_notes", query=query[:30]) as op:
            try:
                notes = self.record_store.read_notes()
            except RecordNotFoundError:
                notes = []
            matches = search_notes(notes, query)
            op["result_count"] = len(matches)
            return matches

    # Export -------------------------------------------------------------

    def export(self, notes_json: str) -> ExportResult:
        """Export and return the detailed result."""
        with timed_operation("export_notes_as_markdown") as op:
            result = self.exporter.export_json(notes_json)
            op["file_count"] = result.file_count
            op["skipped_deletions"] = result.skipped_deletions
            return result

    def export_notes_as_markdown(self, notes_json: str) -> str:
        """Regenerate the sync directory and return its absolute path."""
        return str(self.export(notes_json).sync_dir)

    # Git ----------------------------------------------------------------

    def git_status(self, path: Union[str, Path]) -> str:
        with timed_operation("git_status"):
            return self.git.status(path)

    def git_add_all(self, path: Union[str, Path]) -> str:
        with timed_operation("git_add_all"):
            return self.git.add_all(path)

    def git_commit(self, path: Union[str, Path], message: str) -> str:
        with timed_operation("git_commit"):
            return self.git.commit(path, message)

    def git_push(self, path: Union[str, Path]) -> str:
        with timed_operation("git_push"):
            return self.git.push(path)

    def git_pull(self, path: Union[str, Path]) -> str:
        with timed_operation("git_pull"):
            return self.git.pull(path)
