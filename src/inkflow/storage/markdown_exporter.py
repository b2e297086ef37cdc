"""Markdown export of notes into the sync directory.

Regenerates a flat directory of ``<sanitized-title>.md`` files with a
``key: value`` front matter block, ready to be committed by git. The
directory's markdown contents always reflect the last exported
collection: stale ``.md`` files are removed before new ones are written.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import frontmatter

from inkflow.config import InkflowConfig, get_config
from inkflow.exceptions import ErrorCode, StorageError
from inkflow.models.schema import Note
from inkflow.storage.record_store import parse_notes
from inkflow.utils import has_meaningful_chars, sanitize_filename

logger = logging.getLogger(__name__)

FALLBACK_FILENAME = "untitled"


@dataclass
class ExportResult:
    """Outcome of a markdown export.

    Attributes:
        sync_dir: Absolute path of the sync directory.
        written: File names written, in note order (duplicates included).
        skipped_deletions: Stale files that could not be removed.
        collisions: File names written more than once in this export.
    """

    sync_dir: Path
    written: List[str] = field(default_factory=list)
    skipped_deletions: int = 0
    collisions: List[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(set(self.written))


def render_note(note: Note) -> str:
    """Render a note as markdown with its metadata front matter."""
    lines = [
        "---",
        f"id: {note.id}",
        f"notebook: {note.notebook_id}",
        f"status: {note.status}",
        f"pinned: {'true' if note.pinned else 'false'}",
        f"tags: {', '.join(note.tags)}",
        f"created: {note.created_at}",
        f"updated: {note.updated_at}",
        "---",
        "",
        f"# {note.title}",
        "",
        note.content,
    ]
    return "\n".join(lines)


def parse_exported_note(text: str) -> Note:
    """Parse a file produced by ``render_note`` back into a Note.

    Scalar values are read through YAML, so they are coerced back to
    strings where the model expects strings (``id: 1`` would otherwise
    load as an integer). Trailing whitespace of the content is not
    preserved, and ids YAML reinterprets (leading zeros) may not
    round-trip.

    Raises:
        ValueError: If the front matter has no id or the body no heading.
    """
    post = frontmatter.loads(text)
    metadata = post.metadata

    note_id = metadata.get("id")
    if note_id is None:
        raise ValueError("Note ID missing from front matter")

    body = post.content
    title: Optional[str] = None
    content = ""
    heading, _, rest = body.partition("\n")
    if heading.startswith("# "):
        title = heading[2:]
        content = rest[1:] if rest.startswith("\n") else rest
    if title is None:
        raise ValueError("Note title heading missing from body")

    tags_value = metadata.get("tags") or ""
    if isinstance(tags_value, list):
        tags = [str(t).strip() for t in tags_value if str(t).strip()]
    else:
        tags = [t.strip() for t in str(tags_value).split(",") if t.strip()]

    pinned = metadata.get("pinned", False)
    if isinstance(pinned, str):
        pinned = pinned.lower() == "true"

    return Note(
        id=str(note_id),
        title=title,
        content=content,
        notebook_id=str(metadata.get("notebook") or ""),
        tags=tags,
        status=str(metadata.get("status") or "none"),
        pinned=bool(pinned),
        created_at=int(metadata.get("created") or 0),
        updated_at=int(metadata.get("updated") or 0),
    )


class MarkdownExporter:
    """Writes a note collection into the sync directory.

    Args:
        sync_dir: Target directory. Defaults to the configured sync path.
        max_filename_length: Limit for the sanitized title part of names.
    """

    def __init__(
        self,
        sync_dir: Optional[Path] = None,
        max_filename_length: Optional[int] = None,
        cfg: Optional[InkflowConfig] = None,
    ) -> None:
        cfg = cfg or get_config()
        self.sync_dir = (sync_dir or cfg.get_sync_path()).resolve()
        self.max_filename_length = max_filename_length or cfg.max_filename_length

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_filename(self, note: Note) -> str:
        """Return ``<sanitized-title>.md`` for a note.

        Titles with no alphanumeric character fall back to the sanitized
        note id, then to ``untitled``.
        """
        stem = sanitize_filename(note.title, self.max_filename_length)
        if not has_meaningful_chars(stem):
            id_stem = sanitize_filename(note.id, self.max_filename_length)
            stem = id_stem if has_meaningful_chars(id_stem) else FALLBACK_FILENAME
            logger.debug(
                f"Title of note {note.id} has no usable characters, using '{stem}'"
            )
        return f"{stem}.md"

    def export_json(self, payload: str) -> ExportResult:
        """Parse a serialized note collection and export it.

        Raises:
            RecordParseError: If the payload is not a valid note list.
            StorageError: If the directory or a file cannot be written.
        """
        return self.export(parse_notes(payload))

    def export(self, notes: List[Note]) -> ExportResult:
        """Replace the sync directory's markdown with ``notes``.

        A failed write aborts the export. Files already written and
        deletions already made are left as they are.
        """
        self._ensure_sync_dir()
        result = ExportResult(sync_dir=self.sync_dir)
        result.skipped_deletions = self._clean_old_files()

        seen: Dict[str, str] = {}
        for note in notes:
            filename = self.build_filename(note)
            if filename in seen:
                logger.warning(
                    f"Notes {seen[filename]} and {note.id} both export to "
                    f"{filename}; keeping note {note.id}"
                )
                if filename not in result.collisions:
                    result.collisions.append(filename)
            seen[filename] = note.id

            self._write_file(self.sync_dir / filename, render_note(note))
            result.written.append(filename)

        logger.info(
            f"Exported {len(notes)} notes to {self.sync_dir} "
            f"({result.file_count} files, {result.skipped_deletions} stale files kept)"
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_sync_dir(self) -> None:
        try:
            self.sync_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                str(e),
                operation="create_sync_dir",
                path=str(self.sync_dir),
                code=ErrorCode.EXPORT_WRITE_FAILED,
                original_error=e,
            ) from e

    def _clean_old_files(self) -> int:
        """Remove direct-child .md files. Returns how many could not be removed."""
        try:
            entries = list(self.sync_dir.iterdir())
        except OSError as e:
            raise StorageError(
                str(e),
                operation="clean_sync_dir",
                path=str(self.sync_dir),
                code=ErrorCode.EXPORT_WRITE_FAILED,
                original_error=e,
            ) from e

        skipped = 0
        cleaned = 0
        for md_file in entries:
            if not md_file.name.endswith(".md") or not md_file.is_file():
                continue
            try:
                md_file.unlink()
                cleaned += 1
            except OSError as e:
                skipped += 1
                logger.warning(f"Failed to remove stale export {md_file.name}: {e}")
        if cleaned:
            logger.debug(f"Removed {cleaned} stale markdown files before export")
        return skipped

    @staticmethod
    def _write_file(path: Path, markdown: str) -> None:
        try:
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(markdown)
        except OSError as e:
            raise StorageError(
                str(e),
                operation="write_markdown",
                path=str(path),
                code=ErrorCode.EXPORT_WRITE_FAILED,
                original_error=e,
            ) from e
