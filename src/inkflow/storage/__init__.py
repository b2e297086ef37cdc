"""Storage layer for the InkFlow data layer."""

from inkflow.storage.git_wrapper import GitOperator, GitResult, SubprocessGitRunner
from inkflow.storage.markdown_exporter import ExportResult, MarkdownExporter
from inkflow.storage.record_store import RecordStore

__all__ = [
    "RecordStore",
    "MarkdownExporter",
    "ExportResult",
    "GitOperator",
    "GitResult",
    "SubprocessGitRunner",
]
