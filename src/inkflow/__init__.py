"""
InkFlow - local data layer for the InkFlow note-taking application.
This package persists notes and notebooks as JSON documents, exports notes
as Markdown files with front matter, and drives git to synchronize the
exported directory with a remote repository.

This version uses synchronous operations.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("inkflow")
except PackageNotFoundError:
    __version__ = "0.3.0"
