"""Data models for the InkFlow data layer."""

import time
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, TypeAdapter


class NoteStatus(str, Enum):
    """Workflow states the InkFlow UI assigns to notes.

    The data layer stores ``Note.status`` as an opaque string; these values
    are only used for the built-in notes.
    """

    NONE = "none"
    ACTIVE = "active"
    ON_HOLD = "onHold"
    COMPLETED = "completed"
    DROPPED = "dropped"


class Note(BaseModel):
    """A note as serialized by the InkFlow UI.

    Timestamps are epoch milliseconds supplied by the caller and are never
    regenerated here.
    """

    id: str = Field(..., description="Unique note identifier")
    title: str = Field(..., description="Title of the note")
    content: str = Field(..., description="Markdown body of the note")
    notebook_id: str = Field(
        ..., alias="notebookId", description="ID of the owning notebook"
    )
    tags: List[str] = Field(default_factory=list, description="Ordered tag names")
    status: str = Field(default=NoteStatus.NONE.value, description="Workflow status")
    pinned: bool = Field(default=False, description="Whether the note is pinned")
    created_at: int = Field(
        ..., alias="createdAt", description="Creation time (epoch ms)"
    )
    updated_at: int = Field(
        ..., alias="updatedAt", description="Last update time (epoch ms)"
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class Notebook(BaseModel):
    """A notebook grouping notes."""

    id: str = Field(..., description="Unique notebook identifier")
    name: str = Field(..., description="Display name")
    color: str = Field(..., description="Color token, opaque to this layer")

    model_config = {"populate_by_name": True}


NoteList = TypeAdapter(List[Note])
NotebookList = TypeAdapter(List[Notebook])


def notes_to_json(notes: List[Note]) -> str:
    """Serialize notes using the UI's camelCase field names."""
    return NoteList.dump_json(notes, by_alias=True).decode("utf-8")


def notebooks_to_json(notebooks: List[Notebook]) -> str:
    return NotebookList.dump_json(notebooks, by_alias=True).decode("utf-8")


def _now_ms() -> int:
    return int(time.time() * 1000)


def default_notebooks() -> List[Notebook]:
    """Notebooks created on first launch."""
    return [
        Notebook(id="1", name="Daily Notes", color="#4caf50"),
        Notebook(id="2", name="Work", color="#2196f3"),
        Notebook(id="3", name="Learning", color="#ff9800"),
    ]


_WELCOME_CONTENT = """# Welcome to InkFlow

A clean and elegant note-taking app.

## Features

- **Markdown editing** with live preview
- **Notebook organization** for your notes
- **Tag system** for easy categorization
- **Local storage** - your data stays on your device
- **Search** across all your notes

## Getting Started

1. Create a new note by clicking the "New Note" button
2. Write your content using Markdown
3. Switch between edit, split, and preview modes using the toolbar

> Start capturing your thoughts! ✨"""

_CHEAT_SHEET_CONTENT = """# Markdown Cheat Sheet

## Text Formatting

**Bold text** and *italic text*
~~Strikethrough~~

## Headings

# Heading 1
## Heading 2
### Heading 3

## Lists

- Item 1
- Item 2
  - Nested item

1. First
2. Second

## Code

Inline `code` here

```javascript
function hello() {
  console.log("Hello, InkFlow!");
}
```

## Quotes

> This is a blockquote

## Links & Images

[Link text](https://example.com)

## Tables

| Header 1 | Header 2 |
|----------|----------|
| Cell 1   | Cell 2   |"""


def default_notes() -> List[Note]:
    """Notes created on first launch, timestamped relative to now."""
    now = _now_ms()
    day_ago = now - 86_400_000
    return [
        Note(
            id="1",
            title="Welcome to InkFlow",
            content=_WELCOME_CONTENT,
            notebook_id="1",
            tags=["Getting Started"],
            created_at=now,
            updated_at=now,
        ),
        Note(
            id="2",
            title="Markdown Cheat Sheet",
            content=_CHEAT_SHEET_CONTENT,
            notebook_id="3",
            tags=["Reference", "Markdown"],
            created_at=day_ago,
            updated_at=day_ago,
        ),
    ]
