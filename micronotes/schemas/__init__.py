# Pydantic schemas package
from micronotes.schemas.note import (
    NOTE_COLUMNS,
    Note,
    NoteCreate,
    NoteUpdate,
    normalize_content,
    normalize_title,
)

__all__ = [
    "NOTE_COLUMNS",
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "normalize_content",
    "normalize_title",
]
