"""
Note Schemas.

Pydantic models for the remote `notes` table: the record as returned by the
service and the payloads sent on insert and update.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOTE_COLUMNS = ("id", "title", "content", "created_at", "is_public")


class Note(BaseModel):
    """A note as persisted by the remote table. Replaced whole, never edited."""

    id: str = Field(description="Identifier assigned by the remote store")
    title: str = Field(min_length=1, description="Note title")
    content: str | None = Field(default=None, description="Note content")
    created_at: datetime = Field(description="Creation timestamp assigned by the remote store")
    is_public: bool = Field(default=False, description="Whether the note is public")

    model_config = ConfigDict(frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        # Tables keyed by bigint return numbers; filters only need the text form.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class NoteCreate(BaseModel):
    """Payload for inserting a new note."""

    title: str = Field(..., min_length=1, description="Trimmed note title")
    content: str | None = Field(default=None, description="Trimmed content, or None when blank")
    is_public: bool = False


class NoteUpdate(BaseModel):
    """Payload for updating a note. Only explicitly set fields are sent."""

    title: str | None = Field(default=None, min_length=1)
    content: str | None = None
    is_public: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the fields that were set, keeping an explicit content=None."""
        return self.model_dump(exclude_unset=True)


def normalize_title(title: str | None) -> str:
    """Trim a title. An empty result means the title is missing."""
    return (title or "").strip()


def normalize_content(content: str | None) -> str | None:
    """Trim content; blank content is stored as absent."""
    return (content or "").strip() or None
