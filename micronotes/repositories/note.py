"""
Note Repository.

Data access layer for the remote `notes` table. Implements the four
operations the front end relies on: select ordered by creation time,
insert returning the created row, update by id returning the updated row,
and delete by id.
"""

from micronotes.repositories.base import RETURN_REPRESENTATION, TableRepository
from micronotes.schemas.note import NOTE_COLUMNS, Note, NoteCreate, NoteUpdate


class NoteRepository(TableRepository[Note]):
    """Repository for the remote notes table."""

    model = Note
    table = "notes"

    async def list_recent(self) -> list[Note]:
        """
        Get all notes, newest first.

        Ordering is done by the service; the result is used as-is.
        """
        response = await self._send(
            "GET",
            params={
                "select": ",".join(NOTE_COLUMNS),
                "order": "created_at.desc",
            },
        )
        return self._rows(response)

    async def insert(self, data: NoteCreate) -> Note:
        """
        Insert a note and return the canonical record.

        Returns:
            The created note, with server-assigned id and created_at
        """
        response = await self._send(
            "POST",
            params={"select": ",".join(NOTE_COLUMNS)},
            json=data.model_dump(),
            headers=RETURN_REPRESENTATION,
        )
        return self._single(response, "The service did not return the created note")

    async def update(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Update a note by id and return the updated record.

        Raises:
            NotFoundError: If no row matched the id
        """
        response = await self._send(
            "PATCH",
            params={"id": self.eq(note_id), "select": ",".join(NOTE_COLUMNS)},
            json=data.to_payload(),
            headers=RETURN_REPRESENTATION,
        )
        return self._single(response, f"Note {note_id} no longer exists")

    async def delete(self, note_id: str) -> Note:
        """
        Delete a note by id.

        The deleted row is requested back as confirmation; an empty
        representation means nothing was removed.

        Raises:
            NotFoundError: If no row was deleted
        """
        response = await self._send(
            "DELETE",
            params={"id": self.eq(note_id), "select": ",".join(NOTE_COLUMNS)},
            headers=RETURN_REPRESENTATION,
        )
        return self._single(response, f"Note {note_id} was not deleted")
