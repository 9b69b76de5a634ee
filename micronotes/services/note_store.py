"""
Note Store.

Client-side state for the notes screen. Owns the ordered collection of
notes, the single error message and the operation guard. The collection is
only ever changed after the remote table has accepted a change, and it keeps
the order the service returned (newest first):

    create  → the returned record is prepended
    update  → the returned record replaces the old one at the same position
    toggle  → same as update
    delete  → the record is removed in place

A failed operation leaves the collection exactly as it was and sets the
error message. Nothing is retried.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from micronotes.core.exceptions import (
    ApplicationError,
    OperationInProgressError,
    ValidationError,
)
from micronotes.repositories.note import NoteRepository
from micronotes.schemas.note import (
    Note,
    NoteCreate,
    NoteUpdate,
    normalize_content,
    normalize_title,
)
from micronotes.services.base import BaseService
from micronotes.services.operations import (
    DeleteConfirmation,
    DeleteState,
    OperationGuard,
    OperationResult,
)

T = TypeVar("T")

EMPTY_TITLE_MESSAGE = "Note title cannot be empty."
NOT_FOUND_MESSAGE = "Note not found."

LOAD_FAILED = "Failed to load notes"
SAVE_FAILED = "Failed to save note"
UPDATE_FAILED = "Failed to update note"
DELETE_FAILED = "Failed to delete note"
VISIBILITY_FAILED = "Failed to change visibility"


class NoteStore(BaseService):
    """
    Ordered note collection kept in step with the remote table.

    The store is the only writer of its state; the view reads `notes`,
    `error`, `busy` and `pending_delete` after each operation and re-renders.
    """

    def __init__(self, repo: NoteRepository) -> None:
        super().__init__()
        self.repo = repo
        self._notes: list[Note] = []
        self._error: str | None = None
        self._guard = OperationGuard()
        self._deletion = DeleteConfirmation()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def notes(self) -> tuple[Note, ...]:
        """Snapshot of the collection, newest first."""
        return tuple(self._notes)

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def busy(self) -> bool:
        return self._guard.busy

    @property
    def pending_delete(self) -> str | None:
        """Id of the note awaiting delete confirmation."""
        if self._deletion.state is DeleteState.ARMED:
            return self._deletion.candidate
        return None

    @property
    def delete_state(self) -> DeleteState:
        return self._deletion.state

    def get(self, note_id: str) -> Note | None:
        index = self._index_of(note_id)
        return self._notes[index] if index is not None else None

    def _index_of(self, note_id: str) -> int | None:
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                return index
        return None

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def load(self) -> OperationResult[tuple[Note, ...]]:
        """Fetch every note and replace the collection."""
        self._log_operation("Loading notes")

        def apply(notes: list[Note]) -> tuple[Note, ...]:
            self._notes = list(notes)
            return self.notes

        return await self._run("load", LOAD_FAILED, self.repo.list_recent, apply)

    async def create(self, title: str, content: str | None = None) -> OperationResult[Note]:
        """Validate, insert, and prepend the returned record."""
        self._error = None
        clean_title = normalize_title(title)
        try:
            self._validate_required({"title": clean_title}, ["title"], EMPTY_TITLE_MESSAGE)
        except ValidationError as e:
            return self._fail("create", e.message)

        payload = NoteCreate(
            title=clean_title,
            content=normalize_content(content),
            is_public=False,
        )
        self._log_operation("Creating note", title=clean_title)

        def apply(note: Note) -> Note:
            self._notes.insert(0, note)
            return note

        return await self._run("create", SAVE_FAILED, lambda: self.repo.insert(payload), apply)

    async def update(
        self,
        note_id: str,
        title: str,
        content: str | None = None,
    ) -> OperationResult[Note]:
        """Validate, update, and replace the record in place."""
        self._error = None
        clean_title = normalize_title(title)
        try:
            self._validate_required({"title": clean_title}, ["title"], EMPTY_TITLE_MESSAGE)
        except ValidationError as e:
            return self._fail("update", e.message, note_id=note_id)

        if self._index_of(note_id) is None:
            return self._fail("update", NOT_FOUND_MESSAGE, note_id=note_id)

        payload = NoteUpdate(title=clean_title, content=normalize_content(content))
        self._log_operation("Updating note", note_id=note_id)

        return await self._run(
            "update",
            UPDATE_FAILED,
            lambda: self.repo.update(note_id, payload),
            self._replace,
        )

    async def toggle_visibility(self, note_id: str) -> OperationResult[Note]:
        """Flip is_public on the server and take its version of the record."""
        self._error = None
        current = self.get(note_id)
        if current is None:
            return self._fail("toggle_visibility", NOT_FOUND_MESSAGE, note_id=note_id)

        payload = NoteUpdate(is_public=not current.is_public)
        self._log_operation(
            "Changing note visibility",
            note_id=note_id,
            is_public=payload.is_public,
        )

        return await self._run(
            "toggle_visibility",
            VISIBILITY_FAILED,
            lambda: self.repo.update(note_id, payload),
            self._replace,
        )

    def request_delete(self, note_id: str) -> OperationResult[Note]:
        """Arm a note for deletion. No remote call is made."""
        self._error = None
        note = self.get(note_id)
        if note is None:
            return self._fail("request_delete", NOT_FOUND_MESSAGE, note_id=note_id)
        try:
            self._deletion.arm(note_id)
        except OperationInProgressError as e:
            return self._fail("request_delete", e.message, note_id=note_id)

        self._log_debug("Delete armed", note_id=note_id)
        return OperationResult.success(note)

    def cancel_delete(self) -> None:
        """Drop the armed delete candidate."""
        if self._deletion.state is DeleteState.ARMED:
            self._log_debug("Delete cancelled", note_id=self._deletion.candidate)
        self._deletion.cancel()

    async def confirm_delete(self) -> OperationResult[Note]:
        """Delete the armed candidate and remove it from the collection."""
        self._error = None
        if self.busy:
            # A refused confirm disarms the candidate.
            self._deletion.cancel()
            return self._fail("delete", OperationInProgressError().message)

        try:
            note_id = self._deletion.begin()
        except ValidationError as e:
            return self._fail("delete", e.message)

        self._log_operation("Deleting note", note_id=note_id)

        def apply(deleted: Note) -> Note:
            index = self._index_of(note_id)
            if index is not None:
                del self._notes[index]
            return deleted

        try:
            return await self._run(
                "delete",
                DELETE_FAILED,
                lambda: self.repo.delete(note_id),
                apply,
            )
        finally:
            self._deletion.finish()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _replace(self, note: Note) -> Note:
        index = self._index_of(note.id)
        if index is not None:
            self._notes[index] = note
        return note

    async def _run(
        self,
        operation: str,
        failure_prefix: str,
        call: Callable[[], Awaitable[T]],
        apply: Callable[[T], T],
    ) -> OperationResult[T]:
        """
        Run one remote operation under the guard.

        pending → success: apply the returned value to the collection
                → failure: leave the collection alone and report
        """
        self._error = None
        try:
            with self._guard.held(operation):
                value = await call()
        except OperationInProgressError as e:
            return self._fail(operation, e.message)
        except ApplicationError as e:
            return self._fail(operation, f"{failure_prefix}: {e.message}", code=e.code)

        merged = apply(value)
        self._log_debug(f"{operation} settled", count=len(self._notes))
        return OperationResult.success(merged)

    def _fail(self, operation: str, message: str, **context: object) -> OperationResult:
        self._error = message
        self._log_failure(operation, message, **context)
        return OperationResult.failure(message)
