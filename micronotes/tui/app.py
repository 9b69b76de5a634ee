"""
Notes TUI.

Single-screen terminal front end for the notes table: a creation form, the
list of note cards and a delete confirmation dialog. The screen is a function
of NoteStore state; after every operation it is rebuilt from the store.

While a remote call is in flight every trigger is disabled and the save
button reads "Saving...". The store's guard refuses anything that slips
through (key bindings, queued presses).

Usage:
    app = NotesApp(store, client=client)
    app.run()
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from rich.text import Text
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Button, Footer, Header, Input, Label, Static, TextArea

from micronotes.client import RestClient
from micronotes.core.logging import get_logger, log_with_source
from micronotes.services.note_store import NoteStore
from micronotes.services.operations import OperationResult
from micronotes.tui.formatting import DEFAULT_DATE_FORMAT, DEFAULT_PREVIEW_LENGTH
from micronotes.tui.widgets import (
    ConfirmDeleteScreen,
    EditBuffer,
    EditNoteCard,
    NoteActionButton,
    NoteCard,
    StatusBar,
)

logger = get_logger(__name__)

SAVE_LABEL = "Save Essential Note"
SAVING_LABEL = "Saving..."
LOADING_TEXT = "Loading notes..."
EMPTY_TEXT = "No notes yet. Create your first one!"


class NotesApp(App):
    """Essential micro-knowledge notes."""

    TITLE = "Essential Micro-Knowledge Platform"
    SUB_TITLE = "Simplicity of knowledge"

    CSS = """
    #main {
        padding: 1 2;
    }

    .section-title {
        text-style: bold;
        width: 100%;
        content-align: center middle;
        margin: 1 0;
    }

    #create-section {
        height: auto;
        border-bottom: solid $primary;
        padding-bottom: 1;
    }

    #new-content {
        height: 6;
    }

    #save-note {
        width: 100%;
        margin-top: 1;
    }

    #error {
        color: $error;
        width: 100%;
        content-align: center middle;
        margin-top: 1;
    }

    #list-status {
        color: $text-muted;
        text-style: italic;
        width: 100%;
        content-align: center middle;
    }

    #notes {
        height: auto;
    }

    .note-card {
        height: auto;
        margin: 0 0 1 0;
        padding: 1;
        border: solid $primary;
    }

    .note-card.editing {
        border: double $accent;
    }

    .note-title {
        text-style: bold;
        color: $accent;
    }

    .note-meta {
        color: $text-muted;
    }

    .note-actions {
        height: auto;
        margin-top: 1;
    }

    .edit-content {
        height: 6;
    }

    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text;
        padding: 0 1;
    }

    ConfirmDeleteScreen {
        align: center middle;
    }

    #dialog {
        grid-size: 2;
        grid-gutter: 1 2;
        grid-rows: 1fr 3;
        padding: 0 1;
        width: 60;
        height: 11;
        border: thick $background 80%;
        background: $surface;
    }

    #question {
        column-span: 2;
        height: 1fr;
        width: 1fr;
        content-align: center middle;
    }

    #dialog Button {
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("ctrl+r", "reload", "Reload"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        store: NoteStore,
        client: RestClient | None = None,
        title: str | None = None,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> None:
        super().__init__()
        self.store = store
        self._client = client
        self._preview_length = preview_length
        self._date_format = date_format
        self._editing: EditBuffer | None = None
        if title:
            self.title = title

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="main"):
            with Vertical(id="create-section"):
                yield Label("Add New Note", classes="section-title")
                yield Input(placeholder="Note title (required)", id="new-title")
                yield Label("Content (optional)")
                yield TextArea(id="new-content")
                yield Button(SAVE_LABEL, variant="primary", id="save-note")
                yield Static("", id="error")
            with Vertical(id="list-section"):
                yield Label("My Essential Notes", classes="section-title")
                yield Static("", id="list-status")
                yield Vertical(id="notes")
        yield StatusBar()
        yield Footer()

    async def on_mount(self) -> None:
        self._main = self.query_one("#main", VerticalScroll)
        self._notes_container = self.query_one("#notes", Vertical)
        self._status = self.query_one(StatusBar)
        await self.refresh_view()
        self._start(self.store.load)

    async def on_unmount(self) -> None:
        if self._client is not None:
            await self._client.close()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    async def refresh_view(self) -> None:
        """Rebuild the list and the error line from store state."""
        self._sync_edit_buffer()

        cards = []
        for note in self.store.notes:
            if self._editing is not None and self._editing.note_id == note.id:
                cards.append(EditNoteCard(self._editing))
            else:
                cards.append(NoteCard(note, self._preview_length, self._date_format))

        await self._notes_container.remove_children()
        if cards:
            await self._notes_container.mount_all(cards)

        error = self._main.query_one("#error", Static)
        error.update(Text(self.store.error or ""))
        error.display = bool(self.store.error)

        self._render_busy(self.store.busy)

    def _render_busy(self, busy: bool) -> None:
        for widget in self._main.query("Input, TextArea, Button"):
            widget.disabled = busy
        self._main.query_one("#save-note", Button).label = SAVING_LABEL if busy else SAVE_LABEL

        status = self._main.query_one("#list-status", Static)
        if busy and not self.store.notes:
            status.update(LOADING_TEXT)
            status.display = True
        elif not self.store.notes:
            status.update(EMPTY_TEXT)
            status.display = True
        else:
            status.display = False

        self._status.busy = busy
        self._status.note_count = len(self.store.notes)

    def _sync_edit_buffer(self) -> None:
        # Keeps typed-but-unsaved edits across list rebuilds.
        if self._editing is None:
            return
        for card in self._notes_container.query(EditNoteCard):
            title, content = card.read_values()
            self._editing.title = title
            self._editing.content = content

    # -------------------------------------------------------------------------
    # Operation dispatch
    # -------------------------------------------------------------------------

    def _start(
        self,
        operation: Callable[[], Awaitable[OperationResult]],
        after: Callable[[OperationResult], None] | None = None,
    ) -> None:
        """Disable triggers now, then run the operation in a worker."""
        self._render_busy(True)
        self._perform(operation, after)

    @work(thread=False)
    async def _perform(
        self,
        operation: Callable[[], Awaitable[OperationResult]],
        after: Callable[[OperationResult], None] | None,
    ) -> None:
        result = await operation()
        if not result.ok:
            log_with_source(logger, "tui", "debug", "Operation reported an error", error=result.error)
        if after is not None:
            after(result)
        await self.refresh_view()

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    @on(Button.Pressed, "#save-note")
    @on(Input.Submitted, "#new-title")
    def submit_new_note(self) -> None:
        title_input = self._main.query_one("#new-title", Input)
        content_area = self._main.query_one("#new-content", TextArea)
        title = title_input.value
        content = content_area.text

        def after(result: OperationResult) -> None:
            if result.ok:
                title_input.value = ""
                content_area.load_text("")

        self._start(lambda: self.store.create(title, content), after)

    # -------------------------------------------------------------------------
    # Card actions
    # -------------------------------------------------------------------------

    @on(Button.Pressed, ".note-action")
    async def handle_note_action(self, event: Button.Pressed) -> None:
        button = event.button
        if not isinstance(button, NoteActionButton):
            return
        event.stop()

        action = button.note_action
        note_id = button.note_id
        log_with_source(logger, "tui", "debug", "Note action", action=action, note_id=note_id)

        if action == "edit":
            await self._begin_edit(note_id)
        elif action == "cancel-edit":
            self._editing = None
            await self.refresh_view()
        elif action == "save-edit":
            self._save_edit(note_id)
        elif action == "toggle":
            self._start(lambda: self.store.toggle_visibility(note_id))
        elif action == "delete":
            await self._ask_delete(note_id)

    async def _begin_edit(self, note_id: str) -> None:
        note = self.store.get(note_id)
        if note is None:
            return
        # Starting another edit drops the previous buffer.
        self._editing = EditBuffer(note_id=note.id, title=note.title, content=note.content or "")
        await self.refresh_view()

    def _save_edit(self, note_id: str) -> None:
        self._sync_edit_buffer()
        buffer = self._editing
        if buffer is None or buffer.note_id != note_id:
            return
        title, content = buffer.title, buffer.content

        def after(result: OperationResult) -> None:
            if result.ok:
                self._editing = None

        self._start(lambda: self.store.update(note_id, title, content), after)

    async def _ask_delete(self, note_id: str) -> None:
        result = self.store.request_delete(note_id)
        if not result.ok:
            await self.refresh_view()
            return
        self.push_screen(ConfirmDeleteScreen(result.value.title), self._on_delete_answer)

    def _on_delete_answer(self, confirmed: bool | None) -> None:
        if confirmed:
            if self._editing is not None and self._editing.note_id == self.store.pending_delete:
                self._editing = None
            self._start(self.store.confirm_delete)
        else:
            self.store.cancel_delete()

    # -------------------------------------------------------------------------
    # Bindings
    # -------------------------------------------------------------------------

    def action_reload(self) -> None:
        self._start(self.store.load)
