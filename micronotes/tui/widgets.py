"""
Note Widgets.

Cards for the notes list, the inline editor and the delete confirmation
dialog. Widgets only render; every action is handled by the app.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Grid, Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static, TextArea

from micronotes.schemas.note import Note
from micronotes.tui.formatting import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_PREVIEW_LENGTH,
    content_preview,
    format_created,
    toggle_label,
    visibility_label,
)


@dataclass
class EditBuffer:
    """Unsaved title/content of the note being edited."""

    note_id: str
    title: str
    content: str


class NoteActionButton(Button):
    """Button that carries the note it acts on."""

    def __init__(self, label: str, note_id: str, note_action: str, variant: str = "default") -> None:
        super().__init__(label, variant=variant, classes=f"note-action {note_action}")
        self.note_id = note_id
        self.note_action = note_action


class NoteCard(Vertical):
    """Read-only card for one note."""

    def __init__(
        self,
        note: Note,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> None:
        super().__init__(classes="note-card")
        self.note = note
        self._preview_length = preview_length
        self._date_format = date_format

    def compose(self) -> ComposeResult:
        note = self.note
        yield Static(Text(note.title), classes="note-title")
        preview = content_preview(note.content, self._preview_length)
        if preview is not None:
            yield Static(Text(preview), classes="note-content")
        yield Static(
            f"Created: {format_created(note.created_at, self._date_format)}",
            classes="note-meta",
        )
        yield Static(f"Public: {visibility_label(note.is_public)}", classes="note-meta")
        with Horizontal(classes="note-actions"):
            yield NoteActionButton("Edit", note.id, "edit")
            yield NoteActionButton("Delete", note.id, "delete", variant="error")
            yield NoteActionButton(toggle_label(note.is_public), note.id, "toggle")


class EditNoteCard(Vertical):
    """Inline editor replacing a card while its note is edited."""

    def __init__(self, buffer: EditBuffer) -> None:
        super().__init__(classes="note-card editing")
        self.buffer = buffer

    def compose(self) -> ComposeResult:
        yield Input(value=self.buffer.title, placeholder="Note title (required)", classes="edit-title")
        yield TextArea(self.buffer.content, classes="edit-content")
        with Horizontal(classes="note-actions"):
            yield NoteActionButton("Save", self.buffer.note_id, "save-edit", variant="primary")
            yield NoteActionButton("Cancel", self.buffer.note_id, "cancel-edit")

    def read_values(self) -> tuple[str, str]:
        """Current title and content typed into the editor."""
        title = self.query_one(".edit-title", Input).value
        content = self.query_one(".edit-content", TextArea).text
        return title, content


class StatusBar(Static):
    """Persistent status bar showing collection size and activity."""

    note_count: reactive[int] = reactive(0)
    busy: reactive[bool] = reactive(False)

    def render(self) -> Text:
        activity = "[yellow]working...[/]" if self.busy else "[green]ready[/]"
        return Text.from_markup(f" Notes: [bold]{self.note_count}[/] | {activity}")


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Asks before a note is deleted. Dismisses with True to delete."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, note_title: str) -> None:
        super().__init__()
        self.note_title = note_title

    def compose(self) -> ComposeResult:
        with Grid(id="dialog"):
            yield Label(
                Text(f'Delete "{self.note_title}"? This cannot be undone.'),
                id="question",
            )
            yield Button("Delete", variant="error", id="confirm-delete")
            yield Button("Cancel", variant="primary", id="cancel-delete")

    @on(Button.Pressed, "#confirm-delete")
    def confirm(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#cancel-delete")
    def cancel(self) -> None:
        self.dismiss(False)

    def action_cancel(self) -> None:
        self.dismiss(False)
