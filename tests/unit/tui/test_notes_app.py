"""
Unit Tests for the Notes TUI.

The app runs headless through Textual's pilot with the repository mocked,
so these tests drive the screen exactly as key presses and clicks would
and then assert on both the widgets and the repository calls.
"""

import asyncio

import pytest
from textual.widgets import Button, Input, Static, TextArea

from micronotes.core.exceptions import ExternalServiceError
from micronotes.schemas.note import NoteCreate, NoteUpdate
from micronotes.services.note_store import EMPTY_TITLE_MESSAGE, NoteStore
from micronotes.tui.app import SAVE_LABEL, SAVING_LABEL, NotesApp
from micronotes.tui.widgets import ConfirmDeleteScreen, EditNoteCard, NoteCard, StatusBar


async def settle(app: NotesApp, pilot) -> None:
    """Wait for running operations and the refresh that follows them."""
    await app.workers.wait_for_complete()
    await pilot.pause()


@pytest.fixture
def notes(note_factory):
    older = note_factory("Older", "first body")
    newer = note_factory("Newer", None, is_public=True)
    return [newer, older]


@pytest.fixture
def app(mock_repo, notes) -> NotesApp:
    mock_repo.list_recent.return_value = notes
    return NotesApp(NoteStore(mock_repo))


class TestInitialLoad:
    """Tests for the load on mount."""

    @pytest.mark.asyncio
    async def test_cards_rendered_newest_first(self, app, mock_repo, notes):
        async with app.run_test() as pilot:
            await settle(app, pilot)

            cards = list(app.query(NoteCard))
            assert [card.note.id for card in cards] == [n.id for n in notes]
            assert app.query_one(StatusBar).note_count == 2
            mock_repo.list_recent.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_collection_shows_hint(self, mock_repo):
        app = NotesApp(NoteStore(mock_repo))

        async with app.run_test() as pilot:
            await settle(app, pilot)

            assert not list(app.query(NoteCard))
            assert app.query_one("#list-status", Static).display

    @pytest.mark.asyncio
    async def test_load_failure_shows_error(self, mock_repo):
        mock_repo.list_recent.side_effect = ExternalServiceError("Invalid API key")
        app = NotesApp(NoteStore(mock_repo))

        async with app.run_test() as pilot:
            await settle(app, pilot)

            assert app.store.error == "Failed to load notes: Invalid API key"
            assert app.query_one("#error", Static).display

    @pytest.mark.asyncio
    async def test_triggers_disabled_while_loading(self, mock_repo):
        gate = asyncio.Event()

        async def slow_list():
            await gate.wait()
            return []

        mock_repo.list_recent.side_effect = slow_list
        app = NotesApp(NoteStore(mock_repo))

        async with app.run_test() as pilot:
            await pilot.pause()
            button = app.query_one("#save-note", Button)

            assert button.disabled
            assert str(button.label) == SAVING_LABEL
            assert app.query_one("#new-title", Input).disabled

            gate.set()
            await settle(app, pilot)

            assert not button.disabled
            assert str(button.label) == SAVE_LABEL


class TestCreate:
    """Tests for the creation form."""

    @pytest.mark.asyncio
    async def test_new_note_is_prepended_and_form_cleared(self, app, mock_repo, note_factory):
        created = note_factory("Fresh")
        mock_repo.insert.return_value = created

        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.query_one("#new-title", Input).value = "  Fresh  "

            app.submit_new_note()
            await settle(app, pilot)

            mock_repo.insert.assert_awaited_once_with(
                NoteCreate(title="Fresh", content=None, is_public=False)
            )
            assert list(app.query(NoteCard))[0].note.id == created.id
            assert app.query_one("#new-title", Input).value == ""

    @pytest.mark.asyncio
    async def test_empty_title_is_refused(self, app, mock_repo):
        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.query_one("#new-title", Input).value = "   "

            app.submit_new_note()
            await settle(app, pilot)

            mock_repo.insert.assert_not_awaited()
            assert app.store.error == EMPTY_TITLE_MESSAGE
            assert app.query_one("#error", Static).display

    @pytest.mark.asyncio
    async def test_failed_create_keeps_form(self, app, mock_repo):
        mock_repo.insert.side_effect = ExternalServiceError("duplicate key value")

        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.query_one("#new-title", Input).value = "Keep me"
            app.query_one("#new-content", TextArea).load_text("typed body")

            app.submit_new_note()
            await settle(app, pilot)

            assert app.store.error == "Failed to save note: duplicate key value"
            assert app.query_one("#new-title", Input).value == "Keep me"
            assert app.query_one("#new-content", TextArea).text == "typed body"
            assert len(list(app.query(NoteCard))) == 2

    @pytest.mark.asyncio
    async def test_create_leaves_open_editor_alone(self, app, mock_repo, notes, note_factory):
        created = note_factory("Fresh")
        mock_repo.insert.return_value = created

        async with app.run_test() as pilot:
            await settle(app, pilot)
            await app._begin_edit(notes[1].id)
            await pilot.pause()
            app.query_one(".edit-title", Input).value = "Draft title"
            app.query_one(".edit-content", TextArea).load_text("draft body")

            app.query_one("#new-title", Input).value = "Fresh"
            app.submit_new_note()
            await settle(app, pilot)

            assert app.query_one("#new-title", Input).value == ""
            editors = list(app.query(EditNoteCard))
            assert [editor.buffer.note_id for editor in editors] == [notes[1].id]
            assert app.query_one(".edit-title", Input).value == "Draft title"
            assert app.query_one(".edit-content", TextArea).text == "draft body"
            assert [card.note.id for card in app.query(NoteCard)] == [created.id, notes[0].id]


class TestEdit:
    """Tests for inline editing."""

    @pytest.mark.asyncio
    async def test_edit_and_save(self, app, mock_repo, notes):
        target = notes[1]
        mock_repo.update.return_value = target.model_copy(update={"title": "Renamed"})

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await app._begin_edit(target.id)
            await pilot.pause()
            assert len(list(app.query(EditNoteCard))) == 1

            app.query_one(".edit-title", Input).value = "Renamed"
            app._save_edit(target.id)
            await settle(app, pilot)

            mock_repo.update.assert_awaited_once_with(
                target.id, NoteUpdate(title="Renamed", content="first body")
            )
            assert not list(app.query(EditNoteCard))
            titles = [card.note.title for card in app.query(NoteCard)]
            assert titles == ["Newer", "Renamed"]

    @pytest.mark.asyncio
    async def test_unsaved_edit_survives_refresh(self, app, notes):
        target = notes[0]

        async with app.run_test() as pilot:
            await settle(app, pilot)
            await app._begin_edit(target.id)
            await pilot.pause()

            app.query_one(".edit-title", Input).value = "Half typed"
            await app.refresh_view()
            await pilot.pause()

            assert app.query_one(".edit-title", Input).value == "Half typed"

    @pytest.mark.asyncio
    async def test_failed_save_keeps_editor_open(self, app, mock_repo, notes):
        target = notes[1]
        mock_repo.update.side_effect = ExternalServiceError("permission denied for table notes")

        async with app.run_test() as pilot:
            await settle(app, pilot)
            await app._begin_edit(target.id)
            await pilot.pause()

            app.query_one(".edit-title", Input).value = "Retitled"
            app._save_edit(target.id)
            await settle(app, pilot)

            assert app.store.error == "Failed to update note: permission denied for table notes"
            assert len(list(app.query(EditNoteCard))) == 1
            assert app.query_one(".edit-title", Input).value == "Retitled"
            assert app.query_one(".edit-content", TextArea).text == "first body"
            assert app.store.get(target.id).title == "Older"


class TestDelete:
    """Tests for the two-step delete."""

    @pytest.mark.asyncio
    async def test_confirmed_delete_removes_card(self, app, mock_repo, notes):
        target = notes[0]
        mock_repo.delete.return_value = target

        async with app.run_test() as pilot:
            await settle(app, pilot)

            await app._ask_delete(target.id)
            await pilot.pause()
            assert isinstance(app.screen, ConfirmDeleteScreen)
            mock_repo.delete.assert_not_awaited()

            await pilot.click("#confirm-delete")
            await settle(app, pilot)

            mock_repo.delete.assert_awaited_once_with(target.id)
            assert [card.note.id for card in app.query(NoteCard)] == [notes[1].id]

    @pytest.mark.asyncio
    async def test_cancelled_delete_keeps_note(self, app, mock_repo, notes):
        async with app.run_test() as pilot:
            await settle(app, pilot)

            await app._ask_delete(notes[0].id)
            await pilot.pause()
            await pilot.press("escape")
            await settle(app, pilot)

            mock_repo.delete.assert_not_awaited()
            assert app.store.pending_delete is None
            assert len(list(app.query(NoteCard))) == 2


class TestToggle:
    """Tests for the visibility button."""

    @pytest.mark.asyncio
    async def test_toggle_calls_update_with_flipped_flag(self, app, mock_repo, notes):
        target = notes[1]
        mock_repo.update.return_value = target.model_copy(update={"is_public": True})

        async with app.run_test() as pilot:
            await settle(app, pilot)

            app._start(lambda: app.store.toggle_visibility(target.id))
            await settle(app, pilot)

            mock_repo.update.assert_awaited_once_with(target.id, NoteUpdate(is_public=True))
            assert app.store.get(target.id).is_public is True
