"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Notes are built with `note_factory`, which hands out increasing creation
timestamps so that a list built oldest-first can be reversed into the
newest-first order the remote table returns.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from micronotes.schemas.note import Note

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def note_row(
    note_id: str | int,
    title: str,
    content: str | None = None,
    created_at: datetime = BASE_TIME,
    is_public: bool = False,
) -> dict[str, Any]:
    """A note as the REST interface serializes it."""
    return {
        "id": note_id,
        "title": title,
        "content": content,
        "created_at": created_at.isoformat(),
        "is_public": is_public,
    }


@pytest.fixture
def note_factory() -> Callable[..., Note]:
    """
    Build Note records with increasing created_at.

    Usage:
        def test_something(note_factory):
            a = note_factory("A")
            b = note_factory("B")  # created one minute after A
    """
    counter = {"n": 0}

    def make(
        title: str = "Note",
        content: str | None = None,
        is_public: bool = False,
        note_id: str | None = None,
    ) -> Note:
        counter["n"] += 1
        n = counter["n"]
        return Note(
            id=note_id or f"note-{n}",
            title=title,
            content=content,
            created_at=BASE_TIME + timedelta(minutes=n),
            is_public=is_public,
        )

    return make


@pytest.fixture
def row_factory() -> Callable[..., dict[str, Any]]:
    """Build raw REST rows (see note_row)."""
    return note_row
