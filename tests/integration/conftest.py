"""
Integration Test Fixtures.

Fixtures for integration tests - the real RestClient, NoteRepository and
NoteStore talk to an in-memory notes table served through
httpx.MockTransport. The table speaks enough of the REST dialect of the
hosted service (select, order, eq filters, return=representation) for the
whole stack to be exercised without a network.
"""

import json
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from micronotes.client import RestClient
from micronotes.repositories.note import NoteRepository
from micronotes.services.note_store import NoteStore

BASE_URL = "https://example.supabase.co/rest/v1"
API_KEY = "anon-integration-key"


class FakeNotesTable:
    """
    In-memory notes table behind a REST interface.

    Rows get server-side ids and creation timestamps. `fail_next` makes the
    next request answer with an error body, the way the service reports
    rejected requests.
    """

    def __init__(self, table: str = "notes") -> None:
        self.table = table
        self.rows: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self._next_id = 1
        self._clock = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
        self._failure: tuple[int, str] | None = None

    def seed(self, title: str, content: str | None = None, is_public: bool = False) -> dict[str, Any]:
        row = {
            "id": self._next_id,
            "title": title,
            "content": content,
            "created_at": self._tick().isoformat(),
            "is_public": is_public,
        }
        self._next_id += 1
        self.rows.append(row)
        return row

    def fail_next(self, status: int, message: str) -> None:
        self._failure = (status, message)

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("apikey") != API_KEY:
            return httpx.Response(401, json={"message": "Invalid API key"})
        if request.url.path != f"/rest/v1/{self.table}":
            return httpx.Response(404, json={"message": f"relation \"{self.table}\" does not exist"})
        if self._failure is not None:
            status, message = self._failure
            self._failure = None
            return httpx.Response(status, json={"message": message})

        handler = {
            "GET": self._select,
            "POST": self._insert,
            "PATCH": self._update,
            "DELETE": self._delete,
        }[request.method]
        return handler(request)

    def _matching(self, request: httpx.Request) -> list[dict[str, Any]]:
        id_filter = request.url.params.get("id")
        if id_filter is None:
            return list(self.rows)
        wanted = id_filter.removeprefix("eq.")
        return [row for row in self.rows if str(row["id"]) == wanted]

    def _select(self, request: httpx.Request) -> httpx.Response:
        rows = self._matching(request)
        if request.url.params.get("order") == "created_at.desc":
            rows.sort(key=lambda row: row["created_at"], reverse=True)
        return httpx.Response(200, json=rows)

    def _insert(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        row = self.seed(payload["title"], payload.get("content"), payload.get("is_public", False))
        return httpx.Response(201, json=[row])

    def _update(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        rows = self._matching(request)
        for row in rows:
            row.update(payload)
        return httpx.Response(200, json=rows)

    def _delete(self, request: httpx.Request) -> httpx.Response:
        rows = self._matching(request)
        self.rows = [row for row in self.rows if row not in rows]
        return httpx.Response(200, json=rows)


# =============================================================================
# Stack Fixtures
# =============================================================================


@pytest.fixture
def notes_table() -> FakeNotesTable:
    """Empty in-memory notes table."""
    return FakeNotesTable()


@pytest.fixture
async def rest_client(notes_table: FakeNotesTable) -> AsyncGenerator[RestClient, None]:
    """RestClient wired to the in-memory table."""
    client = RestClient(
        base_url=BASE_URL,
        api_key=API_KEY,
        transport=httpx.MockTransport(notes_table),
    )
    yield client
    await client.close()


@pytest.fixture
def note_store(rest_client: RestClient) -> NoteStore:
    """NoteStore over the real repository and client."""
    return NoteStore(NoteRepository(rest_client))
