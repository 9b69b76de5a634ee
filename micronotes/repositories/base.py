"""
Base Repository.

Base class for repositories backed by a table on the hosted REST interface.
Translates transport failures and error responses into application errors
so callers only ever see ApplicationError subclasses.
"""

from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from micronotes.client import RestClient
from micronotes.core.exceptions import ExternalServiceError, NotFoundError
from micronotes.core.logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)

RETURN_REPRESENTATION = {"Prefer": "return=representation"}


def error_message(response: httpx.Response) -> str:
    """
    Extract a human-readable message from an error response.

    The service answers errors with a JSON body carrying `message`; anything
    else falls back to the raw text or the status line.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "msg"):
            if body.get(key):
                return str(body[key])

    text = response.text.strip()
    if text:
        return text
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class TableRepository(Generic[ModelType]):
    """
    Repository for one remote table.

    Subclasses set the model class and the default table name:

        class NoteRepository(TableRepository[Note]):
            model = Note
            table = "notes"
    """

    model: type[ModelType]
    table: str

    def __init__(self, client: RestClient, table: str | None = None) -> None:
        self.client = client
        if table is not None:
            self.table = table
        self._list_adapter = TypeAdapter(list[self.model])

    @property
    def path(self) -> str:
        """Path of the table under the REST base URL."""
        return f"/{self.table}"

    async def _send(self, method: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request to the table.

        Raises:
            ExternalServiceError: On transport failure or a non-2xx response
        """
        try:
            response = await self.client.request(method, self.path, **kwargs)
        except httpx.HTTPError as e:
            raise ExternalServiceError(str(e) or e.__class__.__name__) from e

        if response.is_error:
            message = error_message(response)
            logger.warning(
                "Remote table returned an error",
                extra={
                    "table": self.table,
                    "method": method,
                    "status_code": response.status_code,
                    "error": message,
                },
            )
            raise ExternalServiceError(message)

        return response

    def _rows(self, response: httpx.Response) -> list[ModelType]:
        """
        Parse a response body into model instances.

        Raises:
            ExternalServiceError: If the body is not a list of valid rows
        """
        try:
            return self._list_adapter.validate_json(response.content)
        except PydanticValidationError as e:
            raise ExternalServiceError(
                f"Unexpected response from {self.table}: {e.error_count()} invalid field(s)"
            ) from e

    def _single(self, response: httpx.Response, not_found: str) -> ModelType:
        """
        Return the first row of a representation response.

        Raises:
            NotFoundError: If the representation is empty
        """
        rows = self._rows(response)
        if not rows:
            raise NotFoundError(not_found)
        return rows[0]

    @staticmethod
    def eq(value: str) -> str:
        """Equality filter operand."""
        return f"eq.{value}"
