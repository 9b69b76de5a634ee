"""
Base Service.

Base class for client-side services providing common patterns: logging
context and validation of user input before any remote call is made.

Usage:
    from micronotes.services.base import BaseService

    class NoteStore(BaseService):
        def __init__(self, repo: NoteRepository) -> None:
            super().__init__()
            self.repo = repo
"""

from typing import Any

from micronotes.core.exceptions import ValidationError
from micronotes.core.logging import get_logger


class BaseService:
    """
    Base class for all services.

    Provides:
    - Logging context
    - Common validation patterns
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
        message: str = "Required fields missing",
    ) -> None:
        """
        Validate that required fields are present and not blank.

        Args:
            fields: Dictionary of field names to values
            field_names: List of required field names
            message: Error message used when a field is missing

        Raises:
            ValidationError: If any required field is missing or blank
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)

        if missing:
            raise ValidationError(message, details={"missing_fields": missing})

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_failure(
        self,
        operation: str,
        error: str,
        **context: Any,
    ) -> None:
        """Log a failed operation at warning level."""
        self._logger.warning(
            f"{operation} failed",
            extra={"service": self.__class__.__name__, "error": error, **context},
        )
