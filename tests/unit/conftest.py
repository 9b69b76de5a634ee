"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching the remote table.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from micronotes.repositories.note import NoteRepository
from micronotes.services.note_store import NoteStore


# =============================================================================
# Repository / Store Fixtures
# =============================================================================


@pytest.fixture
def mock_repo() -> AsyncMock:
    """
    Mocked NoteRepository.

    Every method is an AsyncMock; set return_value or side_effect per test.

    Usage:
        def test_create(mock_repo):
            mock_repo.insert.return_value = note
    """
    repo = AsyncMock(spec=NoteRepository)
    repo.list_recent.return_value = []
    return repo


@pytest.fixture
def store(mock_repo: AsyncMock) -> NoteStore:
    """NoteStore over the mocked repository."""
    return NoteStore(mock_repo)


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def remote_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set the two required secrets in the environment."""
    values = {
        "SUPABASE_URL": "https://example.supabase.co",
        "SUPABASE_ANON_KEY": "anon-test-key",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    return values


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.get_logger", return_value=mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger
