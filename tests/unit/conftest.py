"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching a real store.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notemaster.repositories.note import NoteRepository
from notemaster.repositories.settings import SettingsRepository
from notemaster.store.database import DocumentStore
from notemaster.store.legacy import LegacyStore


# =============================================================================
# Store Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_store() -> AsyncMock:
    """
    Mock document store for unit tests.

    Usage:
        def test_repository(mock_store: AsyncMock):
            mock_store.get.return_value = {"id": "a"}
    """
    return AsyncMock(spec=DocumentStore)


@pytest.fixture
def mock_legacy() -> MagicMock:
    """Mock legacy key-value store holding no keys."""
    legacy = MagicMock(spec=LegacyStore)
    legacy.get_item.return_value = None
    legacy.keys.return_value = []
    return legacy


# =============================================================================
# Repository Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_note_repository() -> AsyncMock:
    """NoteRepository with every coroutine mocked."""
    return AsyncMock(spec=NoteRepository)


@pytest.fixture
def mock_settings_repository() -> AsyncMock:
    """SettingsRepository with every coroutine mocked."""
    return AsyncMock(spec=SettingsRepository)
