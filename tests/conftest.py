"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Store Configuration:
    Every test that needs a document store gets its own SQLite file under
    pytest's tmp_path, so tests never share state and reopening the same
    URL exercises real durability.
"""

import json
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest

from notemaster.schemas.note import Note
from notemaster.store.database import DocumentStore
from notemaster.store.legacy import LegacyStore


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def store_url(tmp_path) -> str:
    """SQLite URL for a fresh database file in the test's tmp_path."""
    return f"sqlite+aiosqlite:///{tmp_path / 'notemaster.db'}"


@pytest.fixture
async def store(store_url: str) -> AsyncGenerator[DocumentStore, None]:
    """
    Provide a document store for a single test.

    The store opens lazily on first use and is closed after the test.

    Usage:
        async def test_put(store: DocumentStore):
            await store.put(Collection.NOTES, {"id": "a"})
    """
    document_store = DocumentStore(store_url)
    yield document_store
    await document_store.close()


@pytest.fixture
def unavailable_store(tmp_path) -> DocumentStore:
    """A store whose database directory is blocked by a regular file."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return DocumentStore(f"sqlite+aiosqlite:///{blocker / 'notemaster.db'}")


@pytest.fixture
def legacy(tmp_path) -> LegacyStore:
    """Empty legacy key-value store backed by a file in tmp_path."""
    return LegacyStore(tmp_path / "legacy_storage.json")


# =============================================================================
# Data Fixtures
# =============================================================================


def legacy_note(note_id: str = "a", **overrides: Any) -> dict[str, Any]:
    """A note document in the camelCase layout written by earlier releases."""
    document = {
        "id": note_id,
        "title": "X",
        "content": "body",
        "category": "Genel",
        "color": "#0f172a",
        "createdAt": 1_700_000_000_000,
        "updatedAt": 1_700_000_000_000,
    }
    document.update(overrides)
    return document


@pytest.fixture
def make_legacy_note() -> Callable[..., dict[str, Any]]:
    """Factory for legacy note documents."""
    return legacy_note


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Factory for Note instances.

    Usage:
        def test_something(make_note):
            note = make_note("a", title="Groceries")
    """

    def _make(note_id: str = "a", **overrides: Any) -> Note:
        return Note.from_document(legacy_note(note_id, **overrides))

    return _make


@pytest.fixture
def seed_legacy(legacy: LegacyStore) -> Callable[..., LegacyStore]:
    """
    Write legacy keys the way earlier releases stored them.

    Usage:
        seed_legacy(notes=[legacy_note("a")], theme="dark")
    """

    def _seed(notes: list[dict[str, Any]] | None = None, **scalars: str) -> LegacyStore:
        if notes is not None:
            legacy.set_item("notes", json.dumps(notes, ensure_ascii=False))
        for key, value in scalars.items():
            legacy.set_item(key, value)
        return legacy

    return _seed
