"""
Notebook Service.

The entry point the presentation layer talks to. Runs the startup
sequence, keeps an in-memory copy of all notes, and routes every
mutation through the repositories.

The document store is the source of truth. Every mutation is written to
the store first and only applied to the in-memory copy once the write
succeeded, so a failed write never leaves the two out of step.

Usage:
    notebook = get_notebook()
    settings = await notebook.start()
    note = await notebook.save_note(NoteDraft(title="Groceries"))
    await notebook.lock_note(note.id, "secret")
"""

from collections.abc import Mapping
from typing import Any

from notemaster.core.exceptions import StoreUnavailableError, WrongPasswordError
from notemaster.core.logging import log_with_source
from notemaster.core.security import DEFAULT_PASSWORD_MIN_LENGTH
from notemaster.repositories.note import NoteRepository
from notemaster.repositories.settings import SettingsRepository
from notemaster.schemas.note import Category, Note, NoteDraft
from notemaster.schemas.settings import Language, SettingKey, Theme
from notemaster.services.base import BaseService
from notemaster.services.lock import LockController
from notemaster.services.query import count_by_category, filter_notes
from notemaster.store.database import DocumentStore
from notemaster.store.legacy import LegacyStore
from notemaster.store.migration import LegacyMigrator, MigrationReport

DEFAULT_SETTINGS: dict[SettingKey, Any] = {
    SettingKey.THEME: Theme.LIGHT,
    SettingKey.LANGUAGE: Language.TR,
    SettingKey.SHOW_LINE_NUMBERS: False,
}


class Notebook(BaseService):
    """
    Application-facing façade over notes, settings and note locks.

    Repositories and the lock controller can be injected; by default they
    are built on the given store. password_min_length only applies to the
    default lock controller.
    """

    def __init__(
        self,
        store: DocumentStore,
        legacy: LegacyStore,
        notes: NoteRepository | None = None,
        settings: SettingsRepository | None = None,
        lock: LockController | None = None,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ) -> None:
        super().__init__()
        self.store = store
        self.migrator = LegacyMigrator(store, legacy)
        self.notes = notes or NoteRepository(store)
        self.settings = settings or SettingsRepository(store)
        self.lock = lock or LockController(self.notes, password_min_length)
        self._cache: dict[str, Note] = {}
        self._settings: dict[SettingKey, Any] = {}

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    async def run_legacy_migration(self) -> MigrationReport:
        """Import the legacy store. Call once at startup, before any read."""
        return await self.migrator.migrate()

    async def start(
        self,
        defaults: Mapping[str | SettingKey, Any] | None = None,
    ) -> dict[SettingKey, Any]:
        """
        Migrate legacy data, then load notes and settings into memory.

        When the store is unavailable the notebook still starts, with no
        notes and the default settings.

        Args:
            defaults: Per-key setting defaults, overriding DEFAULT_SETTINGS

        Returns:
            The resolved settings
        """
        resolved_defaults = {**DEFAULT_SETTINGS}
        for key, value in (defaults or {}).items():
            resolved_defaults[SettingKey(key)] = value

        try:
            await self.run_legacy_migration()
            notes = await self.notes.list_all()
            settings = await self.settings.get_all(resolved_defaults)
        except StoreUnavailableError as e:
            log_with_source(
                self._logger, "app", "error",
                "Store unavailable at startup, continuing with defaults",
                error=e.message,
            )
            notes, settings = [], resolved_defaults

        self._cache = {note.id: note for note in notes}
        self._settings = dict(settings)
        self._log_operation("Notebook started", notes=len(self._cache))
        return dict(self._settings)

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    async def list_notes(self) -> list[Note]:
        """Read every note from the store and refresh the in-memory copy."""
        notes = await self.notes.list_all()
        self._cache = {note.id: note for note in notes}
        return [note.model_copy(deep=True) for note in notes]

    def cached_notes(self) -> list[Note]:
        """Snapshots of the in-memory notes, without touching the store."""
        return [note.model_copy(deep=True) for note in self._cache.values()]

    async def save_note(self, draft: NoteDraft, note_id: str | None = None) -> Note:
        """Create or update a note. See NoteRepository.save()."""
        note = await self.notes.save(draft, note_id)
        self._remember(note)
        self._log_debug("Note saved", note_id=note.id)
        return note

    async def delete_note(self, note_id: str) -> None:
        """Delete a note. Deleting an unknown id is a no-op."""
        await self.notes.delete(note_id)
        self._cache.pop(note_id, None)
        self.lock.revoke(note_id)
        self._log_operation("Note deleted", note_id=note_id)

    def filtered_notes(self, category: Category | str | None = None, query: str = "") -> list[Note]:
        """In-memory notes filtered by category and search text, newest first."""
        return filter_notes(self.cached_notes(), category=category, query=query)

    def category_counts(self) -> dict[str, int]:
        return count_by_category(self._cache.values())

    # -------------------------------------------------------------------------
    # Locks
    # -------------------------------------------------------------------------

    async def lock_note(self, note_id: str, password: str) -> Note:
        note = await self.lock.lock(note_id, password)
        self._remember(note)
        return note

    async def open_note(self, note_id: str, password: str) -> Note:
        """Open a note, raising WrongPasswordError on a wrong password."""
        return await self.lock.open_note(note_id, password)

    async def unlock_for_open(self, note_id: str, password: str) -> bool:
        return await self.lock.unlock_for_open(note_id, password)

    async def unlock_to_remove_lock(self, note_id: str, password: str) -> bool:
        try:
            note = await self.lock.remove_lock(note_id, password)
        except WrongPasswordError:
            return False
        self._remember(note)
        return True

    def _remember(self, note: Note) -> None:
        self._cache[note.id] = note.model_copy(deep=True)

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    async def get_setting(self, key: str | SettingKey, default: Any) -> Any:
        """Stored value for key, or default. Never creates a record."""
        return await self.settings.get(key, default)

    async def put_setting(self, key: str | SettingKey, value: Any) -> None:
        validated = await self.settings.put(key, value)
        self._settings[SettingKey(key)] = validated
        self._log_debug("Setting saved", key=SettingKey(key).value)

    @property
    def current_settings(self) -> dict[SettingKey, Any]:
        """Settings as loaded at start and updated by put_setting()."""
        return dict(self._settings)


# Module-level state for lazy initialization
_notebook: Notebook | None = None


def get_notebook() -> Notebook:
    """
    Get the application notebook, creating it on first use.

    Built on get_store(), the configured legacy file and the password
    rules from security.yaml. Nothing is opened until start().
    """
    global _notebook
    if _notebook is None:
        from notemaster.core.config import get_app_config, get_legacy_path
        from notemaster.store.database import get_store

        _notebook = Notebook(
            get_store(),
            LegacyStore(get_legacy_path()),
            password_min_length=get_app_config().security.password_min_length,
        )
    return _notebook
