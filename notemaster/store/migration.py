"""
Legacy Migration.

One-shot import of the legacy key-value store into the document store,
run once at startup before anything is read.

Three independent steps, in order: notes, theme, language. Each step
reads its legacy key, writes the data into the document store, and only
then erases the legacy key. A blank value holds no data and is erased
straight away. A failing step keeps its key so it is retried
on the next start, and never stops the other steps. Notes are upserted
one by one by id, so re-running after an interrupted import neither loses
nor duplicates records.
"""

import json

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from notemaster.core.exceptions import (
    LegacyStoreError,
    MigrationPartialError,
    StoreUnavailableError,
)
from notemaster.core.logging import get_logger, log_with_source
from notemaster.models.document import Collection
from notemaster.schemas.note import Note
from notemaster.schemas.settings import SETTING_TYPES, SettingKey
from notemaster.store.database import DocumentStore
from notemaster.store.legacy import LANGUAGE_KEY, NOTES_KEY, THEME_KEY, LegacyStore

logger = get_logger(__name__)


class MigrationReport(BaseModel):
    """Outcome of one migration run."""

    migrated: list[str] = Field(default_factory=list, description="Legacy keys moved and erased")
    failed: dict[str, str] = Field(default_factory=dict, description="Legacy key to failure reason")
    notes_imported: int = 0

    @property
    def complete(self) -> bool:
        return not self.failed


class LegacyMigrator:
    """Moves legacy notes, theme and language into the document store."""

    def __init__(self, store: DocumentStore, legacy: LegacyStore) -> None:
        self._store = store
        self._legacy = legacy

    async def migrate(self) -> MigrationReport:
        """
        Run every migration step.

        Returns:
            Report of migrated and failed legacy keys

        Raises:
            StoreUnavailableError: If the document store cannot be opened
        """
        await self._store.open()
        report = MigrationReport()

        steps = (
            (NOTES_KEY, self._migrate_notes),
            (THEME_KEY, self._migrate_theme),
            (LANGUAGE_KEY, self._migrate_language),
        )
        for key, step in steps:
            try:
                count = await step()
            except MigrationPartialError as e:
                report.failed[key] = e.reason
                log_with_source(
                    logger, "migration", "error", "Legacy key migration failed",
                    key=key, reason=e.reason,
                )
                continue

            if count is None:
                continue
            report.migrated.append(key)
            if key == NOTES_KEY:
                report.notes_imported = count

        if report.migrated or report.failed:
            log_with_source(
                logger, "migration", "info", "Legacy migration finished",
                migrated=report.migrated,
                failed=sorted(report.failed),
                notes_imported=report.notes_imported,
            )
        return report

    async def _migrate_notes(self) -> int | None:
        raw = self._read(NOTES_KEY)
        if raw is None:
            return None
        if not raw.strip():
            self._erase(NOTES_KEY)
            return 0

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MigrationPartialError(NOTES_KEY, "notes are not valid JSON") from e
        if not isinstance(entries, list):
            raise MigrationPartialError(NOTES_KEY, "notes must be a JSON array")

        try:
            notes = [Note.from_document(entry) for entry in entries]
        except PydanticValidationError as e:
            raise MigrationPartialError(
                NOTES_KEY, f"invalid note ({e.error_count()} errors)"
            ) from e

        for note in notes:
            await self._put(NOTES_KEY, Collection.NOTES, note.to_document())

        self._erase(NOTES_KEY)
        return len(notes)

    async def _migrate_theme(self) -> int | None:
        return await self._migrate_setting(THEME_KEY, SettingKey.THEME)

    async def _migrate_language(self) -> int | None:
        return await self._migrate_setting(LANGUAGE_KEY, SettingKey.LANGUAGE)

    async def _migrate_setting(self, legacy_key: str, setting: SettingKey) -> int | None:
        raw = self._read(legacy_key)
        if raw is None:
            return None
        if not raw.strip():
            self._erase(legacy_key)
            return 0

        adapter = SETTING_TYPES[setting]
        try:
            value = adapter.validate_python(raw)
        except PydanticValidationError as e:
            raise MigrationPartialError(legacy_key, f"unsupported value {raw!r}") from e

        document = {"key": setting.value, "value": adapter.dump_python(value, mode="json")}
        await self._put(legacy_key, Collection.SETTINGS, document)
        self._erase(legacy_key)
        return 1

    def _read(self, key: str) -> str | None:
        try:
            return self._legacy.get_item(key)
        except LegacyStoreError as e:
            raise MigrationPartialError(key, e.message) from e

    def _erase(self, key: str) -> None:
        try:
            self._legacy.remove_item(key)
        except LegacyStoreError as e:
            raise MigrationPartialError(key, e.message) from e

    async def _put(self, key: str, collection: Collection, document: dict) -> None:
        try:
            await self._store.put(collection, document)
        except StoreUnavailableError as e:
            raise MigrationPartialError(key, e.message) from e
