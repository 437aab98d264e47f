"""
Document Store.

Embedded asynchronous document store on SQLite, using SQLAlchemy's async
engine with the aiosqlite driver. Holds two independent collections:
notes keyed by "id" and settings keyed by "key". Each document is kept
whole in a JSON column and replaced wholesale on every put.

Uses lazy initialization: nothing touches the disk until the first
operation, and every operation waits for one successful open().

Usage:
    store = DocumentStore("sqlite+aiosqlite:///data/notemaster.db")
    await store.put(Collection.NOTES, {"id": "a", "title": "X", ...})
    notes = await store.get_all(Collection.NOTES)
    await store.close()
"""

import asyncio
from pathlib import Path
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from notemaster.core.exceptions import StoreUnavailableError, ValidationError
from notemaster.core.logging import get_logger, log_with_source
from notemaster.models.base import Base
from notemaster.models.document import Collection

logger = get_logger(__name__)

SCHEMA_VERSION = 1

_MEMORY_DATABASES = (None, "", ":memory:")


class DocumentStore:
    """
    Asynchronous store for the notes and settings collections.

    Operations on one collection are serialized by a per-collection lock,
    and every write runs in its own transaction, so a put or delete is
    never observed half-applied. Concurrent open() calls collapse into a
    single initialization.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self._url = url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._open_lock = asyncio.Lock()
        self._locks = {collection: asyncio.Lock() for collection in Collection}

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def __aenter__(self) -> "DocumentStore":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def open(self) -> None:
        """
        Open the store, creating both collections if absent.

        Idempotent and safe to call from several coroutines at once. A
        failed open leaves the store closed, so a later call retries.

        Raises:
            StoreUnavailableError: If the database cannot be opened or its
                schema version is newer than this release supports
        """
        if self._engine is not None:
            return

        async with self._open_lock:
            if self._engine is not None:
                return

            engine: AsyncEngine | None = None
            try:
                engine = self._create_engine()
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                    result = await conn.exec_driver_sql("PRAGMA user_version")
                    version = result.scalar_one()
                    if version > SCHEMA_VERSION:
                        raise StoreUnavailableError(
                            f"Store schema version {version} is newer than "
                            f"supported version {SCHEMA_VERSION}"
                        )
                    if version < SCHEMA_VERSION:
                        await conn.exec_driver_sql(f"PRAGMA user_version = {SCHEMA_VERSION}")
            except StoreUnavailableError as e:
                await self._discard(engine)
                log_with_source(logger, "store", "error", "Document store rejected", error=e.message)
                raise
            except (SQLAlchemyError, OSError) as e:
                await self._discard(engine)
                log_with_source(
                    logger, "store", "error", "Document store could not be opened", error=str(e)
                )
                raise StoreUnavailableError("Document store could not be opened") from e

            self._engine = engine
            logger.info(
                "Document store opened",
                extra={"schema_version": SCHEMA_VERSION},
            )

    async def close(self) -> None:
        """Dispose of the engine. The store can be opened again afterwards."""
        async with self._open_lock:
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None
                logger.debug("Document store closed")

    def _create_engine(self) -> AsyncEngine:
        database = make_url(self._url).database
        if database in _MEMORY_DATABASES:
            return create_async_engine(
                self._url,
                echo=self._echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )

        Path(database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(self._url, echo=self._echo)
        logger.debug("Store engine created", extra={"database": database})
        return engine

    @staticmethod
    async def _discard(engine: AsyncEngine | None) -> None:
        if engine is not None:
            await engine.dispose()

    # -------------------------------------------------------------------------
    # Collection operations
    # -------------------------------------------------------------------------

    async def get_all(self, collection: Collection) -> list[dict[str, Any]]:
        """Return every document in the collection, in no particular order."""
        model = collection.model
        rows = await self._read("get_all", collection, select(model.data))
        return [dict(row) for row in rows]

    async def get(self, collection: Collection, key: str) -> dict[str, Any] | None:
        """
        Return the document stored under key.

        Returns:
            The document, or None when no document has that key
        """
        model = collection.model
        key_column = getattr(model, collection.key_field)
        rows = await self._read(
            "get",
            collection,
            select(model.data).where(key_column == key),
        )
        return dict(rows[0]) if rows else None

    async def put(self, collection: Collection, document: dict[str, Any]) -> None:
        """
        Insert or replace a document by its key field.

        Raises:
            ValidationError: If the document has no usable key
        """
        key_field = collection.key_field
        key = document.get(key_field)
        if not isinstance(key, str) or not key:
            raise ValidationError(
                f"Document for {collection.value} has no '{key_field}'",
                details={"missing_fields": [key_field]},
            )

        statement = sqlite_insert(collection.model).values({key_field: key, "data": document})
        statement = statement.on_conflict_do_update(
            index_elements=[key_field],
            set_={"data": statement.excluded.data},
        )
        await self._write("put", collection, statement)

    async def delete(self, collection: Collection, key: str) -> None:
        """Remove the document stored under key. A missing key is not an error."""
        model = collection.model
        key_column = getattr(model, collection.key_field)
        await self._write("delete", collection, delete(model).where(key_column == key))

    async def get_setting(self, key: str) -> dict[str, Any] | None:
        """Return the {key, value} document for a setting, or None."""
        return await self.get(Collection.SETTINGS, key)

    async def put_setting(self, key: str, value: Any) -> None:
        """Upsert a setting value."""
        await self.put(Collection.SETTINGS, {"key": key, "value": value})

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    async def _read(self, operation: str, collection: Collection, statement: Any) -> list[Any]:
        await self.open()
        async with self._locks[collection]:
            try:
                async with self._engine.connect() as conn:
                    result = await conn.execute(statement)
                    return list(result.scalars().all())
            except SQLAlchemyError as e:
                raise self._unavailable(operation, collection, e) from e

    async def _write(self, operation: str, collection: Collection, statement: Any) -> None:
        await self.open()
        async with self._locks[collection]:
            try:
                async with self._engine.begin() as conn:
                    await conn.execute(statement)
            except SQLAlchemyError as e:
                raise self._unavailable(operation, collection, e) from e

    @staticmethod
    def _unavailable(
        operation: str,
        collection: Collection,
        error: Exception,
    ) -> StoreUnavailableError:
        log_with_source(
            logger, "store", "error", "Document store operation failed",
            operation=operation, collection=collection.value, error=str(error),
        )
        return StoreUnavailableError(f"Store operation failed: {operation} on {collection.value}")


# Module-level state for lazy initialization
_store: DocumentStore | None = None


def get_store() -> DocumentStore:
    """
    Get the application document store, creating it on first use.

    The location comes from store.yaml or NOTEMASTER_STORE_PATH. The store
    is not opened until its first operation.
    """
    global _store
    if _store is None:
        from notemaster.core.config import get_app_config, get_store_url

        _store = DocumentStore(get_store_url(), echo=get_app_config().store.echo)
    return _store
