"""
Base Repository.

Base class for repositories over one document store collection.
"""

from typing import Any

from notemaster.models.document import Collection
from notemaster.store.database import DocumentStore


class BaseRepository:
    """
    Base repository with common document operations.

    Subclasses should set the collection:

        class NoteRepository(BaseRepository):
            collection = Collection.NOTES
    """

    collection: Collection

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def _get_document(self, key: str) -> dict[str, Any] | None:
        return await self.store.get(self.collection, key)

    async def _all_documents(self) -> list[dict[str, Any]]:
        return await self.store.get_all(self.collection)

    async def _put_document(self, document: dict[str, Any]) -> None:
        await self.store.put(self.collection, document)

    async def delete(self, key: str) -> None:
        """Delete a document by key. Deleting a missing key is a no-op."""
        await self.store.delete(self.collection, key)

    async def exists(self, key: str) -> bool:
        """Check if a document exists by key."""
        return await self._get_document(key) is not None
