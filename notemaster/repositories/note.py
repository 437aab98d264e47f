"""
Note Repository.

Typed access to the notes collection. Owns id assignment and the
timestamp rules; every read hands out a fresh Note the caller may mutate
freely without touching the stored record.
"""

from pydantic import ValidationError as PydanticValidationError

from notemaster.core.exceptions import NotFoundError, ValidationError
from notemaster.core.logging import get_logger, log_with_source
from notemaster.core.utils import new_id, now_ms
from notemaster.models.document import Collection
from notemaster.repositories.base import BaseRepository
from notemaster.schemas.note import Note, NoteDraft

logger = get_logger(__name__)


class NoteRepository(BaseRepository):
    """
    Repository for notes.

    save() creates when no stored note matches the id and updates
    otherwise. Lock fields only change through set_lock().
    """

    collection = Collection.NOTES

    async def list_all(self) -> list[Note]:
        """
        Get every stored note, in no particular order.

        A stored document that is no longer a valid note is logged and
        left out, so one damaged record never hides the others.
        """
        notes = []
        for document in await self._all_documents():
            try:
                notes.append(Note.from_document(document))
            except PydanticValidationError as e:
                log_with_source(
                    logger, "store", "warning", "Skipping invalid stored note",
                    note_id=document.get("id"), errors=e.error_count(),
                )
        return notes

    async def get_or_none(self, note_id: str) -> Note | None:
        """
        Get a note by id, returning None if not found.

        Raises:
            ValidationError: If the stored document is not a valid note
        """
        document = await self._get_document(note_id)
        if document is None:
            return None
        try:
            return Note.from_document(document)
        except PydanticValidationError as e:
            raise ValidationError(
                "Stored note is invalid",
                details={"note_id": note_id, "errors": e.error_count()},
            ) from e

    async def get(self, note_id: str) -> Note:
        """
        Get a note by id.

        Raises:
            NotFoundError: If no note has this id
        """
        note = await self.get_or_none(note_id)
        if note is None:
            raise NotFoundError("Note not found")
        return note

    async def save(self, draft: NoteDraft, note_id: str | None = None) -> Note:
        """
        Create or update a note.

        Without an id, or with an id that matches no stored note, a new note
        is created with a fresh id and both timestamps set to now. With a
        matching id the fields set on the draft overlay the stored note,
        updatedAt is refreshed and createdAt is kept.

        Args:
            draft: Note fields from the caller
            note_id: Id of the note being edited, if any

        Returns:
            The saved note
        """
        existing = await self.get_or_none(note_id) if note_id else None
        now = now_ms()

        if existing is None:
            note = Note(
                id=new_id(),
                created_at=now,
                updated_at=now,
                **draft.model_dump(),
            )
        else:
            fields = existing.model_dump()
            fields.update(draft.model_dump(exclude_unset=True))
            fields["updated_at"] = max(now, existing.updated_at)
            note = Note.model_validate(fields)

        await self._put_document(note.to_document())
        return note

    async def set_lock(self, note_id: str, digest: str | None) -> Note:
        """
        Set or clear a note's password digest.

        A digest locks the note; None unlocks it and removes the digest
        from the stored document entirely.

        Raises:
            NotFoundError: If no note has this id
        """
        existing = await self.get(note_id)
        fields = existing.model_dump()
        fields["is_locked"] = digest is not None
        fields["password_digest"] = digest
        fields["updated_at"] = max(now_ms(), existing.updated_at)
        note = Note.model_validate(fields)

        await self._put_document(note.to_document())
        return note
