"""
Lock Controller.

State machine guarding note content behind a password.

States come from the note itself, never stored separately:
    UNLOCKED  is_locked is False, no digest
    LOCKED    is_locked is True, digest present

Transitions:
    lock                    UNLOCKED -> LOCKED
    open (right password)   LOCKED -> LOCKED, content readable this session
    remove lock (right pw)  LOCKED -> UNLOCKED, digest removed
    wrong password          no change, retry always allowed

Changing a password is remove-lock followed by lock.

The prompts a caller shows while waiting for a password (set a password,
or enter one to open / remove the lock) are described by LockPrompt and
never persisted.
"""

from enum import Enum

from pydantic import BaseModel

from notemaster.core.exceptions import ConflictError, WrongPasswordError
from notemaster.core.logging import log_with_source
from notemaster.core.security import (
    DEFAULT_PASSWORD_MIN_LENGTH,
    hash_password,
    validate_password,
    verify_password,
)
from notemaster.repositories.note import NoteRepository
from notemaster.schemas.note import Note
from notemaster.services.base import BaseService


class LockState(str, Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class UnlockPurpose(str, Enum):
    OPEN = "open"
    REMOVE_LOCK = "removeLock"


class PromptKind(str, Enum):
    SET_PASSWORD = "setPassword"
    UNLOCK = "unlock"


class LockPrompt(BaseModel):
    """A pending password prompt for one note."""

    note_id: str
    kind: PromptKind
    purpose: UnlockPurpose | None = None


class LockController(BaseService):
    """
    Sets, verifies and clears note passwords.

    Lock fields are written through NoteRepository.set_lock(). Notes opened
    with the right password are remembered for the session until revoked.
    """

    def __init__(
        self,
        notes: NoteRepository,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ) -> None:
        super().__init__()
        self.notes = notes
        self._password_min_length = password_min_length
        self._granted: set[str] = set()

    @staticmethod
    def state_of(note: Note) -> LockState:
        return LockState.LOCKED if note.is_locked else LockState.UNLOCKED

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    def prompt_for_open(self, note: Note) -> LockPrompt | None:
        """Return the prompt needed before opening a note, or None if it opens directly."""
        if self.has_access(note):
            return None
        return LockPrompt(note_id=note.id, kind=PromptKind.UNLOCK, purpose=UnlockPurpose.OPEN)

    @staticmethod
    def prompt_for_lock_toggle(note: Note) -> LockPrompt:
        """Return the prompt for the lock button: set a password, or unlock to remove it."""
        if note.is_locked:
            return LockPrompt(
                note_id=note.id,
                kind=PromptKind.UNLOCK,
                purpose=UnlockPurpose.REMOVE_LOCK,
            )
        return LockPrompt(note_id=note.id, kind=PromptKind.SET_PASSWORD)

    async def submit(self, prompt: LockPrompt, password: str) -> bool:
        """
        Answer a prompt with the password the user entered.

        Returns:
            True when the action went through, False on a wrong password
        """
        if prompt.kind is PromptKind.SET_PASSWORD:
            await self.lock(prompt.note_id, password)
            return True
        if prompt.purpose is UnlockPurpose.REMOVE_LOCK:
            return await self.unlock_to_remove_lock(prompt.note_id, password)
        return await self.unlock_for_open(prompt.note_id, password)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def lock(self, note_id: str, password: str) -> Note:
        """
        Lock an unlocked note with a password.

        Returns:
            The locked note

        Raises:
            NotFoundError: If no note has this id
            ValidationError: If the password is blank or too short
            ConflictError: If the note is already locked
        """
        validate_password(password, self._password_min_length)
        note = await self.notes.get(note_id)
        if note.is_locked:
            raise ConflictError("Note is already locked")

        locked = await self.notes.set_lock(note_id, hash_password(password))
        self._granted.discard(note_id)
        self._log_operation("Note locked", note_id=note_id)
        return locked

    async def open_note(self, note_id: str, password: str) -> Note:
        """
        Open a note, checking the password when it is locked.

        The note stays locked; on success its content is readable for the
        rest of the session.

        Raises:
            NotFoundError: If no note has this id
            WrongPasswordError: If the password does not match
        """
        note = await self.notes.get(note_id)
        if note.is_locked:
            self._verify(note, password, UnlockPurpose.OPEN)
            self._granted.add(note_id)
            self._log_debug("Locked note opened", note_id=note_id)
        return note

    async def remove_lock(self, note_id: str, password: str) -> Note:
        """
        Remove a note's lock after checking its password.

        Returns:
            The unlocked note, with no digest

        Raises:
            NotFoundError: If no note has this id
            ConflictError: If the note is not locked
            WrongPasswordError: If the password does not match
        """
        note = await self.notes.get(note_id)
        if not note.is_locked:
            raise ConflictError("Note is not locked")
        self._verify(note, password, UnlockPurpose.REMOVE_LOCK)

        unlocked = await self.notes.set_lock(note_id, None)
        self._granted.discard(note_id)
        self._log_operation("Note lock removed", note_id=note_id)
        return unlocked

    async def unlock_for_open(self, note_id: str, password: str) -> bool:
        """Boolean form of open_note(): False on a wrong password."""
        try:
            await self.open_note(note_id, password)
        except WrongPasswordError:
            return False
        return True

    async def unlock_to_remove_lock(self, note_id: str, password: str) -> bool:
        """Boolean form of remove_lock(): False on a wrong password."""
        try:
            await self.remove_lock(note_id, password)
        except WrongPasswordError:
            return False
        return True

    def _verify(self, note: Note, password: str, purpose: UnlockPurpose) -> None:
        if verify_password(password, note.password_digest):
            return
        log_with_source(
            self._logger, "lock", "warning", "Wrong password for note",
            note_id=note.id, purpose=purpose.value,
        )
        raise WrongPasswordError()

    # -------------------------------------------------------------------------
    # Session access
    # -------------------------------------------------------------------------

    def has_access(self, note: Note) -> bool:
        """True when the note's content may be shown: unlocked, or opened this session."""
        return not note.is_locked or note.id in self._granted

    def revoke(self, note_id: str) -> None:
        self._granted.discard(note_id)

    def revoke_all(self) -> None:
        self._granted.clear()
