"""
Unit Tests for Lock Controller.

Tests the lock state machine with a mocked NoteRepository.
"""

from unittest.mock import AsyncMock

import pytest

from notemaster.core.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
    WrongPasswordError,
)
from notemaster.core.security import hash_password
from notemaster.repositories.note import NoteRepository
from notemaster.services.lock import (
    LockController,
    LockPrompt,
    LockState,
    PromptKind,
    UnlockPurpose,
)


@pytest.fixture
def repo():
    """NoteRepository with every coroutine mocked."""
    return AsyncMock(spec=NoteRepository)


@pytest.fixture
def controller(repo):
    return LockController(repo, password_min_length=1)


@pytest.fixture
def unlocked(make_note):
    return make_note("a")


@pytest.fixture
def locked(make_note):
    return make_note("a", isLocked=True, passwordDigest=hash_password("p"))


class TestLock:
    """Tests for UNLOCKED -> LOCKED."""

    @pytest.mark.asyncio
    async def test_lock_stores_digest(self, controller, repo, unlocked, locked):
        """Should persist the digest of the password, never the plaintext."""
        repo.get.return_value = unlocked
        repo.set_lock.return_value = locked

        result = await controller.lock("a", "p")

        repo.set_lock.assert_awaited_once_with("a", hash_password("p"))
        assert result.is_locked is True
        assert controller.state_of(result) is LockState.LOCKED

    @pytest.mark.asyncio
    async def test_blank_password_rejected(self, controller, repo):
        """Should refuse a blank password before touching the store."""
        with pytest.raises(ValidationError):
            await controller.lock("a", "  ")
        repo.get.assert_not_awaited()
        repo.set_lock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_locked_conflicts(self, controller, repo, locked):
        repo.get.return_value = locked
        with pytest.raises(ConflictError):
            await controller.lock("a", "q")
        repo.set_lock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_note(self, controller, repo):
        repo.get.side_effect = NotFoundError("Note not found")
        with pytest.raises(NotFoundError):
            await controller.lock("missing", "p")


class TestUnlockForOpen:
    """Tests for opening a locked note."""

    @pytest.mark.asyncio
    async def test_right_password_grants_access(self, controller, repo, locked):
        """Should grant session access and leave the note locked."""
        repo.get.return_value = locked

        assert await controller.unlock_for_open("a", "p") is True
        assert controller.has_access(locked)
        repo.set_lock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_password_rejected(self, controller, repo, locked):
        """Should refuse and change nothing."""
        repo.get.return_value = locked

        assert await controller.unlock_for_open("a", "wrong") is False
        assert not controller.has_access(locked)
        repo.set_lock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_are_unlimited(self, controller, repo, locked):
        """Should keep accepting attempts after repeated failures."""
        repo.get.return_value = locked
        for _ in range(10):
            assert await controller.unlock_for_open("a", "wrong") is False
        assert await controller.unlock_for_open("a", "p") is True

    @pytest.mark.asyncio
    async def test_open_note_raises_on_wrong_password(self, controller, repo, locked):
        repo.get.return_value = locked
        with pytest.raises(WrongPasswordError) as exc_info:
            await controller.open_note("a", "wrong")
        assert exc_info.value.code == "LOCK_WRONG_PASSWORD"

    @pytest.mark.asyncio
    async def test_unlocked_note_opens_without_password(self, controller, repo, unlocked):
        repo.get.return_value = unlocked
        assert await controller.unlock_for_open("a", "") is True


class TestUnlockToRemoveLock:
    """Tests for LOCKED -> UNLOCKED."""

    @pytest.mark.asyncio
    async def test_right_password_clears_digest(self, controller, repo, locked, unlocked):
        """Should clear the lock through set_lock(None)."""
        repo.get.return_value = locked
        repo.set_lock.return_value = unlocked

        assert await controller.unlock_to_remove_lock("a", "p") is True
        repo.set_lock.assert_awaited_once_with("a", None)

    @pytest.mark.asyncio
    async def test_wrong_password_changes_nothing(self, controller, repo, locked):
        repo.get.return_value = locked

        assert await controller.unlock_to_remove_lock("a", "wrong") is False
        repo.set_lock.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_locked_conflicts(self, controller, repo, unlocked):
        repo.get.return_value = unlocked
        with pytest.raises(ConflictError):
            await controller.unlock_to_remove_lock("a", "p")

    @pytest.mark.asyncio
    async def test_removing_lock_revokes_access(self, controller, repo, locked, unlocked):
        repo.get.return_value = locked
        repo.set_lock.return_value = unlocked
        await controller.unlock_for_open("a", "p")

        await controller.remove_lock("a", "p")

        assert not controller.has_access(locked)


class TestPrompts:
    """Tests for the pending-prompt orchestration."""

    def test_open_prompt_for_locked_note(self, controller, locked):
        prompt = controller.prompt_for_open(locked)
        assert prompt == LockPrompt(note_id="a", kind=PromptKind.UNLOCK, purpose=UnlockPurpose.OPEN)

    def test_no_open_prompt_for_unlocked_note(self, controller, unlocked):
        assert controller.prompt_for_open(unlocked) is None

    def test_lock_toggle_prompts(self, controller, locked, unlocked):
        assert controller.prompt_for_lock_toggle(unlocked).kind is PromptKind.SET_PASSWORD
        assert controller.prompt_for_lock_toggle(locked).purpose is UnlockPurpose.REMOVE_LOCK

    @pytest.mark.asyncio
    async def test_submit_dispatches_by_prompt(self, controller, repo, locked, unlocked):
        repo.get.return_value = locked
        repo.set_lock.return_value = unlocked

        open_prompt = controller.prompt_for_open(locked)
        assert await controller.submit(open_prompt, "wrong") is False
        assert await controller.submit(open_prompt, "p") is True
        repo.set_lock.assert_not_awaited()

        remove_prompt = controller.prompt_for_lock_toggle(locked)
        assert await controller.submit(remove_prompt, "p") is True
        repo.set_lock.assert_awaited_once_with("a", None)

    def test_revoke_all(self, controller, locked):
        controller._granted.add("a")
        controller.revoke_all()
        assert not controller.has_access(locked)
