# Repositories package
from notemaster.repositories.note import NoteRepository
from notemaster.repositories.settings import SettingsRepository

__all__ = ["NoteRepository", "SettingsRepository"]
