# Pydantic schemas package
from notemaster.schemas.note import ALL_CATEGORIES, Category, Note, NoteDraft
from notemaster.schemas.settings import Language, SettingKey, Theme

__all__ = [
    "ALL_CATEGORIES",
    "Category",
    "Language",
    "Note",
    "NoteDraft",
    "SettingKey",
    "Theme",
]
