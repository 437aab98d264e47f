"""
Document Tables.

One table per collection. The key column mirrors the document's key
field ("id" for notes, "key" for settings).
"""

from enum import Enum

from sqlalchemy.orm import Mapped

from notemaster.models.base import Base, DocumentMixin, key_column


class NoteDocument(DocumentMixin, Base):
    """Stored note document, keyed by note id."""

    __tablename__ = "notes"

    id: Mapped[str] = key_column()

    def __repr__(self) -> str:
        return f"<NoteDocument(id={self.id})>"


class SettingDocument(DocumentMixin, Base):
    """Stored setting document ({key, value}), keyed by setting key."""

    __tablename__ = "settings"

    key: Mapped[str] = key_column()

    def __repr__(self) -> str:
        return f"<SettingDocument(key={self.key})>"


class Collection(str, Enum):
    """Collections held by the document store."""

    NOTES = "notes"
    SETTINGS = "settings"

    @property
    def model(self) -> type[NoteDocument] | type[SettingDocument]:
        return NoteDocument if self is Collection.NOTES else SettingDocument

    @property
    def key_field(self) -> str:
        return "id" if self is Collection.NOTES else "key"
