"""
Note Schemas.

Pydantic schemas for notes as they are stored and handed to callers.
Stored documents use camelCase keys; Python code uses the field names.
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class Category(str, Enum):
    """Closed set of note categories."""

    GENERAL = "Genel"
    WORK = "İş"
    PERSONAL = "Kişisel"
    IDEAS = "Fikirler"
    IMPORTANT = "Önemli"


ALL_CATEGORIES = "Tümü"
"""Pseudo-category used by listings for "every category"."""

COLORS = ("#0f172a", "#6366f1", "#ec4899", "#f59e0b", "#10b981", "#3b82f6")
DEFAULT_COLOR = COLORS[0]


class Note(BaseModel):
    """
    A single user note.

    Lock invariant: is_locked is True exactly when password_digest holds a
    non-empty digest. Documents from earlier releases store the digest
    under "password"; it is accepted on input and written back as
    "passwordDigest".
    """

    id: str = Field(min_length=1, description="Opaque unique identifier")
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note body")
    category: Category = Field(default=Category.GENERAL)
    color: str = Field(default=DEFAULT_COLOR, description="Swatch identifier")
    created_at: int = Field(alias="createdAt", ge=0, description="Creation time, epoch ms")
    updated_at: int = Field(alias="updatedAt", ge=0, description="Last mutation time, epoch ms")
    is_locked: bool = Field(default=False, alias="isLocked")
    password_digest: str | None = Field(
        default=None,
        validation_alias=AliasChoices("passwordDigest", "password", "password_digest"),
        serialization_alias="passwordDigest",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("password_digest", mode="before")
    @classmethod
    def _blank_digest_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_invariants(self) -> "Note":
        if self.is_locked and self.password_digest is None:
            raise ValueError("locked note requires a password digest")
        if not self.is_locked and self.password_digest is not None:
            raise ValueError("unlocked note must not carry a password digest")
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not precede createdAt")
        return self

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Note":
        """Build a note from a stored document."""
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Serialize to a store document; an absent digest is omitted, not nulled."""
        document = self.model_dump(mode="json", by_alias=True)
        if self.password_digest is None:
            document.pop("passwordDigest")
        return document

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, locked={self.is_locked})>"


class NoteDraft(BaseModel):
    """
    Caller-supplied note fields for a save.

    On creation every field is used, with defaults for those not given.
    On update only the fields explicitly set are overlaid on the record.
    Lock fields are not part of a draft.
    """

    title: str = Field(default="", max_length=255, examples=["Shopping list"])
    content: str = Field(default="", examples=["Milk, eggs"])
    category: Category = Field(default=Category.GENERAL)
    color: str = Field(default=DEFAULT_COLOR)

    model_config = ConfigDict(extra="forbid")
