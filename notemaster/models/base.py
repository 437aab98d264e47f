"""
SQLAlchemy Base Model.

Base class and mixins for the document store tables. Every collection is
a table keyed by one text column with the whole document kept as JSON.
"""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DocumentMixin:
    """Mixin that adds the JSON document column."""

    data: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
    )


def key_column() -> Any:
    """Primary key column holding the document's key field."""
    return mapped_column(String(255), primary_key=True)
