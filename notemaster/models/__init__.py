# SQLAlchemy models package
from notemaster.models.base import Base
from notemaster.models.document import Collection, NoteDocument, SettingDocument

__all__ = ["Base", "Collection", "NoteDocument", "SettingDocument"]
