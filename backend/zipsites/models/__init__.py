"""SQLAlchemy ORM models for ZipSites."""

from zipsites.models.base import Base
from zipsites.models.stored_object import StoredObjectRow

__all__ = [
    "Base",
    "StoredObjectRow",
]
