"""Database models for persisted progress."""
from sqlalchemy import Column, String, Text

from jlptdrill.models.base import Base, TimestampMixin


class ProgressBlob(Base, TimestampMixin):
    """Opaque progress document stored under a string key."""

    __tablename__ = "progress_blobs"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
