"""Storage record database model.

This module defines the key-value table that backs local device storage.
"""

from sqlalchemy import Column, String, Text

from .base import Base


class StorageRecordModel(Base):
    """One persisted record, addressed by key."""

    __tablename__ = "storage_records"

    key = Column(String, primary_key=True, index=True)
    value = Column(Text, nullable=False)  # serialized JSON document
    update_at = Column(String, nullable=False)  # ISO format string
