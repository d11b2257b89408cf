"""Local storage module.

This module provides a small key-value store with the same contract as a
browser's localStorage, persisted in SQLite through SQLAlchemy.
"""

import logging
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from complaint_desk.core.exceptions import StorageError
from complaint_desk.models.storage_record import StorageRecordModel

logger = logging.getLogger(__name__)


class LocalStorage:
    """Key-value persistence for serialized application records."""

    def __init__(self, session_factory: sessionmaker):
        """Initialize LocalStorage.

        Args:
            session_factory: SQLAlchemy session factory bound to the storage
                database.
        """
        self._session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        """Read the value stored under a key.

        Args:
            key: Record key.

        Returns:
            The stored string, or None if the key is absent.

        Raises:
            StorageError: If the database cannot be read.
        """
        try:
            with self._session_factory() as db:
                model = db.get(StorageRecordModel, key)
                return model.value if model else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read '{key}' from storage") from e

    def set_item(self, key: str, value: str) -> None:
        """Create or replace the value stored under a key.

        Raises:
            StorageError: If the database cannot be written.
        """
        now = datetime.now(pytz.utc).isoformat()
        try:
            with self._session_factory() as db:
                model = db.get(StorageRecordModel, key)
                if model:
                    model.value = value
                    model.update_at = now
                else:
                    db.add(StorageRecordModel(key=key, value=value, update_at=now))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write '{key}' to storage") from e
        logger.debug("Stored %s (%d chars)", key, len(value))

    def remove_item(self, key: str) -> None:
        """Delete a key. Missing keys are ignored.

        Raises:
            StorageError: If the database cannot be written.
        """
        try:
            with self._session_factory() as db:
                model = db.get(StorageRecordModel, key)
                if model:
                    db.delete(model)
                    db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove '{key}' from storage") from e
