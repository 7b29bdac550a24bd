"""Durable key-value stores for progress blobs."""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jlptdrill.models.base import SessionLocal
from jlptdrill.models.models import ProgressBlob

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a store cannot read or write a value."""


class KeyValueStore(ABC):
    """Get/set of opaque string blobs by key."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent."""
        raise NotImplementedError("Subclasses must implement this method")

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        raise NotImplementedError("Subclasses must implement this method")

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a value. Returns True if something was removed."""
        raise NotImplementedError("Subclasses must implement this method")


class MemoryStore(KeyValueStore):
    """Process-local store, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class SqlAlchemyStore(KeyValueStore):
    """Store backed by the ``progress_blobs`` table."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        """Initialize the store with a session factory."""
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            blob = db.query(ProgressBlob).filter(ProgressBlob.key == key).first()
            return blob.value if blob else None
        except SQLAlchemyError as e:
            raise StoreError(f"Could not read {key}: {e}") from e
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db = self.session_factory()
        try:
            blob = db.query(ProgressBlob).filter(ProgressBlob.key == key).first()
            if blob:
                blob.value = value
            else:
                db.add(ProgressBlob(key=key, value=value))
            db.commit()
            logger.debug(f"Stored {len(value)} chars under {key}")
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Could not write {key}: {e}") from e
        finally:
            db.close()

    def delete(self, key: str) -> bool:
        db = self.session_factory()
        try:
            removed = db.query(ProgressBlob).filter(ProgressBlob.key == key).delete()
            db.commit()
            return removed > 0
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Could not delete {key}: {e}") from e
        finally:
            db.close()
