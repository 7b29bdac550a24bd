"""Versioned JSON envelopes for progress blobs.

Every blob is stored as ``{"version": N, "data": ...}``. Reads and writes
never raise: an unreadable or undecodable blob is reported as absent, and a
failed write is logged so the caller keeps its in-memory state.
"""
import json
import logging
from typing import Any, Optional

from jlptdrill.monitoring import corrupt_state_loads, persistence_errors
from jlptdrill.services.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

BLOB_VERSION = 1


class CorruptStateError(ValueError):
    """Raised when a stored blob cannot be decoded."""


def encode_blob(data: Any) -> str:
    """Wrap data in a versioned envelope and serialize it."""
    return json.dumps({"version": BLOB_VERSION, "data": data}, ensure_ascii=False)


def decode_blob(raw: str) -> Any:
    """Parse a versioned envelope and return its data."""
    try:
        envelope = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CorruptStateError(f"Invalid JSON: {e}") from e

    if not isinstance(envelope, dict) or "data" not in envelope:
        raise CorruptStateError("Missing envelope")
    if envelope.get("version") != BLOB_VERSION:
        raise CorruptStateError(f"Unsupported version: {envelope.get('version')!r}")
    return envelope["data"]


def load_blob(store: KeyValueStore, key: str) -> Optional[Any]:
    """Load and decode a blob. Returns None when absent, unreadable or corrupt."""
    try:
        raw = store.get(key)
    except StoreError as e:
        logger.error(f"Error reading progress from store ({key}): {e}")
        persistence_errors.labels(operation="read").inc()
        return None

    if raw is None:
        return None

    try:
        return decode_blob(raw)
    except CorruptStateError as e:
        logger.warning(f"Discarding corrupt progress blob {key}: {e}")
        corrupt_state_loads.labels(key=key).inc()
        return None


def save_blob(store: KeyValueStore, key: str, data: Any) -> bool:
    """Encode and store a blob. Returns False if the write failed."""
    try:
        store.set(key, encode_blob(data))
        return True
    except StoreError as e:
        logger.error(f"Error writing progress to store ({key}): {e}")
        persistence_errors.labels(operation="write").inc()
        return False
