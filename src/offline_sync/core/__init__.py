"""Core data structures."""

from offline_sync.core.pending_change import ChangeKind, PendingChange
from offline_sync.core.record import RECORD_FIELDS, TRACKED_FIELDS, UNIQUE_FIELD, Record

__all__ = [
    "ChangeKind",
    "PendingChange",
    "RECORD_FIELDS",
    "Record",
    "TRACKED_FIELDS",
    "UNIQUE_FIELD",
]
