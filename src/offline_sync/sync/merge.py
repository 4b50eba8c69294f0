"""Merge rule applied when a downloaded record already exists locally."""

from __future__ import annotations

from offline_sync.core.record import TRACKED_FIELDS, Record


def should_apply_remote(local: Record, remote: Record) -> bool:
    """Decide whether the remote copy overwrites the local one.

    Coarse last-writer-wins: the remote wins when it is at least as recent as
    the local copy, or when any tracked field differs regardless of recency.
    A locally newer edit to an untracked field is therefore kept, while a
    locally newer edit to a tracked field is lost.
    """
    if remote.updated_at >= local.updated_at:
        return True
    return remote.differs_from(local, TRACKED_FIELDS)
