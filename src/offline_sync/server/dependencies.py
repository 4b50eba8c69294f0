"""Shared dependencies for API routes."""

from __future__ import annotations

from offline_sync.remote.repository import RecordRepository


async def get_repository() -> RecordRepository:
    """
    Dependency to get the record repository.

    This is overridden by the application at startup.
    """
    raise NotImplementedError("Repository not configured")
