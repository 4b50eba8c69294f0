"""FastAPI record server acting as the authoritative remote store."""

from offline_sync.server.app import create_app

__all__ = ["create_app"]
