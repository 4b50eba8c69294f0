"""API routes for the record server."""

from offline_sync.server.routes.records import router as records_router

__all__ = ["records_router"]
