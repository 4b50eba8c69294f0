"""HTTP client for the remote record store."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from offline_sync.core.record import Record
from offline_sync.remote.base import RemoteClient, RemoteRejected, RemoteUnreachable

logger = logging.getLogger(__name__)

RECORDS_PATH = "/api/records"


class HttpRemoteClient(RemoteClient):
    """
    aiohttp-based client for the remote record server.

    Usage:
        async with HttpRemoteClient("http://localhost:8000") as remote:
            records = await remote.list_all()

    Or without context manager:
        remote = HttpRemoteClient("http://localhost:8000")
        await remote.connect()
        try:
            await remote.create(record)
        finally:
            await remote.close()
    """

    def __init__(self, server_url: str, *, timeout: float = 30.0) -> None:
        """
        Initialize the client.

        Args:
            server_url: Base URL of the record server (e.g., "http://localhost:8000")
            timeout: Request timeout in seconds; expiry surfaces as RemoteUnreachable
        """
        self._server_url = server_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def server_url(self) -> str:
        """Get the server URL."""
        return self._server_url

    @property
    def is_connected(self) -> bool:
        """Check if an HTTP session is open."""
        return self._session is not None

    async def connect(self) -> None:
        """Open the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> HttpRemoteClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        """Make an HTTP request, mapping failures onto the remote error types."""
        if not self._session:
            await self.connect()

        assert self._session is not None

        url = f"{self._server_url}{path}"

        try:
            async with self._session.request(method, url, json=json_data) as response:
                if response.status >= 500:
                    text = await response.text()
                    raise RemoteUnreachable(f"Server error: {text}", status_code=response.status)
                if response.status >= 400:
                    text = await response.text()
                    raise RemoteRejected(f"Request rejected: {text}", status_code=response.status)
                if response.status == 204:
                    return None
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteUnreachable(f"Connection error: {e}") from e

    # ========== Record Operations ==========

    async def create(self, record: Record) -> Record:
        """Create a record. The id is omitted; the server assigns one."""
        result = await self._request(
            "POST", RECORDS_PATH, json_data=record.to_dict(include_id=False)
        )
        return Record.from_dict(result)

    async def update(self, record: Record) -> Record:
        """Replace the record at /records/{id}. The body id must match the path."""
        result = await self._request(
            "PUT", f"{RECORDS_PATH}/{record.id}", json_data=record.to_dict()
        )
        return Record.from_dict(result)

    async def delete(self, record_id: int) -> bool:
        """Delete a record."""
        try:
            await self._request("DELETE", f"{RECORDS_PATH}/{record_id}")
            return True
        except RemoteRejected as e:
            if e.status_code == 404:
                return False
            raise

    async def get(self, record_id: int) -> Record | None:
        """Get a record by ID."""
        try:
            result = await self._request("GET", f"{RECORDS_PATH}/{record_id}")
            return Record.from_dict(result)
        except RemoteRejected as e:
            if e.status_code == 404:
                return None
            raise

    async def list_all(self) -> list[Record]:
        """Fetch every remote record."""
        result = await self._request("GET", RECORDS_PATH)
        return [Record.from_dict(r) for r in result or []]

    async def ping(self) -> bool:
        """Check the server health endpoint."""
        try:
            result = await self._request("GET", "/health")
        except (RemoteUnreachable, RemoteRejected):
            logger.debug("Ping to %s failed", self._server_url, exc_info=True)
            return False
        return bool(result) and result.get("status") == "healthy"
