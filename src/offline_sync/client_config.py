"""Client configuration for offline-sync.

Configuration is stored in ~/.offline-sync/config.toml
The local record database is stored in ~/.offline-sync/records.db (SQLite)
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import tomllib
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# http(s) URL without quotes, whitespace or control characters
_SERVER_URL_PATTERN = re.compile(r"^https?://[^\s\"'\\]+$")

DEFAULT_SERVER_URL = "http://localhost:8000"


class ConnectivityMode(StrEnum):
    """How the client decides whether the remote is reachable."""

    PROBE = "probe"
    ONLINE = "online"
    OFFLINE = "offline"


def get_offline_sync_dir() -> Path:
    """Get the client data directory.

    Priority:
    1. OFFLINE_SYNC_DIR environment variable
    2. ~/.offline-sync/
    """
    env_dir = os.environ.get("OFFLINE_SYNC_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".offline-sync"


def validate_server_url(url: str) -> str:
    """Return the URL without a trailing slash, or raise ValueError."""
    url = url.strip().rstrip("/")
    if not _SERVER_URL_PATTERN.match(url):
        raise ValueError(f"Invalid server URL: {url!r} (expected http:// or https://)")
    return url


@dataclass
class RemoteSettings:
    """Where the remote record server lives."""

    server_url: str = DEFAULT_SERVER_URL
    timeout: float = 10.0

    def to_dict(self) -> dict[str, Any]:
        return {"server_url": self.server_url, "timeout": self.timeout}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteSettings:
        return cls(
            server_url=data.get("server_url", DEFAULT_SERVER_URL),
            timeout=float(data.get("timeout", 10.0)),
        )


@dataclass
class ConnectivitySettings:
    """Connectivity detection."""

    mode: ConnectivityMode = ConnectivityMode.PROBE
    probe_interval: float = 15.0

    def to_dict(self) -> dict[str, Any]:
        return {"mode": str(self.mode), "probe_interval": self.probe_interval}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConnectivitySettings:
        raw_mode = data.get("mode", ConnectivityMode.PROBE)
        try:
            mode = ConnectivityMode(raw_mode)
        except ValueError:
            logger.warning("Unknown connectivity mode %r, using probe", raw_mode)
            mode = ConnectivityMode.PROBE
        return cls(mode=mode, probe_interval=float(data.get("probe_interval", 15.0)))


@dataclass
class SyncSettings:
    """Sync behavior."""

    sync_on_reconnect: bool = True
    status_history: int = 50

    def to_dict(self) -> dict[str, Any]:
        return {
            "sync_on_reconnect": self.sync_on_reconnect,
            "status_history": self.status_history,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncSettings:
        return cls(
            sync_on_reconnect=data.get("sync_on_reconnect", True),
            status_history=int(data.get("status_history", 50)),
        )


@dataclass
class ClientConfig:
    """Client configuration, persisted as TOML in the data directory."""

    data_dir: Path = field(default_factory=get_offline_sync_dir)
    remote: RemoteSettings = field(default_factory=RemoteSettings)
    connectivity: ConnectivitySettings = field(default_factory=ConnectivitySettings)
    sync: SyncSettings = field(default_factory=SyncSettings)

    @classmethod
    def load(cls, config_path: Path | None = None) -> ClientConfig:
        """Load configuration from file, or create the default if it doesn't exist."""
        if config_path is None:
            data_dir = get_offline_sync_dir()
            config_path = data_dir / "config.toml"
        else:
            data_dir = config_path.parent

        if not config_path.exists():
            config = cls(data_dir=data_dir)
            config.save()
            logger.debug("Wrote default config to %s", config_path)
            return config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(
            data_dir=data_dir,
            remote=RemoteSettings.from_dict(data.get("remote", {})),
            connectivity=ConnectivitySettings.from_dict(data.get("connectivity", {})),
            sync=SyncSettings.from_dict(data.get("sync", {})),
        )

    def save(self) -> None:
        """Save configuration to TOML file (atomic write via temp+rename)."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

        # Reject anything that would break out of the quoted TOML string
        server_url = validate_server_url(self.remote.server_url)

        lines = [
            "# offline-sync client configuration",
            "",
            "[remote]",
            f'server_url = "{server_url}"',
            f"timeout = {float(self.remote.timeout)}",
            "",
            "# mode: probe | online | offline",
            "[connectivity]",
            f'mode = "{self.connectivity.mode}"',
            f"probe_interval = {float(self.connectivity.probe_interval)}",
            "",
            "[sync]",
            f"sync_on_reconnect = {'true' if self.sync.sync_on_reconnect else 'false'}",
            f"status_history = {int(self.sync.status_history)}",
        ]

        content = "\n".join(lines) + "\n"
        fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), suffix=".toml.tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(tmp_path).replace(self.config_path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.toml"

    @property
    def db_path(self) -> Path:
        """Path to the local SQLite record database."""
        return self.data_dir / "records.db"

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_dir": str(self.data_dir),
            "remote": self.remote.to_dict(),
            "connectivity": self.connectivity.to_dict(),
            "sync": self.sync.to_dict(),
        }

    def set_server(self, server_url: str) -> None:
        """Change the remote server URL and save."""
        self.remote.server_url = validate_server_url(server_url)
        self.save()

    def set_mode(self, mode: str) -> None:
        """Change the connectivity mode and save."""
        self.connectivity.mode = ConnectivityMode(mode)
        self.save()


# Singleton instance for easy access
_config: ClientConfig | None = None


def get_config(reload: bool = False) -> ClientConfig:
    """Get the client configuration (singleton).

    Args:
        reload: Force reload from disk
    """
    global _config
    if _config is None or reload:
        _config = ClientConfig.load()
    return _config


def reset_config() -> None:
    """Drop the cached configuration."""
    global _config
    _config = None
