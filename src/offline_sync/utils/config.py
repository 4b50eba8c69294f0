"""Record server settings read from OFFLINE_SYNC_* environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

ENV_PREFIX = "OFFLINE_SYNC_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

DEFAULT_CORS_ORIGINS = ("http://localhost:*", "http://127.0.0.1:*")


def _env(name: str) -> str | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    return default if raw is None else raw.lower() in _TRUE_VALUES


def _env_port(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        port = int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s%s=%r", ENV_PREFIX, name, raw)
        return default
    if not 0 < port < 65536:
        logger.warning("Ignoring out-of-range %s%s=%d", ENV_PREFIX, name, port)
        return default
    return port


def _env_csv(name: str, default: tuple[str, ...]) -> list[str]:
    raw = _env(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Config:
    """
    Record server configuration.

    Attributes:
        host: Interface `osync serve` binds to
        port: Port `osync serve` binds to
        debug: FastAPI debug mode
        seed: Load the sample employee into a fresh repository
        cors_origins: Origins allowed by the CORS middleware
    """

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    seed: bool = True
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> Config:
        """Build from the environment, falling back to defaults per variable."""
        return cls(
            host=_env("HOST") or "127.0.0.1",
            port=_env_port("PORT", 8000),
            debug=_env_flag("DEBUG", False),
            seed=_env_flag("SEED", True),
            cors_origins=_env_csv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        )


_config: Config | None = None


def get_config() -> Config:
    """Get the process-wide server configuration."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next call re-reads the environment."""
    global _config
    _config = None
