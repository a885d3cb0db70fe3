"""Environment-driven settings for the engine and its HTTP service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

__all__ = ["CosmicError", "ConfigError", "Settings", "load_settings"]

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SNAPSHOT_CACHE_SIZE = 256
DEFAULT_ANNUAL_CACHE_SIZE = 32

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CosmicError(RuntimeError):
    """Base error for the cosmic engine package."""


class ConfigError(CosmicError):
    """Raised when an environment setting cannot be interpreted."""


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    snapshot_cache_size: int = DEFAULT_SNAPSHOT_CACHE_SIZE
    annual_cache_size: int = DEFAULT_ANNUAL_CACHE_SIZE
    cors_origins: Tuple[str, ...] = ("*",)


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``)."""

    env = os.environ if environ is None else environ

    log_level = env.get("COSMIC_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"Unsupported COSMIC_LOG_LEVEL: {log_level}")

    origins_raw = env.get("COSMIC_CORS_ORIGINS", "*")
    origins = tuple(origin.strip() for origin in origins_raw.split(",") if origin.strip())

    return Settings(
        log_level=log_level,
        snapshot_cache_size=_positive_int(
            env, "COSMIC_SNAPSHOT_CACHE_SIZE", DEFAULT_SNAPSHOT_CACHE_SIZE
        ),
        annual_cache_size=_positive_int(env, "COSMIC_ANNUAL_CACHE_SIZE", DEFAULT_ANNUAL_CACHE_SIZE),
        cors_origins=origins or ("*",),
    )
