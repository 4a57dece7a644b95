from __future__ import annotations

import os
from dataclasses import dataclass


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True, slots=True)
class PoolSettings:
    pool_size: int = 10
    max_overflow: int = 20
    pool_recycle: int = 3600

    @classmethod
    def from_env(cls) -> PoolSettings:
        """Read DEALER_DESK_DB_POOL_SIZE / _MAX_OVERFLOW / _POOL_RECYCLE, falling back to defaults."""
        defaults = cls()
        return cls(
            pool_size=_int_env("DEALER_DESK_DB_POOL_SIZE", defaults.pool_size),
            max_overflow=_int_env("DEALER_DESK_DB_MAX_OVERFLOW", defaults.max_overflow),
            pool_recycle=_int_env("DEALER_DESK_DB_POOL_RECYCLE", defaults.pool_recycle),
        )


REPOSITORY_BACKENDS = ("postgres", "memory")


def repository_backend() -> str:
    """DEALER_DESK_REPOSITORY selects deal storage: 'postgres' (default) or 'memory'."""
    backend = (os.getenv("DEALER_DESK_REPOSITORY") or "postgres").strip().lower()
    if backend not in REPOSITORY_BACKENDS:
        raise RuntimeError(
            f"DEALER_DESK_REPOSITORY must be one of {REPOSITORY_BACKENDS}, got {backend!r}"
        )
    return backend
