from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from ordering.application.ports.repositories import StorageBackend


class ConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    backend: StorageBackend
    database_url: str | None
    redis_url: str | None
    storage_timeout_seconds: float = 2.0
    document_prefix: str = "orders"
    events_channel: str = "events:orders"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Resolve the process configuration once; the result is never re-read."""
    env = os.environ if environ is None else environ

    raw_backend = env.get("ORDER_STORE_BACKEND", StorageBackend.RELATIONAL.value).strip().lower()
    try:
        backend = StorageBackend(raw_backend)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in StorageBackend)
        raise ConfigurationError(
            f"ORDER_STORE_BACKEND must be one of: {allowed} (got {raw_backend!r})"
        ) from exc

    database_url = env.get("DATABASE_URL") or None
    redis_url = env.get("REDIS_URL") or None
    if backend is StorageBackend.RELATIONAL and not database_url:
        raise ConfigurationError("DATABASE_URL is not set")
    if backend is StorageBackend.DOCUMENT and not redis_url:
        raise ConfigurationError("REDIS_URL is not set")

    raw_timeout = env.get("STORAGE_TIMEOUT_SECONDS", "2.0")
    try:
        timeout_seconds = float(raw_timeout)
    except ValueError as exc:
        raise ConfigurationError(f"STORAGE_TIMEOUT_SECONDS is not a number: {raw_timeout!r}") from exc
    if timeout_seconds <= 0:
        raise ConfigurationError("STORAGE_TIMEOUT_SECONDS must be > 0")

    return Settings(
        backend=backend,
        database_url=database_url,
        redis_url=redis_url,
        storage_timeout_seconds=timeout_seconds,
        document_prefix=env.get("ORDER_DOCUMENT_PREFIX", "orders"),
        events_channel=env.get("ORDER_EVENTS_CHANNEL", "events:orders"),
    )
