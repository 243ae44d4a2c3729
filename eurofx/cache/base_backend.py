"""Cache store interface shared by every backend."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CacheStore(ABC):
    """Key/value store whose entries become unreadable once their TTL elapses."""

    @abstractmethod
    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds`` seconds."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the live value for ``key`` or ``None`` when absent or expired."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""

    def __enter__(self) -> "CacheStore":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()


def validate_ttl(ttl_seconds: int) -> int:
    """Reject TTLs that would create an entry that is already expired."""

    ttl = int(ttl_seconds)
    if ttl <= 0:
        raise ValueError("ttl_seconds must be positive")
    return ttl


__all__ = ["CacheStore", "validate_ttl"]
