"""Abstractions for pluggable feed transports."""

from __future__ import annotations

from typing import Protocol

from eurofx.ingestion.models import FeedKind, FeedPayload


class FeedClient(Protocol):
    """Contract for retrieving raw ECB feeds.

    Implementations return the feed body together with the publication instant
    reported by the transport, and raise :class:`eurofx.errors.FetchError` on
    any unsuccessful outcome.
    """

    def fetch(self, kind: FeedKind) -> FeedPayload:
        ...  # pragma: no cover - protocol definition

    def close(self) -> None:
        ...  # pragma: no cover - protocol definition


__all__ = ["FeedClient"]
