"""Cache-aside loading of ECB snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from eurofx.cache import DAILY_CACHE_KEY, HISTORY_CACHE_KEY
from eurofx.cache.base_backend import CacheStore
from eurofx.cache.serialization import dumps_snapshot, loads_snapshot
from eurofx.ingestion.ecb_xml import parse_daily, parse_history
from eurofx.ingestion.models import FeedKind, RateSnapshot
from eurofx.ingestion.strategy import FeedClient
from eurofx.utils.logger import get_logger
from eurofx.utils.schedule import resolve_cache_ttl

LOGGER = get_logger(__name__)

CACHE_KEYS: dict[FeedKind, str] = {
    FeedKind.DAILY: DAILY_CACHE_KEY,
    FeedKind.HISTORY: HISTORY_CACHE_KEY,
}


@dataclass(slots=True)
class LoadedSnapshot:
    """A snapshot plus the TTL callers should advertise for it."""

    snapshot: RateSnapshot
    cache_ttl: int
    from_cache: bool


class RateService:
    """Serve ECB snapshots from the cache, fetching and parsing on a miss.

    A cache hit is authoritative until it expires. There is no locking: two
    callers missing the same key both fetch and both write the same snapshot.
    """

    def __init__(self, client: FeedClient, cache: CacheStore) -> None:
        self.client = client
        self.cache = cache

    def load(self, kind: FeedKind, now: datetime) -> LoadedSnapshot:
        key = CACHE_KEYS[kind]
        cached = self.cache.get(key)
        if cached is not None:
            snapshot = loads_snapshot(cached)
            LOGGER.debug("Cache hit for %s", key)
            return LoadedSnapshot(
                snapshot=snapshot,
                cache_ttl=resolve_cache_ttl(now, snapshot.published_at),
                from_cache=True,
            )

        payload = self.client.fetch(kind)
        if kind is FeedKind.DAILY:
            snapshot = RateSnapshot(
                kind=kind, published_at=payload.published_at, table=parse_daily(payload.body)
            )
        else:
            snapshot = RateSnapshot(
                kind=kind, published_at=payload.published_at, series=parse_history(payload.body)
            )
        ttl = resolve_cache_ttl(now, payload.published_at)
        self.cache.put(key, dumps_snapshot(snapshot), ttl)
        LOGGER.info("Cached %s for %ss", key, ttl)
        return LoadedSnapshot(snapshot=snapshot, cache_ttl=ttl, from_cache=False)

    def daily(self, now: datetime) -> LoadedSnapshot:
        return self.load(FeedKind.DAILY, now)

    def history(self, now: datetime) -> LoadedSnapshot:
        return self.load(FeedKind.HISTORY, now)


__all__ = ["CACHE_KEYS", "LoadedSnapshot", "RateService"]
