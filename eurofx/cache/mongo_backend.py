"""MongoDB cache backend."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable

from eurofx.cache import CACHE_TABLE
from eurofx.cache.base_backend import CacheStore, validate_ttl
from eurofx.utils.logger import get_logger

try:  # pragma: no cover - optional dependency
    from pymongo import MongoClient
    from pymongo.collection import Collection
    from pymongo.errors import PyMongoError
except ModuleNotFoundError:  # pragma: no cover - handled dynamically
    MongoClient = None  # type: ignore[assignment]
    Collection = None  # type: ignore[assignment]
    PyMongoError = Exception  # type: ignore[assignment]

LOGGER = get_logger(__name__)


class MongoCacheStore(CacheStore):
    """Store cache entries as documents with a TTL index on ``expires_at``.

    MongoDB's TTL monitor only runs periodically, so reads also compare the
    expiry against the clock.
    """

    def __init__(
        self,
        url: str,
        *,
        database: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if MongoClient is None:  # pragma: no cover - defensive
            raise ModuleNotFoundError("pymongo is required for MongoDB cache backends")
        self.url = url
        self._clock = clock
        self._client = MongoClient(url)
        db = self._client.get_default_database() if database is None else self._client[database]
        if db is None:
            raise ValueError("MongoDB connection URI must include a database name")
        self._collection: Collection = db[CACHE_TABLE]
        self._schema_ready = False

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        try:
            LOGGER.info("Ensuring MongoDB %s collection has a TTL index", CACHE_TABLE)
            self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)
        except PyMongoError as exc:  # pragma: no cover - error path
            raise RuntimeError(f"Failed to ensure MongoDB cache index: {exc}") from exc
        self._schema_ready = True

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        ttl = validate_ttl(ttl_seconds)
        self.ensure_schema()
        expires_at = datetime.fromtimestamp(self._clock() + ttl, tz=timezone.utc)
        try:
            self._collection.replace_one(
                {"_id": key},
                {"_id": key, "payload": value, "expires_at": expires_at},
                upsert=True,
            )
        except PyMongoError as exc:  # pragma: no cover - error path
            raise RuntimeError(f"Failed to write MongoDB cache entry {key}: {exc}") from exc

    def get(self, key: str) -> str | None:
        self.ensure_schema()
        try:
            doc = self._collection.find_one({"_id": key})
        except PyMongoError as exc:  # pragma: no cover - error path
            raise RuntimeError(f"Failed to read MongoDB cache entry {key}: {exc}") from exc
        if doc is None:
            return None
        expires_at = doc["expires_at"]
        if expires_at.tzinfo is None:
            # pymongo returns naive UTC datetimes unless tz_aware is set.
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if self._now() >= expires_at:
            self.delete(key)
            return None
        return doc["payload"]

    def delete(self, key: str) -> None:
        try:
            self._collection.delete_one({"_id": key})
        except PyMongoError as exc:  # pragma: no cover - error path
            raise RuntimeError(f"Failed to delete MongoDB cache entry {key}: {exc}") from exc

    def close(self) -> None:  # pragma: no cover - trivial cleanup
        self._client.close()


__all__ = ["MongoCacheStore"]
