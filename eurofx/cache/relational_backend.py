"""SQL cache backend (SQLite/Postgres/MySQL) powered by SQLAlchemy."""

from __future__ import annotations

import time
from typing import Callable

from sqlalchemy import (
    Column,
    DateTime,
    Double,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from eurofx.cache import CACHE_TABLE
from eurofx.cache.base_backend import CacheStore, validate_ttl
from eurofx.utils.logger import get_logger

LOGGER = get_logger(__name__)

metadata = MetaData()

cache_entries = Table(
    CACHE_TABLE,
    metadata,
    Column("cache_key", String(191), primary_key=True),
    # Historical snapshots exceed MySQL's 64KB TEXT limit.
    Column("payload", Text().with_variant(mysql.MEDIUMTEXT(), "mysql"), nullable=False),
    Column("expires_at", Double, nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
)


class RelationalCacheStore(CacheStore):
    """Store cache entries in a single SQL table.

    Writes replace any existing row for the key. Two writers racing on a cold
    key may collide on the primary key; the loser's write is dropped since
    both carry the same snapshot.
    """

    def __init__(self, url: str, *, clock: Callable[[], float] = time.time) -> None:
        self.url = url
        self._clock = clock
        self._engine_instance: Engine | None = None
        self._schema_ready = False

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True)
        return self._engine_instance

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        LOGGER.info("Ensuring %s cache table exists", CACHE_TABLE)
        metadata.create_all(self._get_engine(), tables=[cache_entries])
        self._schema_ready = True

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + validate_ttl(ttl_seconds)
        self.ensure_schema()
        try:
            with self._get_engine().begin() as connection:
                connection.execute(delete(cache_entries).where(cache_entries.c.cache_key == key))
                connection.execute(
                    insert(cache_entries).values(cache_key=key, payload=value, expires_at=expires_at)
                )
        except IntegrityError:
            LOGGER.info("Concurrent writer already populated cache key %s", key)

    def get(self, key: str) -> str | None:
        self.ensure_schema()
        with self._get_engine().connect() as connection:
            row = connection.execute(
                select(cache_entries.c.payload, cache_entries.c.expires_at).where(
                    cache_entries.c.cache_key == key
                )
            ).first()
        if row is None:
            return None
        if self._clock() >= float(row.expires_at):
            self.delete(key)
            return None
        return row.payload

    def delete(self, key: str) -> None:
        self.ensure_schema()
        with self._get_engine().begin() as connection:
            connection.execute(delete(cache_entries).where(cache_entries.c.cache_key == key))

    def purge_expired(self) -> int:
        """Delete every expired row and return how many were removed."""

        self.ensure_schema()
        with self._get_engine().begin() as connection:
            result = connection.execute(
                delete(cache_entries).where(cache_entries.c.expires_at <= self._clock())
            )
        return result.rowcount or 0

    def close(self) -> None:  # pragma: no cover - trivial resource cleanup
        if self._engine_instance is not None:
            self._engine_instance.dispose()
            self._engine_instance = None


__all__ = ["RelationalCacheStore", "cache_entries"]
