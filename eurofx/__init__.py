"""Public interface for the eurofx package."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from importlib import metadata as importlib_metadata
from typing import Any, Callable
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from eurofx.cache.base_backend import CacheStore
from eurofx.cache.memory_backend import MemoryCacheStore
from eurofx.cache.relational_backend import RelationalCacheStore
from eurofx.conversion import (
    HistoricalPoint,
    HistoricalResult,
    PairResult,
    RebaseResult,
    historical_pairwise,
    pairwise,
    rebase,
    validate_amount,
)
from eurofx.currencies import ANCHOR_CURRENCY, currency_listing, ensure_currency
from eurofx.errors import (
    EuroFxError,
    FetchError,
    ParseError,
    UnknownCurrencyError,
    ZeroOrMissingRateError,
)
from eurofx.ingestion.ecb_client import EcbFeedClient
from eurofx.ingestion.models import FeedKind, HistoricalSeries, RateTable
from eurofx.ingestion.strategy import FeedClient
from eurofx.service import RateService
from eurofx.utils.ecb import CURRENCIES_CACHE_TTL

__all__ = [
    "__version__",
    "ANCHOR_CURRENCY",
    "CURRENCIES_CACHE_TTL",
    "CacheBackend",
    "CacheConnectionInfo",
    "EuroFx",
    "EuroFxError",
    "FetchError",
    "ParseError",
    "UnknownCurrencyError",
    "ZeroOrMissingRateError",
    "RateTable",
    "HistoricalSeries",
    "HistoricalPoint",
    "RebaseResult",
    "PairResult",
    "HistoricalResult",
]

try:
    __version__ = importlib_metadata.version("eurofx")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


class CacheBackend(str, Enum):
    """Supported cache stores for EuroFx."""

    MEMORY = "memory"
    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRES = "postgres"
    MONGODB = "mongodb"

    @classmethod
    def resolve_backend_and_scheme(cls, scheme: str) -> tuple["CacheBackend", str]:
        """Return backend enum + canonical scheme used in connection URLs."""

        if not scheme:
            raise ValueError("Cache URL must include a scheme (e.g. memory:// or sqlite:///)")
        scheme_lower = scheme.lower()
        base_scheme, _, driver = scheme_lower.partition("+")
        if base_scheme == "memory":
            return cls.MEMORY, "memory"
        if base_scheme in {"postgresql", "postgres"}:
            canonical_scheme = f"postgresql+{driver}" if driver else "postgresql"
            return cls.POSTGRES, canonical_scheme
        if base_scheme == "sqlite":
            return cls.SQLITE, "sqlite"
        if base_scheme == "mysql":
            # Preserve optional driver hints such as ``mysql+pymysql``.
            canonical_scheme = scheme_lower if driver else "mysql"
            return cls.MYSQL, canonical_scheme
        if base_scheme == "mongodb":
            # Keep srv-style schemes intact so pymongo can route via DNS.
            canonical_scheme = scheme_lower if driver else "mongodb"
            return cls.MONGODB, canonical_scheme
        raise ValueError(
            "Unsupported cache backend. Supported values are memory, SQLite, MySQL, "
            "Postgres, and MongoDB."
        )

    @classmethod
    def from_scheme(cls, scheme: str) -> "CacheBackend":
        """Normalise URL schemes into a CacheBackend value."""

        backend, _ = cls.resolve_backend_and_scheme(scheme)
        return backend


@dataclass(slots=True)
class CacheConnectionInfo:
    """Represents where EuroFx keeps fetched ECB snapshots."""

    backend: CacheBackend
    url: str
    name: str | None = None

    @classmethod
    def from_url(cls, url: str) -> "CacheConnectionInfo":
        """Create a connection object by parsing a cache URL/DSN."""

        cleaned_url, query_db_name = cls._normalise_database_name_parameter(url)
        parsed = urlparse(cleaned_url)
        if not parsed.scheme:
            raise ValueError("Cache URL must include a scheme (e.g. memory:// or sqlite:///)")
        backend, canonical_scheme = CacheBackend.resolve_backend_and_scheme(parsed.scheme)
        if parsed.scheme != canonical_scheme:
            # Swap the scheme textually; urlunparse drops the "//" of sqlite:/// URLs.
            cleaned_url = canonical_scheme + cleaned_url[len(parsed.scheme) :]
        resolved_name = parsed.path[1:] if parsed.path and parsed.path != "/" else None
        if not resolved_name:
            resolved_name = query_db_name
        return cls(backend=backend, url=cleaned_url, name=resolved_name)

    @staticmethod
    def _normalise_database_name_parameter(url: str) -> tuple[str, str | None]:
        """Support a ``DATABASE_NAME`` query parameter for MongoDB URLs."""

        # Some callers append ``DATABASE_NAME=foo`` without an ``&`` delimiter.
        patched_url = re.sub(r"(?i)(?<![?&])DATABASE_NAME=", "&DATABASE_NAME=", url)
        parsed = urlparse(patched_url)
        remaining_pairs: list[tuple[str, str]] = []
        database_name: str | None = None
        for key, value in parse_qsl(parsed.query, keep_blank_values=True):
            if key.lower() == "database_name":
                if value:
                    database_name = value
                # Strip the custom parameter so drivers don't error on it.
                continue
            remaining_pairs.append((key, value))

        if database_name is None and patched_url == url:
            return url, None
        new_path = parsed.path
        if (not new_path or new_path == "/") and database_name:
            new_path = f"/{database_name}"
        cleaned = parsed._replace(query=urlencode(remaining_pairs, doseq=True), path=new_path)
        return urlunparse(cleaned), database_name

    @property
    def is_memory(self) -> bool:
        return self.backend is CacheBackend.MEMORY


def build_cache_store(
    info: CacheConnectionInfo, *, clock: Callable[[], float] | None = None
) -> CacheStore:
    """Instantiate the cache backend described by ``info``."""

    kwargs: dict[str, Any] = {"clock": clock} if clock is not None else {}
    if info.backend is CacheBackend.MEMORY:
        return MemoryCacheStore(**kwargs)
    if info.backend in {CacheBackend.SQLITE, CacheBackend.MYSQL, CacheBackend.POSTGRES}:
        return RelationalCacheStore(info.url, **kwargs)
    if info.backend is CacheBackend.MONGODB:
        from eurofx.cache.mongo_backend import MongoCacheStore

        return MongoCacheStore(info.url, database=info.name, **kwargs)
    raise ValueError(f"Unsupported backend: {info.backend}")


class EuroFx:
    """Package facade: validates requests, loads ECB snapshots, converts rates."""

    __slots__ = ("connection_info", "cache", "client", "service", "_owns_client")

    # Provide direct access to the package version as a class attribute.
    __version__ = __version__

    def __init__(
        self,
        cache_config: CacheConnectionInfo | CacheStore | str | None = None,
        *,
        client: FeedClient | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Configure where snapshots are cached and how feeds are fetched.

        ``cache_config`` accepts a ``CacheConnectionInfo``, a ready
        ``CacheStore``, or a URL such as ``sqlite:///cache.db``. When omitted,
        an in-process memory cache is used. ``client`` defaults to an
        :class:`EcbFeedClient`; ``clock`` is forwarded to cache backends for
        expiry checks.
        """

        if isinstance(cache_config, CacheStore):
            self.connection_info = None
            self.cache = cache_config
        else:
            self.connection_info = self._build_connection_info(cache_config)
            self.cache = build_cache_store(self.connection_info, clock=clock)
        self._owns_client = client is None
        self.client: FeedClient = client or EcbFeedClient()
        self.service = RateService(self.client, self.cache)

    @staticmethod
    def _build_connection_info(
        cache_config: CacheConnectionInfo | str | None,
    ) -> CacheConnectionInfo:
        if isinstance(cache_config, CacheConnectionInfo):
            return cache_config
        if isinstance(cache_config, str):
            return CacheConnectionInfo.from_url(cache_config)
        return CacheConnectionInfo(backend=CacheBackend.MEMORY, url="memory://")

    @staticmethod
    def _resolve_now(now: datetime | None) -> datetime:
        return now if now is not None else datetime.now(timezone.utc)

    @staticmethod
    def currencies(*, historical: bool = False) -> dict[str, dict[str, str]]:
        """Return the accepted currencies with their display names."""

        return currency_listing(historical=historical)

    def latest(
        self,
        from_currency: str,
        *,
        amount: float = 1.0,
        now: datetime | None = None,
    ) -> RebaseResult:
        """Return every current currency expressed in ``from_currency``."""

        source = ensure_currency(from_currency)
        scale = validate_amount(amount)
        loaded = self.service.daily(self._resolve_now(now))
        table = loaded.snapshot.table
        assert table is not None
        return RebaseResult(
            base=source,
            amount=scale,
            rate_date=table.rate_date,
            rates=rebase(table, source, scale),
            published_at=loaded.snapshot.published_at,
            cache_ttl=loaded.cache_ttl,
        )

    def convert(
        self,
        from_currency: str,
        to_currency: str,
        *,
        amount: float = 1.0,
        now: datetime | None = None,
    ) -> PairResult:
        """Return the latest ``from_currency`` → ``to_currency`` rate times ``amount``."""

        source = ensure_currency(from_currency)
        target = ensure_currency(to_currency)
        scale = validate_amount(amount)
        loaded = self.service.daily(self._resolve_now(now))
        table = loaded.snapshot.table
        assert table is not None
        return PairResult(
            source=source,
            target=target,
            amount=scale,
            rate_date=table.rate_date,
            rate=pairwise(table, source, target, scale),
            published_at=loaded.snapshot.published_at,
            cache_ttl=loaded.cache_ttl,
        )

    def history(
        self,
        from_currency: str,
        to_currency: str,
        *,
        amount: float = 1.0,
        now: datetime | None = None,
    ) -> HistoricalResult:
        """Return the pair rate for every date of the 90-day feed, newest first."""

        source = ensure_currency(from_currency, historical=True)
        target = ensure_currency(to_currency, historical=True)
        scale = validate_amount(amount)
        loaded = self.service.history(self._resolve_now(now))
        series = loaded.snapshot.series
        assert series is not None
        return HistoricalResult(
            source=source,
            target=target,
            amount=scale,
            points=historical_pairwise(series, source, target, scale),
            published_at=loaded.snapshot.published_at,
            cache_ttl=loaded.cache_ttl,
        )

    def close(self) -> None:
        self.cache.close()
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "EuroFx":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
