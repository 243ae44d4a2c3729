from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from conftest import PUBLISHED_AT, FakeClock, FakeFeedClient

from eurofx.cache import DAILY_CACHE_KEY, HISTORY_CACHE_KEY
from eurofx.cache.memory_backend import MemoryCacheStore
from eurofx.errors import FetchError, ParseError
from eurofx.ingestion.models import FeedKind
from eurofx.service import RateService
from eurofx.utils.ecb import STALE_CACHE_TTL

NOW = datetime(2024, 6, 4, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


def test_miss_fetches_parses_and_caches(fake_client: FakeFeedClient, clock: FakeClock) -> None:
    cache = MemoryCacheStore(clock=clock)
    service = RateService(fake_client, cache)

    loaded = service.daily(NOW)

    assert fake_client.calls == [FeedKind.DAILY]
    assert loaded.from_cache is False
    assert loaded.cache_ttl == 22 * 3600 + 50 * 60
    assert loaded.snapshot.published_at == PUBLISHED_AT
    assert loaded.snapshot.table is not None
    assert loaded.snapshot.table.rate_date == date(2024, 6, 4)
    assert cache.get(DAILY_CACHE_KEY) is not None


def test_hit_is_authoritative_until_expiry(fake_client: FakeFeedClient, clock: FakeClock) -> None:
    service = RateService(fake_client, MemoryCacheStore(clock=clock))
    first = service.daily(NOW)

    later = NOW + timedelta(hours=3)
    clock.current = later
    second = service.daily(later)

    assert fake_client.calls == [FeedKind.DAILY]
    assert second.from_cache is True
    assert second.snapshot.table == first.snapshot.table
    assert second.cache_ttl == first.cache_ttl - 3 * 3600

    expired = NOW + timedelta(seconds=first.cache_ttl)
    clock.current = expired
    third = service.daily(expired)

    assert fake_client.calls == [FeedKind.DAILY, FeedKind.DAILY]
    assert third.from_cache is False
    assert third.cache_ttl == STALE_CACHE_TTL


def test_history_uses_its_own_key(fake_client: FakeFeedClient, clock: FakeClock) -> None:
    cache = MemoryCacheStore(clock=clock)
    service = RateService(fake_client, cache)

    loaded = service.history(NOW)

    assert loaded.snapshot.series is not None
    assert loaded.snapshot.series.dates[0] == date(2024, 6, 4)
    assert cache.get(HISTORY_CACHE_KEY) is not None
    assert cache.get(DAILY_CACHE_KEY) is None


def test_missing_publication_time_caches_briefly(clock: FakeClock) -> None:
    client = FakeFeedClient(published_at=None)
    service = RateService(client, MemoryCacheStore(clock=clock))

    loaded = service.daily(NOW)
    assert loaded.cache_ttl == STALE_CACHE_TTL

    clock.current = NOW + timedelta(seconds=STALE_CACHE_TTL)
    service.daily(clock.current)
    assert len(client.calls) == 2


def test_fetch_errors_propagate_and_nothing_is_cached(clock: FakeClock) -> None:
    client = FakeFeedClient(error=FetchError("boom"))
    cache = MemoryCacheStore(clock=clock)
    service = RateService(client, cache)

    with pytest.raises(FetchError):
        service.daily(NOW)
    assert cache.get(DAILY_CACHE_KEY) is None


def test_parse_errors_propagate(clock: FakeClock) -> None:
    client = FakeFeedClient(daily="<html>maintenance</html>")
    cache = MemoryCacheStore(clock=clock)
    service = RateService(client, cache)

    with pytest.raises(ParseError):
        service.daily(NOW)
    assert cache.get(DAILY_CACHE_KEY) is None


def test_services_sharing_a_cache_reuse_the_snapshot(clock: FakeClock) -> None:
    cache = MemoryCacheStore(clock=clock)
    first = RateService(FakeFeedClient(), cache)
    second = RateService(FakeFeedClient(), cache)

    a = first.daily(NOW)
    b = second.daily(NOW)

    assert b.from_cache is True
    assert a.snapshot.table == b.snapshot.table


def test_truncated_feed_is_never_cached(daily_xml: str, clock: FakeClock) -> None:
    truncated = daily_xml[: daily_xml.index("<Cube currency='GBP'")]
    cache = MemoryCacheStore(clock=clock)
    service = RateService(FakeFeedClient(daily=truncated), cache)

    with pytest.raises(ParseError):
        service.daily(NOW)
    assert cache.get(DAILY_CACHE_KEY) is None
