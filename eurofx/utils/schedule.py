"""Cache lifetimes derived from the ECB publication schedule.

The ECB publishes a new reference-rate set once per business day at around
16:00 Central European Time. A fetched dataset stays fresh until shortly
before the next expected publication, which is anchored on the instant the
current dataset was published rather than on the current time.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from eurofx.utils.ecb import (
    ECB_PUBLICATION_TIME,
    ECB_SAFETY_MARGIN,
    ECB_TIMEZONE,
    STALE_CACHE_TTL,
)
from eurofx.utils.logger import get_logger

LOGGER = get_logger(__name__)

_WEEKEND = {5, 6}


def is_business_day(day: date) -> bool:
    """Return True for Monday through Friday."""

    return day.weekday() not in _WEEKEND


def next_business_day(day: date) -> date:
    """Return the first business day strictly after ``day``."""

    candidate = day + timedelta(days=1)
    while not is_business_day(candidate):
        candidate += timedelta(days=1)
    return candidate


def _require_aware(value: datetime, label: str) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{label} must be a timezone-aware datetime")


def next_cutoff(published_at: datetime) -> datetime:
    """Return the local instant after which ``published_at`` data is stale.

    The cutoff sits on the business day following the local publication date,
    a safety margin before the nominal publication time.
    """

    _require_aware(published_at, "published_at")
    published_local = published_at.astimezone(ECB_TIMEZONE)
    update_day = next_business_day(published_local.date())
    publication = datetime.combine(update_day, ECB_PUBLICATION_TIME, tzinfo=ECB_TIMEZONE)
    # Wall-clock subtraction; both ends stay on the same civil day.
    return publication - ECB_SAFETY_MARGIN


def compute_cache_ttl(now: datetime, published_at: datetime) -> int:
    """Return how many whole seconds data published at ``published_at`` stays fresh."""

    _require_aware(now, "now")
    cutoff = next_cutoff(published_at)
    # Aware datetimes sharing a tzinfo compare by wall time; compare in UTC.
    remaining = cutoff.astimezone(timezone.utc) - now.astimezone(timezone.utc)
    seconds = remaining.total_seconds()
    if seconds <= 0:
        LOGGER.info(
            "Cutoff %s has passed without a newer publication; caching for %ss",
            cutoff.isoformat(),
            STALE_CACHE_TTL,
        )
        return STALE_CACHE_TTL
    return max(1, int(seconds))


def resolve_cache_ttl(now: datetime, published_at: datetime | None) -> int:
    """Like :func:`compute_cache_ttl`, tolerating a missing publication instant.

    Without a publication instant there is no cutoff to anchor on, so the
    short stale lifetime is used until a later fetch reports one.
    """

    if published_at is None:
        _require_aware(now, "now")
        LOGGER.warning("No publication time reported; caching for %ss", STALE_CACHE_TTL)
        return STALE_CACHE_TTL
    return compute_cache_ttl(now, published_at)


__all__ = [
    "is_business_day",
    "next_business_day",
    "next_cutoff",
    "compute_cache_ttl",
    "resolve_cache_ttl",
]
