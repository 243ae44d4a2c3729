"""Data models shared across ingestion, caching and conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterator


class FeedKind(str, Enum):
    """The two ECB reference-rate datasets."""

    DAILY = "daily"
    HISTORY = "history"


@dataclass(slots=True)
class RateTable:
    """EUR-relative reference rates for a single publication date.

    ``rates`` maps uppercase ISO codes to positive rates and never contains the
    anchor currency.
    """

    rate_date: date
    rates: dict[str, float]

    @property
    def currencies(self) -> list[str]:
        return sorted(self.rates)


@dataclass(slots=True)
class HistoricalSeries:
    """Rate tables for many dates, most recent first."""

    tables: list[RateTable] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tables = sorted(self.tables, key=lambda table: table.rate_date, reverse=True)

    def __iter__(self) -> Iterator[RateTable]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    @property
    def dates(self) -> list[date]:
        return [table.rate_date for table in self.tables]


@dataclass(slots=True)
class FeedPayload:
    """Raw feed body as returned by the transport."""

    kind: FeedKind
    body: str
    url: str
    published_at: datetime | None = None


@dataclass(slots=True)
class RateSnapshot:
    """A parsed dataset together with the instant the ECB published it."""

    kind: FeedKind
    published_at: datetime | None
    table: RateTable | None = None
    series: HistoricalSeries | None = None

    def __post_init__(self) -> None:
        if self.kind is FeedKind.DAILY and self.table is None:
            raise ValueError("daily snapshots require a rate table")
        if self.kind is FeedKind.HISTORY and self.series is None:
            raise ValueError("history snapshots require a historical series")


__all__ = ["FeedKind", "RateTable", "HistoricalSeries", "FeedPayload", "RateSnapshot"]
