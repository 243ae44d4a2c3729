"""Cross-rate computations on EUR-anchored rate tables."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime

from eurofx.currencies import ANCHOR_CURRENCY
from eurofx.errors import ZeroOrMissingRateError
from eurofx.ingestion.models import HistoricalSeries, RateTable


@dataclass(slots=True)
class HistoricalPoint:
    """Rate for one series date; ``rate`` is ``None`` when it cannot be derived."""

    rate_date: date
    rate: float | None


@dataclass(slots=True)
class RebaseResult:
    """Every known currency expressed against ``base``, scaled by ``amount``."""

    base: str
    amount: float
    rate_date: date
    rates: dict[str, float]
    published_at: datetime | None = None
    cache_ttl: int | None = None


@dataclass(slots=True)
class PairResult:
    source: str
    target: str
    amount: float
    rate_date: date
    rate: float
    published_at: datetime | None = None
    cache_ttl: int | None = None


@dataclass(slots=True)
class HistoricalResult:
    source: str
    target: str
    amount: float
    points: list[HistoricalPoint] = field(default_factory=list)
    published_at: datetime | None = None
    cache_ttl: int | None = None

    @property
    def dates(self) -> list[date]:
        return [point.rate_date for point in self.points]


def validate_amount(amount: float) -> float:
    """Return ``amount`` as a float, rejecting non-finite or non-positive values."""

    try:
        value = float(amount)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"amount must be a number, got {amount!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"amount must be a positive finite number, got {amount!r}")
    return value


def lookup_rate(table: RateTable, code: str) -> float | None:
    """Return the EUR-relative rate for ``code``.

    The anchor resolves to 1.0 without being stored in the table. Missing and
    zero rates both resolve to ``None`` so they are never used as divisors.
    """

    if code == ANCHOR_CURRENCY:
        return 1.0
    rate = table.rates.get(code)
    if not rate:
        return None
    return rate


def _require_rate(table: RateTable, code: str) -> float:
    rate = lookup_rate(table, code)
    if rate is None:
        raise ZeroOrMissingRateError(code, table.rate_date)
    return rate


def rebase(table: RateTable, source: str, amount: float = 1.0) -> dict[str, float]:
    """Express every currency in ``table`` (plus the anchor) against ``source``."""

    scale = validate_amount(amount)
    source_rate = _require_rate(table, source)
    rebased: dict[str, float] = {}
    for code in sorted({ANCHOR_CURRENCY, *table.rates}):
        rate = lookup_rate(table, code)
        if rate is None:
            continue
        rebased[code] = (rate / source_rate) * scale
    return rebased


def pairwise(table: RateTable, source: str, target: str, amount: float = 1.0) -> float:
    """Return how many ``target`` units ``amount`` of ``source`` buys."""

    scale = validate_amount(amount)
    source_rate = _require_rate(table, source)
    target_rate = _require_rate(table, target)
    return (target_rate / source_rate) * scale


def historical_pairwise(
    series: HistoricalSeries, source: str, target: str, amount: float = 1.0
) -> list[HistoricalPoint]:
    """Return one point per series date, in series order.

    Dates where either side is missing or zero produce ``rate=None`` instead
    of failing the whole series.
    """

    scale = validate_amount(amount)
    points: list[HistoricalPoint] = []
    for table in series:
        source_rate = lookup_rate(table, source)
        target_rate = lookup_rate(table, target)
        if source_rate is None or target_rate is None:
            points.append(HistoricalPoint(rate_date=table.rate_date, rate=None))
            continue
        points.append(
            HistoricalPoint(rate_date=table.rate_date, rate=(target_rate / source_rate) * scale)
        )
    return points


__all__ = [
    "HistoricalPoint",
    "RebaseResult",
    "PairResult",
    "HistoricalResult",
    "validate_amount",
    "lookup_rate",
    "rebase",
    "pairwise",
    "historical_pairwise",
]
