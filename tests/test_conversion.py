from __future__ import annotations

from datetime import date

import pytest

from eurofx.conversion import (
    HistoricalPoint,
    historical_pairwise,
    lookup_rate,
    pairwise,
    rebase,
    validate_amount,
)
from eurofx.errors import ZeroOrMissingRateError
from eurofx.ingestion.models import HistoricalSeries, RateTable

TABLE = RateTable(
    rate_date=date(2024, 6, 4),
    rates={"GBP": 0.8465, "JPY": 170.05, "USD": 1.0847, "ZAR": 19.6578},
)
ALL_CODES = ["EUR", "GBP", "JPY", "USD", "ZAR"]


def test_lookup_rate_synthesises_anchor() -> None:
    assert lookup_rate(TABLE, "EUR") == 1.0
    assert lookup_rate(TABLE, "USD") == 1.0847
    assert lookup_rate(TABLE, "CHF") is None
    assert "EUR" not in TABLE.rates


def test_lookup_rate_treats_zero_as_missing() -> None:
    table = RateTable(rate_date=date(2024, 6, 4), rates={"USD": 0.0})

    assert lookup_rate(table, "USD") is None


def test_rebase_usd_scenario() -> None:
    result = rebase(TABLE, "USD", 100)

    assert result["USD"] == 100
    assert result["EUR"] == pytest.approx(92.19, abs=0.01)
    assert result["EUR"] == pytest.approx(100 / 1.0847)
    assert result["GBP"] == pytest.approx((0.8465 / 1.0847) * 100)
    assert list(result) == ALL_CODES


def test_rebase_to_anchor_returns_table_rates() -> None:
    result = rebase(TABLE, "EUR")

    assert result == {"EUR": 1.0, **TABLE.rates}


@pytest.mark.parametrize("code", ALL_CODES)
@pytest.mark.parametrize("amount", [1, 2.5, 1000])
def test_rebase_identity(code: str, amount: float) -> None:
    assert rebase(TABLE, code, amount)[code] == amount


def test_rebase_skips_zero_rates() -> None:
    table = RateTable(rate_date=date(2024, 6, 4), rates={"GBP": 0.0, "USD": 1.0847})

    assert set(rebase(table, "USD")) == {"EUR", "USD"}


def test_rebase_rejects_missing_or_zero_source() -> None:
    table = RateTable(rate_date=date(2024, 6, 4), rates={"GBP": 0.0})

    with pytest.raises(ZeroOrMissingRateError):
        rebase(table, "GBP")
    with pytest.raises(ZeroOrMissingRateError) as excinfo:
        rebase(table, "USD")
    assert excinfo.value.code == "USD"


def test_pairwise_usd_gbp_scenario() -> None:
    assert pairwise(TABLE, "USD", "GBP") == pytest.approx(0.8465 / 1.0847)
    assert pairwise(TABLE, "USD", "GBP") == pytest.approx(0.7804, abs=1e-4)


def test_pairwise_same_currency_is_amount() -> None:
    assert pairwise(TABLE, "JPY", "JPY", 42) == 42


@pytest.mark.parametrize("source", ALL_CODES)
@pytest.mark.parametrize("target", ALL_CODES)
def test_pairwise_is_reciprocal(source: str, target: str) -> None:
    forward = pairwise(TABLE, source, target, 7)
    backward = pairwise(TABLE, target, source, 7)

    assert forward * backward == pytest.approx(49)


def test_pairwise_is_linear_in_amount() -> None:
    small = pairwise(TABLE, "ZAR", "JPY", 3)
    large = pairwise(TABLE, "ZAR", "JPY", 12345.5)

    assert small / 3 == pytest.approx(large / 12345.5)


def test_pairwise_missing_target_raises() -> None:
    with pytest.raises(ZeroOrMissingRateError):
        pairwise(TABLE, "USD", "CHF")


@pytest.mark.parametrize("amount", [0, -1, float("nan"), float("inf"), "abc", None])
def test_invalid_amounts_are_rejected(amount: object) -> None:
    with pytest.raises(ValueError):
        validate_amount(amount)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        pairwise(TABLE, "USD", "GBP", amount)  # type: ignore[arg-type]


def test_historical_pairwise_marks_missing_dates() -> None:
    series = HistoricalSeries(
        [
            RateTable(rate_date=date(2024, 6, 3), rates={"USD": 1.0875}),
            RateTable(rate_date=date(2024, 6, 4), rates={"GBP": 0.8465, "USD": 1.0847}),
            RateTable(rate_date=date(2024, 5, 31), rates={"GBP": 0.0, "USD": 1.0848}),
        ]
    )

    points = historical_pairwise(series, "USD", "GBP", 10)

    assert len(points) == len(series)
    assert [point.rate_date for point in points] == series.dates
    assert points[0].rate == pytest.approx(0.8465 / 1.0847 * 10)
    assert points[1] == HistoricalPoint(rate_date=date(2024, 6, 3), rate=None)
    assert points[2].rate is None


def test_historical_pairwise_with_anchor() -> None:
    series = HistoricalSeries(
        [
            RateTable(rate_date=date(2024, 6, 4), rates={"USD": 1.0847}),
            RateTable(rate_date=date(2024, 6, 3), rates={}),
        ]
    )

    points = historical_pairwise(series, "EUR", "USD")

    assert points[0].rate == 1.0847
    assert points[1].rate is None
    assert historical_pairwise(series, "EUR", "EUR")[1].rate == 1.0


def test_historical_pairwise_empty_series() -> None:
    assert historical_pairwise(HistoricalSeries(), "USD", "GBP") == []
