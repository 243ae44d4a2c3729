"""Parse ECB ``eurofxref`` XML feeds into rate tables.

Both feeds share one shape::

    <gesmes:Envelope>
      <Cube>
        <Cube time="2024-06-04">
          <Cube currency="USD" rate="1.0847"/>
          ...
        </Cube>
        ...
      </Cube>
    </gesmes:Envelope>

The daily feed carries a single dated cube, the 90-day feed one per business
day.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Iterable

from bs4 import BeautifulSoup
from bs4.element import Tag
from lxml import etree

from eurofx.currencies import feed_currencies, normalise_code
from eurofx.errors import ParseError
from eurofx.ingestion.models import HistoricalSeries, RateTable
from eurofx.utils.logger import get_logger

LOGGER = get_logger(__name__)


def _child_cubes(parent: Tag) -> list[Tag]:
    return [child for child in parent.find_all("Cube", recursive=False) if isinstance(child, Tag)]


def _ensure_well_formed(xml: str | bytes) -> None:
    data = xml.encode("utf-8") if isinstance(xml, str) else xml
    # BeautifulSoup's lxml builder recovers from broken markup; reject it first.
    parser = etree.XMLParser(recover=False, resolve_entities=False, no_network=True)
    try:
        etree.fromstring(data, parser)
    except etree.XMLSyntaxError as exc:
        raise ParseError(f"ECB feed is not well-formed XML: {exc}") from exc


def _dated_cubes(xml: str | bytes) -> list[Tag]:
    if not xml:
        raise ParseError("ECB feed is empty")
    _ensure_well_formed(xml)
    soup = BeautifulSoup(xml, "xml")
    envelope = soup.find("Envelope", recursive=False)
    if not isinstance(envelope, Tag):
        raise ParseError("ECB feed has no gesmes:Envelope root element")
    outer = envelope.find("Cube", recursive=False)
    if not isinstance(outer, Tag):
        raise ParseError("ECB feed envelope has no Cube element")
    dated = _child_cubes(outer)
    if not dated:
        raise ParseError("ECB feed contains no dated Cube elements")
    return dated


def _parse_date(value: object) -> date:
    if not isinstance(value, str):
        raise ParseError("Cube element is missing its time attribute")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ParseError(f"Invalid ECB date {value!r}") from exc


def _parse_rate(code: str, value: object) -> float:
    if not isinstance(value, str):
        raise ParseError(f"Rate for {code} is missing")
    try:
        rate = float(value.strip())
    except ValueError as exc:
        raise ParseError(f"Rate for {code} is not numeric: {value!r}") from exc
    if not math.isfinite(rate) or rate <= 0:
        raise ParseError(f"Rate for {code} must be a positive number, got {value!r}")
    return rate


def _parse_rates(
    rate_date: date, cubes: Iterable[Tag], accepted: frozenset[str]
) -> dict[str, float]:
    rates: dict[str, float] = {}
    for cube in cubes:
        raw_code = cube.get("currency")
        if not isinstance(raw_code, str) or not raw_code.strip():
            raise ParseError(f"Cube on {rate_date} is missing its currency attribute")
        code = normalise_code(raw_code)
        if code not in accepted:
            raise ParseError(f"Unknown currency code {raw_code!r} on {rate_date}")
        rate = _parse_rate(code, cube.get("rate"))
        previous = rates.get(code)
        if previous is not None and previous != rate:
            LOGGER.warning(
                "Conflicting %s rates on %s (%s vs %s); keeping the last one",
                code,
                rate_date,
                previous,
                rate,
            )
        rates[code] = rate
    return dict(sorted(rates.items()))


def _parse_table(cube: Tag, accepted: frozenset[str]) -> RateTable:
    rate_date = _parse_date(cube.get("time"))
    return RateTable(rate_date=rate_date, rates=_parse_rates(rate_date, _child_cubes(cube), accepted))


def parse_daily(xml: str | bytes, accepted: frozenset[str] | None = None) -> RateTable:
    """Parse the daily feed.

    ``accepted`` defaults to the current currency enumeration.
    """

    dated = _dated_cubes(xml)
    if len(dated) != 1:
        raise ParseError(f"Daily ECB feed must contain one dated Cube, found {len(dated)}")
    table = _parse_table(dated[0], accepted if accepted is not None else feed_currencies())
    LOGGER.info("Parsed %s daily rates for %s", len(table.rates), table.rate_date)
    return table


def parse_history(xml: str | bytes, accepted: frozenset[str] | None = None) -> HistoricalSeries:
    """Parse the 90-day feed.

    ``accepted`` defaults to the historical currency enumeration.
    """

    if accepted is None:
        accepted = feed_currencies(historical=True)
    tables: list[RateTable] = []
    seen: set[date] = set()
    for cube in _dated_cubes(xml):
        table = _parse_table(cube, accepted)
        if table.rate_date in seen:
            raise ParseError(f"Duplicate ECB date {table.rate_date} in historical feed")
        seen.add(table.rate_date)
        tables.append(table)
    series = HistoricalSeries(tables)
    LOGGER.info(
        "Parsed %s historical rate tables (%s to %s)",
        len(series),
        series.dates[-1],
        series.dates[0],
    )
    return series


__all__ = ["parse_daily", "parse_history"]
