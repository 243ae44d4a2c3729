"""JSON encoding of rate snapshots for the cache boundary.

Dates are stored as ISO strings and rates as JSON numbers. Python writes
floats using their shortest round-trip representation, so decoded rates are
bit-for-bit equal to the encoded ones.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from eurofx.ingestion.models import FeedKind, HistoricalSeries, RateSnapshot, RateTable

FORMAT_VERSION = 1


def _table_to_dict(table: RateTable) -> dict[str, Any]:
    return {"date": table.rate_date.isoformat(), "rates": dict(sorted(table.rates.items()))}


def _table_from_dict(payload: dict[str, Any]) -> RateTable:
    return RateTable(
        rate_date=date.fromisoformat(payload["date"]),
        rates={str(code): float(rate) for code, rate in payload["rates"].items()},
    )


def dumps_snapshot(snapshot: RateSnapshot) -> str:
    """Serialise ``snapshot`` into a compact JSON document."""

    document: dict[str, Any] = {
        "version": FORMAT_VERSION,
        "kind": snapshot.kind.value,
        "published_at": snapshot.published_at.isoformat() if snapshot.published_at else None,
    }
    if snapshot.kind is FeedKind.DAILY:
        assert snapshot.table is not None
        document["table"] = _table_to_dict(snapshot.table)
    else:
        assert snapshot.series is not None
        document["series"] = [_table_to_dict(table) for table in snapshot.series]
    return json.dumps(document, separators=(",", ":"), allow_nan=False)


def loads_snapshot(raw: str) -> RateSnapshot:
    """Inverse of :func:`dumps_snapshot`."""

    document = json.loads(raw)
    if document.get("version") != FORMAT_VERSION:
        raise ValueError(f"Unsupported cache payload version: {document.get('version')!r}")
    kind = FeedKind(document["kind"])
    published_raw = document.get("published_at")
    published_at = datetime.fromisoformat(published_raw) if published_raw else None
    if kind is FeedKind.DAILY:
        return RateSnapshot(
            kind=kind, published_at=published_at, table=_table_from_dict(document["table"])
        )
    series = HistoricalSeries([_table_from_dict(entry) for entry in document["series"]])
    return RateSnapshot(kind=kind, published_at=published_at, series=series)


__all__ = ["FORMAT_VERSION", "dumps_snapshot", "loads_snapshot"]
