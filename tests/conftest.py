from __future__ import annotations

from datetime import datetime, timezone

import pytest

from eurofx.ingestion.models import FeedKind, FeedPayload

DAILY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<gesmes:Envelope xmlns:gesmes="http://www.gesmes.org/xml/2002-08-01" xmlns="http://www.ecb.int/vocabulary/2002-08-01/eurofxref">
    <gesmes:subject>Reference rates</gesmes:subject>
    <gesmes:Sender>
        <gesmes:name>European Central Bank</gesmes:name>
    </gesmes:Sender>
    <Cube>
        <Cube time='2024-06-04'>
            <Cube currency='USD' rate='1.0847'/>
            <Cube currency='JPY' rate='170.05'/>
            <Cube currency='GBP' rate='0.8465'/>
        </Cube>
    </Cube>
</gesmes:Envelope>
"""

HISTORY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<gesmes:Envelope xmlns:gesmes="http://www.gesmes.org/xml/2002-08-01" xmlns="http://www.ecb.int/vocabulary/2002-08-01/eurofxref">
    <gesmes:subject>Reference rates</gesmes:subject>
    <Cube>
        <Cube time="2024-06-03">
            <Cube currency="USD" rate="1.0875"/>
            <Cube currency="GBP" rate="0.85"/>
            <Cube currency="HRK" rate="7.5345"/>
        </Cube>
        <Cube time="2024-06-04">
            <Cube currency="USD" rate="1.0847"/>
        </Cube>
        <Cube time="2024-05-31">
            <Cube currency="USD" rate="1.0848"/>
            <Cube currency="GBP" rate="0.8511"/>
        </Cube>
    </Cube>
</gesmes:Envelope>
"""

# Tuesday 2024-06-04 16:00 CEST.
PUBLISHED_AT = datetime(2024, 6, 4, 14, 0, tzinfo=timezone.utc)


class FakeFeedClient:
    """In-memory feed transport that records how often it was called."""

    def __init__(
        self,
        *,
        daily: str = DAILY_XML,
        history: str = HISTORY_XML,
        published_at: datetime | None = PUBLISHED_AT,
        error: Exception | None = None,
    ) -> None:
        self.bodies = {FeedKind.DAILY: daily, FeedKind.HISTORY: history}
        self.published_at = published_at
        self.error = error
        self.calls: list[FeedKind] = []
        self.closed = False

    def fetch(self, kind: FeedKind) -> FeedPayload:
        self.calls.append(kind)
        if self.error is not None:
            raise self.error
        return FeedPayload(
            kind=kind,
            body=self.bodies[kind],
            url=f"https://example.test/{kind.value}.xml",
            published_at=self.published_at,
        )

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Epoch clock that tests can move forward."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current.timestamp()


@pytest.fixture
def daily_xml() -> str:
    return DAILY_XML


@pytest.fixture
def history_xml() -> str:
    return HISTORY_XML


@pytest.fixture
def fake_client() -> FakeFeedClient:
    return FakeFeedClient()
