from __future__ import annotations

import logging

import pytest

from eurofx.ingestion.ecb_xml import parse_daily
from eurofx.utils.logger import LOG_FORMAT, get_logger


def test_get_logger_returns_named_logger() -> None:
    assert get_logger().name == "eurofx"
    assert get_logger("eurofx.service") is logging.getLogger("eurofx.service")
    assert "%(name)s" in LOG_FORMAT


def test_conflicting_duplicate_rates_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    xml = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<gesmes:Envelope xmlns:gesmes="http://www.gesmes.org/xml/2002-08-01">'
        '<Cube><Cube time="2024-06-04">'
        '<Cube currency="USD" rate="1.08"/><Cube currency="USD" rate="1.09"/>'
        "</Cube></Cube></gesmes:Envelope>"
    )

    with caplog.at_level(logging.WARNING, logger="eurofx.ingestion.ecb_xml"):
        table = parse_daily(xml)

    assert table.rates == {"USD": 1.09}
    assert any("Conflicting USD rates" in record.getMessage() for record in caplog.records)
