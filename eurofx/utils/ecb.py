"""ECB publication constants shared across the package."""

from __future__ import annotations

from datetime import time, timedelta
from zoneinfo import ZoneInfo

ECB_TIMEZONE = ZoneInfo("Europe/Berlin")
ECB_PUBLICATION_TIME = time(16, 0)
ECB_SAFETY_MARGIN = timedelta(minutes=10)

# Returned once the expected publication cutoff has passed without a refresh.
STALE_CACHE_TTL = 60
# The currency listing only changes with a package release.
CURRENCIES_CACHE_TTL = 24 * 60 * 60

ECB_DAILY_URL = "https://www.ecb.europa.eu/stats/eurofxref/eurofxref-daily.xml"
ECB_HISTORY_URL = "https://www.ecb.europa.eu/stats/eurofxref/eurofxref-hist-90d.xml"


__all__ = [
    "ECB_TIMEZONE",
    "ECB_PUBLICATION_TIME",
    "ECB_SAFETY_MARGIN",
    "STALE_CACHE_TTL",
    "CURRENCIES_CACHE_TTL",
    "ECB_DAILY_URL",
    "ECB_HISTORY_URL",
]
