"""Key/value cache backends used to hold parsed ECB snapshots."""

from __future__ import annotations

from typing import Final

__all__ = ["DAILY_CACHE_KEY", "HISTORY_CACHE_KEY", "CACHE_TABLE"]

DAILY_CACHE_KEY: Final[str] = "eurofx:ecb:daily"
HISTORY_CACHE_KEY: Final[str] = "eurofx:ecb:history"
# Table (SQL) or collection (MongoDB) name holding cache entries.
CACHE_TABLE: Final[str] = "rate_cache"
