"""requests-based downloader for the ECB euro reference-rate feeds."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import requests

from eurofx.errors import FetchError
from eurofx.ingestion.models import FeedKind, FeedPayload
from eurofx.utils.ecb import ECB_DAILY_URL, ECB_HISTORY_URL
from eurofx.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "eurofx/1.0",
    "Accept": "application/xml,text/xml;q=0.9,*/*;q=0.8",
}


class EcbFeedClient:
    """Fetch the daily or 90-day ECB XML feed over plain HTTPS GET.

    Failures are raised as :class:`FetchError` and never retried here; retry
    policy belongs to the caller.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 30,
        daily_url: str = ECB_DAILY_URL,
        history_url: str = ECB_HISTORY_URL,
    ) -> None:
        self.timeout = timeout
        self.urls: dict[FeedKind, str] = {
            FeedKind.DAILY: daily_url,
            FeedKind.HISTORY: history_url,
        }
        self._owns_session = session is None
        self.session = session or requests.Session()
        if self._owns_session:
            self.session.headers.update(DEFAULT_HEADERS)

    def fetch(self, kind: FeedKind) -> FeedPayload:
        """Download the ``kind`` feed and return its body and publication time."""

        url = self.urls[FeedKind(kind)]
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"Unable to reach ECB feed {url}: {exc}", url=url) from exc
        self._raise_with_context(response, url)

        published_at = parse_last_modified(response.headers.get("Last-Modified"))
        if published_at is None:
            LOGGER.warning("ECB feed %s did not report a usable Last-Modified header", url)
        LOGGER.info("Fetched %s feed from %s (published %s)", FeedKind(kind).value, url, published_at)
        return FeedPayload(kind=FeedKind(kind), body=response.text, url=url, published_at=published_at)

    @staticmethod
    def _raise_with_context(response: requests.Response, url: str) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = response.status_code
            raise FetchError(
                f"ECB feed responded with HTTP {status} for {url}", url=url, status=status
            ) from exc

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "EcbFeedClient":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # pragma: no cover - trivial
        self.close()


def parse_last_modified(value: str | None) -> datetime | None:
    """Parse an HTTP date header into an aware UTC datetime, or ``None``."""

    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        # RFC 7231 dates are always GMT; "-0000" parses as naive.
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


__all__ = ["EcbFeedClient", "parse_last_modified"]
