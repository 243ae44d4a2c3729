"""Exception hierarchy raised by eurofx."""

from __future__ import annotations


class EuroFxError(Exception):
    """Base class for every error raised by the package."""


class FetchError(EuroFxError, RuntimeError):
    """The ECB feed could not be retrieved (network failure or non-2xx status)."""

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class ParseError(EuroFxError, ValueError):
    """The feed payload does not match the expected ECB schema."""


class UnknownCurrencyError(EuroFxError, ValueError):
    """A request referenced a currency code outside the accepted enumeration."""

    def __init__(self, code: str, *, historical: bool = False) -> None:
        scope = "historical" if historical else "current"
        super().__init__(f"Unknown {scope} currency code: {code!r}")
        self.code = code
        self.historical = historical


class ZeroOrMissingRateError(EuroFxError, LookupError):
    """A rate required for a conversion is absent from the table or zero."""

    def __init__(self, code: str, rate_date: object | None = None) -> None:
        suffix = f" on {rate_date}" if rate_date is not None else ""
        super().__init__(f"No usable rate for {code}{suffix}")
        self.code = code
        self.rate_date = rate_date


__all__ = [
    "EuroFxError",
    "FetchError",
    "ParseError",
    "UnknownCurrencyError",
    "ZeroOrMissingRateError",
]
