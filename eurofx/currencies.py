"""Currency enumerations accepted by the ECB feeds.

``CURRENT_FEED_CURRENCIES`` lists the codes published in the daily feed.
``HISTORICAL_FEED_CURRENCIES`` additionally contains currencies the ECB used to
publish and that may still show up in historical data. The anchor (EUR) never
appears in a feed; it is accepted in requests and synthesised at lookup time.
"""

from __future__ import annotations

from typing import Final

from eurofx.errors import UnknownCurrencyError

ANCHOR_CURRENCY: Final[str] = "EUR"

CURRENCY_NAMES: Final[dict[str, str]] = {
    "AUD": "Australian Dollar",
    "BGN": "Bulgarian Lev",
    "BRL": "Brazilian Real",
    "CAD": "Canadian Dollar",
    "CHF": "Swiss Franc",
    "CNY": "Chinese Yuan Renminbi",
    "CZK": "Czech Koruna",
    "DKK": "Danish Krone",
    "EUR": "Euro",
    "GBP": "Pound Sterling",
    "HKD": "Hong Kong Dollar",
    "HUF": "Hungarian Forint",
    "IDR": "Indonesian Rupiah",
    "ILS": "Israeli Shekel",
    "INR": "Indian Rupee",
    "ISK": "Icelandic Krona",
    "JPY": "Japanese Yen",
    "KRW": "South Korean Won",
    "MXN": "Mexican Peso",
    "MYR": "Malaysian Ringgit",
    "NOK": "Norwegian Krone",
    "NZD": "New Zealand Dollar",
    "PHP": "Philippine Peso",
    "PLN": "Polish Zloty",
    "RON": "Romanian Leu",
    "SEK": "Swedish Krona",
    "SGD": "Singapore Dollar",
    "THB": "Thai Baht",
    "TRY": "Turkish Lira",
    "USD": "United States Dollar",
    "ZAR": "South African Rand",
    # No longer published in the daily feed.
    "CYP": "Cypriot Pound",
    "EEK": "Estonian Kroon",
    "HRK": "Croatian Kuna",
    "LTL": "Lithuanian Litas",
    "LVL": "Latvian Lats",
    "MTL": "Maltese Lira",
    "ROL": "Romanian Leu (old)",
    "RUB": "Russian Rouble",
    "SIT": "Slovenian Tolar",
    "SKK": "Slovak Koruna",
    "TRL": "Turkish Lira (old)",
}

CURRENT_FEED_CURRENCIES: Final[frozenset[str]] = frozenset(
    {
        "AUD",
        "BGN",
        "BRL",
        "CAD",
        "CHF",
        "CNY",
        "CZK",
        "DKK",
        "GBP",
        "HKD",
        "HUF",
        "IDR",
        "ILS",
        "INR",
        "ISK",
        "JPY",
        "KRW",
        "MXN",
        "MYR",
        "NOK",
        "NZD",
        "PHP",
        "PLN",
        "RON",
        "SEK",
        "SGD",
        "THB",
        "TRY",
        "USD",
        "ZAR",
    }
)

HISTORICAL_FEED_CURRENCIES: Final[frozenset[str]] = CURRENT_FEED_CURRENCIES | frozenset(
    {"CYP", "EEK", "HRK", "LTL", "LVL", "MTL", "ROL", "RUB", "SIT", "SKK", "TRL"}
)

CURRENT_CURRENCIES: Final[frozenset[str]] = CURRENT_FEED_CURRENCIES | {ANCHOR_CURRENCY}
HISTORICAL_CURRENCIES: Final[frozenset[str]] = HISTORICAL_FEED_CURRENCIES | {ANCHOR_CURRENCY}


def normalise_code(code: str) -> str:
    return code.strip().upper()


def feed_currencies(*, historical: bool = False) -> frozenset[str]:
    """Codes a feed may legitimately contain (the anchor is never included)."""

    return HISTORICAL_FEED_CURRENCIES if historical else CURRENT_FEED_CURRENCIES


def request_currencies(*, historical: bool = False) -> frozenset[str]:
    """Codes a caller may ask for, including the anchor."""

    return HISTORICAL_CURRENCIES if historical else CURRENT_CURRENCIES


def ensure_currency(code: str, *, historical: bool = False) -> str:
    """Normalise ``code`` and reject anything outside the request enumeration."""

    if not isinstance(code, str):
        raise UnknownCurrencyError(repr(code), historical=historical)
    normalised = normalise_code(code)
    if normalised not in request_currencies(historical=historical):
        raise UnknownCurrencyError(code, historical=historical)
    return normalised


def currency_listing(*, historical: bool = False) -> dict[str, dict[str, str]]:
    """Return ``{code: {"code": code, "name": name}}`` sorted by code."""

    return {
        code: {"code": code, "name": CURRENCY_NAMES[code]}
        for code in sorted(request_currencies(historical=historical))
    }


__all__ = [
    "ANCHOR_CURRENCY",
    "CURRENCY_NAMES",
    "CURRENT_FEED_CURRENCIES",
    "HISTORICAL_FEED_CURRENCIES",
    "CURRENT_CURRENCIES",
    "HISTORICAL_CURRENCIES",
    "normalise_code",
    "feed_currencies",
    "request_currencies",
    "ensure_currency",
    "currency_listing",
]
