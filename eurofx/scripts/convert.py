"""CLI for querying ECB reference rates.

Examples::

    python -m eurofx.scripts.convert USD
    python -m eurofx.scripts.convert USD --to GBP --amount 100
    python -m eurofx.scripts.convert USD --to GBP --history
    python -m eurofx.scripts.convert --list
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Sequence

from eurofx import EuroFx
from eurofx.errors import FetchError, ParseError, UnknownCurrencyError, ZeroOrMissingRateError
from eurofx.utils.logger import get_logger

LOGGER = get_logger(__name__)

__all__ = ["parse_args", "run", "main"]

CACHE_URL_ENV = "EUROFX_CACHE_URL"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert currencies using ECB reference rates")
    parser.add_argument("source", nargs="?", help="Source currency code (e.g. USD)")
    parser.add_argument("--to", dest="target", help="Target currency code")
    parser.add_argument("--amount", type=float, default=1.0, help="Amount to convert")
    parser.add_argument(
        "--history",
        action="store_true",
        help="Return the pair rate for every date of the 90-day feed (requires --to)",
    )
    parser.add_argument("--list", action="store_true", help="List accepted currencies")
    parser.add_argument(
        "--cache-url",
        default=os.environ.get(CACHE_URL_ENV),
        help=f"Cache URL (memory://, sqlite:///path, ...); defaults to ${CACHE_URL_ENV}",
    )
    args = parser.parse_args(argv)
    if not args.list and not args.source:
        parser.error("a source currency is required unless --list is given")
    if args.history and not args.target:
        parser.error("--history requires --to")
    return args


def _json_default(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def run(args: argparse.Namespace, fx: EuroFx) -> dict[str, Any]:
    if args.list:
        return fx.currencies(historical=args.history)
    if args.history:
        return asdict(fx.history(args.source, args.target, amount=args.amount))
    if args.target:
        return asdict(fx.convert(args.source, args.target, amount=args.amount))
    return asdict(fx.latest(args.source, amount=args.amount))


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        with EuroFx(args.cache_url) as fx:
            result = run(args, fx)
    except (FetchError, ParseError, ZeroOrMissingRateError) as exc:
        LOGGER.error("%s", exc)
        return 1
    except (UnknownCurrencyError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 2
    json.dump(result, sys.stdout, indent=2, default=_json_default)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - thin wrapper
    sys.exit(main())
