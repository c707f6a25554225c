"""
Price text parsing.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from pricescraper.domain import Currency

NUMBER_REGEX = re.compile(r"([0-9]+(?:\.[0-9]+)?)")
USD_MARKERS = ("USD", "$")
ZWG_MARKERS = ("ZWG", "ZWL", "ZIG")


class ParsedPrice(NamedTuple):
    price: float | None
    currency: str | None


def parse_price(raw: str | None) -> ParsedPrice:
    """
    Extract the first number and a currency tag from a raw price string.

    Commas are treated as thousands separators. When both USD and ZWG markers
    appear, ZWG wins.
    """

    if not raw:
        return ParsedPrice(None, None)

    cleaned = raw.replace(",", "")
    match = NUMBER_REGEX.search(cleaned)
    if match is None:
        return ParsedPrice(None, None)

    upper = cleaned.upper()
    currency = None
    if any(marker in upper for marker in USD_MARKERS):
        currency = Currency.USD
    if any(marker in upper for marker in ZWG_MARKERS):
        currency = Currency.ZWG
    return ParsedPrice(float(match.group(1)), currency)
