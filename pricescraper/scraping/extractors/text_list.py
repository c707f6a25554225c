"""
Heuristic extractor for pages without stable markup.

The page is flattened to visible text lines. Every line carrying a currency
marker followed by a number is a price line; its title is the nearest usable
line above it and its location/supplier are looked up in the lines below it.
Both lookups are limited to a fixed window, so titles further away are missed
and stray price mentions can produce listings. Both are accepted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from pricescraper.domain import RawListing
from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.extractors.base import ListingExtractor
from pricescraper.scraping.logging_utils import log_event
from pricescraper.scraping.parsing import DocumentQuery

logger = logging.getLogger(__name__)

WINDOW_SIZE = 8
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 120

PRICE_LINE_REGEX = re.compile(
    r"(?:\bUS\$|\$|\b(?:USD|ZWG|ZWL|ZIG))\s*[0-9]",
    flags=re.IGNORECASE,
)
RESERVED_TITLE_PREFIX = re.compile(
    r"^(?:by|location|phone|email|price|usd|zwg|zig)",
    flags=re.IGNORECASE,
)
DIGITS_ONLY = re.compile(r"^\d+$")
LOCATION_PREFIX = re.compile(r"location\s*:\s*(.+)$", flags=re.IGNORECASE)
CITY_REGEX = re.compile(
    r"\b(?:harare|bulawayo|gweru|mutare|masvingo|kwekwe|bindura|kadoma|"
    r"chinhoyi|ruwa|norton|chegutu)\b",
    flags=re.IGNORECASE,
)
SUPPLIER_PREFIX = re.compile(r"^by\s+(.+)$", flags=re.IGNORECASE)

DEFAULT_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, flags=re.IGNORECASE)
    for pattern in (
        r"\b(?:login|log in|register|post|submit an advert|menu|search|sort|filters?|"
        r"categories|select state|select city|all cities)\b",
        r"\b(?:home|classifieds?|category list|clear all filters|grid view|list view|"
        r"add to favou?rites|email alert)\b",
        r"\b(?:previous|next|first|last|back to top)\b|\bsave [0-9]+%",
        r"^by$",
        r"^for sale$",
        r"^negotiable$",
        r"^location\s*:?$",
        r"^phone\s*:?",
    )
)


def compile_noise_patterns(extra_patterns: Sequence[str] = ()) -> tuple[re.Pattern[str], ...]:
    """
    Default noise blocklist plus per-source patterns; invalid patterns are skipped.
    """

    compiled = list(DEFAULT_NOISE_PATTERNS)
    for pattern in extra_patterns:
        try:
            compiled.append(re.compile(pattern, flags=re.IGNORECASE))
        except re.error as exc:
            log_event(
                logger,
                logging.WARNING,
                "noise_pattern_invalid",
                pattern=pattern,
                error=str(exc),
            )
    return tuple(compiled)


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def is_price_line(line: str) -> bool:
    return PRICE_LINE_REGEX.search(line) is not None


def is_noise(line: str, patterns: Sequence[re.Pattern[str]]) -> bool:
    return any(pattern.search(line) for pattern in patterns)


def is_title_candidate(line: str) -> bool:
    if not line or is_price_line(line):
        return False
    if not TITLE_MIN_LENGTH <= len(line) <= TITLE_MAX_LENGTH:
        return False
    if RESERVED_TITLE_PREFIX.match(line):
        return False
    return DIGITS_ONLY.match(line) is None


def extract_location(line: str) -> str | None:
    cleaned = normalize_line(line)
    match = LOCATION_PREFIX.search(cleaned)
    if match:
        return match.group(1).strip()
    if CITY_REGEX.search(cleaned):
        return cleaned
    return None


def extract_supplier(line: str) -> str | None:
    match = SUPPLIER_PREFIX.match(normalize_line(line))
    return match.group(1).strip() if match else None


def find_title(
    lines: Sequence[str],
    index: int,
    patterns: Sequence[re.Pattern[str]],
    window: int = WINDOW_SIZE,
) -> str | None:
    """
    Nearest title candidate in ``lines[index - window : index]``, scanning upward.
    """

    for position in range(index - 1, max(-1, index - window - 1), -1):
        candidate = lines[position]
        if is_noise(candidate, patterns):
            continue
        if is_title_candidate(candidate):
            return candidate
    return None


def find_context(
    lines: Sequence[str],
    index: int,
    window: int = WINDOW_SIZE,
) -> tuple[str | None, str | None]:
    """
    First location and first supplier in ``lines[index + 1 : index + window + 1]``.
    """

    location: str | None = None
    supplier: str | None = None
    for position in range(index + 1, min(len(lines), index + window + 1)):
        if location is None:
            location = extract_location(lines[position])
        if supplier is None:
            supplier = extract_supplier(lines[position])
        if location is not None and supplier is not None:
            break
    return location, supplier


def extract_text_listings(
    lines: Sequence[str],
    patterns: Sequence[re.Pattern[str]] = DEFAULT_NOISE_PATTERNS,
    window: int = WINDOW_SIZE,
) -> list[RawListing]:
    listings: list[RawListing] = []
    seen: set[tuple[str, str, str, str]] = set()

    for index, line in enumerate(lines):
        if is_noise(line, patterns) or not is_price_line(line):
            continue

        title = find_title(lines, index, patterns, window)
        if title is None:
            continue

        location, supplier = find_context(lines, index, window)
        key = (title, line, location or "", supplier or "")
        if key in seen:
            continue
        seen.add(key)

        listings.append(
            RawListing(
                name=title,
                price=line,
                location=location,
                supplier=supplier,
            )
        )
    return listings


class TextListExtractor(ListingExtractor):
    """
    Window-based extractor over the page's visible text lines.
    """

    def extract(self, document: DocumentQuery, source: SourceConfig) -> list[RawListing]:
        lines = tuple(normalize_line(line) for line in document.visible_lines())
        lines = tuple(line for line in lines if line)
        patterns = compile_noise_patterns(source.ignore_patterns)
        return extract_text_listings(lines, patterns)
