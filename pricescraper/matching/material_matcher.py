"""
pricescraper/matching/material_matcher.py

Maps scraped product names to canonical material keys.

Resolution order:
1. Exact lookup of the normalized name in the alias dictionary.
2. Longest alias contained in the normalized name, so a specific alias
   ("red common bricks") is never shadowed by a general one ("bricks").
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9 .-]")


def normalize_text(value: str) -> str:
    """
    Lowercase, collapse whitespace, drop characters outside ``[a-z0-9 .-]``, trim.
    """

    collapsed = _WHITESPACE.sub(" ", value.lower())
    return _DISALLOWED.sub("", collapsed).strip()


class AliasDictionary(Mapping[str, str]):
    """
    Read-only ``normalized alias -> material key`` mapping built once per run.

    Aliases that normalize to an empty string are dropped. When two raw
    aliases collapse to the same normalized form, the first one is kept.
    """

    def __init__(self, raw_aliases: Mapping[str, str]) -> None:
        entries: dict[str, str] = {}
        for alias, material_key in raw_aliases.items():
            normalized = normalize_text(alias)
            if normalized and normalized not in entries:
                entries[normalized] = material_key
        self._entries = entries
        self._by_length = sorted(entries.items(), key=lambda item: len(item[0]), reverse=True)

    def __getitem__(self, alias: str) -> str:
        return self._entries[alias]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def longest_first(self) -> list[tuple[str, str]]:
        # sorted() is stable, so equal-length aliases keep dictionary order
        return self._by_length


class MaterialMatcher:
    """
    Pure alias matcher; no I/O.
    """

    def __init__(self, aliases: AliasDictionary | Mapping[str, str]) -> None:
        self._aliases = aliases if isinstance(aliases, AliasDictionary) else AliasDictionary(aliases)

    @property
    def aliases(self) -> AliasDictionary:
        return self._aliases

    def match(self, raw_name: str | None) -> str | None:
        if not raw_name:
            return None
        normalized = normalize_text(raw_name)
        if not normalized:
            return None

        exact = self._aliases.get(normalized)
        if exact is not None:
            return exact

        for alias, material_key in self._aliases.longest_first():
            if alias in normalized:
                return material_key
        return None
