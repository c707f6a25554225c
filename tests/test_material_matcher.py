"""
tests/test_material_matcher.py

Alias normalization and longest-alias resolution.
"""

from __future__ import annotations

from pricescraper.matching import AliasDictionary, MaterialMatcher, normalize_text
from pricescraper.scraping.config import load_alias_mapping


def test_normalize_text_lowercases_and_strips_symbols() -> None:
    assert normalize_text("  PPC   Cement (50kg)!  ") == "ppc cement 50kg"
    assert normalize_text("Surecem 32.5-R") == "surecem 32.5-r"


def test_exact_alias_match() -> None:
    matcher = MaterialMatcher({"River Sand": "sand-river"})
    assert matcher.match("river   SAND") == "sand-river"


def test_longest_alias_wins_over_general_alias() -> None:
    matcher = MaterialMatcher(
        {
            "bricks": "brick-common",
            "red common bricks": "brick-common-red",
        }
    )
    assert matcher.match("Premium Red Common Bricks (per 1000)") == "brick-common-red"
    assert matcher.match("Face bricks per 1000") == "brick-common"


def test_alias_keeps_decimal_point() -> None:
    matcher = MaterialMatcher(
        {
            "cement": "cement-generic-50kg",
            "surecem 32.5": "cement-ppc-surecem-325r",
        }
    )
    assert matcher.match("PPC Cement Surecem 32.5") == "cement-ppc-surecem-325r"
    assert matcher.match("PPC Surecem 32.5 50kg") == "cement-ppc-surecem-325r"
    assert matcher.match("Surecem 325 bag") is None


def test_bundled_aliases_resolve_halsteds_surecem_listing() -> None:
    aliases = load_alias_mapping(aliases_path="pricescraper/scraping/config/material-aliases.json")
    matcher = MaterialMatcher(aliases)

    assert matcher.match("PPC Cement Surecem 32.5") == "cement-ppc-surecem-325r"
    assert matcher.match("PPC Cement Surecem 32.5 (Kwekwe)") == "cement-ppc-surecem-325r"
    assert matcher.match("Lafarge Cement 32.5 50kg") == "cement-lafarge-325"
    assert matcher.match("Cement 50kg") == "cement-generic-50kg"


def test_no_alias_returns_none() -> None:
    matcher = MaterialMatcher({"cement": "cement-generic-50kg"})
    assert matcher.match("Garden hose 30m") is None
    assert matcher.match("") is None
    assert matcher.match("!!!") is None


def test_alias_dictionary_first_duplicate_wins_and_empty_aliases_dropped() -> None:
    aliases = AliasDictionary({"Cement": "first", "cement ": "second", "***": "empty"})
    assert dict(aliases) == {"cement": "first"}


def test_equal_length_aliases_keep_file_order() -> None:
    aliases = AliasDictionary({"pit sand": "sand-pit", "dpc roll": "dpc-roll"})
    assert [alias for alias, _ in aliases.longest_first()] == ["pit sand", "dpc roll"]
    assert MaterialMatcher(aliases).match("pit sand and dpc roll combo") == "sand-pit"
