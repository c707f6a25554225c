"""
Material identity resolution.
"""

from pricescraper.matching.material_matcher import AliasDictionary, MaterialMatcher, normalize_text

__all__ = ["AliasDictionary", "MaterialMatcher", "normalize_text"]
