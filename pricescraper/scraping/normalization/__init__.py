"""
Observation building from raw listings.
"""

from pricescraper.scraping.normalization.observation_builder import ObservationBuilder

__all__ = ["ObservationBuilder"]
