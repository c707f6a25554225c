"""
Weekly price aggregation.
"""

from pricescraper.scraping.aggregation.weekly import aggregate_weekly, week_start

__all__ = ["aggregate_weekly", "week_start"]
