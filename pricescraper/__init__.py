"""
Building-material price scraping, matching and weekly aggregation.
"""
