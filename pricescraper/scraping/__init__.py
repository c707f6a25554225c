"""
Price scraping pipeline: fetch, extract, match, build, aggregate, persist.
"""
