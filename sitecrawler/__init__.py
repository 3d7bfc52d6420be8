"""
Site Crawler

A breadth-first, depth-bounded crawler for a single site that records each
page's title and visible text.
"""

__version__ = "1.0.0"
__description__ = "Level-by-level site crawler producing a JSON snapshot of page texts"
