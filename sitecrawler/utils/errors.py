"""
Exception types shared across the crawler.
"""


class CrawlerError(Exception):
    """Base class for crawler errors."""
    pass


class InvalidInputError(CrawlerError):
    """Raised when the seed URL or crawl options are unusable."""
    pass


class SnapshotError(CrawlerError):
    """Raised when the crawl snapshot cannot be persisted."""
    pass
