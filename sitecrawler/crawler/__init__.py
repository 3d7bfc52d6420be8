"""
Site crawler core components.
"""

from .normalizer import normalize_url, is_same_site
from .fetcher import WebFetcher, FetchResult
from .parser import ContentParser, ExtractionResult
from .scheduler import CrawlerScheduler, CrawlRecord, CrawlState

__all__ = [
    'normalize_url', 'is_same_site',
    'WebFetcher', 'FetchResult',
    'ContentParser', 'ExtractionResult',
    'CrawlerScheduler', 'CrawlRecord', 'CrawlState'
]
