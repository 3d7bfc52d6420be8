"""
Utility modules for the site crawler.
"""

from .config import Config, ConfigManager, load_config
from .errors import CrawlerError, InvalidInputError, SnapshotError

__all__ = [
    'Config', 'ConfigManager', 'load_config',
    'CrawlerError', 'InvalidInputError', 'SnapshotError'
]
