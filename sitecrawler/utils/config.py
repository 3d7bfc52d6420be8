"""
Configuration management for the site crawler.
"""

import re
import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field

from .errors import InvalidInputError


DEFAULT_MAX_DEPTH = 1
DEFAULT_DB_NAME = 'crawler.JSON'
DB_SUFFIX = '.JSON'

NO_URL_MSG = 'The --url parameter is mandatory.'
INVALID_URL_MSG = 'The --url parameter is not a valid URL.'
INVALID_MAX_DEPTH_MSG = 'The --maxdist parameter must be greater than 0.'

SEED_URL_PATTERN = re.compile(
    r'^(https?|ftp|file)://[-A-Z0-9+&@#/%?=~_|!:,.;]*[-A-Z0-9+&@#/%=~_|]',
    re.IGNORECASE
)

# Footnote markers such as "(42)" or "(note 3)"
DEFAULT_EXCLUDE_PATTERNS = [r'\([^0-9]*\d+[0-9]*\)']

# Rejects tokens containing ASCII digits, punctuation or symbols, Latin-1
# symbols, spacing modifiers, combining marks and the general punctuation to
# misc symbols blocks.
DEFAULT_WORD_PATTERN = (
    r"^[^\u0000-\u0040\u005B-\u0060\u007B-\u00BF\u02B0-\u036F"
    r"\u00D7\u00F7\u2000-\u2BFF]+$"
)

TEXT_MODES = ('words', 'paragraphs')


@dataclass
class CrawlerConfig:
    """Configuration for traversal and fetching."""
    batch_size: int = 100
    request_timeout: Optional[float] = None
    user_agent: str = 'sitecrawler/1.0'
    max_content_size: int = 10 * 1024 * 1024


@dataclass
class ExtractionConfig:
    """Configuration for text and link extraction."""
    exclude_scripts: bool = True
    excluded_hrefs: List[str] = field(default_factory=lambda: ['/', '#'])
    text_separator: str = ', '
    text_mode: str = 'words'
    exclude_patterns: List[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS)
    )
    word_pattern: str = DEFAULT_WORD_PATTERN


@dataclass
class OutputConfig:
    """Configuration for the snapshot file."""
    db_name: str = DEFAULT_DB_NAME
    pretty: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    file: Optional[str] = None
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    json: bool = False


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file, or defaults when no path is set."""
        config_data: Dict[str, Any] = {}
        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as file:
                try:
                    config_data = yaml.safe_load(file) or {}
                except yaml.YAMLError as e:
                    raise ValueError(f"Malformed configuration file {self.config_path}: {e}")

            if not isinstance(config_data, dict):
                raise ValueError("Configuration file must contain a mapping")

        self._config = Config(
            crawler=CrawlerConfig(**(config_data.get('crawler') or {})),
            extraction=ExtractionConfig(**(config_data.get('extraction') or {})),
            output=OutputConfig(**(config_data.get('output') or {})),
            logging=LoggingConfig(**(config_data.get('logging') or {}))
        )

        self._validate_config()
        return self._config

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ValueError("Configuration not loaded")

        crawler = self._config.crawler
        if crawler.batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        if crawler.request_timeout is not None and crawler.request_timeout <= 0:
            raise ValueError("request_timeout must be positive when set")

        extraction = self._config.extraction
        if extraction.text_mode not in TEXT_MODES:
            raise ValueError("text_mode must be 'words' or 'paragraphs'")

        for pattern in [*extraction.exclude_patterns, extraction.word_pattern]:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid regular expression {pattern!r}: {e}")

        if not isinstance(logging.getLevelName(self._config.logging.level.upper()), int):
            raise ValueError(f"Unknown log level: {self._config.logging.level}")

        logging.debug("Configuration validation passed")


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file, falling back to defaults."""
    return ConfigManager(config_path).load_config()


def validate_seed_url(url: Optional[str]) -> str:
    """Check the seed URL is present and looks like scheme://host/path."""
    if not url:
        raise InvalidInputError(NO_URL_MSG)
    if not SEED_URL_PATTERN.match(url):
        raise InvalidInputError(INVALID_URL_MSG)
    return url


def validate_max_depth(max_depth: Optional[int]) -> int:
    """Return the max depth, defaulting when unset and rejecting values below 1."""
    if max_depth is None:
        return DEFAULT_MAX_DEPTH
    if max_depth < 1:
        raise InvalidInputError(INVALID_MAX_DEPTH_MSG)
    return max_depth


def normalize_db_name(db_name: Optional[str]) -> str:
    """Append the snapshot suffix to the output name when it is missing."""
    if not db_name:
        return DEFAULT_DB_NAME
    if db_name.endswith(DB_SUFFIX):
        return db_name
    return db_name + DB_SUFFIX
