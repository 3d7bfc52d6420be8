#!/usr/bin/env python3
"""
Main entry point for the site crawler.
"""

import asyncio
import argparse
import logging
import sys
from typing import Dict, Optional

from sitecrawler import __version__
from sitecrawler.crawler.fetcher import WebFetcher
from sitecrawler.crawler.parser import ContentParser
from sitecrawler.crawler.scheduler import CrawlerScheduler, CrawlRecord
from sitecrawler.storage.snapshot import FileSnapshotWriter, SnapshotWriter, serialize_store
from sitecrawler.utils.config import (
    Config, load_config, normalize_db_name, validate_max_depth, validate_seed_url
)
from sitecrawler.utils.errors import CrawlerError, SnapshotError
from sitecrawler.utils.logger import setup_logging


class CrawlerApp:
    """Main application class for the site crawler."""

    def __init__(self, config: Config, writer: Optional[SnapshotWriter] = None):
        self.config = config
        self.writer = writer or FileSnapshotWriter(config.output.db_name)
        self.logger = logging.getLogger(__name__)
        self.store: Dict[int, CrawlRecord] = {}

    async def run(self, seed_url: str, max_depth: int) -> int:
        """Crawl, then persist the snapshot. Returns a process exit code."""
        self.logger.info("=== SITE CRAWLER STARTING ===")
        self.logger.info(f"Seed URL: {seed_url}")
        self.logger.info(f"Max depth: {max_depth}")
        self.logger.info(f"Batch size: {self.config.crawler.batch_size}")

        async with WebFetcher(
            user_agent=self.config.crawler.user_agent,
            request_timeout=self.config.crawler.request_timeout,
            max_concurrent_requests=self.config.crawler.batch_size,
            max_content_size=self.config.crawler.max_content_size
        ) as fetcher:
            scheduler = CrawlerScheduler(
                fetcher,
                ContentParser(self.config.extraction),
                batch_size=self.config.crawler.batch_size
            )
            self.store = await scheduler.crawl(seed_url, max_depth)
            self.logger.info(f"Fetcher stats: {fetcher.get_stats()}")

        data = serialize_store(self.store, pretty=self.config.output.pretty)
        try:
            await self.writer.persist(data)
        except SnapshotError as e:
            self.logger.error(f"{e}")
            self.logger.error("Writing snapshot to stdout instead")
            self.logger.info("=== SITE CRAWLER FINISHED ===")
            sys.stdout.write(data.decode('utf-8') + '\n')
            return 1

        self.logger.info("=== SITE CRAWLER FINISHED ===")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Breadth-first crawler for a single site",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --url https://www.example.com/             # Crawl the seed page only
  python main.py -u https://www.example.com/ -m 3           # Crawl three levels deep
  python main.py -u https://www.example.com/ -d example     # Write example.JSON
  python main.py -u https://www.example.com/ -c config.yaml # Use a config file
        """
    )

    parser.add_argument('-u', '--url', help='URL to crawl')
    parser.add_argument(
        '-m', '--maxdist',
        type=int,
        help='Maximum distance to crawl from the root URL (default: 1)'
    )
    parser.add_argument('-d', '--db', help='File name for the database (default: crawler.JSON)')
    parser.add_argument('-c', '--config', help='Path to a YAML configuration file')
    parser.add_argument(
        '--version',
        action='version',
        version=f'sitecrawler {__version__}'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        seed_url = validate_seed_url(args.url)
        max_depth = validate_max_depth(args.maxdist)
        config = load_config(args.config)
    except CrawlerError as e:
        print(e)
        return 1
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"Error: invalid configuration: {e}")
        return 1

    if args.db:
        config.output.db_name = normalize_db_name(args.db)
    else:
        config.output.db_name = normalize_db_name(config.output.db_name)

    setup_logging(config.logging)

    app = CrawlerApp(config)
    try:
        return asyncio.run(app.run(seed_url, max_depth))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1


if __name__ == '__main__':
    sys.exit(main())
