"""
Level-by-level crawl scheduler.

Each level's frontier is split into batches. Pages in a batch are fetched and
extracted concurrently; the batch is awaited as a whole before its results are
merged into the crawl state and the next batch starts. Only the merge step
writes to the state, so the concurrent region needs no locking.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Set
from dataclasses import dataclass, field

from .fetcher import WebFetcher
from .parser import ContentParser, ExtractionResult


@dataclass
class CrawlRecord:
    """One successfully crawled page."""
    id: int
    url: str
    title: str
    texts: str

    def to_dict(self) -> dict:
        """Snapshot form; the id is carried by the store key."""
        return {
            'url': self.url,
            'title': self.title,
            'texts': self.texts
        }


@dataclass
class CrawlState:
    """Mutable traversal state, threaded from one level to the next."""
    frontier: List[str]
    visited: Set[str] = field(default_factory=set)
    store: Dict[int, CrawlRecord] = field(default_factory=dict)
    next_id: int = 1
    level: int = 1


@dataclass
class CrawlStats:
    """Statistics for crawl operations."""
    start_time: float
    levels_processed: int = 0
    batches_processed: int = 0
    pages_stored: int = 0
    pages_failed: int = 0
    links_staged: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


def chunk_urls(urls: List[str], size: int) -> List[List[str]]:
    """Split URLs into consecutive batches of at most ``size``."""
    return [urls[i:i + size] for i in range(0, len(urls), size)]


class CrawlerScheduler:
    """
    Breadth-first crawler bounded by depth and batch size.

    ``fetcher`` is anything with an ``async fetch(url) -> FetchResult``;
    a failed fetch is reported through ``FetchResult.error``.
    """

    def __init__(self, fetcher: WebFetcher, parser: Optional[ContentParser] = None,
                 batch_size: int = 100):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.fetcher = fetcher
        self.parser = parser or ContentParser()
        self.batch_size = batch_size
        self.logger = logging.getLogger(__name__)
        self.stats = CrawlStats(start_time=time.time())

    async def crawl(self, seed_url: str, max_depth: int) -> Dict[int, CrawlRecord]:
        """
        Crawl from ``seed_url`` for at most ``max_depth`` levels.

        Args:
            seed_url: Root URL; also the prefix every followed link must share
            max_depth: Number of levels to process, the seed being level 1

        Returns:
            Output store mapping record id to CrawlRecord, in id order
        """
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")

        self.stats = CrawlStats(start_time=time.time())
        state = CrawlState(frontier=[seed_url])

        while state.level <= max_depth:
            if not state.frontier:
                self.logger.info(f"Frontier empty at level {state.level}, stopping early")
                break

            self.logger.info(f"Crawling level {state.level} of {max_depth}")
            state = await self._crawl_level(seed_url, state)
            self.stats.levels_processed += 1

        self._log_final_stats(state)
        return state.store

    async def _crawl_level(self, seed_url: str, state: CrawlState) -> CrawlState:
        """Process one level and return the state for the next one."""
        next_frontier: List[str] = []
        staged: Set[str] = set()
        batches = chunk_urls(state.frontier, self.batch_size)

        for number, batch in enumerate(batches, start=1):
            self.logger.info(
                f"Processing block {number} of {len(batches)} (pages in block: {len(batch)})"
            )
            results = await asyncio.gather(
                *(self._process_page(seed_url, url) for url in batch),
                return_exceptions=True
            )
            self.stats.batches_processed += 1

            for url, result in zip(batch, results):
                if isinstance(result, Exception):
                    self.logger.error(f"Error processing {url}: {result}")
                    result = None
                if result is None:
                    self.stats.pages_failed += 1
                    continue
                self._merge(state, result, next_frontier, staged)

        # Links staged before a later batch of this level fetched them
        state.frontier = [url for url in next_frontier if url not in state.visited]
        state.level += 1
        return state

    def _merge(self, state: CrawlState, result: ExtractionResult,
               next_frontier: List[str], staged: Set[str]):
        """Record a page and stage its unseen links for the next level."""
        record = CrawlRecord(
            id=state.next_id,
            url=result.url,
            title=result.title,
            texts=result.texts
        )
        state.store[record.id] = record
        state.next_id += 1
        state.visited.add(result.url)
        self.stats.pages_stored += 1

        for link in result.links:
            if link not in state.visited and link not in staged:
                staged.add(link)
                next_frontier.append(link)
                self.stats.links_staged += 1

    async def _process_page(self, seed_url: str, url: str) -> Optional[ExtractionResult]:
        """Fetch and extract one page; None when it yields nothing."""
        fetch_result = await self.fetcher.fetch(url)
        if not fetch_result.ok:
            return None

        return self.parser.extract(seed_url, url, fetch_result.content)

    def _log_final_stats(self, state: CrawlState):
        self.logger.info("=== CRAWL COMPLETED ===")
        self.logger.info(f"Levels processed: {self.stats.levels_processed}")
        self.logger.info(f"Pages stored: {self.stats.pages_stored}")
        self.logger.info(f"Pages failed: {self.stats.pages_failed}")
        self.logger.info(f"Links staged: {self.stats.links_staged}")
        self.logger.info(f"Unvisited frontier: {len(state.frontier)}")
        self.logger.info(f"Total time: {self.stats.elapsed_time:.2f} seconds")

    def get_stats(self) -> Dict:
        """Get current crawl statistics."""
        return {
            'levels_processed': self.stats.levels_processed,
            'batches_processed': self.stats.batches_processed,
            'pages_stored': self.stats.pages_stored,
            'pages_failed': self.stats.pages_failed,
            'links_staged': self.stats.links_staged,
            'elapsed_time': self.stats.elapsed_time
        }
