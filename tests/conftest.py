"""Shared fixtures for the crawler tests."""

import asyncio
import logging
from typing import Dict, List

import pytest

from sitecrawler.crawler.fetcher import FetchResult


class FakeFetcher:
    """In-memory stand-in for WebFetcher serving a fixed set of pages."""

    def __init__(self, pages: Dict[str, str]):
        self.pages = pages
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight -= 1

        if url not in self.pages:
            return FetchResult(url=url, status_code=404, error="HTTP 404")
        return FetchResult(url=url, status_code=200, content=self.pages[url])


def page(title: str = '', body: str = '', links: List[str] = ()) -> str:
    anchors = ''.join(f'<a href="{href}"></a>' for href in links)
    return (
        f'<html><head><title>{title}</title></head>'
        f'<body>{body}{anchors}</body></html>'
    )


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def make_page():
    return page


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
