"""
Web page fetcher. Failures are reported in the result, never raised.
"""

import asyncio
import aiohttp
import logging
import time
from typing import Optional, Dict
from dataclasses import dataclass
from aiohttp import ClientSession, ClientTimeout, ClientError


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status_code: int
    content: Optional[str] = None
    error: Optional[str] = None
    fetch_time: float = 0.0
    encoding: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.content)


class WebFetcher:
    """
    Fetches web pages over a shared aiohttp session.

    Only an HTTP 200 response with a non-empty body counts as success.
    There are no retries. ``request_timeout`` of None means no timeout, so a
    hung server blocks the caller until the connection drops.
    """

    def __init__(self, user_agent: str, request_timeout: Optional[float] = None,
                 max_concurrent_requests: int = 100,
                 max_content_size: int = 10 * 1024 * 1024):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_concurrent_requests = max_concurrent_requests
        self.max_content_size = max_content_size

        self.logger = logging.getLogger(__name__)
        self.session: Optional[ClientSession] = None

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            timeout = ClientTimeout(total=self.request_timeout)
            headers = {'User-Agent': self.user_agent}

            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers=headers,
                connector=aiohttp.TCPConnector(limit=self.max_concurrent_requests)
            )
            self.logger.debug("WebFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("WebFetcher session closed")

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a single URL.

        Args:
            url: The URL to fetch

        Returns:
            FetchResult carrying the body on success or an error message
        """
        if self.session is None:
            raise RuntimeError("WebFetcher session not started")

        start_time = time.time()
        self.stats['total_requests'] += 1

        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    self.stats['failed_requests'] += 1
                    self.logger.warning(f"Failed to fetch {url}. Status code: {response.status}")
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        error=f"HTTP {response.status}",
                        fetch_time=time.time() - start_time
                    )

                content = await self._read_content_safely(response)
                fetch_time = time.time() - start_time

                if not content:
                    self.stats['failed_requests'] += 1
                    self.logger.warning(f"Empty or unreadable body: {url}")
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        error="Empty body",
                        fetch_time=fetch_time
                    )

                self.stats['successful_requests'] += 1
                self.stats['total_bytes_downloaded'] += len(content)
                self.logger.debug(f"Fetched {url}: {response.status} ({len(content)} chars)")

                return FetchResult(
                    url=url,
                    status_code=response.status,
                    content=content,
                    encoding=response.charset,
                    fetch_time=fetch_time
                )

        except asyncio.TimeoutError:
            error_msg = "Request timeout"
            self.logger.warning(f"Timeout fetching {url}")

        except ClientError as e:
            # Includes InvalidURL for hrefs that normalized into garbage
            error_msg = f"Client error: {e}"
            self.logger.warning(f"Failed to fetch the URL: {url} ({e})")

        except Exception as e:
            # e.g. UnicodeError from IDNA encoding of an over-long host label
            error_msg = f"Unexpected error: {e}"
            self.logger.error(f"Unexpected error fetching {url}: {e}")

        self.stats['failed_requests'] += 1
        return FetchResult(
            url=url,
            status_code=0,
            error=error_msg,
            fetch_time=time.time() - start_time
        )

    async def _read_content_safely(self, response) -> Optional[str]:
        """
        Read the response body, giving up past ``max_content_size`` bytes.

        Returns:
            Decoded content, or None if too large
        """
        content_length = response.headers.get('content-length')
        if content_length and content_length.isdigit() and int(content_length) > self.max_content_size:
            self.logger.warning(f"Content too large ({content_length} bytes): {response.url}")
            return None

        content_bytes = b''
        async for chunk in response.content.iter_chunked(8192):
            content_bytes += chunk
            if len(content_bytes) > self.max_content_size:
                self.logger.warning(f"Content exceeded size limit during reading: {response.url}")
                return None

        encoding = response.charset or 'utf-8'
        try:
            return content_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            for fallback_encoding in ['utf-8', 'cp1252']:
                try:
                    return content_bytes.decode(fallback_encoding)
                except UnicodeDecodeError:
                    continue

            return content_bytes.decode('latin-1')

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()
