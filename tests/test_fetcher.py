"""Tests for the aiohttp fetcher against a local test server."""

import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from sitecrawler.crawler.fetcher import WebFetcher


HOME = '<html><head><title>Home</title></head><body><p>Welcome</p></body></html>'


async def home(request):
    return web.Response(text=HOME, content_type='text/html')


async def empty(request):
    return web.Response(text='', content_type='text/html')


async def user_agent(request):
    return web.Response(text=request.headers.get('User-Agent', ''))


async def server_error(request):
    return web.Response(status=500, text='oops')


def make_app():
    app = web.Application()
    app.router.add_get('/', home)
    app.router.add_get('/empty', empty)
    app.router.add_get('/ua', user_agent)
    app.router.add_get('/error', server_error)
    return app


def fetch_from_server(path, **fetcher_kwargs):
    async def run():
        async with test_utils.TestServer(make_app()) as server:
            async with WebFetcher(user_agent='test-agent/1.0', **fetcher_kwargs) as fetcher:
                result = await fetcher.fetch(str(server.make_url(path)))
                return result, fetcher.get_stats()

    return asyncio.run(run())


class TestWebFetcher:

    def test_success(self):
        result, stats = fetch_from_server('/')

        assert result.ok
        assert result.status_code == 200
        assert result.content == HOME
        assert result.error is None
        assert stats['successful_requests'] == 1
        assert stats['total_bytes_downloaded'] == len(HOME)

    def test_sends_user_agent(self):
        result, _ = fetch_from_server('/ua')
        assert result.content == 'test-agent/1.0'

    @pytest.mark.parametrize('path, status', [('/missing', 404), ('/error', 500)])
    def test_non_200_is_failure(self, path, status):
        result, stats = fetch_from_server(path)

        assert not result.ok
        assert result.status_code == status
        assert result.content is None
        assert stats['failed_requests'] == 1

    def test_empty_body_is_failure(self):
        result, _ = fetch_from_server('/empty')

        assert not result.ok
        assert result.error == "Empty body"

    def test_oversized_body_is_failure(self):
        result, _ = fetch_from_server('/', max_content_size=10)

        assert not result.ok
        assert result.content is None

    def test_connection_error_is_reported(self):
        async def run():
            async with WebFetcher(user_agent='test-agent/1.0') as fetcher:
                return await fetcher.fetch('http://127.0.0.1:1/')

        result = asyncio.run(run())

        assert not result.ok
        assert result.status_code == 0
        assert result.error.startswith("Client error")

    def test_unencodable_host_is_reported(self):
        async def run():
            async with WebFetcher(user_agent='test-agent/1.0') as fetcher:
                result = await fetcher.fetch('http://www.x.com' + 'a' * 300 + '/')
                return result, fetcher.get_stats()

        result, stats = asyncio.run(run())

        assert not result.ok
        assert result.status_code == 0
        assert result.error is not None
        assert stats['total_requests'] == 1
        assert stats['failed_requests'] == 1

    def test_fetch_requires_started_session(self):
        fetcher = WebFetcher(user_agent='test-agent/1.0')
        with pytest.raises(RuntimeError):
            asyncio.run(fetcher.fetch('http://www.x.com/'))
