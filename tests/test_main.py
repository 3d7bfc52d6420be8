"""Tests for the command-line entry point and application runner."""

import asyncio
import json

from aiohttp import web
from aiohttp import test_utils

from main import CrawlerApp, main
from sitecrawler.storage.snapshot import FileSnapshotWriter, SnapshotWriter
from sitecrawler.utils.config import Config, LoggingConfig
from sitecrawler.utils.errors import SnapshotError
from sitecrawler.utils.logger import setup_logging


SEED_PAGE = (
    '<html><head><title>Home</title></head>'
    '<body><p>Welcome (42)</p><a href="/about"></a></body></html>'
)


class BrokenWriter(SnapshotWriter):

    async def persist(self, data: bytes):
        raise SnapshotError("disk full")


def run_app(writer, max_depth=1):
    async def seed(request):
        return web.Response(text=SEED_PAGE, content_type='text/html')

    async def run():
        app = web.Application()
        app.router.add_get('/', seed)
        async with test_utils.TestServer(app) as server:
            seed_url = str(server.make_url('/'))
            crawler = CrawlerApp(Config(), writer=writer)
            code = await crawler.run(seed_url, max_depth)
            return code, crawler, seed_url

    return asyncio.run(run())


class TestMain:

    def test_missing_url(self, capsys):
        assert main(['--maxdist', '2']) == 1
        assert capsys.readouterr().out.strip() == "The --url parameter is mandatory."

    def test_invalid_url(self, capsys):
        assert main(['--url', 'not a url']) == 1
        assert capsys.readouterr().out.strip() == "The --url parameter is not a valid URL."

    def test_invalid_max_depth(self, capsys):
        assert main(['-u', 'http://www.x.com/', '-m', '0']) == 1
        assert capsys.readouterr().out.strip() == "The --maxdist parameter must be greater than 0."

    def test_missing_config_file(self, capsys, tmp_path):
        assert main(['-u', 'http://www.x.com/', '-c', str(tmp_path / 'none.yaml')]) == 1
        assert "invalid configuration" in capsys.readouterr().out

    def test_non_mapping_config_file(self, capsys, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('- a\n- b\n')

        assert main(['-u', 'http://www.x.com/', '-c', str(path)]) == 1
        assert "must contain a mapping" in capsys.readouterr().out


class TestCrawlerApp:

    def test_writes_snapshot(self, tmp_path):
        target = tmp_path / "crawler.JSON"
        code, crawler, seed_url = run_app(FileSnapshotWriter(str(target)))

        assert code == 0
        assert json.loads(target.read_text(encoding='utf-8')) == {
            "1": {"url": seed_url, "title": "Home", "texts": "Welcome"}
        }

    def test_persist_failure_keeps_store(self, capsys, restore_root_logger):
        setup_logging(LoggingConfig())
        code, crawler, seed_url = run_app(BrokenWriter())

        assert code == 1
        assert [record.url for record in crawler.store.values()] == [seed_url]
        out = capsys.readouterr().out
        assert "=== SITE CRAWLER FINISHED ===" in out
        assert json.loads(out.strip().splitlines()[-1]) == {
            "1": {"url": seed_url, "title": "Home", "texts": "Welcome"}
        }
