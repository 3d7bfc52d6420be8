"""Tests for snapshot serialization and file persistence."""

import asyncio
import json

import pytest

from sitecrawler.crawler.scheduler import CrawlRecord
from sitecrawler.storage.snapshot import FileSnapshotWriter, serialize_store
from sitecrawler.utils.errors import SnapshotError


def record(record_id, url, title='', texts=''):
    return CrawlRecord(id=record_id, url=url, title=title, texts=texts)


class TestSerializeStore:

    def test_keys_in_id_order(self):
        store = {
            2: record(2, "http://www.x.com/b", "B"),
            1: record(1, "http://www.x.com/", "Home", "Welcome"),
        }
        data = serialize_store(store)

        assert data.decode('utf-8').startswith('{"1": ')
        assert json.loads(data) == {
            "1": {"url": "http://www.x.com/", "title": "Home", "texts": "Welcome"},
            "2": {"url": "http://www.x.com/b", "title": "B", "texts": ""},
        }

    def test_non_ascii_kept_verbatim(self):
        data = serialize_store({1: record(1, "http://www.x.com/", "Café", "naïve")})
        assert "Café".encode('utf-8') in data

    def test_empty_store(self):
        assert serialize_store({}) == b'{}'

    def test_pretty(self):
        data = serialize_store({1: record(1, "http://www.x.com/")}, pretty=True)
        assert b'\n  "1": {' in data


class TestFileSnapshotWriter:

    def test_writes_file(self, tmp_path):
        target = tmp_path / "out" / "crawler.JSON"
        asyncio.run(FileSnapshotWriter(str(target)).persist(b'{"1": {}}'))
        assert target.read_bytes() == b'{"1": {}}'

    def test_failure_raises_snapshot_error(self, tmp_path):
        writer = FileSnapshotWriter(str(tmp_path))
        with pytest.raises(SnapshotError):
            asyncio.run(writer.persist(b'{}'))
