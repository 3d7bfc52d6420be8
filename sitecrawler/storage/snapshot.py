"""
Snapshot storage for the crawl output store.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Mapping

from ..crawler.scheduler import CrawlRecord
from ..utils.errors import SnapshotError


def serialize_store(store: Mapping[int, CrawlRecord], pretty: bool = False) -> bytes:
    """
    Serialize the output store as a JSON object.

    Keys are the record ids as strings, emitted in id order so snapshots of
    repeated runs diff cleanly.
    """
    payload: Dict[str, dict] = {
        str(record_id): store[record_id].to_dict()
        for record_id in sorted(store)
    }
    return json.dumps(
        payload, ensure_ascii=False, indent=2 if pretty else None
    ).encode('utf-8')


class SnapshotWriter:
    """Abstract base class for snapshot destinations."""

    async def persist(self, data: bytes):
        """Persist serialized snapshot bytes, raising SnapshotError on failure."""
        raise NotImplementedError


class FileSnapshotWriter(SnapshotWriter):
    """Writes the snapshot to a single file, replacing any previous one."""

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)
        self.logger = logging.getLogger(__name__)

    async def persist(self, data: bytes):
        self.logger.info(f"Saving snapshot to {self.file_path}...")
        try:
            if self.file_path.parent != Path('.'):
                self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path.write_bytes(data)
        except OSError as e:
            raise SnapshotError(f"Error writing snapshot to {self.file_path}: {e}") from e

        self.logger.info(f"Snapshot saved ({len(data)} bytes)")
