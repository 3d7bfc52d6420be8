"""
Snapshot storage for the site crawler.
"""

from .snapshot import SnapshotWriter, FileSnapshotWriter, serialize_store

__all__ = ['SnapshotWriter', 'FileSnapshotWriter', 'serialize_store']
