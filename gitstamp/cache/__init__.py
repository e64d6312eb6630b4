"""Snapshot cache for creation/modification-time builder progress."""

from gitstamp.cache.codec import (
    decode_ctime_snapshot,
    decode_mtime_snapshot,
    encode_ctime_snapshot,
    encode_mtime_snapshot,
)
from gitstamp.cache.models import CacheInfo, SaveResult, SnapshotInfo
from gitstamp.cache.store import CTIME_FILE_NAME, MTIME_FILE_NAME, FileStorageCache

__all__ = [
    "CTIME_FILE_NAME",
    "CacheInfo",
    "FileStorageCache",
    "MTIME_FILE_NAME",
    "SaveResult",
    "SnapshotInfo",
    "decode_ctime_snapshot",
    "decode_mtime_snapshot",
    "encode_ctime_snapshot",
    "encode_mtime_snapshot",
]
