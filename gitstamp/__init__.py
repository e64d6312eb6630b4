"""gitstamp - resumable git creation/modification-time metadata."""

from gitstamp.builders import BlobCTimeBuilder, FileMTimeBuilder, FileMTimeInfo
from gitstamp.cache import CacheInfo, FileStorageCache, SaveResult
from gitstamp.config import GitstampConfig, load_config
from gitstamp.errors import (
    CacheError,
    CacheReadError,
    GitRepositoryError,
    GitstampError,
    SnapshotDecodeError,
    SnapshotEncodeError,
)
from gitstamp.git import GitHash, GitRepository, RepositoryHandle
from gitstamp.storage import FileStorage

__version__ = "0.1.0"

__all__ = [
    "BlobCTimeBuilder",
    "CacheError",
    "CacheInfo",
    "CacheReadError",
    "FileMTimeBuilder",
    "FileMTimeInfo",
    "FileStorage",
    "FileStorageCache",
    "GitHash",
    "GitRepository",
    "GitRepositoryError",
    "GitstampConfig",
    "GitstampError",
    "RepositoryHandle",
    "SaveResult",
    "SnapshotDecodeError",
    "SnapshotEncodeError",
    "load_config",
]
