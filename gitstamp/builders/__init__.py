"""Traversal builder state: what has been walked and what it produced."""

from gitstamp.builders.ctime import BlobCTimeBuilder
from gitstamp.builders.models import (
    BlobCTimeState,
    FileMTimeInfo,
    FileMTimeState,
    StatefulBuilder,
)
from gitstamp.builders.mtime import FileMTimeBuilder

__all__ = [
    "BlobCTimeBuilder",
    "BlobCTimeState",
    "FileMTimeBuilder",
    "FileMTimeInfo",
    "FileMTimeState",
    "StatefulBuilder",
]
