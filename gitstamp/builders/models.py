"""State containers exchanged between the builders and the cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, TypeVar, runtime_checkable

from gitstamp.git.hashes import GitHash

StateT = TypeVar("StateT")


@dataclass(frozen=True)
class FileMTimeInfo:
    """When a tracked path last changed, and to which blob."""

    file_path: str
    hash: GitHash
    dt: datetime


@dataclass
class BlobCTimeState:
    """Everything the creation-time builder needs to resume a walk."""

    processed_commits: set[GitHash] = field(default_factory=set)
    processed_trees: set[GitHash] = field(default_factory=set)
    map: dict[GitHash, datetime] = field(default_factory=dict)


@dataclass
class FileMTimeState:
    """Everything the modification-time builder needs to resume a walk."""

    processed_commits: set[GitHash] = field(default_factory=set)
    map: dict[str, FileMTimeInfo] = field(default_factory=dict)


@runtime_checkable
class StatefulBuilder(Protocol[StateT]):
    """A traversal builder whose progress can be exported and restored."""

    def export_state(self) -> StateT:
        """Return a detached copy of the builder's state."""
        ...

    def import_state(self, state: StateT) -> None:
        """Replace the builder's state wholesale."""
        ...
