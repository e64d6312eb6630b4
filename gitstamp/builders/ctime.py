"""Holder for blob creation-time progress."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from gitstamp.builders.models import BlobCTimeState
from gitstamp.git.hashes import GitHash


class BlobCTimeBuilder:
    """Accumulates the first-seen time of every blob reached by a history walk.

    The walk itself lives elsewhere. It records visited commits and trees
    here so that a resumed walk can skip them, and fills ``map`` with the
    creation time of each blob.
    """

    def __init__(
        self,
        processed_commits: Iterable[GitHash] | None = None,
        processed_trees: Iterable[GitHash] | None = None,
        map: Mapping[GitHash, datetime] | None = None,
    ) -> None:
        self.processed_commits: set[GitHash] = set(processed_commits or ())
        self.processed_trees: set[GitHash] = set(processed_trees or ())
        self.map: dict[GitHash, datetime] = dict(map or {})

    @property
    def empty(self) -> bool:
        return not (self.processed_commits or self.processed_trees or self.map)

    def is_commit_processed(self, commit: GitHash) -> bool:
        return commit in self.processed_commits

    def is_tree_processed(self, tree: GitHash) -> bool:
        return tree in self.processed_trees

    def ctime(self, blob: GitHash) -> datetime | None:
        return self.map.get(blob)

    def export_state(self) -> BlobCTimeState:
        return BlobCTimeState(
            processed_commits=set(self.processed_commits),
            processed_trees=set(self.processed_trees),
            map=dict(self.map),
        )

    def import_state(self, state: BlobCTimeState) -> None:
        self.processed_commits = set(state.processed_commits)
        self.processed_trees = set(state.processed_trees)
        self.map = dict(state.map)

    @classmethod
    def from_state(cls, state: BlobCTimeState) -> BlobCTimeBuilder:
        builder = cls()
        builder.import_state(state)
        return builder

    def __repr__(self) -> str:
        return (
            f"BlobCTimeBuilder(commits={len(self.processed_commits)}, "
            f"trees={len(self.processed_trees)}, blobs={len(self.map)})"
        )
