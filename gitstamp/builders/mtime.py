"""Holder for per-path modification-time progress."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from gitstamp.builders.models import FileMTimeInfo, FileMTimeState
from gitstamp.git.hashes import GitHash


class FileMTimeBuilder:
    """Accumulates, per tracked path, the commit time that last changed it."""

    def __init__(
        self,
        processed_commits: Iterable[GitHash] | None = None,
        map: Mapping[str, FileMTimeInfo] | None = None,
    ) -> None:
        self.processed_commits: set[GitHash] = set(processed_commits or ())
        self.map: dict[str, FileMTimeInfo] = dict(map or {})

    @property
    def empty(self) -> bool:
        return not (self.processed_commits or self.map)

    def is_commit_processed(self, commit: GitHash) -> bool:
        return commit in self.processed_commits

    def mtime(self, file_path: str) -> FileMTimeInfo | None:
        return self.map.get(file_path)

    def export_state(self) -> FileMTimeState:
        return FileMTimeState(
            processed_commits=set(self.processed_commits),
            map=dict(self.map),
        )

    def import_state(self, state: FileMTimeState) -> None:
        self.processed_commits = set(state.processed_commits)
        self.map = dict(state.map)

    @classmethod
    def from_state(cls, state: FileMTimeState) -> FileMTimeBuilder:
        builder = cls()
        builder.import_state(state)
        return builder

    def __repr__(self) -> str:
        return f"FileMTimeBuilder(commits={len(self.processed_commits)}, files={len(self.map)})"
