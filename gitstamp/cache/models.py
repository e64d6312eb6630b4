"""Pydantic models describing cache operations and on-disk status."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SaveResult(BaseModel):
    """Outcome of FileStorageCache.save()."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    head: str = Field(default="0" * 40, description="Hex head hash both snapshots were tagged with")
    error: str | None = None

    @property
    def failed(self) -> bool:
        return not self.ok


class SnapshotInfo(BaseModel):
    """What is currently on disk for one builder kind."""

    name: str
    path: str
    status: Literal["absent", "valid", "corrupt"]
    size_bytes: int = 0
    head: str | None = None
    processed_commits: int = 0
    processed_trees: int = 0
    entries: int = 0
    error: str | None = None


class CacheInfo(BaseModel):
    """Status of both snapshots in a cache folder."""

    cache_folder: str
    ctime: SnapshotInfo
    mtime: SnapshotInfo

    @property
    def heads_agree(self) -> bool:
        """True when both snapshots are valid and tagged with the same head."""
        return (
            self.ctime.status == "valid"
            and self.mtime.status == "valid"
            and self.ctime.head == self.mtime.head
        )
