"""On-disk persistence of builder progress, keyed to the HEAD it was computed at.

Each builder kind gets its own snapshot file in the cache folder. The two
files are written and read independently, so they can end up tagged with
different heads (e.g. after a crash between the two writes). ``load``
detects that and refuses to report the cache as caught up to any commit,
while still handing back whatever each builder had already processed.
Those entries stay valid because git objects never change.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from gitstamp.builders import BlobCTimeBuilder, BlobCTimeState, FileMTimeBuilder, FileMTimeState
from gitstamp.cache.codec import (
    decode_ctime_snapshot,
    decode_mtime_snapshot,
    encode_ctime_snapshot,
    encode_mtime_snapshot,
)
from gitstamp.cache.models import CacheInfo, SaveResult, SnapshotInfo
from gitstamp.errors import CacheError, CacheReadError, GitRepositoryError, SnapshotDecodeError
from gitstamp.git.hashes import GitHash
from gitstamp.git.repository import RepositoryHandle
from gitstamp.storage import FileStorage

if TYPE_CHECKING:
    from gitstamp.config.models import GitstampConfig

logger = logging.getLogger(__name__)

CTIME_FILE_NAME = "blob_ctime_v1"
MTIME_FILE_NAME = "file_mtime_v1"

StateT = TypeVar("StateT")


def _write_atomic(path: Path, data: bytes) -> None:
    """Write via a sibling temp file so readers never see a half-written snapshot."""
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        tmp.write_bytes(data)
        os.replace(tmp, path)
    except OSError:
        with contextlib.suppress(OSError):
            tmp.unlink(missing_ok=True)
        raise


class FileStorageCache:
    """Loads and saves BlobCTimeBuilder / FileMTimeBuilder state for one repository.

    Not safe for concurrent use: callers must serialize load/save/clear
    against a given cache folder.
    """

    def __init__(self, cache_folder_path: str | Path, warn_size_kb: float | None = None) -> None:
        path = Path(cache_folder_path)
        if not path.is_absolute():
            raise ValueError(f"cache folder must be an absolute path, got {str(path)!r}")
        self.cache_folder_path = path
        self.warn_size_kb = warn_size_kb
        self.last_processed_head = GitHash.zero()

    @classmethod
    def from_config(cls, config: GitstampConfig, repo_root: str | Path) -> FileStorageCache:
        """Build a cache whose folder is ``config.cache.directory`` under *repo_root*."""
        directory = Path(config.cache.directory).expanduser()
        if not directory.is_absolute():
            directory = Path(repo_root).resolve() / directory
        return cls(directory, warn_size_kb=config.cache.warn_size_kb)

    @property
    def ctime_file_path(self) -> Path:
        return self.cache_folder_path / CTIME_FILE_NAME

    @property
    def mtime_file_path(self) -> Path:
        return self.cache_folder_path / MTIME_FILE_NAME

    # ------------------------------------------------------------------
    # Clear
    # ------------------------------------------------------------------

    async def clear(self) -> None:
        """Delete both snapshots. Best effort: never raises for I/O problems."""
        for path in (self.ctime_file_path, self.mtime_file_path):
            try:
                await asyncio.to_thread(path.unlink)
            except FileNotFoundError:
                continue
            except OSError:
                logger.error("Failed to clear FileStorageCache file %s", path, exc_info=True)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load(self, repo: RepositoryHandle) -> FileStorage:
        """Rebuild both builders from disk.

        Missing snapshots give empty builders. A snapshot that exists but
        cannot be read or decoded raises (CacheReadError /
        SnapshotDecodeError); both files are always attempted first.
        """
        self.last_processed_head = GitHash.zero()
        failures: list[CacheError] = []

        ctime_state, ctime_head = BlobCTimeState(), GitHash.zero()
        try:
            snapshot = await self._load_snapshot(
                self.ctime_file_path, "BlobCTimeBuilder", decode_ctime_snapshot
            )
        except CacheError as e:
            failures.append(e)
        else:
            if snapshot is not None:
                ctime_state, ctime_head = snapshot

        mtime_state, mtime_head = FileMTimeState(), GitHash.zero()
        try:
            snapshot = await self._load_snapshot(
                self.mtime_file_path, "FileMTimeBuilder", decode_mtime_snapshot
            )
        except CacheError as e:
            failures.append(e)
        else:
            if snapshot is not None:
                mtime_state, mtime_head = snapshot

        if failures:
            for extra in failures[1:]:
                logger.error("FileStorageCache load also failed: %s", extra)
            raise failures[0]

        if ctime_head == mtime_head:
            self.last_processed_head = ctime_head
        else:
            logger.debug(
                "Cache heads disagree (ctime %s, mtime %s); not trusting either as caught up",
                ctime_head,
                mtime_head,
            )

        return FileStorage(
            git_repo=repo,
            blob_ctime_builder=BlobCTimeBuilder.from_state(ctime_state),
            file_mtime_builder=FileMTimeBuilder.from_state(mtime_state),
        )

    async def _read_bytes(self, path: Path, label: str) -> bytes | None:
        """Return the snapshot bytes, or None when the file does not exist."""
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheReadError(path, f"read {label} cache", e) from e

        size_kb = len(data) / 1024
        logger.debug("%s Cache Size: %.2f Kb", label, size_kb)
        if self.warn_size_kb is not None and size_kb > self.warn_size_kb:
            logger.warning(
                "%s cache at %s is %.2f Kb (warn threshold %.2f Kb)",
                label,
                path,
                size_kb,
                self.warn_size_kb,
            )
        return data

    async def _load_snapshot(
        self,
        path: Path,
        label: str,
        decode: Callable[[bytes], tuple[StateT, GitHash]],
    ) -> tuple[StateT, GitHash] | None:
        data = await self._read_bytes(path, label)
        if data is None:
            return None
        try:
            return decode(data)
        except SnapshotDecodeError as e:
            raise e.with_path(path) from e.__cause__

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def save(self, storage: FileStorage) -> SaveResult:
        """Persist both builders, tagged with the repository's current HEAD.

        Never raises for I/O or encoding problems; they come back as a
        failed SaveResult so callers can fire and forget.
        """
        try:
            try:
                head = await storage.git_repo.head_hash()
            except GitRepositoryError as e:
                logger.debug("No HEAD to tag the cache with, using zero hash: %s", e)
                head = GitHash.zero()
            self.last_processed_head = head

            await asyncio.to_thread(self.cache_folder_path.mkdir, parents=True, exist_ok=True)

            data = encode_ctime_snapshot(head, storage.blob_ctime_builder.export_state())
            await asyncio.to_thread(_write_atomic, self.ctime_file_path, data)

            data = encode_mtime_snapshot(head, storage.file_mtime_builder.export_state())
            await asyncio.to_thread(_write_atomic, self.mtime_file_path, data)
        except (OSError, CacheError) as e:
            logger.warning("Failed to save FileStorageCache to %s: %s", self.cache_folder_path, e)
            return SaveResult(ok=False, head=self.last_processed_head.hex, error=str(e))

        return SaveResult(ok=True, head=head.hex)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    async def describe(self) -> CacheInfo:
        """Report what is on disk without raising for corrupt snapshots."""
        return CacheInfo(
            cache_folder=str(self.cache_folder_path),
            ctime=await self._describe_snapshot(
                self.ctime_file_path, "BlobCTimeBuilder", decode_ctime_snapshot
            ),
            mtime=await self._describe_snapshot(
                self.mtime_file_path, "FileMTimeBuilder", decode_mtime_snapshot
            ),
        )

    async def _describe_snapshot(
        self,
        path: Path,
        label: str,
        decode: Callable[[bytes], tuple[Any, GitHash]],
    ) -> SnapshotInfo:
        try:
            data = await self._read_bytes(path, label)
        except CacheReadError as e:
            return SnapshotInfo(name=label, path=str(path), status="corrupt", error=str(e))
        if data is None:
            return SnapshotInfo(name=label, path=str(path), status="absent")

        try:
            state, head = decode(data)
        except SnapshotDecodeError as e:
            return SnapshotInfo(
                name=label,
                path=str(path),
                status="corrupt",
                size_bytes=len(data),
                error=str(e.with_path(path)),
            )

        return SnapshotInfo(
            name=label,
            path=str(path),
            status="valid",
            size_bytes=len(data),
            head=head.hex,
            processed_commits=len(state.processed_commits),
            processed_trees=len(getattr(state, "processed_trees", ())),
            entries=len(state.map),
        )
