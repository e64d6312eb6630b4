"""Repository handle used to look up the current HEAD."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

from gitstamp.errors import GitRepositoryError
from gitstamp.git.hashes import GitHash

logger = logging.getLogger(__name__)


@runtime_checkable
class RepositoryHandle(Protocol):
    """The only thing the cache needs from a repository: its HEAD hash."""

    async def head_hash(self) -> GitHash: ...


class GitRepository:
    """RepositoryHandle backed by the ``git`` command line."""

    def __init__(self, path: str | Path, git_binary: str = "git", timeout: float = 10.0) -> None:
        self.path = Path(path)
        self.git_binary = git_binary
        self.timeout = timeout

    async def head_hash(self) -> GitHash:
        """Resolve HEAD to a commit hash.

        Raises GitRepositoryError when HEAD cannot be resolved, e.g. on an
        unborn branch or outside a work tree.
        """
        return await asyncio.to_thread(self._rev_parse_head)

    def _rev_parse_head(self) -> GitHash:
        try:
            result = subprocess.run(
                [self.git_binary, "rev-parse", "--verify", "--quiet", "HEAD^{commit}"],
                cwd=self.path,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitRepositoryError(self.path, f"{self.git_binary} not found", e) from e
        except subprocess.TimeoutExpired as e:
            raise GitRepositoryError(self.path, "git rev-parse timed out", e) from e
        except OSError as e:
            raise GitRepositoryError(self.path, "could not run git", e) from e

        if result.returncode != 0:
            detail = result.stderr.strip() or "HEAD does not point to a commit"
            raise GitRepositoryError(self.path, detail)

        try:
            head = GitHash.from_hex(result.stdout)
        except ValueError as e:
            raise GitRepositoryError(self.path, f"unexpected rev-parse output {result.stdout!r}", e) from e
        logger.debug("HEAD of %s is %s", self.path, head)
        return head

    def __repr__(self) -> str:
        return f"GitRepository({str(self.path)!r})"
