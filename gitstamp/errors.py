"""Exception types raised by gitstamp."""

from __future__ import annotations

from pathlib import Path


class GitstampError(Exception):
    """Base class for all gitstamp errors."""


class GitRepositoryError(GitstampError):
    """A repository query (e.g. resolving HEAD) could not be answered."""

    def __init__(self, path: str | Path, message: str, cause: Exception | None = None) -> None:
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")
        self.__cause__ = cause


class CacheError(GitstampError):
    """Wraps failures while reading, decoding or writing a cache snapshot."""

    def __init__(
        self,
        path: str | Path | None,
        operation: str,
        cause: Exception | str,
    ) -> None:
        self.path = str(path) if path is not None else None
        self.operation = operation
        self.reason = str(cause)
        where = f" {self.path}" if self.path else ""
        super().__init__(f"{operation}{where} failed: {self.reason}")
        if isinstance(cause, Exception):
            self.__cause__ = cause

    def with_path(self, path: str | Path) -> CacheError:
        """Return a copy of this error bound to *path*."""
        cause = self.__cause__ if isinstance(self.__cause__, Exception) else self.reason
        return type(self)(path, self.operation, cause)


class CacheReadError(CacheError):
    """A snapshot file exists but could not be read."""


class SnapshotDecodeError(CacheError):
    """A snapshot file exists but its contents are malformed."""


class SnapshotEncodeError(CacheError):
    """Builder state could not be serialized."""
