"""The unit handed to and returned from the cache: a repository plus its builders."""

from __future__ import annotations

from dataclasses import dataclass, field

from gitstamp.builders import BlobCTimeBuilder, FileMTimeBuilder
from gitstamp.git.repository import RepositoryHandle


@dataclass
class FileStorage:
    """A repository together with the creation/modification-time builders for it."""

    git_repo: RepositoryHandle
    blob_ctime_builder: BlobCTimeBuilder = field(default_factory=BlobCTimeBuilder)
    file_mtime_builder: FileMTimeBuilder = field(default_factory=FileMTimeBuilder)
