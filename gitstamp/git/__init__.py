"""Git primitives: object hashes and the repository handle."""

from gitstamp.git.hashes import HASH_LENGTH, GitHash
from gitstamp.git.repository import GitRepository, RepositoryHandle

__all__ = [
    "GitHash",
    "GitRepository",
    "HASH_LENGTH",
    "RepositoryHandle",
]
