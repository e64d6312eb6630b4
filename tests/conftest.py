"""Shared test fixtures for gitstamp."""

from datetime import datetime, timedelta, timezone

import pytest

from gitstamp.builders import BlobCTimeBuilder, FileMTimeBuilder, FileMTimeInfo
from gitstamp.cache import FileStorageCache
from gitstamp.config.models import GitstampConfig
from gitstamp.git.hashes import GitHash
from gitstamp.storage import FileStorage


def make_hash(n: int) -> GitHash:
    """A distinct, readable hash for test data: n repeated over 20 bytes."""
    return GitHash(bytes([n % 256]) * 20)


IST = timezone(timedelta(hours=5, minutes=30))
PST = timezone(timedelta(hours=-8))


class FakeRepository:
    """RepositoryHandle double whose HEAD can be moved or made to fail."""

    def __init__(self, head: GitHash | None = None, error: Exception | None = None) -> None:
        self.head = head
        self.error = error
        self.calls = 0

    async def head_hash(self) -> GitHash:
        self.calls += 1
        if self.error is not None:
            raise self.error
        assert self.head is not None
        return self.head


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def cache(cache_dir):
    return FileStorageCache(cache_dir)


@pytest.fixture
def head():
    return make_hash(0xAA)


@pytest.fixture
def repo(head):
    return FakeRepository(head=head)


@pytest.fixture
def ctime_builder():
    return BlobCTimeBuilder(
        processed_commits={make_hash(1), make_hash(2)},
        processed_trees={make_hash(10), make_hash(11), make_hash(12)},
        map={
            make_hash(20): datetime(2021, 3, 4, 5, 6, 7, tzinfo=IST),
            make_hash(21): datetime(2019, 12, 31, 23, 59, 59, tzinfo=PST),
        },
    )


@pytest.fixture
def mtime_builder():
    return FileMTimeBuilder(
        processed_commits={make_hash(1), make_hash(2)},
        map={
            "README.md": FileMTimeInfo(
                "README.md", make_hash(30), datetime(2021, 3, 4, 5, 6, 7, tzinfo=IST)
            ),
            "src/main.py": FileMTimeInfo(
                "src/main.py", make_hash(31), datetime(2020, 1, 1, tzinfo=timezone.utc)
            ),
        },
    )


@pytest.fixture
def storage(repo, ctime_builder, mtime_builder):
    return FileStorage(
        git_repo=repo,
        blob_ctime_builder=ctime_builder,
        file_mtime_builder=mtime_builder,
    )


@pytest.fixture
def sample_config():
    return GitstampConfig()
