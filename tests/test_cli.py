"""Tests for the gitstamp CLI (cache info/clear, config show/init)."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import FakeRepository, make_hash
from gitstamp.cache import FileStorageCache
from gitstamp.cli import app
from gitstamp.config import GitstampConfig
from gitstamp.storage import FileStorage

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep the user's real gitstamp.yaml files out of CLI runs."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")


def _repo_cache(repo_root: Path) -> FileStorageCache:
    return FileStorageCache.from_config(GitstampConfig(), repo_root)


def _save(repo_root: Path, storage: FileStorage) -> FileStorageCache:
    cache = _repo_cache(repo_root)
    result = asyncio.run(cache.save(storage))
    assert result.ok
    return cache


# ── gitstamp cache info ──────────────────────────────────────────────


def test_info_without_cache(tmp_path: Path):
    result = runner.invoke(app, ["cache", "info", str(tmp_path)])
    assert result.exit_code == 0
    assert "No cache yet" in result.output


def test_info_with_valid_cache(tmp_path: Path, storage, head):
    _save(tmp_path, storage)

    result = runner.invoke(app, ["cache", "info", str(tmp_path)])
    assert result.exit_code == 0
    assert "Caught up to" in result.output
    assert head.hex in result.output


def test_info_with_corrupt_snapshot(tmp_path: Path, storage):
    cache = _save(tmp_path, storage)
    cache.mtime_file_path.write_bytes(b"definitely not msgpack")

    result = runner.invoke(app, ["cache", "info", str(tmp_path)])
    assert result.exit_code == 0
    assert "FileMTimeBuilder:" in result.output
    assert "Cache is corrupt" in result.output


def test_info_with_mismatched_heads(tmp_path: Path, storage):
    cache = _save(tmp_path, storage)
    stale = cache.ctime_file_path.read_bytes()
    storage.git_repo = FakeRepository(head=make_hash(0x42))
    _save(tmp_path, storage)
    cache.ctime_file_path.write_bytes(stale)

    result = runner.invoke(app, ["cache", "info", str(tmp_path)])
    assert result.exit_code == 0
    assert "disagree" in result.output


def test_info_uses_configured_directory(tmp_path: Path, storage):
    custom = tmp_path / "custom-cache"
    config_file = tmp_path / "gs.yaml"
    config_file.write_text(f"cache:\n  directory: {custom}\n")
    asyncio.run(FileStorageCache(custom).save(storage))

    result = runner.invoke(app, ["--config", str(config_file), "cache", "info", str(tmp_path)])
    assert result.exit_code == 0
    assert "Caught up to" in result.output


def test_invalid_config_exits_nonzero(tmp_path: Path):
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("log_level: loud\n")

    result = runner.invoke(app, ["--config", str(config_file), "cache", "info", str(tmp_path)])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


# ── gitstamp cache clear ─────────────────────────────────────────────


def test_clear_removes_snapshots(tmp_path: Path, storage):
    cache = _save(tmp_path, storage)

    result = runner.invoke(app, ["cache", "clear", str(tmp_path)])
    assert result.exit_code == 0
    assert "Cleared" in result.output
    assert not cache.ctime_file_path.exists()
    assert not cache.mtime_file_path.exists()


def test_clear_without_cache_succeeds(tmp_path: Path):
    result = runner.invoke(app, ["cache", "clear", str(tmp_path)])
    assert result.exit_code == 0


# ── gitstamp config ──────────────────────────────────────────────────


def test_config_show():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert ".gitstamp/cache" in result.output


def test_config_init_creates_file():
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert Path("gitstamp.yaml").is_file()


def test_config_init_refuses_overwrite():
    Path("gitstamp.yaml").write_text("log_level: info\n")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output
