"""Binary encoding of builder snapshots.

A snapshot file is a fixed struct header followed by a msgpack payload::

    header:  magic(4) + schema version(2) + payload length(4), big-endian
    payload: {"kind": str, "head": bin, "commits": [bin], "trees": [bin],
              "map": {key: [...]}}

``trees`` is only present in creation-time snapshots. Map values are arrays:

    creation time:     hex blob hash -> [offset_seconds, epoch_seconds]
    modification time: path -> [path, blob hash bin | nil, offset_seconds, epoch_seconds]

Everything here is pure; file access lives in ``gitstamp.cache.store``.
"""

from __future__ import annotations

import calendar
import logging
import struct
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

import msgpack

from gitstamp.builders.models import BlobCTimeState, FileMTimeInfo, FileMTimeState
from gitstamp.errors import SnapshotDecodeError, SnapshotEncodeError
from gitstamp.git.hashes import GitHash

logger = logging.getLogger(__name__)

MAGIC = b"GSTM"
SCHEMA_VERSION = 1
HEADER_FORMAT = ">4sHI"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 10 bytes

KIND_CTIME = "blob_ctime"
KIND_MTIME = "file_mtime"

_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ── Scalars ──────────────────────────────────────────────────────────


def encode_hash(value: GitHash) -> bytes:
    return value.raw


def decode_hash(value: Any) -> GitHash:
    if not isinstance(value, bytes):
        raise ValueError(f"expected hash bytes, got {type(value).__name__}")
    return GitHash.from_bytes(value)


def encode_hash_set(hashes: Iterable[GitHash]) -> list[bytes]:
    """Encode a set of hashes. Sorted so equal sets give equal bytes."""
    return sorted(h.raw for h in hashes)


def decode_hash_set(values: Any) -> set[GitHash]:
    if not isinstance(values, list):
        raise ValueError(f"expected a list of hashes, got {type(values).__name__}")
    return {decode_hash(v) for v in values}


def _check_int(value: Any, low: int, high: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"{what} out of range: {value}")
    return value


def encode_datetime(dt: datetime) -> tuple[int, int]:
    """Return ``(offset_seconds, epoch_seconds)`` for an aware datetime.

    Fractional seconds are dropped.
    """
    offset = dt.utcoffset()
    if offset is None:
        raise ValueError(f"datetime must be timezone-aware, got {dt!r}")
    offset_seconds = _check_int(int(offset.total_seconds()), _INT32_MIN, _INT32_MAX, "utc offset")
    epoch_seconds = _check_int(calendar.timegm(dt.utctimetuple()), _INT64_MIN, _INT64_MAX, "timestamp")
    return offset_seconds, epoch_seconds


def decode_datetime(offset_seconds: Any, epoch_seconds: Any) -> datetime:
    """Rebuild a datetime carrying the recorded UTC offset."""
    offset_seconds = _check_int(offset_seconds, _INT32_MIN, _INT32_MAX, "utc offset")
    epoch_seconds = _check_int(epoch_seconds, _INT64_MIN, _INT64_MAX, "timestamp")
    tz = timezone(timedelta(seconds=offset_seconds))
    return (_EPOCH + timedelta(seconds=epoch_seconds)).astimezone(tz)


# ── Framing ──────────────────────────────────────────────────────────


def _frame(payload: dict[str, Any]) -> bytes:
    body = msgpack.packb(payload, use_bin_type=True)
    header = struct.pack(HEADER_FORMAT, MAGIC, SCHEMA_VERSION, len(body))
    return header + body


def _unframe(data: bytes, kind: str) -> dict[str, Any]:
    if len(data) < HEADER_SIZE:
        raise ValueError(f"truncated header ({len(data)} bytes)")
    magic, version, length = struct.unpack_from(HEADER_FORMAT, data)
    if magic != MAGIC:
        raise ValueError(f"bad magic {magic!r}")
    if version != SCHEMA_VERSION:
        raise ValueError(f"unsupported schema version {version}")
    body = data[HEADER_SIZE:]
    if len(body) != length:
        raise ValueError(f"payload is {len(body)} bytes, header says {length}")

    payload = msgpack.unpackb(body, raw=False)
    if not isinstance(payload, dict):
        raise ValueError(f"payload must be a map, got {type(payload).__name__}")
    if payload.get("kind") != kind:
        raise ValueError(f"expected a {kind} snapshot, got {payload.get('kind')!r}")
    return payload


def _expect_map(value: Any) -> dict[Any, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"map must be a map, got {type(value).__name__}")
    return value


def _expect_entry(value: Any, size: int) -> list[Any]:
    if not isinstance(value, list) or len(value) != size:
        raise ValueError(f"map entry must be an array of {size}, got {value!r}")
    return value


# ── Creation time ────────────────────────────────────────────────────


def encode_ctime_snapshot(head: GitHash, state: BlobCTimeState) -> bytes:
    """Serialize the creation-time builder's state, tagged with *head*."""
    try:
        entries = {}
        for blob, dt in state.map.items():
            offset, epoch = encode_datetime(dt)
            entries[blob.hex] = [offset, epoch]
        return _frame({
            "kind": KIND_CTIME,
            "head": encode_hash(head),
            "commits": encode_hash_set(state.processed_commits),
            "trees": encode_hash_set(state.processed_trees),
            "map": entries,
        })
    except (ValueError, TypeError, OverflowError, AttributeError) as e:
        raise SnapshotEncodeError(None, "encode blob ctime snapshot", e) from e


def decode_ctime_snapshot(data: bytes) -> tuple[BlobCTimeState, GitHash]:
    """Parse a creation-time snapshot into ``(state, head)``."""
    try:
        payload = _unframe(data, KIND_CTIME)
        blobs: dict[GitHash, datetime] = {}
        for key, value in _expect_map(payload["map"]).items():
            if not isinstance(key, str):
                raise ValueError(f"blob key must be a hex string, got {key!r}")
            offset, epoch = _expect_entry(value, 2)
            blobs[GitHash.from_hex(key)] = decode_datetime(offset, epoch)
        state = BlobCTimeState(
            processed_commits=decode_hash_set(payload["commits"]),
            processed_trees=decode_hash_set(payload["trees"]),
            map=blobs,
        )
        return state, decode_hash(payload["head"])
    except (ValueError, TypeError, KeyError, OverflowError, msgpack.exceptions.UnpackException) as e:
        raise SnapshotDecodeError(None, "decode blob ctime snapshot", e) from e


# ── Modification time ────────────────────────────────────────────────


def encode_mtime_snapshot(head: GitHash, state: FileMTimeState) -> bytes:
    """Serialize the modification-time builder's state, tagged with *head*."""
    try:
        entries = {}
        for file_path, info in state.map.items():
            offset, epoch = encode_datetime(info.dt)
            blob = None if info.hash.is_zero else encode_hash(info.hash)
            entries[file_path] = [file_path, blob, offset, epoch]
        return _frame({
            "kind": KIND_MTIME,
            "head": encode_hash(head),
            "commits": encode_hash_set(state.processed_commits),
            "map": entries,
        })
    except (ValueError, TypeError, OverflowError, AttributeError) as e:
        raise SnapshotEncodeError(None, "encode file mtime snapshot", e) from e


def decode_mtime_snapshot(data: bytes) -> tuple[FileMTimeState, GitHash]:
    """Parse a modification-time snapshot into ``(state, head)``.

    The map key is the canonical path; the path stored inside each entry
    is only checked for consistency.
    """
    try:
        payload = _unframe(data, KIND_MTIME)
        files: dict[str, FileMTimeInfo] = {}
        for key, value in _expect_map(payload["map"]).items():
            if not isinstance(key, str):
                raise ValueError(f"file path key must be a string, got {key!r}")
            embedded_path, blob, offset, epoch = _expect_entry(value, 4)
            if embedded_path != key:
                logger.debug("mtime entry %r carries path %r, using the key", key, embedded_path)
            files[key] = FileMTimeInfo(
                file_path=key,
                hash=GitHash.zero() if blob is None else decode_hash(blob),
                dt=decode_datetime(offset, epoch),
            )
        state = FileMTimeState(
            processed_commits=decode_hash_set(payload["commits"]),
            map=files,
        )
        return state, decode_hash(payload["head"])
    except (ValueError, TypeError, KeyError, OverflowError, msgpack.exceptions.UnpackException) as e:
        raise SnapshotDecodeError(None, "decode file mtime snapshot", e) from e
