"""Git object identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass

HASH_LENGTH = 20

_HEX40_RE = re.compile(r"[0-9a-fA-F]{40}")


@dataclass(frozen=True, order=True)
class GitHash:
    """A 20-byte SHA-1 object id (commit, tree or blob).

    Compares and sorts by its raw bytes. The all-zero hash stands for
    "unknown" or "nothing processed yet".
    """

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes):
            raise TypeError(f"hash must be bytes, got {type(self.raw).__name__}")
        if len(self.raw) != HASH_LENGTH:
            raise ValueError(f"hash must be {HASH_LENGTH} bytes, got {len(self.raw)}")

    @classmethod
    def zero(cls) -> GitHash:
        return cls(bytes(HASH_LENGTH))

    @classmethod
    def from_bytes(cls, raw: bytes | bytearray | memoryview) -> GitHash:
        return cls(bytes(raw))

    @classmethod
    def from_hex(cls, text: str) -> GitHash:
        text = text.strip()
        if not _HEX40_RE.fullmatch(text):
            raise ValueError(f"hash must be 40 hex chars, got {text!r}")
        return cls(bytes.fromhex(text))

    @property
    def is_zero(self) -> bool:
        return not any(self.raw)

    @property
    def hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        return f"GitHash({self.hex})"
