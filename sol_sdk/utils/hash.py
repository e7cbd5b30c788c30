from __future__ import annotations

import hashlib

from .bytes import BytesLike


# --- SHA-256 -------------------------------------------------------------------
# Program derived addresses and associated token addresses are SHA-256 digests.


class SHA256:
    """Streaming SHA-256 hasher."""

    __slots__ = ("_h",)

    def __init__(self) -> None:
        self._h = hashlib.sha256()

    def update(self, data: BytesLike) -> "SHA256":
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"SHA256.update expects bytes, got {type(data).__name__}")
        self._h.update(data)
        return self

    def digest(self) -> bytes:
        return self._h.digest()

    def copy(self) -> "SHA256":
        c = object.__new__(SHA256)
        c._h = self._h.copy()
        return c


__all__ = ["SHA256"]
