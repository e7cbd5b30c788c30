from __future__ import annotations

from typing import Tuple, Union

from ..errors import SerializationError

BytesLike = Union[bytes, bytearray, memoryview]

U8_MAX = 0xFF
U16_MAX = 0xFFFF
U32_MAX = 0xFFFF_FFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF


# --- Fixed-width little-endian integers ---------------------------------------


def _pack_uint(n: int, width: int, limit: int, name: str) -> bytes:
    if isinstance(n, bool) or not isinstance(n, int):
        raise SerializationError(f"{name} expects an int, got {type(n).__name__}")
    if n < 0 or n > limit:
        raise SerializationError(f"{name} out of range: {n}")
    return n.to_bytes(width, "little")


def pack_u8(n: int) -> bytes:
    return _pack_uint(n, 1, U8_MAX, "u8")


def pack_u32(n: int) -> bytes:
    return _pack_uint(n, 4, U32_MAX, "u32")


def pack_u64(n: int) -> bytes:
    return _pack_uint(n, 8, U64_MAX, "u64")


# --- Compact-u16 ("shortvec") length prefixes ---------------------------------


def encode_length(n: int) -> bytes:
    """
    Encode a length as compact-u16: 7 bits per byte, low groups first,
    0x80 continuation bit, at most three bytes.

    Example:
        0x00   -> b'\\x00'
        0x7f   -> b'\\x7f'
        0x80   -> b'\\x80\\x01'
        0xffff -> b'\\xff\\xff\\x03'
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise SerializationError("encode_length expects an int")
    if n < 0 or n > U16_MAX:
        raise SerializationError(f"compact-u16 length out of range: {n}")
    out = bytearray()
    while True:
        to_write = n & 0x7F
        n >>= 7
        if n:
            out.append(to_write | 0x80)
        else:
            out.append(to_write)
            break
    return bytes(out)


def decode_length(b: BytesLike, *, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a compact-u16 starting at `offset`.

    Returns:
        (value, length_consumed)

    Raises:
        SerializationError if the input is truncated, uses a non-minimal
        (alias) encoding, or exceeds 0xFFFF.
    """
    view = memoryview(b)
    value = 0
    for i in range(3):
        pos = offset + i
        if pos >= len(view):
            raise SerializationError("truncated compact-u16 (input ended before termination byte)")
        byte = view[pos]
        if i > 0 and byte == 0:
            raise SerializationError("non-minimal compact-u16 encoding")
        if i == 2 and byte > 0x03:
            raise SerializationError("compact-u16 overflows 16 bits")
        value |= (byte & 0x7F) << (7 * i)
        if byte & 0x80 == 0:
            return value, i + 1
    raise SerializationError("compact-u16 overflows 16 bits")  # pragma: no cover


class ByteReader:
    """Forward-only cursor over a byte buffer; every short read raises SerializationError."""

    __slots__ = ("_buf", "_pos")

    def __init__(self, data: BytesLike, offset: int = 0) -> None:
        self._buf = bytes(data)
        if offset < 0 or offset > len(self._buf):
            raise SerializationError(f"offset {offset} outside buffer of {len(self._buf)} bytes")
        self._pos = offset

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def at_end(self) -> bool:
        return self._pos == len(self._buf)

    def peek_u8(self) -> int:
        if self._pos >= len(self._buf):
            raise SerializationError("unexpected end of buffer")
        return self._buf[self._pos]

    def read(self, n: int) -> bytes:
        if n < 0 or self._pos + n > len(self._buf):
            raise SerializationError(
                f"unexpected end of buffer: need {n} bytes at offset {self._pos}, have {self.remaining}"
            )
        chunk = self._buf[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_length(self) -> int:
        value, consumed = decode_length(self._buf, offset=self._pos)
        self._pos += consumed
        return value


__all__ = [
    "BytesLike",
    "U8_MAX",
    "U16_MAX",
    "U32_MAX",
    "U64_MAX",
    "pack_u8",
    "pack_u32",
    "pack_u64",
    "encode_length",
    "decode_length",
    "ByteReader",
]
