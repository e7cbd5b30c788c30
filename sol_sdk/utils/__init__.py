"""
Utility helpers for the Python SDK.

Re-exports:
- bytes: little-endian integers, compact-u16 lengths, ByteReader
- encoding: base58 / base64 text codecs
- hash: streaming SHA-256
- ed25519: curve membership test for compressed points
"""

from .bytes import (ByteReader, decode_length, encode_length, pack_u8,
                    pack_u32, pack_u64)
from .ed25519 import is_on_curve
from .encoding import b58decode, b58encode, b64decode, b64encode
from .hash import SHA256

__all__ = [
    # bytes
    "pack_u8",
    "pack_u32",
    "pack_u64",
    "encode_length",
    "decode_length",
    "ByteReader",
    # encoding
    "b58encode",
    "b58decode",
    "b64encode",
    "b64decode",
    # hash
    "SHA256",
    # ed25519
    "is_on_curve",
]
