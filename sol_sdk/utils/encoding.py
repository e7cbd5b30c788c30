"""
Text encodings used on the wire.

- base58 (Bitcoin alphabet) for public keys, blockhashes and signatures,
  backed by the `base58` package.
- base64 (standard alphabet, padded) for transaction payloads and account data.

All decoders raise `EncodingError` for malformed input so callers never have
to know which backend failed.
"""

from __future__ import annotations

import base64
import binascii
from typing import Union

import base58

from ..errors import EncodingError
from .bytes import BytesLike

__all__ = ["b58encode", "b58decode", "b64encode", "b64decode"]


def b58encode(data: BytesLike) -> str:
    """Bytes -> base58 text."""
    return base58.b58encode(bytes(data)).decode("ascii")


def b58decode(text: Union[str, bytes]) -> bytes:
    """Base58 text -> bytes; raises EncodingError on characters outside the alphabet."""
    if not isinstance(text, (str, bytes)):
        raise EncodingError(f"base58 input must be str, got {type(text).__name__}")
    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise EncodingError(f"invalid base58 string: {e}") from e


def b64encode(data: BytesLike) -> str:
    """Bytes -> padded base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def b64decode(text: Union[str, bytes]) -> bytes:
    """Padded base64 text -> bytes; non-alphabet characters and bad padding are rejected."""
    if not isinstance(text, (str, bytes)):
        raise EncodingError(f"base64 input must be str, got {type(text).__name__}")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"invalid base64 string: {e}") from e
