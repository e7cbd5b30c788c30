"""
sol_sdk.publickey
=================

The 32-byte public key value type used for accounts, programs and signers.

Format
------
A PublicKey is exactly 32 raw bytes. Its canonical text form is base58
(Bitcoin alphabet). Equality and hashing are byte-wise, so keys work as dict
keys and set members, which the message compiler relies on.

This module provides:
- PublicKey(value)           -> from 32 bytes or a base58 string
- PublicKey.default()        -> the all-zero key (the system program id)
- key.is_on_curve()          -> Ed25519 curve membership
- key.verify(msg, sig)       -> Ed25519 signature check (never raises)
- verify(key, msg, sig)      -> functional alias
"""

from __future__ import annotations

from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from .errors import InvalidKeyLength
from .utils.bytes import BytesLike
from .utils.ed25519 import is_on_curve as _is_on_curve
from .utils.encoding import b58decode, b58encode

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64

PublicKeyLike = Union["PublicKey", str, bytes, bytearray, memoryview]

__all__ = [
    "PUBLIC_KEY_LENGTH",
    "SIGNATURE_LENGTH",
    "PublicKey",
    "PublicKeyLike",
    "verify",
]


class PublicKey:
    """Immutable 32-byte public key with a base58 text form."""

    __slots__ = ("_bytes",)

    def __init__(self, value: PublicKeyLike) -> None:
        if isinstance(value, PublicKey):
            raw = value._bytes
        elif isinstance(value, str):
            raw = b58decode(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
        else:
            raise TypeError(f"PublicKey expects bytes or a base58 string, got {type(value).__name__}")
        if len(raw) != PUBLIC_KEY_LENGTH:
            raise InvalidKeyLength("public key", str(PUBLIC_KEY_LENGTH), len(raw))
        object.__setattr__(self, "_bytes", raw)

    # ---- Constructors ----

    @classmethod
    def default(cls) -> "PublicKey":
        return cls(bytes(PUBLIC_KEY_LENGTH))

    @classmethod
    def from_base58(cls, text: str) -> "PublicKey":
        return cls(text)

    # ---- Value semantics ----

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("PublicKey is immutable")

    def __bytes__(self) -> bytes:
        return self._bytes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._bytes == other._bytes

    def __hash__(self) -> int:
        return hash(self._bytes)

    def __str__(self) -> str:
        return b58encode(self._bytes)

    def __repr__(self) -> str:
        return f"PublicKey({str(self)!r})"

    def __reduce__(self):
        return (PublicKey, (self._bytes,))

    # ---- Accessors ----

    def to_bytes(self) -> bytes:
        return self._bytes

    def to_base58(self) -> str:
        return str(self)

    def is_on_curve(self) -> bool:
        """True if the key is a valid Ed25519 point (i.e. could have a private key)."""
        return _is_on_curve(self._bytes)

    def verify(self, message: BytesLike, signature: BytesLike) -> bool:
        """
        Verify an Ed25519 signature over `message`.

        Returns False for a wrong signature, a signature of the wrong size, or a
        key that cannot be loaded as an Ed25519 public key.
        """
        sig = bytes(signature)
        if len(sig) != SIGNATURE_LENGTH:
            return False
        try:
            Ed25519PublicKey.from_public_bytes(self._bytes).verify(sig, bytes(message))
        except (InvalidSignature, ValueError):
            return False
        return True


def verify(public_key: PublicKeyLike, message: BytesLike, signature: BytesLike) -> bool:
    """Functional form of `PublicKey.verify`."""
    return PublicKey(public_key).verify(message, signature)
