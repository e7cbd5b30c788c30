"""
sol_sdk.wallet.keypair
======================

Ed25519 keypairs for signing transaction messages.

This module is a thin, well-typed facade over the `cryptography` package's
Ed25519 implementation. It is designed to be stable and ergonomic for the
SDK while deferring the cryptographic details to the library.

Key features
------------
- CSPRNG key generation (`Keypair.generate`)
- Import from the 32-byte seed or the conventional 64-byte `seed || pubkey`
  secret key (`Keypair.from_secret_key`, `Keypair.from_base58`)
- Deterministic signatures (RFC 8032), verification via `PublicKey.verify`

Notes
-----
- The public key is always derived from the seed; a 64-byte secret whose tail
  disagrees with the derived key is rejected rather than trusted.
- Keypairs are immutable and never render secret bytes in `repr`.
"""

from __future__ import annotations

from typing import Union

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (Encoding,
                                                          NoEncryption,
                                                          PrivateFormat,
                                                          PublicFormat)

from ..errors import InvalidKeyError, InvalidKeyLength
from ..publickey import PUBLIC_KEY_LENGTH, PublicKey
from ..utils.bytes import BytesLike
from ..utils.encoding import b58decode, b58encode

SEED_LENGTH = 32
SECRET_KEY_LENGTH = SEED_LENGTH + PUBLIC_KEY_LENGTH

__all__ = [
    "SEED_LENGTH",
    "SECRET_KEY_LENGTH",
    "Keypair",
    "sign",
]


def _derive_public_bytes(private_key: Ed25519PrivateKey) -> bytes:
    return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


class Keypair:
    """
    An Ed25519 signing keypair.

    Create instances via:
        - Keypair.generate()
        - Keypair.from_secret_key(secret)
        - Keypair.from_seed(seed)
        - Keypair.from_base58(text)
    """

    __slots__ = ("_private_key", "_seed", "_public_key")

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        seed = private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
        object.__setattr__(self, "_private_key", private_key)
        object.__setattr__(self, "_seed", seed)
        object.__setattr__(self, "_public_key", PublicKey(_derive_public_bytes(private_key)))

    # ---- Constructors ----

    @classmethod
    def generate(cls) -> "Keypair":
        """Fresh keypair from the operating system CSPRNG."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: BytesLike) -> "Keypair":
        """Keypair from a 32-byte Ed25519 seed."""
        raw = bytes(seed)
        if len(raw) != SEED_LENGTH:
            raise InvalidKeyLength("seed", str(SEED_LENGTH), len(raw))
        return cls(Ed25519PrivateKey.from_private_bytes(raw))

    @classmethod
    def from_secret_key(cls, secret: BytesLike) -> "Keypair":
        """
        Reconstruct a keypair from an externally supplied secret.

        Parameters
        ----------
        secret : bytes
            Either the 32-byte seed, or the 64-byte `seed || public key` layout
            written by wallets and the command-line tools.

        Raises
        ------
        InvalidKeyLength
            For any other length.
        InvalidKeyError
            If a 64-byte secret carries a public key that does not match its seed.
        """
        raw = bytes(secret)
        if len(raw) == SEED_LENGTH:
            return cls.from_seed(raw)
        if len(raw) != SECRET_KEY_LENGTH:
            raise InvalidKeyLength("secret key", f"{SEED_LENGTH} or {SECRET_KEY_LENGTH}", len(raw))
        kp = cls.from_seed(raw[:SEED_LENGTH])
        if kp.public_key.to_bytes() != raw[SEED_LENGTH:]:
            raise InvalidKeyError("secret key public half does not match its seed")
        return kp

    @classmethod
    def from_base58(cls, text: str) -> "Keypair":
        """Keypair from a base58-encoded secret key (32 or 64 bytes once decoded)."""
        return cls.from_secret_key(b58decode(text))

    # ---- Properties ----

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Keypair is immutable")

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def seed(self) -> bytes:
        return self._seed

    @property
    def secret_key(self) -> bytes:
        # 64-byte `seed || pubkey`; callers are responsible for secure storage.
        return self._seed + self._public_key.to_bytes()

    def to_base58(self) -> str:
        return b58encode(self.secret_key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Keypair):
            return NotImplemented
        return self._seed == other._seed

    def __hash__(self) -> int:
        return hash(self._public_key)

    def __repr__(self) -> str:
        return f"Keypair(public_key={str(self._public_key)!r})"

    # ---- Operations ----

    def sign(self, message: BytesLike) -> bytes:
        """
        Sign a message.

        Parameters
        ----------
        message : bytes
            The exact byte string to sign (for transactions: the serialized message).

        Returns
        -------
        bytes
            64-byte Ed25519 signature; identical for identical (key, message).
        """
        return self._private_key.sign(bytes(message))

    def verify(self, message: BytesLike, signature: BytesLike) -> bool:
        return self._public_key.verify(message, signature)


def sign(keypair: Keypair, message: Union[bytes, bytearray, memoryview]) -> bytes:
    """Functional form of `Keypair.sign`."""
    return keypair.sign(message)
