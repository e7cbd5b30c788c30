"""
sol_sdk.tx.transaction
======================

Signed legacy transactions.

A Transaction pairs a compiled `Message` with one 64-byte signature slot per
required signer, in the order the signers appear at the head of the account
table. Unfilled slots hold 64 zero bytes on the wire.

Transactions are immutable: `sign` and `add_signature` return a new
Transaction, so a half-signed value can be shared between threads and signed
by several parties in any order.

Wire layout
-----------
    shortvec(#signatures) || signatures (64 bytes each) || message bytes

Typical usage
-------------
    tx = Transaction.new(blockhash, transfer(payer.public_key, to, 1_000), payer.public_key)
    tx = tx.sign(payer)
    assert tx.is_fully_signed()
    raw = tx.serialize()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Optional, Sequence, Tuple, Union

from ..errors import SerializationError, SigningError
from ..publickey import SIGNATURE_LENGTH, PublicKey, PublicKeyLike
from ..utils.bytes import ByteReader, BytesLike, encode_length
from ..utils.encoding import b58encode, b64decode, b64encode
from ..wallet.keypair import Keypair
from .instructions import Instruction
from .message import BlockhashLike, Message

log = logging.getLogger(__name__)

EMPTY_SIGNATURE = bytes(SIGNATURE_LENGTH)

__all__ = ["EMPTY_SIGNATURE", "Transaction"]


@dataclass(frozen=True)
class Transaction:
    """A message plus its signer slots."""

    message: Message
    signatures: Tuple[bytes, ...] = ()

    def __post_init__(self) -> None:
        required = self.message.header.num_required_signatures
        sigs = tuple(bytes(s) for s in self.signatures) or (EMPTY_SIGNATURE,) * required
        if len(sigs) != required:
            raise SerializationError(f"expected {required} signature slots, got {len(sigs)}")
        for i, sig in enumerate(sigs):
            if len(sig) != SIGNATURE_LENGTH:
                raise SerializationError(f"signature {i} must be {SIGNATURE_LENGTH} bytes, got {len(sig)}")
        object.__setattr__(self, "signatures", sigs)

    @classmethod
    def new(
        cls,
        recent_blockhash: BlockhashLike,
        instructions: Union[Instruction, Sequence[Instruction]],
        fee_payer: PublicKeyLike,
    ) -> "Transaction":
        """Compile `instructions` and wrap the message with empty signature slots."""
        return cls(Message.compile(recent_blockhash, instructions, fee_payer))

    # ---- Signing ----

    @cached_property
    def message_bytes(self) -> bytes:
        """The exact bytes every signer signs."""
        return self.message.serialize()

    def _slot_of(self, pubkey: PublicKey) -> int:
        try:
            return self.message.signer_keys.index(pubkey)
        except ValueError:
            raise SigningError(f"{pubkey} is not a required signer of this message") from None

    def sign(self, *keypairs: Keypair) -> "Transaction":
        """
        Sign the message with each keypair and store the signature in its slot.

        Returns a new Transaction; `self` is unchanged.

        Raises
        ------
        SigningError
            If a keypair's public key is not among the required signers.
        """
        sigs = list(self.signatures)
        for kp in keypairs:
            slot = self._slot_of(kp.public_key)
            sigs[slot] = kp.sign(self.message_bytes)
            log.debug("signed slot=%d signer=%s", slot, kp.public_key)
        return Transaction(self.message, tuple(sigs))

    def add_signature(self, pubkey: PublicKeyLike, signature: BytesLike) -> "Transaction":
        """Place an externally produced signature for `pubkey`; returns a new Transaction."""
        key = PublicKey(pubkey)
        sig = bytes(signature)
        if len(sig) != SIGNATURE_LENGTH:
            raise SerializationError(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(sig)}")
        sigs = list(self.signatures)
        sigs[self._slot_of(key)] = sig
        return Transaction(self.message, tuple(sigs))

    def missing_signers(self) -> Tuple[PublicKey, ...]:
        return tuple(
            key for key, sig in zip(self.message.signer_keys, self.signatures) if sig == EMPTY_SIGNATURE
        )

    def is_fully_signed(self) -> bool:
        return not self.missing_signers()

    def verify_signatures(self) -> bool:
        """True if every slot is filled with a valid signature by its signer."""
        return self.is_fully_signed() and all(
            key.verify(self.message_bytes, sig)
            for key, sig in zip(self.message.signer_keys, self.signatures)
        )

    @property
    def signature(self) -> Optional[str]:
        """Base58 fee-payer signature (the transaction id), or None while unsigned."""
        first = self.signatures[0] if self.signatures else EMPTY_SIGNATURE
        return None if first == EMPTY_SIGNATURE else b58encode(first)

    # ---- Wire format ----

    def serialize(self) -> bytes:
        return b"".join([encode_length(len(self.signatures)), *self.signatures, self.message_bytes])

    def __bytes__(self) -> bytes:
        return self.serialize()

    def to_base64(self) -> str:
        return b64encode(self.serialize())

    @classmethod
    def from_bytes(cls, raw: BytesLike) -> "Transaction":
        """
        Decode a serialized transaction.

        Raises
        ------
        SerializationError
            On truncation, trailing bytes, or a signature count that disagrees
            with the message header.
        """
        reader = ByteReader(raw)
        count = reader.read_length()
        sigs = tuple(reader.read(SIGNATURE_LENGTH) for _ in range(count))
        message = Message.read_from(reader)
        if count != message.header.num_required_signatures:
            raise SerializationError(
                f"transaction carries {count} signatures, message requires {message.header.num_required_signatures}"
            )
        if not reader.at_end():
            raise SerializationError(f"{reader.remaining} trailing bytes after transaction")
        return cls(message, sigs)

    @classmethod
    def from_base64(cls, text: str) -> "Transaction":
        return cls.from_bytes(b64decode(text))
