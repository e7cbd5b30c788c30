"""
sol_sdk.tx.message
==================

Compile instructions into a legacy transaction message and (de)serialize it.

Account table
-------------
`Message.compile` merges every account referenced by the instructions, plus
each instruction's program id (read-only, unsigned), into one deduplicated
table. Duplicate keys OR their signer/writable flags. The table order is part
of the wire contract:

    fee payer (always signer + writable)
    signer + writable      (first-seen order)
    signer + read-only     (first-seen order)
    writable               (first-seen order)
    read-only              (first-seen order)

The header records how many keys must sign and how many signed / unsigned
keys are read-only; instruction accounts and program ids become u8 indices
into the table.

Wire layout
-----------
    u8  num_required_signatures
    u8  num_readonly_signed_accounts
    u8  num_readonly_unsigned_accounts
    shortvec(#keys)  || keys (32 bytes each)
    recent_blockhash (32 bytes)
    shortvec(#instructions) || for each:
        u8 program_id_index
        shortvec(#accounts) || account indices (u8 each)
        shortvec(#data)     || data

`Message.from_bytes(m.serialize())` reproduces `m` exactly, so re-encoding a
decoded message is byte-identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

from ..errors import SerializationError
from ..publickey import PUBLIC_KEY_LENGTH, PublicKey, PublicKeyLike
from ..utils.bytes import (U8_MAX, ByteReader, BytesLike, encode_length,
                           pack_u8)
from ..utils.encoding import b58decode, b58encode
from .instructions import Instruction, flatten

BLOCKHASH_LENGTH = 32
MAX_ACCOUNT_KEYS = U8_MAX + 1
VERSION_PREFIX_MASK = 0x80

BlockhashLike = Union[str, bytes, bytearray, memoryview, PublicKey]

__all__ = [
    "BLOCKHASH_LENGTH",
    "MAX_ACCOUNT_KEYS",
    "BlockhashLike",
    "MessageHeader",
    "CompiledInstruction",
    "Message",
    "blockhash_bytes",
]


def blockhash_bytes(value: BlockhashLike) -> bytes:
    """Normalize a blockhash given as base58 text or raw bytes to 32 bytes."""
    if isinstance(value, PublicKey):
        raw = value.to_bytes()
    elif isinstance(value, str):
        raw = b58decode(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise TypeError(f"blockhash must be base58 text or bytes, got {type(value).__name__}")
    if len(raw) != BLOCKHASH_LENGTH:
        raise SerializationError(f"recent blockhash must be {BLOCKHASH_LENGTH} bytes, got {len(raw)}")
    return raw


@dataclass(frozen=True)
class MessageHeader:
    """
    Signature and access counts for the account table.

    The first `num_required_signatures` keys sign; the last
    `num_readonly_signed_accounts` of those are read-only, and the last
    `num_readonly_unsigned_accounts` keys of the table are read-only.
    """

    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int

    def serialize(self) -> bytes:
        return (
            pack_u8(self.num_required_signatures)
            + pack_u8(self.num_readonly_signed_accounts)
            + pack_u8(self.num_readonly_unsigned_accounts)
        )


@dataclass(frozen=True)
class CompiledInstruction:
    """Instruction whose program and accounts are indices into the account table."""

    program_id_index: int
    accounts: Tuple[int, ...]
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "data", bytes(self.data))

    def serialize(self) -> bytes:
        return b"".join(
            [
                pack_u8(self.program_id_index),
                encode_length(len(self.accounts)),
                b"".join(pack_u8(i) for i in self.accounts),
                encode_length(len(self.data)),
                self.data,
            ]
        )


def _merge(roles: Dict[PublicKey, List[bool]], key: PublicKey, is_signer: bool, is_writable: bool) -> None:
    flags = roles.get(key)
    if flags is None:
        roles[key] = [bool(is_signer), bool(is_writable)]
    else:
        flags[0] = flags[0] or bool(is_signer)
        flags[1] = flags[1] or bool(is_writable)


@dataclass(frozen=True)
class Message:
    """A compiled legacy message. Build it with `Message.compile` or `Message.from_bytes`."""

    header: MessageHeader
    account_keys: Tuple[PublicKey, ...]
    recent_blockhash: bytes
    instructions: Tuple[CompiledInstruction, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_keys", tuple(PublicKey(k) for k in self.account_keys))
        object.__setattr__(self, "recent_blockhash", blockhash_bytes(self.recent_blockhash))
        object.__setattr__(self, "instructions", tuple(self.instructions))
        self._validate()

    def _validate(self) -> None:
        n = len(self.account_keys)
        h = self.header
        if n > MAX_ACCOUNT_KEYS:
            raise SerializationError(f"too many accounts: {n} (max {MAX_ACCOUNT_KEYS})")
        if len(set(self.account_keys)) != n:
            raise SerializationError("account table contains duplicate keys")
        if h.num_required_signatures > n:
            raise SerializationError("header requires more signatures than there are accounts")
        if h.num_readonly_signed_accounts > h.num_required_signatures:
            raise SerializationError("header marks more read-only signers than signers")
        if h.num_readonly_unsigned_accounts > n - h.num_required_signatures:
            raise SerializationError("header marks more read-only unsigned accounts than exist")
        for ix in self.instructions:
            for idx in (ix.program_id_index, *ix.accounts):
                if not 0 <= idx < n:
                    raise SerializationError(f"instruction references account index {idx} of {n}")

    # ---- Compilation ----

    @classmethod
    def compile(
        cls,
        recent_blockhash: BlockhashLike,
        instructions: Union[Instruction, Sequence[Instruction]],
        fee_payer: PublicKeyLike,
    ) -> "Message":
        """
        Merge `instructions` against `fee_payer` into an ordered account table.

        Raises
        ------
        SerializationError
            If the blockhash is not 32 bytes or more than 256 accounts are referenced.
        """
        ixs = flatten(instructions)
        payer = PublicKey(fee_payer)

        roles: Dict[PublicKey, List[bool]] = {payer: [True, True]}
        for ix in ixs:
            for meta in ix.accounts:
                _merge(roles, meta.pubkey, meta.is_signer, meta.is_writable)
            _merge(roles, ix.program_id, False, False)
        roles[payer] = [True, True]

        rest = [(k, f) for k, f in roles.items() if k != payer]
        signed_writable = [k for k, (s, w) in rest if s and w]
        signed_readonly = [k for k, (s, w) in rest if s and not w]
        unsigned_writable = [k for k, (s, w) in rest if not s and w]
        unsigned_readonly = [k for k, (s, w) in rest if not s and not w]
        keys = [payer, *signed_writable, *signed_readonly, *unsigned_writable, *unsigned_readonly]
        if len(keys) > MAX_ACCOUNT_KEYS:
            raise SerializationError(f"too many accounts: {len(keys)} (max {MAX_ACCOUNT_KEYS})")

        header = MessageHeader(
            num_required_signatures=1 + len(signed_writable) + len(signed_readonly),
            num_readonly_signed_accounts=len(signed_readonly),
            num_readonly_unsigned_accounts=len(unsigned_readonly),
        )
        index = {k: i for i, k in enumerate(keys)}
        compiled = tuple(
            CompiledInstruction(
                program_id_index=index[ix.program_id],
                accounts=tuple(index[m.pubkey] for m in ix.accounts),
                data=ix.data,
            )
            for ix in ixs
        )
        return cls(
            header=header,
            account_keys=tuple(keys),
            recent_blockhash=blockhash_bytes(recent_blockhash),
            instructions=compiled,
        )

    # ---- Accessors ----

    @property
    def fee_payer(self) -> PublicKey:
        return self.account_keys[0]

    @property
    def signer_keys(self) -> Tuple[PublicKey, ...]:
        return self.account_keys[: self.header.num_required_signatures]

    @property
    def recent_blockhash_b58(self) -> str:
        return b58encode(self.recent_blockhash)

    def is_signer(self, index: int) -> bool:
        return index < self.header.num_required_signatures

    def is_writable(self, index: int) -> bool:
        h = self.header
        if index < h.num_required_signatures:
            return index < h.num_required_signatures - h.num_readonly_signed_accounts
        return index < len(self.account_keys) - h.num_readonly_unsigned_accounts

    def program_ids(self) -> Tuple[PublicKey, ...]:
        return tuple(self.account_keys[ix.program_id_index] for ix in self.instructions)

    # ---- Wire format ----

    def serialize(self) -> bytes:
        parts = [
            self.header.serialize(),
            encode_length(len(self.account_keys)),
            *(k.to_bytes() for k in self.account_keys),
            self.recent_blockhash,
            encode_length(len(self.instructions)),
            *(ix.serialize() for ix in self.instructions),
        ]
        return b"".join(parts)

    def __bytes__(self) -> bytes:
        return self.serialize()

    @classmethod
    def read_from(cls, reader: ByteReader) -> "Message":
        """Decode one message from `reader`, leaving the cursor after it."""
        if reader.peek_u8() & VERSION_PREFIX_MASK:
            raise SerializationError("versioned messages are not supported")
        header = MessageHeader(reader.read_u8(), reader.read_u8(), reader.read_u8())
        num_keys = reader.read_length()
        keys = tuple(PublicKey(reader.read(PUBLIC_KEY_LENGTH)) for _ in range(num_keys))
        blockhash = reader.read(BLOCKHASH_LENGTH)
        num_ixs = reader.read_length()
        ixs = []
        for _ in range(num_ixs):
            program_id_index = reader.read_u8()
            accounts = tuple(reader.read(reader.read_length()))
            data = reader.read(reader.read_length())
            ixs.append(CompiledInstruction(program_id_index, accounts, data))
        return cls(header=header, account_keys=keys, recent_blockhash=blockhash, instructions=tuple(ixs))

    @classmethod
    def from_bytes(cls, raw: BytesLike) -> "Message":
        """
        Decode a serialized legacy message.

        Raises
        ------
        SerializationError
            On truncation, trailing bytes, a versioned prefix or inconsistent indices.
        """
        reader = ByteReader(raw)
        msg = cls.read_from(reader)
        if not reader.at_end():
            raise SerializationError(f"{reader.remaining} trailing bytes after message")
        return msg
