"""
sol_sdk.tx.instructions
=======================

Instruction builders for the programs the SDK knows about.

Every builder returns the same immutable `Instruction` shape, `(program_id,
accounts, data)`, so the message compiler treats all of them uniformly. The
account order of each builder is fixed by the target program and must not be
changed.

Builders
--------
- `transfer`                         : system program lamport transfer
- `spl_transfer`                     : token program transfer between token accounts
- `create_associated_token_account`  : associated token program account creation
- `set_compute_unit_limit`           : compute budget limit
- `set_compute_unit_price`           : compute budget priority fee
- `memo`                             : memo program note

Examples
--------
    from sol_sdk.tx.instructions import transfer

    ix = transfer(sender.public_key, receiver, 1_000)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

from ..programs import PROGRAM_IDS, ProgramIds
from ..publickey import PublicKey, PublicKeyLike
from ..utils.bytes import BytesLike, pack_u8, pack_u32, pack_u64

# -----------------------------------------------------------------------------
# Core shapes
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AccountMeta:
    """Role annotation for one account referenced by an instruction."""

    pubkey: PublicKey
    is_signer: bool = False
    is_writable: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.pubkey, PublicKey):
            object.__setattr__(self, "pubkey", PublicKey(self.pubkey))


@dataclass(frozen=True)
class Instruction:
    """A program invocation: program id, ordered account roles, opaque payload."""

    program_id: PublicKey
    accounts: Tuple[AccountMeta, ...] = field(default_factory=tuple)
    data: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.program_id, PublicKey):
            object.__setattr__(self, "program_id", PublicKey(self.program_id))
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "data", bytes(self.data))


def _signer_writable(key: PublicKeyLike) -> AccountMeta:
    return AccountMeta(PublicKey(key), is_signer=True, is_writable=True)


def _writable(key: PublicKeyLike) -> AccountMeta:
    return AccountMeta(PublicKey(key), is_signer=False, is_writable=True)


def _readonly(key: PublicKeyLike) -> AccountMeta:
    return AccountMeta(PublicKey(key), is_signer=False, is_writable=False)


def _signer(key: PublicKeyLike) -> AccountMeta:
    return AccountMeta(PublicKey(key), is_signer=True, is_writable=False)


# -----------------------------------------------------------------------------
# System program
# -----------------------------------------------------------------------------

SYSTEM_TRANSFER = 2


def transfer(
    from_pubkey: PublicKeyLike,
    to_pubkey: PublicKeyLike,
    lamports: int,
    *,
    programs: ProgramIds = PROGRAM_IDS,
) -> Instruction:
    """
    Move `lamports` from `from_pubkey` (signs, debited) to `to_pubkey` (credited).

    Data: u32 LE instruction index 2 || u64 LE lamports.
    """
    return Instruction(
        program_id=programs.system,
        accounts=(_signer_writable(from_pubkey), _writable(to_pubkey)),
        data=pack_u32(SYSTEM_TRANSFER) + pack_u64(lamports),
    )


# -----------------------------------------------------------------------------
# Token program
# -----------------------------------------------------------------------------

TOKEN_TRANSFER = 3


def spl_transfer(
    source: PublicKeyLike,
    destination: PublicKeyLike,
    owner: PublicKeyLike,
    amount: int,
    *,
    programs: ProgramIds = PROGRAM_IDS,
) -> Instruction:
    """
    Move `amount` base units between two token accounts of the same mint.

    `owner` is the authority of `source` and must sign.
    Data: u8 instruction index 3 || u64 LE amount.
    """
    return Instruction(
        program_id=programs.token,
        accounts=(_writable(source), _writable(destination), _signer(owner)),
        data=pack_u8(TOKEN_TRANSFER) + pack_u64(amount),
    )


# -----------------------------------------------------------------------------
# Associated token program
# -----------------------------------------------------------------------------


def create_associated_token_account(
    payer: PublicKeyLike,
    associated_account: PublicKeyLike,
    owner: PublicKeyLike,
    mint: PublicKeyLike,
    *,
    programs: ProgramIds = PROGRAM_IDS,
) -> Instruction:
    """
    Create the associated token account of `owner` for `mint`, funded by `payer`.

    `associated_account` is normally `find_associated_token_address(owner, mint).address`.
    The instruction carries no data.
    """
    return Instruction(
        program_id=programs.associated_token,
        accounts=(
            _signer_writable(payer),
            _writable(associated_account),
            _readonly(owner),
            _readonly(mint),
            _readonly(programs.system),
            _readonly(programs.token),
            _readonly(programs.rent_sysvar),
        ),
        data=b"",
    )


# -----------------------------------------------------------------------------
# Compute budget program
# -----------------------------------------------------------------------------

COMPUTE_SET_UNIT_LIMIT = 2
COMPUTE_SET_UNIT_PRICE = 3


def set_compute_unit_limit(units: int, *, programs: ProgramIds = PROGRAM_IDS) -> Instruction:
    """Cap the compute units the transaction may consume (u8 2 || u32 LE units)."""
    return Instruction(
        program_id=programs.compute_budget,
        accounts=(),
        data=pack_u8(COMPUTE_SET_UNIT_LIMIT) + pack_u32(units),
    )


def set_compute_unit_price(micro_lamports: int, *, programs: ProgramIds = PROGRAM_IDS) -> Instruction:
    """Priority fee per compute unit in micro-lamports (u8 3 || u64 LE price)."""
    return Instruction(
        program_id=programs.compute_budget,
        accounts=(),
        data=pack_u8(COMPUTE_SET_UNIT_PRICE) + pack_u64(micro_lamports),
    )


# -----------------------------------------------------------------------------
# Memo program
# -----------------------------------------------------------------------------


def memo(
    text: str | BytesLike,
    signers: Iterable[PublicKeyLike] = (),
    *,
    programs: ProgramIds = PROGRAM_IDS,
) -> Instruction:
    """Attach a UTF-8 note; any `signers` listed must sign the transaction."""
    payload = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    return Instruction(
        program_id=programs.memo,
        accounts=tuple(_signer(s) for s in signers),
        data=payload,
    )


def flatten(instructions: Instruction | Sequence[Instruction]) -> Tuple[Instruction, ...]:
    """Accept one instruction or a sequence of them."""
    if isinstance(instructions, Instruction):
        return (instructions,)
    out = tuple(instructions)
    for ix in out:
        if not isinstance(ix, Instruction):
            raise TypeError(f"expected Instruction, got {type(ix).__name__}")
    return out


__all__ = [
    "AccountMeta",
    "Instruction",
    "SYSTEM_TRANSFER",
    "TOKEN_TRANSFER",
    "COMPUTE_SET_UNIT_LIMIT",
    "COMPUTE_SET_UNIT_PRICE",
    "transfer",
    "spl_transfer",
    "create_associated_token_account",
    "set_compute_unit_limit",
    "set_compute_unit_price",
    "memo",
    "flatten",
]
