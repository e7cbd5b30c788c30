"""
sol_sdk.pda
===========

Program derived addresses (PDAs).

A PDA is a 32-byte address that no private key can sign for: it is a SHA-256
digest chosen so that it does *not* decode to an Ed25519 point.

    address = sha256(seed_0 || ... || seed_n || program_id || "ProgramDerivedAddress")

`find_program_address` appends one extra "bump" seed byte and walks it from
255 down to 0, returning the first off-curve candidate. The search is pure and
deterministic: identical seeds and program id always give the identical
(address, bump) pair, and the seed order is part of the input.

Limits mirror the runtime: at most 16 seeds (bump included), each at most
32 bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from .errors import InvalidSeeds, NoValidBumpFound
from .programs import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID
from .publickey import PublicKey, PublicKeyLike
from .utils.ed25519 import is_on_curve
from .utils.hash import SHA256

log = logging.getLogger(__name__)

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEEDS = 16
MAX_SEED_LENGTH = 32

Seed = Union[bytes, bytearray, memoryview, PublicKey]

__all__ = [
    "PDA_MARKER",
    "MAX_SEEDS",
    "MAX_SEED_LENGTH",
    "ProgramDerivedAddress",
    "create_program_address",
    "find_program_address",
    "find_associated_token_address",
]


@dataclass(frozen=True)
class ProgramDerivedAddress:
    """Result of a PDA search. Unpacks as `address, bump = ...`."""

    address: PublicKey
    bump: int

    def __iter__(self):
        yield self.address
        yield self.bump


def _seed_bytes(seeds: Sequence[Seed], *, reserve: int = 0) -> list:
    if isinstance(seeds, (bytes, bytearray, str)):
        raise TypeError("seeds must be a sequence of byte strings, not a single value")
    if len(seeds) + reserve > MAX_SEEDS:
        raise InvalidSeeds(f"too many seeds: {len(seeds)} (max {MAX_SEEDS - reserve})")
    out = []
    for i, seed in enumerate(seeds):
        raw = seed.to_bytes() if isinstance(seed, PublicKey) else bytes(seed)
        if len(raw) > MAX_SEED_LENGTH:
            raise InvalidSeeds(f"seed {i} is {len(raw)} bytes (max {MAX_SEED_LENGTH})")
        out.append(raw)
    return out


def _digest(prefix: SHA256, program_id: PublicKey) -> bytes:
    return prefix.update(program_id.to_bytes()).update(PDA_MARKER).digest()


def create_program_address(seeds: Sequence[Seed], program_id: PublicKeyLike) -> PublicKey:
    """
    Hash `seeds` under `program_id` into an address.

    Raises
    ------
    InvalidSeeds
        If the seeds break the count/length limits, or the digest lies on the
        curve (and so is not a valid program address).
    """
    program = PublicKey(program_id)
    h = SHA256()
    for raw in _seed_bytes(seeds):
        h.update(raw)
    digest = _digest(h, program)
    if is_on_curve(digest):
        raise InvalidSeeds("derived address lies on the ed25519 curve")
    return PublicKey(digest)


def find_program_address(seeds: Sequence[Seed], program_id: PublicKeyLike) -> ProgramDerivedAddress:
    """
    Search bump seeds 255..0 for the first off-curve address.

    Returns
    -------
    ProgramDerivedAddress
        `(address, bump)`.

    Raises
    ------
    InvalidSeeds
        If the seeds (plus the bump) break the count/length limits.
    NoValidBumpFound
        If all 256 candidates are on the curve.
    """
    program = PublicKey(program_id)
    prefix = SHA256()
    for raw in _seed_bytes(seeds, reserve=1):
        prefix.update(raw)
    for bump in range(255, -1, -1):
        digest = _digest(prefix.copy().update(bytes((bump,))), program)
        if not is_on_curve(digest):
            address = PublicKey(digest)
            log.debug("pda found program=%s bump=%d address=%s", program, bump, address)
            return ProgramDerivedAddress(address=address, bump=bump)
    raise NoValidBumpFound(f"no off-curve address for program {program}")


def find_associated_token_address(
    owner: PublicKeyLike,
    mint: PublicKeyLike,
    *,
    token_program_id: PublicKeyLike = TOKEN_PROGRAM_ID,
    associated_token_program_id: PublicKeyLike = ASSOCIATED_TOKEN_PROGRAM_ID,
) -> ProgramDerivedAddress:
    """
    Associated token account of `owner` for `mint`: the PDA of seeds
    `[owner, token_program, mint]` under the associated token program.
    """
    return find_program_address(
        [PublicKey(owner), PublicKey(token_program_id), PublicKey(mint)],
        associated_token_program_id,
    )
