"""
Well-known on-chain program and sysvar ids.

The ids are grouped in one immutable `ProgramIds` table so code that needs a
different deployment (for example a local validator with a forked token
program) can pass its own table instead of mutating module state.
"""

from __future__ import annotations

from dataclasses import dataclass

from .publickey import PublicKey


@dataclass(frozen=True)
class ProgramIds:
    system: PublicKey = PublicKey("11111111111111111111111111111111")
    token: PublicKey = PublicKey("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
    associated_token: PublicKey = PublicKey("ATokenGPvbdGVxr1b2hvZbsiW5xWH25efTNsLJA8knL")
    rent_sysvar: PublicKey = PublicKey("SysvarRent111111111111111111111111111111111")
    compute_budget: PublicKey = PublicKey("ComputeBudget111111111111111111111111111111")
    memo: PublicKey = PublicKey("MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr")


PROGRAM_IDS = ProgramIds()

SYSTEM_PROGRAM_ID = PROGRAM_IDS.system
TOKEN_PROGRAM_ID = PROGRAM_IDS.token
ASSOCIATED_TOKEN_PROGRAM_ID = PROGRAM_IDS.associated_token
SYSVAR_RENT_ID = PROGRAM_IDS.rent_sysvar
COMPUTE_BUDGET_PROGRAM_ID = PROGRAM_IDS.compute_budget
MEMO_PROGRAM_ID = PROGRAM_IDS.memo

__all__ = [
    "ProgramIds",
    "PROGRAM_IDS",
    "SYSTEM_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "SYSVAR_RENT_ID",
    "COMPUTE_BUDGET_PROGRAM_ID",
    "MEMO_PROGRAM_ID",
]
