"""
sol_sdk.tx
==========

Transaction helpers: instructions, message compilation, signing.

Submodules
----------
- instructions : `Instruction` / `AccountMeta` and the per-program builders.
- message      : account-table compilation and the legacy message wire format.
- transaction  : signer slots, signing, transaction wire format.

Typical usage
-------------
    from sol_sdk.tx import Transaction, transfer

    # 1) Build instructions
    ix = transfer(payer.public_key, receiver, 1_000)

    # 2) Compile against a recent blockhash and the fee payer
    tx = Transaction.new(blockhash, ix, payer.public_key)

    # 3) Sign with every required signer (returns a new Transaction)
    tx = tx.sign(payer)

    # 4) Submit
    # signature = rpc.send_transaction(tx)
"""

from __future__ import annotations

from .instructions import (AccountMeta, Instruction,
                           create_associated_token_account, memo,
                           set_compute_unit_limit, set_compute_unit_price,
                           spl_transfer, transfer)
from .message import CompiledInstruction, Message, MessageHeader
from .transaction import Transaction

__all__ = [
    "AccountMeta",
    "Instruction",
    "transfer",
    "spl_transfer",
    "create_associated_token_account",
    "set_compute_unit_limit",
    "set_compute_unit_price",
    "memo",
    "MessageHeader",
    "CompiledInstruction",
    "Message",
    "Transaction",
]
