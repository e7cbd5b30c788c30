"""
Typed views over JSON-RPC results.

The node speaks JSON; these dataclasses are what RpcClient hands back. Each
has a `from_json` constructor that validates the shape and raises
`SerializationError` for anything it cannot interpret (the client turns that
into an RpcError carrying the method name).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..errors import EncodingError, SerializationError
from ..publickey import PublicKey
from ..tx.message import blockhash_bytes
from ..utils.bytes import U64_MAX
from ..utils.encoding import b58decode, b58encode, b64decode


def _require(obj: Mapping[str, Any], key: str, kind: type) -> Any:
    if not isinstance(obj, Mapping) or key not in obj:
        raise SerializationError(f"missing field {key!r}")
    value = obj[key]
    # bool is an int subclass; never accept it where a number is expected
    if kind is int and isinstance(value, bool):
        raise SerializationError(f"field {key!r} must be int, got bool")
    if not isinstance(value, kind):
        raise SerializationError(f"field {key!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _rent_epoch(raw: Any) -> int:
    # u64::MAX marks rent-exempt accounts; a float rendering of it rounds up to 2**64
    if isinstance(raw, float) and math.isfinite(raw):
        raw = min(int(raw), U64_MAX)
    if isinstance(raw, bool) or not isinstance(raw, int) or not 0 <= raw <= U64_MAX:
        raise SerializationError(f"rentEpoch must be an unsigned 64-bit integer, got {raw!r}")
    return raw


def decode_account_data(raw: Any) -> bytes:
    """
    Decode the `data` field of an account.

    Accepts `[payload, "base64"]`, `[payload, "base58"]`, and the legacy bare
    base58 string form.
    """
    try:
        if isinstance(raw, str):
            return b58decode(raw)
        if isinstance(raw, (list, tuple)) and len(raw) == 2 and isinstance(raw[0], str):
            payload, encoding = raw
            if encoding == "base64":
                return b64decode(payload)
            if encoding == "base58":
                return b58decode(payload)
            raise SerializationError(f"unsupported account data encoding {encoding!r}")
    except EncodingError as e:
        raise SerializationError(f"undecodable account data: {e}") from e
    raise SerializationError(f"unrecognised account data shape: {type(raw).__name__}")


@dataclass(frozen=True)
class AccountInfo:
    owner: PublicKey
    lamports: int
    data: bytes
    executable: bool
    rent_epoch: int
    space: Optional[int] = None

    @classmethod
    def from_json(cls, value: Mapping[str, Any]) -> "AccountInfo":
        if not isinstance(value, Mapping):
            raise SerializationError(f"account must be an object, got {type(value).__name__}")
        data = decode_account_data(value.get("data"))
        space = value.get("space")
        return cls(
            owner=PublicKey(_require(value, "owner", str)),
            lamports=_require(value, "lamports", int),
            data=data,
            executable=bool(value.get("executable", False)),
            rent_epoch=_rent_epoch(value.get("rentEpoch", 0)),
            space=int(space) if space is not None else len(data),
        )


@dataclass(frozen=True)
class LatestBlockhash:
    blockhash: bytes
    last_valid_block_height: int

    @property
    def blockhash_b58(self) -> str:
        return b58encode(self.blockhash)

    @classmethod
    def from_json(cls, value: Mapping[str, Any]) -> "LatestBlockhash":
        return cls(
            blockhash=blockhash_bytes(_require(value, "blockhash", str)),
            last_valid_block_height=_require(value, "lastValidBlockHeight", int),
        )


@dataclass(frozen=True)
class TokenAmount:
    """SPL token balance in base units plus the mint's decimals."""

    amount: int
    decimals: int
    ui_amount_string: str

    @classmethod
    def from_json(cls, value: Mapping[str, Any]) -> "TokenAmount":
        amount = _require(value, "amount", str)
        if not amount.isdigit():
            raise SerializationError(f"token amount must be a decimal string, got {amount!r}")
        return cls(
            amount=int(amount),
            decimals=_require(value, "decimals", int),
            ui_amount_string=str(value.get("uiAmountString", "")),
        )


__all__ = ["AccountInfo", "LatestBlockhash", "TokenAmount", "decode_account_data"]
