"""
Typed error classes for the Python SDK.

These are raised by the codecs, key material, PDA derivation, the message
compiler and the RPC client so callers can catch specific failure modes while
still being able to catch the base `SolSdkError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

__all__ = [
    "SolSdkError",
    "InvalidKeyError",
    "InvalidKeyLength",
    "EncodingError",
    "PdaDerivationError",
    "NoValidBumpFound",
    "InvalidSeeds",
    "SerializationError",
    "TransactionError",
    "SigningError",
    "IncompleteSignaturesError",
    "RpcError",
    "JsonRpcCode",
    "from_jsonrpc_error",
    "raise_for_jsonrpc_result",
]


class SolSdkError(Exception):
    """Base class for all SDK errors."""


# --- Key material ------------------------------------------------------------


class InvalidKeyError(SolSdkError, ValueError):
    """Raised when key bytes are malformed or inconsistent."""


class InvalidKeyLength(InvalidKeyError):
    """Raised when a public or secret key has the wrong number of bytes."""

    def __init__(self, kind: str, expected: str, got: int) -> None:
        self.kind = kind
        self.expected = expected
        self.got = got
        super().__init__(f"{kind} must be {expected} bytes, got {got}")


# --- Codecs ------------------------------------------------------------------


class EncodingError(SolSdkError, ValueError):
    """Raised for malformed base58 / base64 text."""


class SerializationError(SolSdkError, ValueError):
    """Raised when a binary buffer cannot be encoded or decoded."""


# --- Program derived addresses ----------------------------------------------


class PdaDerivationError(SolSdkError):
    """Raised when a program derived address cannot be produced."""


class InvalidSeeds(PdaDerivationError, ValueError):
    """Seeds exceed the allowed count/length, or the address lands on the curve."""


class NoValidBumpFound(PdaDerivationError):
    """All 256 bump candidates produced on-curve points."""


# --- Transactions ------------------------------------------------------------


class TransactionError(SolSdkError):
    """Base class for transaction assembly problems."""


class SigningError(TransactionError):
    """Raised when a keypair is not a required signer of the message."""


class IncompleteSignaturesError(TransactionError):
    """Raised when a transaction is submitted with unsigned signer slots."""

    def __init__(self, missing: Any) -> None:
        self.missing = list(missing)
        names = ", ".join(str(k) for k in self.missing)
        super().__init__(f"transaction is missing signatures for: {names}")


# --- JSON-RPC ----------------------------------------------------------------


class JsonRpcCode(IntEnum):
    # JSON-RPC 2.0 spec
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Server errors (implementation-defined range: -32099 to -32000)
    SERVER_ERROR = -32000

    # Validator-side codes seen in practice
    BLOCK_CLEANED_UP = -32001
    SEND_TX_PREFLIGHT_FAILURE = -32002
    TX_SIGNATURE_VERIFICATION_FAILURE = -32003
    NODE_UNHEALTHY = -32005
    TX_PRECOMPILE_VERIFICATION_FAILURE = -32006

    # Client-side: the request never produced a JSON-RPC response
    TRANSPORT_ERROR = -32098


@dataclass(eq=False)
class RpcError(SolSdkError):
    """Raised when a JSON-RPC call fails in transport or returns an error object."""

    method: Optional[str]
    code: int
    message: str
    data: Optional[Any] = None
    request_id: Optional[Any] = None
    http_status: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"RPC[{self.method or '-'}] code={self.code} msg={self.message!r}"]
        if self.request_id is not None:
            parts.append(f"id={self.request_id}")
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        if self.data is not None:
            parts.append(f"data={self.data!r}")
        return " ".join(parts)

    @property
    def code_enum(self) -> Optional[JsonRpcCode]:
        try:
            return JsonRpcCode(self.code)
        except ValueError:
            return None


def from_jsonrpc_error(
    err_obj: Dict[str, Any],
    *,
    method: Optional[str] = None,
    request_id: Optional[Any] = None,
    http_status: Optional[int] = None,
) -> RpcError:
    """
    Convert a JSON-RPC error object into RpcError.

    `err_obj` should resemble: {"code": int, "message": str, "data": any?}
    """
    if not isinstance(err_obj, dict):
        return RpcError(
            method=method,
            code=int(JsonRpcCode.INTERNAL_ERROR),
            message="Malformed JSON-RPC error object",
            data=err_obj,
            request_id=request_id,
            http_status=http_status,
        )
    code = int(err_obj.get("code", JsonRpcCode.SERVER_ERROR))
    message = str(err_obj.get("message", "Unknown JSON-RPC error"))
    return RpcError(
        method=method,
        code=code,
        message=message,
        data=err_obj.get("data"),
        request_id=request_id,
        http_status=http_status,
    )


def raise_for_jsonrpc_result(
    result: Dict[str, Any],
    *,
    method: Optional[str] = None,
    http_status: Optional[int] = None,
) -> None:
    """
    If `result` contains an "error" field, raise RpcError.

    Called by the HTTP transport after parsing a JSON-RPC response.
    """
    if "error" in result and result["error"] is not None:
        raise from_jsonrpc_error(
            result["error"], method=method, request_id=result.get("id"), http_status=http_status
        )
