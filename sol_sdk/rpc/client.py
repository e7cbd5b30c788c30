"""
sol_sdk.rpc.client
==================

Typed JSON-RPC client for a cluster node.

Each method issues exactly one JSON-RPC call through an `HttpTransport` and
converts the result into a Python value or one of the dataclasses in
`sol_sdk.rpc.types`. Failures of any kind surface as `RpcError` carrying the
method name: transport problems, server error objects, and results whose
shape cannot be interpreted (code -32603).

Typical usage
-------------
    from sol_sdk.rpc import RpcClient

    with RpcClient("https://api.devnet.solana.com") as rpc:
        lamports = rpc.get_balance(owner)
        latest = rpc.get_latest_blockhash()
        tx = Transaction.new(latest.blockhash, ixs, payer.public_key).sign(payer)
        sig = rpc.send_transaction(tx)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, TypeVar, Union

import httpx

from ..commitment import Commitment
from ..config import SDKConfig
from ..errors import (EncodingError, IncompleteSignaturesError, InvalidKeyError,
                      JsonRpcCode, RpcError, SerializationError)
from ..publickey import PublicKey, PublicKeyLike
from ..tx.message import BlockhashLike, blockhash_bytes
from ..tx.transaction import Transaction
from ..utils.encoding import b58encode
from .http import JSON, HttpTransport, Params
from .types import AccountInfo, LatestBlockhash, TokenAmount

T = TypeVar("T")

_DEFAULT_URL = "http://127.0.0.1:8899"


def _malformed(method: str, detail: str, result: Any) -> RpcError:
    return RpcError(
        method=method,
        code=int(JsonRpcCode.INTERNAL_ERROR),
        message=f"Unexpected result shape: {detail}",
        data=result,
    )


class RpcClient:
    """
    Synchronous client for the cluster JSON-RPC API.

    Parameters
    ----------
    url:
        HTTP(S) endpoint of the node.
    commitment:
        Default commitment sent with every call that accepts one.
    timeout, headers, max_retries, backoff_factor:
        Passed to the underlying HttpTransport (retries are off by default).
    transport:
        Optional `httpx.BaseTransport`, e.g. `httpx.MockTransport` in tests.
    http:
        A ready-made HttpTransport; when given, the options above are ignored.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        commitment: Union[Commitment, str] = Commitment.FINALIZED,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
        max_retries: int = 0,
        backoff_factor: float = 1.8,
        transport: Optional[httpx.BaseTransport] = None,
        http: Optional[HttpTransport] = None,
    ) -> None:
        self.commitment = Commitment.parse(commitment)
        self._http = http or HttpTransport(
            url or _DEFAULT_URL,
            timeout=timeout,
            max_retries=max_retries,
            backoff_factor=backoff_factor,
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: SDKConfig, *, transport: Optional[httpx.BaseTransport] = None
    ) -> "RpcClient":
        return cls(
            config.rpc_url,
            commitment=config.commitment,
            timeout=config.request_timeout,
            headers=config.http_headers(),
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self._http.url

    # --- lifecycle -------------------------------------------------------

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    # --- plumbing --------------------------------------------------------

    def _call(self, method: str, params: Params = None) -> JSON:
        return self._http.request(method, params)

    def _opts(self, commitment: Optional[Union[Commitment, str]], **extra: Any) -> Dict[str, Any]:
        opts: Dict[str, Any] = {"commitment": str(Commitment.parse(commitment or self.commitment))}
        opts.update(extra)
        return opts

    @staticmethod
    def _value(method: str, result: JSON) -> Any:
        # Most account/bank queries wrap their payload in {"context": ..., "value": ...}
        if not isinstance(result, dict) or "value" not in result:
            raise _malformed(method, "expected an object with 'value'", result)
        return result["value"]

    @staticmethod
    def _parse(method: str, result: Any, parser: Callable[[Any], T]) -> T:
        try:
            return parser(result)
        except (SerializationError, EncodingError, InvalidKeyError) as e:
            raise _malformed(method, str(e), result) from e

    @staticmethod
    def _int(method: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _malformed(method, "expected an integer", value)
        return value

    @staticmethod
    def _str(method: str, value: Any) -> str:
        if not isinstance(value, str):
            raise _malformed(method, "expected a string", value)
        return value

    # --- core ------------------------------------------------------------

    def get_balance(
        self, pubkey: PublicKeyLike, *, commitment: Optional[Union[Commitment, str]] = None
    ) -> int:
        """Lamport balance of `pubkey`."""
        method = "getBalance"
        res = self._call(method, [str(PublicKey(pubkey)), self._opts(commitment)])
        return self._int(method, self._value(method, res))

    def get_latest_blockhash(
        self, *, commitment: Optional[Union[Commitment, str]] = None
    ) -> LatestBlockhash:
        """Most recent blockhash and the last block height at which it is still accepted."""
        method = "getLatestBlockhash"
        res = self._call(method, [self._opts(commitment)])
        return self._parse(method, self._value(method, res), LatestBlockhash.from_json)

    def send_transaction(
        self,
        tx: Transaction,
        *,
        skip_preflight: bool = False,
        preflight_commitment: Optional[Union[Commitment, str]] = None,
    ) -> str:
        """
        Submit a fully signed transaction; returns its base58 signature.

        Raises
        ------
        IncompleteSignaturesError
            If any required signer slot is still empty. Nothing is sent.
        RpcError
            If the node rejects the transaction or cannot be reached.
        """
        missing = tx.missing_signers()
        if missing:
            raise IncompleteSignaturesError(missing)
        method = "sendTransaction"
        opts = {
            "encoding": "base64",
            "skipPreflight": bool(skip_preflight),
            "preflightCommitment": str(Commitment.parse(preflight_commitment or self.commitment)),
        }
        res = self._call(method, [tx.to_base64(), opts])
        return self._str(method, res)

    def get_account_info(
        self, pubkey: PublicKeyLike, *, commitment: Optional[Union[Commitment, str]] = None
    ) -> Optional[AccountInfo]:
        """Account state of `pubkey`, or None when the account does not exist."""
        method = "getAccountInfo"
        res = self._call(method, [str(PublicKey(pubkey)), self._opts(commitment, encoding="base64")])
        value = self._value(method, res)
        if value is None:
            return None
        return self._parse(method, value, AccountInfo.from_json)

    # --- supplementary queries --------------------------------------------

    def get_token_account_balance(
        self, pubkey: PublicKeyLike, *, commitment: Optional[Union[Commitment, str]] = None
    ) -> TokenAmount:
        method = "getTokenAccountBalance"
        res = self._call(method, [str(PublicKey(pubkey)), self._opts(commitment)])
        return self._parse(method, self._value(method, res), TokenAmount.from_json)

    def get_minimum_balance_for_rent_exemption(
        self, space: int, *, commitment: Optional[Union[Commitment, str]] = None
    ) -> int:
        """Lamports an account of `space` data bytes needs to be rent exempt."""
        if isinstance(space, bool) or not isinstance(space, int) or space < 0:
            raise ValueError(f"space must be a non-negative int, got {space!r}")
        method = "getMinimumBalanceForRentExemption"
        res = self._call(method, [space, self._opts(commitment)])
        return self._int(method, res)

    def is_blockhash_valid(
        self, blockhash: BlockhashLike, *, commitment: Optional[Union[Commitment, str]] = None
    ) -> bool:
        method = "isBlockhashValid"
        res = self._call(method, [b58encode(blockhash_bytes(blockhash)), self._opts(commitment)])
        value = self._value(method, res)
        if not isinstance(value, bool):
            raise _malformed(method, "expected a boolean", value)
        return value

    def request_airdrop(
        self, pubkey: PublicKeyLike, lamports: int, *, commitment: Optional[Union[Commitment, str]] = None
    ) -> str:
        """Ask a test cluster's faucet for lamports; returns the airdrop signature."""
        if isinstance(lamports, bool) or not isinstance(lamports, int) or lamports <= 0:
            raise ValueError(f"lamports must be a positive int, got {lamports!r}")
        method = "requestAirdrop"
        res = self._call(method, [str(PublicKey(pubkey)), lamports, self._opts(commitment)])
        return self._str(method, res)

    def get_health(self) -> str:
        method = "getHealth"
        return self._str(method, self._call(method))

    def get_transaction_count(self, *, commitment: Optional[Union[Commitment, str]] = None) -> int:
        method = "getTransactionCount"
        return self._int(method, self._call(method, [self._opts(commitment)]))


__all__ = ["RpcClient"]
