"""
HTTP JSON-RPC transport (sync).

- Uses httpx; a custom `httpx.BaseTransport` can be injected (tests use
  `httpx.MockTransport`).
- Every call is one request/response pair with a fresh id.
- Transport failures and 429/5xx gateways can be retried with jittered
  backoff, but only when the caller opts in with `max_retries > 0`.
  Server-reported JSON-RPC errors are never retried.

Example:
    from sol_sdk.rpc.http import HttpTransport
    with HttpTransport("http://127.0.0.1:8899") as rpc:
        print(rpc.request("getSlot"))
"""

from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Union

import httpx

from ..errors import JsonRpcCode, RpcError, raise_for_jsonrpc_result
from ..version import user_agent

log = logging.getLogger(__name__)

JSON = Union[dict, list, str, int, float, bool, None]
Params = Union[Sequence[Any], Mapping[str, Any], None]


def _is_retriable_http(status: int) -> bool:
    # Typical transient HTTP statuses: 429/502/503/504
    return status in (429, 502, 503, 504)


def _jitter_backoff(base: float, factor: float, attempt: int, jitter: float) -> float:
    # Exponential backoff with jitter in [0, jitter]
    return base * (factor ** max(attempt - 1, 0)) + random.random() * jitter


@dataclass
class HttpTransport:
    """Synchronous JSON-RPC 2.0 transport over HTTP."""

    url: str
    timeout: float = 30.0
    max_retries: int = 0
    backoff_base: float = 0.15
    backoff_factor: float = 1.8
    backoff_jitter: float = 0.2
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.BaseTransport] = None
    _id_counter: Iterator[int] = field(default_factory=lambda: count(start=1), repr=False)
    _client: httpx.Client = field(init=False, repr=False)

    def __post_init__(self) -> None:
        merged_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent(),
        }
        if self.headers:
            merged_headers.update(dict(self.headers))
        self._client = httpx.Client(
            timeout=self.timeout,
            headers=merged_headers,
            transport=self.transport,
        )

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self._client.close()

    # --- public API ------------------------------------------------------

    def request(self, method: str, params: Params = None) -> JSON:
        """Perform a single JSON-RPC request and return `result` or raise RpcError."""
        payload = self._make_payload(method, params)
        started = time.monotonic()
        result = self._send_with_retries(method, payload)
        log.debug(
            "rpc %s id=%s ok in %.1fms", method, payload["id"], (time.monotonic() - started) * 1000.0
        )
        return result

    # --- internals -------------------------------------------------------

    def _make_payload(self, method: str, params: Params) -> Dict[str, Any]:
        if params is None:
            params = []
        elif isinstance(params, Mapping):
            params = dict(params)
        elif isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray)):
            params = list(params)
        else:
            # Coerce single param into positional list
            params = [params]  # type: ignore[list-item]
        return {"jsonrpc": "2.0", "id": next(self._id_counter), "method": method, "params": params}

    def _send_with_retries(self, method: str, payload: Dict[str, Any]) -> JSON:
        for attempt in range(1, self.max_retries + 2):  # N retries -> N+1 attempts
            try:
                return self._send_once(method, payload)
            except RpcError as e:
                if e.code != JsonRpcCode.TRANSPORT_ERROR or attempt > self.max_retries:
                    raise
                delay = _jitter_backoff(self.backoff_base, self.backoff_factor, attempt, self.backoff_jitter)
                log.warning("rpc %s transport failure (%s); retry %d/%d in %.2fs",
                            method, e.message, attempt, self.max_retries, delay)
                time.sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover

    def _send_once(self, method: str, payload: Dict[str, Any]) -> JSON:
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        try:
            r = self._client.post(self.url, content=body)
        except httpx.HTTPError as e:
            raise RpcError(
                method=method,
                code=int(JsonRpcCode.TRANSPORT_ERROR),
                message="Network error",
                data=str(e),
                request_id=payload["id"],
            ) from e
        if _is_retriable_http(r.status_code):
            raise RpcError(
                method=method,
                code=int(JsonRpcCode.TRANSPORT_ERROR),
                message=f"HTTP {r.status_code}",
                data=r.text[:256],
                request_id=payload["id"],
                http_status=r.status_code,
            )
        # Avoid raise_for_status() to keep a JSON-RPC error body visible below
        try:
            resp = r.json()
        except ValueError as e:
            raise RpcError(
                method=method,
                code=int(JsonRpcCode.INTERNAL_ERROR),
                message="Non-JSON response from RPC",
                data=f"HTTP {r.status_code}: {r.text[:256]}",
                request_id=payload["id"],
                http_status=r.status_code,
            ) from e

        if not isinstance(resp, dict):
            raise RpcError(
                method=method,
                code=int(JsonRpcCode.INTERNAL_ERROR),
                message="Invalid JSON-RPC response type",
                data=type(resp).__name__,
                request_id=payload["id"],
                http_status=r.status_code,
            )
        raise_for_jsonrpc_result(resp, method=method, http_status=r.status_code)
        if "result" not in resp:
            raise RpcError(
                method=method,
                code=int(JsonRpcCode.INTERNAL_ERROR),
                message="Malformed JSON-RPC response",
                data=resp,
                request_id=payload["id"],
                http_status=r.status_code,
            )
        return resp["result"]


__all__ = ["HttpTransport", "JSON", "Params"]
