"""
sol_sdk.rpc
-----------

JSON-RPC access to a cluster node.

This package exposes:
- RpcClient:     typed client (see .client)
- HttpTransport: the httpx-based JSON-RPC 2.0 transport (see .http)
- AccountInfo, LatestBlockhash, TokenAmount: result types (see .types)

Import style:

    from sol_sdk.rpc import RpcClient
    rpc = RpcClient("http://127.0.0.1:8899")
"""

from __future__ import annotations

from .client import RpcClient
from .http import HttpTransport
from .types import AccountInfo, LatestBlockhash, TokenAmount

__all__ = ["RpcClient", "HttpTransport", "AccountInfo", "LatestBlockhash", "TokenAmount"]
