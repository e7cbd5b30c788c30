import json
import os
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from sol_sdk.rpc.client import RpcClient

Reply = Union[Any, Callable[[list], Any], httpx.Response]


class FakeNode:
    """
    In-memory JSON-RPC node behind an httpx.MockTransport.

    `results` maps a method name to either a plain result, a callable taking the
    params list, or a ready-made httpx.Response (for HTTP-level failures).
    Methods not listed answer with a -32601 error object.
    """

    def __init__(self, **results: Reply) -> None:
        self.results: Dict[str, Reply] = dict(results)
        self.errors: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.requests: List[httpx.Request] = []

    def fail(self, method: str, code: int, message: str, data: Any = None) -> None:
        self.errors[method] = {"code": code, "message": message, "data": data}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.calls.append((method, params))
        if method in self.errors:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]})
        if method not in self.results:
            err = {"code": -32601, "message": f"Method not found: {method}"}
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": err})
        reply = self.results[method]
        if isinstance(reply, httpx.Response):
            return reply
        if callable(reply):
            reply = reply(params)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": reply})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, **kwargs: Any) -> RpcClient:
        return RpcClient("http://node.test:8899", transport=self.transport, **kwargs)

    def methods(self) -> List[str]:
        return [m for (m, _p) in self.calls]


@pytest.fixture
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture(autouse=True)
def _clean_sdk_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep developer SOL_SDK_* settings from leaking into config/CLI tests
    for key in list(os.environ):
        if key.startswith("SOL_SDK_"):
            monkeypatch.delenv(key, raising=False)
