import json
import logging

import httpx
import pytest

from sol_sdk.commitment import Commitment
from sol_sdk.config import SDKConfig
from sol_sdk.errors import IncompleteSignaturesError, JsonRpcCode, RpcError
from sol_sdk.publickey import PublicKey
from sol_sdk.rpc.client import RpcClient
from sol_sdk.rpc.http import HttpTransport
from sol_sdk.rpc.types import AccountInfo, LatestBlockhash, TokenAmount
from sol_sdk.tx.instructions import transfer
from sol_sdk.tx.transaction import Transaction
from sol_sdk.utils.encoding import b58encode, b64decode, b64encode
from sol_sdk.wallet import Keypair

BLOCKHASH = bytes(range(32))
OWNER = PublicKey("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")


def _ctx(value):
    return {"context": {"slot": 1234}, "value": value}


def _signed_transfer() -> Transaction:
    sender = Keypair.from_seed(b"\x01" * 32)
    receiver = Keypair.from_seed(b"\x02" * 32).public_key
    return Transaction.new(BLOCKHASH, transfer(sender.public_key, receiver, 1000), sender.public_key).sign(sender)


# --- Core operations -----------------------------------------------------------


def test_get_balance(node):
    node.results["getBalance"] = _ctx(5_000_000_000)
    pk = Keypair.from_seed(b"\x05" * 32).public_key
    with node.client() as rpc:
        assert rpc.get_balance(pk) == 5_000_000_000
    method, params = node.calls[0]
    assert method == "getBalance"
    assert params == [str(pk), {"commitment": "finalized"}]


def test_requests_are_jsonrpc_2_with_fresh_ids(node):
    node.results["getBalance"] = _ctx(1)
    rpc = node.client()
    rpc.get_balance(OWNER)
    rpc.get_balance(OWNER)
    bodies = [json.loads(r.content) for r in node.requests]
    assert all(b["jsonrpc"] == "2.0" for b in bodies)
    assert bodies[0]["id"] != bodies[1]["id"]
    assert node.requests[0].headers["user-agent"].startswith("sol-sdk-python/")
    assert node.requests[0].headers["content-type"] == "application/json"


def test_per_call_commitment_override(node):
    node.results["getBalance"] = _ctx(1)
    rpc = node.client(commitment="confirmed")
    rpc.get_balance(OWNER)
    rpc.get_balance(OWNER, commitment=Commitment.PROCESSED)
    assert [p[1]["commitment"] for (_m, p) in node.calls] == ["confirmed", "processed"]


def test_get_latest_blockhash(node):
    node.results["getLatestBlockhash"] = _ctx({"blockhash": b58encode(BLOCKHASH), "lastValidBlockHeight": 3090})
    latest = node.client().get_latest_blockhash()
    assert latest == LatestBlockhash(blockhash=BLOCKHASH, last_valid_block_height=3090)
    assert latest.blockhash_b58 == b58encode(BLOCKHASH)
    assert node.calls[0] == ("getLatestBlockhash", [{"commitment": "finalized"}])


def test_send_transaction_base64(node):
    tx = _signed_transfer()
    node.results["sendTransaction"] = tx.signature
    sig = node.client().send_transaction(tx)
    assert sig == tx.signature
    method, params = node.calls[0]
    assert method == "sendTransaction"
    assert b64decode(params[0]) == tx.serialize()
    assert params[1] == {"encoding": "base64", "skipPreflight": False, "preflightCommitment": "finalized"}


def test_send_transaction_skip_preflight(node):
    node.results["sendTransaction"] = "sig"
    node.client().send_transaction(_signed_transfer(), skip_preflight=True, preflight_commitment="processed")
    opts = node.calls[0][1][1]
    assert opts["skipPreflight"] is True
    assert opts["preflightCommitment"] == "processed"


def test_send_unsigned_transaction_never_reaches_the_node(node):
    sender = Keypair.from_seed(b"\x01" * 32)
    tx = Transaction.new(BLOCKHASH, transfer(sender.public_key, OWNER, 1), sender.public_key)
    with pytest.raises(IncompleteSignaturesError) as ei:
        node.client().send_transaction(tx)
    assert ei.value.missing == [sender.public_key]
    assert node.calls == []


def test_get_account_info_not_found_is_none(node):
    node.results["getAccountInfo"] = _ctx(None)
    random_key = Keypair.generate().public_key
    assert node.client().get_account_info(random_key) is None
    method, params = node.calls[0]
    assert method == "getAccountInfo"
    assert params == [str(random_key), {"commitment": "finalized", "encoding": "base64"}]


def test_get_account_info_base64(node):
    node.results["getAccountInfo"] = _ctx(
        {
            "data": [b64encode(b"\x01\x02\x03"), "base64"],
            "executable": False,
            "lamports": 2039280,
            "owner": str(OWNER),
            "rentEpoch": 18446744073709551615,
            "space": 3,
        }
    )
    info = node.client().get_account_info(OWNER)
    assert info == AccountInfo(
        owner=OWNER, lamports=2039280, data=b"\x01\x02\x03", executable=False,
        rent_epoch=18446744073709551615, space=3,
    )


def test_get_account_info_float_rent_epoch_stays_within_u64(node):
    node.results["getAccountInfo"] = _ctx(
        {"data": ["", "base64"], "lamports": 1, "owner": str(OWNER), "rentEpoch": 1.8446744073709552e19}
    )
    info = node.client().get_account_info(OWNER)
    assert info.rent_epoch == 2**64 - 1


@pytest.mark.parametrize("rent_epoch", [-1, 2**64, "361", None])
def test_get_account_info_rejects_bad_rent_epoch(node, rent_epoch):
    node.results["getAccountInfo"] = _ctx(
        {"data": ["", "base64"], "lamports": 1, "owner": str(OWNER), "rentEpoch": rent_epoch}
    )
    with pytest.raises(RpcError) as ei:
        node.client().get_account_info(OWNER)
    assert ei.value.code == JsonRpcCode.INTERNAL_ERROR


@pytest.mark.parametrize(
    "data",
    [[b58encode(b"legacy"), "base58"], b58encode(b"legacy")],
)
def test_get_account_info_base58_forms(node, data):
    node.results["getAccountInfo"] = _ctx(
        {"data": data, "executable": True, "lamports": 1, "owner": str(OWNER), "rentEpoch": 0}
    )
    info = node.client().get_account_info(OWNER)
    assert info.data == b"legacy"
    assert info.executable is True
    assert info.space == len(b"legacy")


# --- Supplementary queries ---------------------------------------------------


def test_get_token_account_balance(node):
    node.results["getTokenAccountBalance"] = _ctx({"amount": "9864", "decimals": 2, "uiAmount": 98.64, "uiAmountString": "98.64"})
    amt = node.client().get_token_account_balance(OWNER)
    assert amt == TokenAmount(amount=9864, decimals=2, ui_amount_string="98.64")


def test_get_minimum_balance_for_rent_exemption(node):
    node.results["getMinimumBalanceForRentExemption"] = 2039280
    rpc = node.client()
    assert rpc.get_minimum_balance_for_rent_exemption(165) == 2039280
    assert node.calls[0][1] == [165, {"commitment": "finalized"}]
    with pytest.raises(ValueError):
        rpc.get_minimum_balance_for_rent_exemption(-1)


def test_is_blockhash_valid(node):
    node.results["isBlockhashValid"] = _ctx(True)
    assert node.client().is_blockhash_valid(BLOCKHASH) is True
    assert node.calls[0][1][0] == b58encode(BLOCKHASH)


def test_request_airdrop(node):
    node.results["requestAirdrop"] = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
    rpc = node.client()
    sig = rpc.request_airdrop(OWNER, 1_000_000_000)
    assert sig.startswith("5VERv8")
    assert node.calls[0][1][:2] == [str(OWNER), 1_000_000_000]
    with pytest.raises(ValueError):
        rpc.request_airdrop(OWNER, 0)


def test_get_health_and_transaction_count(node):
    node.results["getHealth"] = "ok"
    node.results["getTransactionCount"] = 268
    rpc = node.client()
    assert rpc.get_health() == "ok"
    assert rpc.get_transaction_count() == 268
    assert node.methods() == ["getHealth", "getTransactionCount"]


# --- Errors ------------------------------------------------------------------


def test_server_error_object_raises_rpc_error(node):
    node.fail("sendTransaction", -32002, "Transaction simulation failed", {"logs": ["boom"]})
    with pytest.raises(RpcError) as ei:
        node.client().send_transaction(_signed_transfer())
    err = ei.value
    assert err.method == "sendTransaction"
    assert err.code == -32002
    assert err.message == "Transaction simulation failed"
    assert err.data == {"logs": ["boom"]}
    assert "sendTransaction" in str(err)


def test_unknown_method_maps_to_code_enum(node):
    with pytest.raises(RpcError) as ei:
        node.client().get_health()
    assert ei.value.code_enum is JsonRpcCode.METHOD_NOT_FOUND


@pytest.mark.parametrize(
    "method, result, call",
    [
        ("getBalance", _ctx("lots"), lambda rpc: rpc.get_balance(OWNER)),
        ("getBalance", 12, lambda rpc: rpc.get_balance(OWNER)),
        ("getLatestBlockhash", _ctx({"blockhash": "short"}), lambda rpc: rpc.get_latest_blockhash()),
        ("getAccountInfo", _ctx({"data": ["%%%", "base64"], "lamports": 1, "owner": str(OWNER)}),
         lambda rpc: rpc.get_account_info(OWNER)),
        ("getAccountInfo", _ctx({"data": ["", "jsonParsed"], "lamports": 1, "owner": str(OWNER)}),
         lambda rpc: rpc.get_account_info(OWNER)),
        ("getTokenAccountBalance", _ctx({"amount": "-1", "decimals": 0}), lambda rpc: rpc.get_token_account_balance(OWNER)),
        ("isBlockhashValid", _ctx("yes"), lambda rpc: rpc.is_blockhash_valid(BLOCKHASH)),
        ("getHealth", {"status": "ok"}, lambda rpc: rpc.get_health()),
    ],
)
def test_malformed_results_raise_internal_error(node, method, result, call):
    node.results[method] = result
    with pytest.raises(RpcError) as ei:
        call(node.client())
    assert ei.value.method == method
    assert ei.value.code == JsonRpcCode.INTERNAL_ERROR


def test_non_json_body(node):
    node.results["getHealth"] = httpx.Response(200, text="<html>gateway</html>")
    with pytest.raises(RpcError) as ei:
        node.client().get_health()
    assert ei.value.code == JsonRpcCode.INTERNAL_ERROR
    assert ei.value.http_status == 200


def test_http_error_status_without_retry(node):
    node.results["getHealth"] = httpx.Response(503, text="unavailable")
    with pytest.raises(RpcError) as ei:
        node.client().get_health()
    assert ei.value.code == JsonRpcCode.TRANSPORT_ERROR
    assert ei.value.http_status == 503
    assert len(node.calls) == 1


def test_network_error_maps_to_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    rpc = RpcClient("http://node.test:8899", transport=httpx.MockTransport(handler))
    with pytest.raises(RpcError) as ei:
        rpc.get_health()
    assert ei.value.code == JsonRpcCode.TRANSPORT_ERROR
    assert ei.value.method == "getHealth"
    assert isinstance(ei.value.__cause__, httpx.ConnectError)


def test_opt_in_retries_recover_from_transient_failures(monkeypatch, caplog):
    monkeypatch.setattr("sol_sdk.rpc.http.time.sleep", lambda _s: None)
    attempts = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["n"] += 1
        body = json.loads(request.content)
        if attempts["n"] < 3:
            return httpx.Response(429, text="slow down")
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "ok"})

    rpc = RpcClient("http://node.test:8899", transport=httpx.MockTransport(handler), max_retries=2)
    with caplog.at_level(logging.WARNING, logger="sol_sdk.rpc.http"):
        assert rpc.get_health() == "ok"
    assert attempts["n"] == 3
    assert "retry 1/2" in caplog.text


def test_server_errors_are_never_retried(node, monkeypatch):
    monkeypatch.setattr("sol_sdk.rpc.http.time.sleep", lambda _s: None)
    node.fail("getHealth", -32005, "Node is unhealthy")
    with pytest.raises(RpcError):
        node.client(max_retries=5).get_health()
    assert len(node.calls) == 1


# --- Construction ------------------------------------------------------------


def test_from_config(node):
    cfg = SDKConfig(rpc_url="https://rpc.example", commitment="confirmed", user_agent="custom/1.0")
    node.results["getBalance"] = _ctx(7)
    rpc = RpcClient.from_config(cfg, transport=node.transport)
    assert rpc.url == "https://rpc.example"
    assert rpc.get_balance(OWNER) == 7
    assert node.calls[0][1][1] == {"commitment": "confirmed"}
    assert node.requests[0].headers["user-agent"] == "custom/1.0"
    assert node.requests[0].url.host == "rpc.example"


def test_from_config_carries_retry_backoff(monkeypatch):
    delays = []
    monkeypatch.setattr("sol_sdk.rpc.http.time.sleep", delays.append)
    monkeypatch.setattr("sol_sdk.rpc.http.random.random", lambda: 0.0)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    cfg = SDKConfig(rpc_url="http://node.test:8899", max_retries=2, backoff_factor=9.0)
    rpc = RpcClient.from_config(cfg, transport=httpx.MockTransport(handler))
    assert rpc._http.backoff_factor == 9.0
    assert rpc._http.max_retries == 2
    with pytest.raises(RpcError):
        rpc.get_health()
    assert delays == [pytest.approx(0.15), pytest.approx(0.15 * 9.0)]


def test_shared_transport_instance(node):
    node.results["getHealth"] = "ok"
    http = HttpTransport("http://node.test:8899", transport=node.transport)
    with RpcClient(http=http) as rpc:
        assert rpc.get_health() == "ok"
        assert rpc.url == "http://node.test:8899"
