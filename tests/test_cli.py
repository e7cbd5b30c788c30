import json

import pytest
from typer.testing import CliRunner

import sol_sdk.cli.main as cli
from sol_sdk.pda import find_associated_token_address, find_program_address
from sol_sdk.publickey import PublicKey
from sol_sdk.rpc.client import RpcClient
from sol_sdk.tx.transaction import Transaction
from sol_sdk.utils.encoding import b58encode, b64encode
from sol_sdk.version import __version__
from sol_sdk.wallet import Keypair

runner = CliRunner()

BLOCKHASH = bytes(range(32))
MINT = PublicKey("So11111111111111111111111111111111111111112")


@pytest.fixture
def wired(node, monkeypatch):
    """Route every CLI RPC call to the in-memory node."""

    def _client(ctx):
        return RpcClient.from_config(ctx.obj.config, transport=node.transport)

    monkeypatch.setattr(cli, "_client", _client)
    return node


def _json(result):
    return json.loads(result.stdout)


def test_version():
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"sol-sdk {__version__}"


def test_env_reflects_flags_over_env(monkeypatch):
    monkeypatch.setenv("SOL_SDK_RPC_URL", "http://from-env:8899")
    monkeypatch.setenv("SOL_SDK_COMMITMENT", "processed")
    result = runner.invoke(cli.app, ["--rpc", "https://from-flag", "--timeout", "3", "env"])
    assert result.exit_code == 0, result.output
    data = _json(result)
    assert data["rpc_url"] == "https://from-flag"
    assert data["commitment"] == "processed"
    assert data["request_timeout"] == 3.0
    assert data["sdk_version"] == __version__


def test_bad_commitment_exits_1():
    result = runner.invoke(cli.app, ["--commitment", "eventually", "env"])
    assert result.exit_code == 1
    assert "error:" in result.output


def test_pda():
    program = "BPFLoaderUpgradeab1e11111111111111111111111"
    result = runner.invoke(cli.app, ["pda", program, "vault", "42"])
    assert result.exit_code == 0, result.output
    expected = find_program_address([b"vault", b"42"], program)
    assert _json(result) == {"address": str(expected.address), "bump": expected.bump}


def test_pda_rejects_bad_program_id():
    result = runner.invoke(cli.app, ["pda", "not-base58-0OIl", "seed"])
    assert result.exit_code == 1
    assert "error:" in result.output


def test_ata():
    owner = Keypair.from_seed(b"\x04" * 32).public_key
    result = runner.invoke(cli.app, ["ata", str(owner), str(MINT)])
    assert result.exit_code == 0, result.output
    assert _json(result)["address"] == str(find_associated_token_address(owner, MINT).address)


def test_keygen_outputs_consistent_pair():
    result = runner.invoke(cli.app, ["keygen"])
    assert result.exit_code == 0
    data = _json(result)
    kp = Keypair.from_base58(data["secretKey"])
    assert str(kp.public_key) == data["publicKey"]


def test_balance(wired):
    wired.results["getBalance"] = {"context": {"slot": 1}, "value": 42}
    owner = Keypair.from_seed(b"\x04" * 32).public_key
    result = runner.invoke(cli.app, ["--commitment", "confirmed", "balance", str(owner)])
    assert result.exit_code == 0, result.output
    assert _json(result) == {"pubkey": str(owner), "lamports": 42}
    assert wired.calls[0][1][1] == {"commitment": "confirmed"}


def test_blockhash(wired):
    wired.results["getLatestBlockhash"] = {
        "context": {"slot": 1},
        "value": {"blockhash": b58encode(BLOCKHASH), "lastValidBlockHeight": 77},
    }
    result = runner.invoke(cli.app, ["blockhash"])
    assert result.exit_code == 0, result.output
    assert _json(result) == {"blockhash": b58encode(BLOCKHASH), "lastValidBlockHeight": 77}


def test_account_not_found_prints_null(wired):
    wired.results["getAccountInfo"] = {"context": {"slot": 1}, "value": None}
    result = runner.invoke(cli.app, ["account", str(MINT)])
    assert result.exit_code == 0, result.output
    assert _json(result) is None


def test_account_found(wired):
    wired.results["getAccountInfo"] = {
        "context": {"slot": 1},
        "value": {
            "data": [b64encode(b"\xaa\xbb"), "base64"],
            "executable": False,
            "lamports": 10,
            "owner": str(PublicKey.default()),
            "rentEpoch": 0,
            "space": 2,
        },
    }
    result = runner.invoke(cli.app, ["account", str(MINT)])
    assert result.exit_code == 0, result.output
    data = _json(result)
    assert data["data"] == b64encode(b"\xaa\xbb")
    assert data["owner"] == "11111111111111111111111111111111"


def test_rpc_error_goes_to_stderr_with_exit_1(wired):
    wired.fail("getBalance", -32005, "Node is unhealthy")
    result = runner.invoke(cli.app, ["balance", str(MINT)])
    assert result.exit_code == 1
    assert "error:" in result.output
    assert "Node is unhealthy" in result.output


def test_transfer_signs_and_submits(wired, monkeypatch):
    sender = Keypair.from_seed(b"\x09" * 32)
    receiver = Keypair.from_seed(b"\x0a" * 32).public_key
    monkeypatch.setenv("SOL_SDK_SECRET_KEY", sender.to_base58())
    wired.results["getLatestBlockhash"] = {
        "context": {"slot": 1},
        "value": {"blockhash": b58encode(BLOCKHASH), "lastValidBlockHeight": 77},
    }
    wired.results["sendTransaction"] = lambda params: Transaction.from_base64(params[0]).signature

    result = runner.invoke(cli.app, ["transfer", "--to", str(receiver), "--lamports", "1000"])
    assert result.exit_code == 0, result.output

    assert wired.methods() == ["getLatestBlockhash", "sendTransaction"]
    sent = Transaction.from_base64(wired.calls[1][1][0])
    assert sent.verify_signatures()
    assert sent.message.account_keys[:2] == (sender.public_key, receiver)
    assert sent.message.recent_blockhash == BLOCKHASH
    data = _json(result)
    assert data["signature"] == sent.signature
    assert data["lamports"] == 1000


def test_transfer_with_bad_secret_exits_1(wired, monkeypatch):
    monkeypatch.setenv("SOL_SDK_SECRET_KEY", b58encode(b"\x01" * 10))
    result = runner.invoke(cli.app, ["transfer", "--to", str(MINT), "--lamports", "1"])
    assert result.exit_code == 1
    assert "error:" in result.output
    assert wired.calls == []


def test_main_returns_exit_codes():
    assert cli.main(["version"]) == 0
    assert cli.main(["pda", "0OIl", "x"]) == 1
