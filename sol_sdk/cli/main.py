"""
sol_sdk.cli.main
================

`sol-sdk`: a small command-line interface over the SDK. It queries a node,
derives addresses offline, and can sign and submit a plain lamport transfer.

Examples
--------
    $ sol-sdk --rpc https://api.devnet.solana.com balance 9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin
    $ sol-sdk blockhash
    $ sol-sdk pda TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA metadata
    $ sol-sdk ata <OWNER> <MINT>
    $ SOL_SDK_SECRET_KEY=<base58> sol-sdk transfer --to <PUBKEY> --lamports 1000

Configuration
-------------
- RPC URL      : `--rpc` or env `SOL_SDK_RPC_URL` (default: http://127.0.0.1:8899)
- Commitment   : `--commitment` or env `SOL_SDK_COMMITMENT` (default: finalized)
- HTTP Timeout : `--timeout` or env `SOL_SDK_TIMEOUT` seconds (default: 30.0)
- Signer       : env `SOL_SDK_SECRET_KEY` (base58, 32 or 64 bytes) for `transfer`

Every command prints JSON on stdout. Failures print `error: ...` on stderr
and exit with status 1.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

import typer

from ..config import SDKConfig
from ..errors import SolSdkError
from ..pda import find_associated_token_address, find_program_address
from ..programs import PROGRAM_IDS
from ..publickey import PublicKey
from ..rpc.client import RpcClient
from ..tx.instructions import transfer as transfer_ix
from ..tx.transaction import Transaction
from ..utils.encoding import b64encode
from ..version import __version__ as SDK_VERSION
from ..wallet.keypair import Keypair

app = typer.Typer(
    name="sol-sdk",
    help="Solana SDK CLI: query a node, derive addresses, send transfers.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]


@dataclass
class Ctx:
    config: SDKConfig


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


@contextmanager
def _errors() -> Iterator[None]:
    """Turn SDK and validation errors into `error: ...` on stderr and exit 1."""
    try:
        yield
    except (SolSdkError, ValueError, TypeError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.callback()
def _root(
    ctx: typer.Context,
    rpc: Optional[str] = typer.Option(None, "--rpc", help="Node HTTP JSON-RPC URL."),
    commitment: Optional[str] = typer.Option(
        None, "--commitment", help="processed | confirmed | finalized"
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log RPC traffic to stderr."),
) -> None:
    """
    Resolve the effective configuration: flags win over SOL_SDK_* env vars,
    which win over built-in defaults.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    with _errors():
        config = SDKConfig.with_overrides(
            SDKConfig.from_env(), rpc_url=rpc, commitment=commitment, request_timeout=timeout
        )
    ctx.obj = Ctx(config=config)


def _client(ctx: typer.Context) -> RpcClient:
    c: Ctx = ctx.obj
    return RpcClient.from_config(c.config)


# --- Informational -----------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK CLI version."""
    typer.echo(f"sol-sdk {SDK_VERSION}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    c: Ctx = ctx.obj
    _print_json({**c.config.to_dict(), "sdk_version": SDK_VERSION})


# --- Node queries ------------------------------------------------------------


@app.command("balance")
def balance(
    ctx: typer.Context,
    pubkey: str = typer.Argument(..., help="Account address (base58)."),
) -> None:
    """Print the lamport balance of an account."""
    with _errors(), _client(ctx) as client:
        lamports = client.get_balance(pubkey)
    _print_json({"pubkey": str(PublicKey(pubkey)), "lamports": lamports})


@app.command("blockhash")
def blockhash(ctx: typer.Context) -> None:
    """Print the latest blockhash and its last valid block height."""
    with _errors(), _client(ctx) as client:
        latest = client.get_latest_blockhash()
    _print_json(
        {"blockhash": latest.blockhash_b58, "lastValidBlockHeight": latest.last_valid_block_height}
    )


@app.command("account")
def account(
    ctx: typer.Context,
    pubkey: str = typer.Argument(..., help="Account address (base58)."),
) -> None:
    """Print an account's state (data as base64), or null if it does not exist."""
    with _errors(), _client(ctx) as client:
        info = client.get_account_info(pubkey)
    if info is None:
        _print_json(None)
        return
    _print_json(
        {
            "owner": str(info.owner),
            "lamports": info.lamports,
            "executable": info.executable,
            "rentEpoch": info.rent_epoch,
            "space": info.space,
            "data": b64encode(info.data),
        }
    )


# --- Offline helpers ---------------------------------------------------------


@app.command("keygen")
def keygen() -> None:
    """Generate a fresh keypair and print it (the secret key is base58 seed||pubkey)."""
    kp = Keypair.generate()
    _print_json({"publicKey": str(kp.public_key), "secretKey": kp.to_base58()})


@app.command("pda")
def pda(
    program: str = typer.Argument(..., help="Program id (base58)."),
    seeds: Optional[List[str]] = typer.Argument(None, help="Seeds, encoded as UTF-8."),
) -> None:
    """Find the program derived address for UTF-8 seeds."""
    with _errors():
        derived = find_program_address([s.encode("utf-8") for s in seeds or []], program)
    _print_json({"address": str(derived.address), "bump": derived.bump})


@app.command("ata")
def ata(
    owner: str = typer.Argument(..., help="Wallet address (base58)."),
    mint: str = typer.Argument(..., help="Token mint (base58)."),
    token_program: str = typer.Option(
        str(PROGRAM_IDS.token), "--token-program", help="Token program id."
    ),
) -> None:
    """Derive the associated token account of OWNER for MINT."""
    with _errors():
        derived = find_associated_token_address(owner, mint, token_program_id=token_program)
    _print_json({"address": str(derived.address), "bump": derived.bump})


# --- Transactions ------------------------------------------------------------


@app.command("transfer")
def transfer(
    ctx: typer.Context,
    to: str = typer.Option(..., "--to", help="Recipient address (base58)."),
    lamports: int = typer.Option(..., "--lamports", min=1, help="Amount in lamports."),
    secret_key: str = typer.Option(
        ...,
        "--secret-key",
        envvar="SOL_SDK_SECRET_KEY",
        help="Sender secret key (base58). Prefer the env var.",
        show_default=False,
    ),
    skip_preflight: bool = typer.Option(False, "--skip-preflight", help="Skip node simulation."),
) -> None:
    """Sign and submit a lamport transfer from the configured secret key."""
    with _errors():
        sender = Keypair.from_base58(secret_key)
        with _client(ctx) as client:
            latest = client.get_latest_blockhash()
            tx = Transaction.new(
                latest.blockhash, transfer_ix(sender.public_key, to, lamports), sender.public_key
            ).sign(sender)
            signature = client.send_transaction(tx, skip_preflight=skip_preflight)
    _print_json({"signature": signature, "from": str(sender.public_key), "to": to, "lamports": lamports})


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rv = app(prog_name="sol-sdk", standalone_mode=False, args=argv)
        return rv if isinstance(rv, int) else 0
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
