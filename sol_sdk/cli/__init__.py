"""
sol_sdk.cli
===========

Command-line interface for the SDK.

The Typer app is exposed via the console script `sol-sdk`. Typer itself is
only imported when the CLI is actually used, so `import sol_sdk` stays light.

Quick usage
-----------
- From Python:
    >>> from sol_sdk.cli import main
    >>> main(["version"])

- From shell (installed as a console script):
    $ sol-sdk --help
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List, Optional

__all__: List[str] = ["main", "run", "app"]

_SUBMODULE = "sol_sdk.cli.main"
_EXPOSE = ("app", "main", "run")


def _load() -> Any:
    return import_module(_SUBMODULE)


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name in _EXPOSE:
        return getattr(_load(), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def main(argv: Optional[list[str]] = None) -> int:
    """Execute the CLI and return its exit code."""
    return int(_load().main(argv))


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)
