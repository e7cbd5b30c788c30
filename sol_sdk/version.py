"""
Version helpers for the Python SDK.
We keep a static __version__ (PEP 440) and expose the User-Agent string the
RPC transport sends.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"

USER_AGENT_PRODUCT = "sol-sdk-python"


def user_agent() -> str:
    """Value for the HTTP User-Agent header, e.g. 'sol-sdk-python/0.1.0'."""
    return f"{USER_AGENT_PRODUCT}/{__version__}"


__all__ = ["__version__", "USER_AGENT_PRODUCT", "user_agent"]
