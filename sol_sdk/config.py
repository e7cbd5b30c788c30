"""
SDK configuration: RPC endpoint, commitment, and transport timeouts/retries.

- Loads sane defaults and supports overrides via environment variables (SOL_SDK_*).
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .commitment import Commitment
from .version import user_agent

_DEFAULT_RPC = "http://127.0.0.1:8899"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


@dataclass(slots=True)
class SDKConfig:
    # Core
    rpc_url: str = field(default_factory=lambda: _DEFAULT_RPC)
    commitment: Commitment = Commitment.FINALIZED
    # HTTP behavior (owned by the transport; the core never retries on its own)
    request_timeout: float = 30.0
    max_retries: int = 0
    backoff_factor: float = 1.8
    # Headers / identity
    user_agent: str = field(default_factory=user_agent)

    def __post_init__(self) -> None:
        _ensure_scheme(self.rpc_url, ("http", "https"))
        self.commitment = Commitment.parse(self.commitment)
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be >= 1")

    @classmethod
    def from_env(cls, prefix: str = "SOL_SDK_") -> "SDKConfig":
        """
        Create config from environment variables:

        SOL_SDK_RPC_URL         (http/https)
        SOL_SDK_COMMITMENT      (processed | confirmed | finalized)
        SOL_SDK_TIMEOUT         (float seconds, HTTP)
        SOL_SDK_MAX_RETRIES     (int, transport-level retries; default 0)
        SOL_SDK_BACKOFF         (float, exponential multiplier between retries)
        SOL_SDK_USER_AGENT      (str)
        """
        return cls(
            rpc_url=_env(f"{prefix}RPC_URL", _DEFAULT_RPC) or _DEFAULT_RPC,
            commitment=Commitment.parse(_env(f"{prefix}COMMITMENT", Commitment.FINALIZED.value)),
            request_timeout=float(_env(f"{prefix}TIMEOUT", "30.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "0")),
            backoff_factor=float(_env(f"{prefix}BACKOFF", "1.8")),
            user_agent=_env(f"{prefix}USER_AGENT", user_agent()) or user_agent(),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys and None values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rpc_url": self.rpc_url,
            "commitment": self.commitment.value,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_factor": float(self.backoff_factor),
            "user_agent": self.user_agent,
        }


__all__ = ["SDKConfig"]
