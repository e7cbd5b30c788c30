from __future__ import annotations

from enum import Enum


class Commitment(str, Enum):
    """How settled the state an RPC node reports must be."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @classmethod
    def parse(cls, value: "str | Commitment") -> "Commitment":
        if isinstance(value, Commitment):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(c.value for c in cls)
            raise ValueError(f"unknown commitment {value!r} (expected one of: {allowed})") from None

    def __str__(self) -> str:
        return self.value


__all__ = ["Commitment"]
