"""
sol_sdk.wallet
==============

Convenience exports for key material:

- Keypair (Ed25519 generate / import / sign).
- verify helper for detached signatures.
"""

from ..publickey import verify
from .keypair import SECRET_KEY_LENGTH, SEED_LENGTH, Keypair, sign

__all__ = [
    "Keypair",
    "SEED_LENGTH",
    "SECRET_KEY_LENGTH",
    "sign",
    "verify",
]
