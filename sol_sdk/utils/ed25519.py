"""
Ed25519 curve membership for 32-byte compressed points.

Signing and verification go through the `cryptography` package (see
`sol_sdk.wallet.keypair`); it does not expose point decompression, which is
the one curve operation program derived addresses need. A compressed point
is on the curve when its y coordinate yields a square

    x^2 = (y^2 - 1) / (d*y^2 + 1)   (mod p)

The sign bit only picks between x and -x, so it does not affect membership.
y is read with bit 255 cleared and reduced mod p, which is how validators
decompress points when checking PDAs.
"""

from __future__ import annotations

from .bytes import BytesLike

P = 2**255 - 19
D = (-121665 * pow(121666, P - 2, P)) % P

_Y_MASK = (1 << 255) - 1


def is_on_curve(point: BytesLike) -> bool:
    """Return True if *point* (32 bytes) decompresses to an Ed25519 curve point."""
    raw = bytes(point)
    if len(raw) != 32:
        return False
    y = (int.from_bytes(raw, "little") & _Y_MASK) % P
    y2 = y * y % P
    u = (y2 - 1) % P
    v = (D * y2 + 1) % P
    # v never vanishes: -1/d is not a square mod p.
    x2 = u * pow(v, P - 2, P) % P
    if x2 == 0:
        return True
    # Euler's criterion
    return pow(x2, (P - 1) // 2, P) == 1


__all__ = ["P", "D", "is_on_curve"]
