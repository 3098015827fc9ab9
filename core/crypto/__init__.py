"""
Core cryptographic utilities.

Module 02 provides the SHA-256 primitives and the hash-chain walk used by
the one-time signature scheme.
"""
from .hashing import (
    HASH_LENGTH,
    sha256,
    hashv,
    advance,
    to_hex,
    from_hex,
    parse_hex,
)

__all__ = [
    "HASH_LENGTH",
    "sha256",
    "hashv",
    "advance",
    "to_hex",
    "from_hex",
    "parse_hex",
]
