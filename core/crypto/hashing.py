"""
Module 02 - Hashing Utilities
SHA-256 primitives shared by the signature scheme, the commitment tree
and address derivation.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- SHA-256 hashing for raw bytes and for multi-part inputs
- Hash-chain advancement (the one-way chain walk of the one-time scheme)
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- The chain function is a single SHA-256 over the 32-byte chain value, with
  no domain separation. Key generators must use the identical function.
- All operations are deterministic and side-effect free
"""
from __future__ import annotations

import hashlib
from typing import Iterable


HASH_LENGTH: int = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hashv(parts: Iterable[bytes]) -> bytes:
    """
    Hash several byte strings as if they were concatenated.

    hashv([a, b, c]) == sha256(a + b + c), without building the joined buffer.
    """
    hasher = hashlib.sha256()
    for part in parts:
        hasher.update(part)
    return hasher.digest()


def advance(seed: bytes, steps: int) -> bytes:
    """
    Walk a hash chain forward.

    Applies sha256 ``steps`` times starting from ``seed``. ``steps == 0``
    returns the seed unchanged.

    Args:
        seed: 32-byte chain value
        steps: Number of chain steps, >= 0

    Returns:
        32-byte chain value ``steps`` positions further along

    Raises:
        ValueError: If the seed is not 32 bytes or steps is negative
    """
    if len(seed) != HASH_LENGTH:
        raise ValueError(
            f"Chain value must be {HASH_LENGTH} bytes, got {len(seed)}"
        )
    if steps < 0:
        raise ValueError(f"Chain steps must be non-negative, got {steps}")

    value = bytes(seed)
    for _ in range(steps):
        value = hashlib.sha256(value).digest()
    return value


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def parse_hex(hex_string: str) -> bytes:
    """Decode hex with or without the 0x prefix (CLI and env input)."""
    hex_string = hex_string.strip()
    if not hex_string.startswith("0x"):
        hex_string = "0x" + hex_string
    return from_hex(hex_string)


__all__ = [
    "HASH_LENGTH",
    "sha256",
    "hashv",
    "advance",
    "to_hex",
    "from_hex",
    "parse_hex",
]
