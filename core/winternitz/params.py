"""
Module 03 - Winternitz Scheme Parameters
File: params.py

Purpose: Fixed constants of the one-time signature scheme. Changing any of
these breaks compatibility with every key already committed to a vault.
"""

from core.crypto.hashing import HASH_LENGTH

# One digit per byte: chains are walked 0..255 steps
WINTERNITZ_W: int = 256
CHAIN_LENGTH: int = WINTERNITZ_W - 1

# Digits taken from the message digest (26 bytes = 208 bits)
MESSAGE_DIGITS: int = 26

# Checksum of the message digits; max 26 * 255 = 6630 fits in two base-256 digits
CHECKSUM_DIGITS: int = 2

SCALAR_COUNT: int = MESSAGE_DIGITS + CHECKSUM_DIGITS
SIGNATURE_LENGTH: int = SCALAR_COUNT * HASH_LENGTH
PUBKEY_LENGTH: int = SCALAR_COUNT * HASH_LENGTH

__all__ = [
    "HASH_LENGTH",
    "WINTERNITZ_W",
    "CHAIN_LENGTH",
    "MESSAGE_DIGITS",
    "CHECKSUM_DIGITS",
    "SCALAR_COUNT",
    "SIGNATURE_LENGTH",
    "PUBKEY_LENGTH",
]
