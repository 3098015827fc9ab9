"""
Module 03 - Winternitz Message Digits
File: digits.py

Purpose: Map a message to the chain positions a signature reveals.

The message is hashed, the first MESSAGE_DIGITS bytes become one digit each,
and CHECKSUM_DIGITS big-endian bytes of sum(255 - d) are appended. Raising
any message digit lowers the checksum, so a forger who can only walk chains
forward cannot move every digit in the direction they need.
"""
from __future__ import annotations

from core.crypto.hashing import sha256
from core.winternitz.params import (
    CHAIN_LENGTH,
    CHECKSUM_DIGITS,
    MESSAGE_DIGITS,
)


def checksum(digits: list[int]) -> int:
    """Sum of the remaining chain distance for each message digit."""
    return sum(CHAIN_LENGTH - d for d in digits)


def message_digits(message: bytes) -> list[int]:
    """
    Derive all chain positions for a message.

    Args:
        message: The exact signed byte string

    Returns:
        SCALAR_COUNT digits in [0, 255]: message digits then checksum digits
    """
    digest = sha256(message)
    digits = list(digest[:MESSAGE_DIGITS])
    digits.extend(checksum(digits).to_bytes(CHECKSUM_DIGITS, "big"))
    return digits


def recovery_steps(digits: list[int]) -> int:
    """Chain steps a verifier walks to finish every chain."""
    return sum(CHAIN_LENGTH - d for d in digits)


def estimate_recovery_steps(message: bytes) -> int:
    """Chain steps needed to recover a public key for ``message``."""
    return recovery_steps(message_digits(message))


__all__ = [
    "checksum",
    "message_digits",
    "recovery_steps",
    "estimate_recovery_steps",
]
