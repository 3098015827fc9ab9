"""
Signed Messages

The byte strings a vault key signs. They are always assembled from the
instruction's own fields, so a signature cannot be detached from the effect
it authorizes:

    Split: amount (u64 LE, 8) | split recipient (32) | refund recipient (32)
    Close: refund recipient (32)
"""

from __future__ import annotations

from core.crypto.hashing import HASH_LENGTH
from core.schemas.errors import MalformedInputException
from core.schemas.instructions import AMOUNT_LENGTH, U64_MAX


SPLIT_MESSAGE_LENGTH: int = AMOUNT_LENGTH + 2 * HASH_LENGTH
CLOSE_MESSAGE_LENGTH: int = HASH_LENGTH


def _check_address(name: str, address: bytes) -> None:
    if len(address) != HASH_LENGTH:
        raise MalformedInputException(
            f"{name} address must be {HASH_LENGTH} bytes, got {len(address)}"
        )


def split_message(amount: int, split_recipient: bytes, refund_recipient: bytes) -> bytes:
    """72-byte message authorizing a split."""
    if not 0 <= amount <= U64_MAX:
        raise MalformedInputException(f"Amount {amount} does not fit in a u64")
    _check_address("Split recipient", split_recipient)
    _check_address("Refund recipient", refund_recipient)
    return amount.to_bytes(AMOUNT_LENGTH, "little") + split_recipient + refund_recipient


def close_message(refund_recipient: bytes) -> bytes:
    """32-byte message authorizing a close."""
    _check_address("Refund recipient", refund_recipient)
    return bytes(refund_recipient)


__all__ = [
    "SPLIT_MESSAGE_LENGTH",
    "CLOSE_MESSAGE_LENGTH",
    "split_message",
    "close_message",
]
