"""
Module 03 - Winternitz Signature & Public-Key Recovery
File: signature.py

Recovery never fails on a well-formed signature: it always yields *some*
public key. Whether that key is the right one is decided downstream by
comparing its commitment with the vault identity.

Recovery reports how many hashes it performed so that callers can price
verification against an execution budget.
"""
from __future__ import annotations

from dataclasses import dataclass

from core.crypto.hashing import advance
from core.schemas.errors import MalformedInputException
from core.winternitz.digits import message_digits
from core.winternitz.params import (
    CHAIN_LENGTH,
    HASH_LENGTH,
    SCALAR_COUNT,
    SIGNATURE_LENGTH,
)
from core.winternitz.pubkey import WinternitzPubkey


@dataclass(frozen=True)
class Recovery:
    """
    Outcome of public-key recovery.

    Attributes:
        pubkey: The recovered chain tips
        chain_steps: Chain hashes walked (sum of 255 - digit)
    """
    pubkey: WinternitzPubkey
    chain_steps: int

    @property
    def hash_count(self) -> int:
        """Total SHA-256 invocations, including the message digest."""
        return self.chain_steps + 1


@dataclass(frozen=True)
class WinternitzSignature:
    """
    One-time signature: one intermediate chain value per digit.

    Attributes:
        elements: SCALAR_COUNT chain values of HASH_LENGTH bytes
    """
    elements: tuple[bytes, ...]

    def __post_init__(self) -> None:
        if len(self.elements) != SCALAR_COUNT:
            raise MalformedInputException(
                f"Signature must have {SCALAR_COUNT} elements, got {len(self.elements)}"
            )
        for i, element in enumerate(self.elements):
            if len(element) != HASH_LENGTH:
                raise MalformedInputException(
                    f"Signature element {i} must be {HASH_LENGTH} bytes, got {len(element)}"
                )

    @classmethod
    def from_bytes(cls, data: bytes) -> "WinternitzSignature":
        """
        Split an 896-byte signature into its chain values.

        Raises:
            MalformedInputException: If the length is not exactly SIGNATURE_LENGTH
        """
        if len(data) != SIGNATURE_LENGTH:
            raise MalformedInputException(
                f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(data)}",
                details={"expected": SIGNATURE_LENGTH, "actual": len(data)},
            )
        return cls(
            elements=tuple(
                bytes(data[i:i + HASH_LENGTH])
                for i in range(0, SIGNATURE_LENGTH, HASH_LENGTH)
            )
        )

    def to_bytes(self) -> bytes:
        return b"".join(self.elements)

    def recover(self, message: bytes) -> Recovery:
        """
        Finish every chain from the revealed position to its tip.

        Args:
            message: The exact byte string that was signed

        Returns:
            Recovery with the public key and the number of chain steps walked
        """
        digits = message_digits(message)
        tips: list[bytes] = []
        steps = 0
        for element, digit in zip(self.elements, digits):
            remaining = CHAIN_LENGTH - digit
            tips.append(advance(element, remaining))
            steps += remaining
        return Recovery(pubkey=WinternitzPubkey(tips=tuple(tips)), chain_steps=steps)

    def recover_pubkey(self, message: bytes) -> WinternitzPubkey:
        """Recover the public key for ``message``."""
        return self.recover(message).pubkey


__all__ = [
    "Recovery",
    "WinternitzSignature",
]
