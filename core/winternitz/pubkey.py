"""
Module 03 - Winternitz Public Key
File: pubkey.py

The raw public key is the ordered list of chain tips. It only ever lives in
memory; vaults are identified by its merklized commitment.
"""
from __future__ import annotations

from dataclasses import dataclass

from core.merkle.merkle_tree import build_merkle_root
from core.schemas.errors import MalformedInputException
from core.winternitz.params import HASH_LENGTH, PUBKEY_LENGTH, SCALAR_COUNT


@dataclass(frozen=True)
class WinternitzPubkey:
    """
    Chain tips of a one-time key.

    Attributes:
        tips: SCALAR_COUNT chain values, each advanced to the end of its chain
    """
    tips: tuple[bytes, ...]

    def __post_init__(self) -> None:
        if len(self.tips) != SCALAR_COUNT:
            raise MalformedInputException(
                f"Public key must have {SCALAR_COUNT} tips, got {len(self.tips)}"
            )
        for i, tip in enumerate(self.tips):
            if len(tip) != HASH_LENGTH:
                raise MalformedInputException(
                    f"Public key tip {i} must be {HASH_LENGTH} bytes, got {len(tip)}"
                )

    @classmethod
    def from_bytes(cls, data: bytes) -> "WinternitzPubkey":
        if len(data) != PUBKEY_LENGTH:
            raise MalformedInputException(
                f"Public key must be {PUBKEY_LENGTH} bytes, got {len(data)}",
                details={"expected": PUBKEY_LENGTH, "actual": len(data)},
            )
        return cls(
            tips=tuple(
                data[i:i + HASH_LENGTH] for i in range(0, PUBKEY_LENGTH, HASH_LENGTH)
            )
        )

    def to_bytes(self) -> bytes:
        return b"".join(self.tips)

    def merklize(self) -> bytes:
        """Compress the tips into the 32-byte vault commitment."""
        return build_merkle_root(list(self.tips))


__all__ = ["WinternitzPubkey"]
