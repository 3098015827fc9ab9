"""
Module 01 - Schemas
File: instructions.py

Purpose: Wire layout of vault instructions.

    | Discriminator | Name  | Payload                                          |
    |---------------|-------|--------------------------------------------------|
    | 0             | Open  | commitment (32) | bump (1)                       |
    | 1             | Split | signature (896) | bump (1) | amount (u64 LE, 8)  |
    | 2             | Close | signature (896) | bump (1)                       |

Payload lengths are exact. Anything else is rejected as malformed before
any cryptography runs.
"""

from enum import IntEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from core.crypto.hashing import HASH_LENGTH
from core.schemas.errors import MalformedInputException
from core.winternitz.params import SIGNATURE_LENGTH


AMOUNT_LENGTH: int = 8
BUMP_LENGTH: int = 1
U64_MAX: int = 2**64 - 1


class VaultInstruction(IntEnum):
    """First byte of every vault instruction."""

    OPEN = 0
    SPLIT = 1
    CLOSE = 2


def _check_length(name: str, payload: bytes, expected: int) -> None:
    if len(payload) != expected:
        raise MalformedInputException(
            f"{name} payload must be {expected} bytes, got {len(payload)}",
            details={"instruction": name, "expected": expected, "actual": len(payload)},
        )


class OpenVaultData(BaseModel):
    """Open: establish a vault identity from a commitment and bump."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    LENGTH: ClassVar[int] = HASH_LENGTH + BUMP_LENGTH

    commitment: bytes = Field(
        ...,
        min_length=HASH_LENGTH,
        max_length=HASH_LENGTH,
        description="Merklized one-time public key",
    )
    bump: int = Field(..., ge=0, le=255, description="Address derivation bump")

    @classmethod
    def from_bytes(cls, payload: bytes) -> "OpenVaultData":
        _check_length("Open", payload, cls.LENGTH)
        return cls(commitment=bytes(payload[:HASH_LENGTH]), bump=payload[HASH_LENGTH])

    def to_bytes(self) -> bytes:
        return self.commitment + bytes([self.bump])


class SplitVaultData(BaseModel):
    """Split: pay ``amount`` to one recipient and the rest to another."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    LENGTH: ClassVar[int] = SIGNATURE_LENGTH + BUMP_LENGTH + AMOUNT_LENGTH

    signature: bytes = Field(
        ...,
        min_length=SIGNATURE_LENGTH,
        max_length=SIGNATURE_LENGTH,
        description="One-time signature over the split message",
    )
    bump: int = Field(..., ge=0, le=255)
    amount: int = Field(..., ge=0, le=U64_MAX, description="Lamports for the split recipient")

    @classmethod
    def from_bytes(cls, payload: bytes) -> "SplitVaultData":
        _check_length("Split", payload, cls.LENGTH)
        bump_at = SIGNATURE_LENGTH
        return cls(
            signature=bytes(payload[:bump_at]),
            bump=payload[bump_at],
            amount=int.from_bytes(payload[bump_at + 1:], "little"),
        )

    @property
    def amount_bytes(self) -> bytes:
        return self.amount.to_bytes(AMOUNT_LENGTH, "little")

    def to_bytes(self) -> bytes:
        return self.signature + bytes([self.bump]) + self.amount_bytes


class CloseVaultData(BaseModel):
    """Close: pay the whole balance to a refund recipient."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    LENGTH: ClassVar[int] = SIGNATURE_LENGTH + BUMP_LENGTH

    signature: bytes = Field(
        ...,
        min_length=SIGNATURE_LENGTH,
        max_length=SIGNATURE_LENGTH,
        description="One-time signature over the refund address",
    )
    bump: int = Field(..., ge=0, le=255)

    @classmethod
    def from_bytes(cls, payload: bytes) -> "CloseVaultData":
        _check_length("Close", payload, cls.LENGTH)
        return cls(
            signature=bytes(payload[:SIGNATURE_LENGTH]),
            bump=payload[SIGNATURE_LENGTH],
        )

    def to_bytes(self) -> bytes:
        return self.signature + bytes([self.bump])


__all__ = [
    "AMOUNT_LENGTH",
    "BUMP_LENGTH",
    "U64_MAX",
    "VaultInstruction",
    "OpenVaultData",
    "SplitVaultData",
    "CloseVaultData",
]
