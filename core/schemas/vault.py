"""
Module 01 - Schemas
File: vault.py

Purpose: Persisted state of a vault account.

A vault is written once by Open and never updated. Its address is always
the derivation of (commitment, bump, program id); the stored copy lets
readers identify a vault without re-deriving anything.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from core.crypto.hashing import HASH_LENGTH, to_hex
from core.schemas.errors import MalformedInputException


class VaultState(BaseModel):
    """On-ledger layout: commitment (32) | bump (1)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    SIZE: ClassVar[int] = HASH_LENGTH + 1

    commitment: bytes = Field(
        ...,
        min_length=HASH_LENGTH,
        max_length=HASH_LENGTH,
        description="Merklized one-time public key authorized to unlock the vault",
    )
    bump: int = Field(..., ge=0, le=255, description="Address derivation bump")

    @classmethod
    def from_bytes(cls, data: bytes) -> "VaultState":
        if len(data) != cls.SIZE:
            raise MalformedInputException(
                f"Vault state must be {cls.SIZE} bytes, got {len(data)}",
                details={"expected": cls.SIZE, "actual": len(data)},
            )
        return cls(commitment=bytes(data[:HASH_LENGTH]), bump=data[HASH_LENGTH])

    def to_bytes(self) -> bytes:
        return self.commitment + bytes([self.bump])

    def to_display(self) -> dict[str, object]:
        return {"commitment": to_hex(self.commitment), "bump": self.bump}


__all__ = ["VaultState"]
