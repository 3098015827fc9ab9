"""
Module 03 - Winternitz Reference Signer
File: privkey.py

Key generation and signing for the one-time scheme. Vault programs never
see private keys; this signer exists so that clients, tooling and tests
produce keys with exactly the chain function and digit mapping that
verification expects.

A private key must sign at most one message. Signing reveals chain values
from which any message with digits >= the signed ones can be forged.
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass

from core.crypto.hashing import advance, sha256
from core.schemas.errors import MalformedInputException
from core.winternitz.digits import message_digits
from core.winternitz.params import CHAIN_LENGTH, HASH_LENGTH, SCALAR_COUNT
from core.winternitz.pubkey import WinternitzPubkey
from core.winternitz.signature import WinternitzSignature


@dataclass(frozen=True)
class WinternitzPrivkey:
    """
    Chain seeds of a one-time key.

    Attributes:
        scalars: SCALAR_COUNT secret 32-byte chain starts
    """
    scalars: tuple[bytes, ...]

    def __post_init__(self) -> None:
        if len(self.scalars) != SCALAR_COUNT:
            raise MalformedInputException(
                f"Private key must have {SCALAR_COUNT} scalars, got {len(self.scalars)}"
            )
        if any(len(s) != HASH_LENGTH for s in self.scalars):
            raise MalformedInputException(
                f"Private key scalars must be {HASH_LENGTH} bytes"
            )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(scalars=<{SCALAR_COUNT} redacted>)"

    @classmethod
    def generate(cls) -> "WinternitzPrivkey":
        """Generate a fresh key from the OS CSPRNG."""
        return cls(
            scalars=tuple(secrets.token_bytes(HASH_LENGTH) for _ in range(SCALAR_COUNT))
        )

    @classmethod
    def from_seed(cls, seed: bytes) -> "WinternitzPrivkey":
        """
        Deterministically expand a master seed: scalar[i] = sha256(seed || i).

        Args:
            seed: Master secret, any length
        """
        return cls(scalars=tuple(sha256(seed + bytes([i])) for i in range(SCALAR_COUNT)))

    def pubkey(self) -> WinternitzPubkey:
        """Walk every chain to its tip."""
        return WinternitzPubkey(
            tips=tuple(advance(s, CHAIN_LENGTH) for s in self.scalars)
        )

    def commitment(self) -> bytes:
        """Merklized public key, the value a vault is opened with."""
        return self.pubkey().merklize()

    def sign(self, message: bytes) -> WinternitzSignature:
        """Reveal each chain at the position given by the message digits."""
        digits = message_digits(message)
        return WinternitzSignature(
            elements=tuple(advance(s, d) for s, d in zip(self.scalars, digits))
        )


__all__ = ["WinternitzPrivkey"]
