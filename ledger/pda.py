"""
Program-Derived Addresses

Deterministic, one-way address derivation:

    address = sha256(seed_0 || ... || seed_n || bump || program_id || "ProgramDerivedAddress")

A derived address must not be a valid ed25519 point, so no private key can
ever sign for it. ``find_program_address`` walks bumps from 255 downwards and
returns the first off-curve result.
"""

from __future__ import annotations

from typing import Sequence

import nacl.bindings

from core.crypto.hashing import hashv, to_hex
from core.schemas.errors import InvalidSeedsException


PDA_MARKER: bytes = b"ProgramDerivedAddress"
MAX_SEEDS: int = 16
MAX_SEED_LEN: int = 32


def is_on_curve(address: bytes) -> bool:
    """True if ``address`` decodes to a valid ed25519 point."""
    if len(address) != 32:
        return False
    return bool(nacl.bindings.crypto_core_ed25519_is_valid_point(address))


def _check_seeds(seeds: Sequence[bytes]) -> None:
    # the bump occupies one of the seed slots
    if len(seeds) + 1 > MAX_SEEDS:
        raise InvalidSeedsException(
            f"At most {MAX_SEEDS - 1} seeds allowed besides the bump, got {len(seeds)}",
            details={"seed_count": len(seeds)},
        )
    for i, seed in enumerate(seeds):
        if len(seed) > MAX_SEED_LEN:
            raise InvalidSeedsException(
                f"Seed {i} is {len(seed)} bytes, max {MAX_SEED_LEN}",
                details={"seed_index": i, "seed_length": len(seed)},
            )


def hash_program_address(seeds: Sequence[bytes], bump: int, program_id: bytes) -> bytes:
    """Raw derivation hash, without the off-curve check."""
    return hashv([*seeds, bytes([bump]), program_id, PDA_MARKER])


def create_program_address(seeds: Sequence[bytes], bump: int, program_id: bytes) -> bytes:
    """
    Derive the address for ``seeds`` and ``bump`` under ``program_id``.

    Raises:
        InvalidSeedsException: Too many/too long seeds, or the result is on the curve
    """
    if not 0 <= bump <= 255:
        raise InvalidSeedsException(f"Bump must be in [0, 255], got {bump}")
    _check_seeds(seeds)
    address = hash_program_address(seeds, bump, program_id)
    if is_on_curve(address):
        raise InvalidSeedsException(
            "Derived address lies on the ed25519 curve",
            details={"address": to_hex(address), "bump": bump},
        )
    return address


def find_program_address(seeds: Sequence[bytes], program_id: bytes) -> tuple[bytes, int]:
    """
    Find the canonical (highest) bump that yields an off-curve address.

    Returns:
        (address, bump)
    """
    _check_seeds(seeds)
    for bump in range(255, -1, -1):
        address = hash_program_address(seeds, bump, program_id)
        if not is_on_curve(address):
            return address, bump
    raise InvalidSeedsException("No viable bump found for seeds")


__all__ = [
    "PDA_MARKER",
    "MAX_SEEDS",
    "MAX_SEED_LEN",
    "is_on_curve",
    "hash_program_address",
    "create_program_address",
    "find_program_address",
]
