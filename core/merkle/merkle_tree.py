"""
Module 02 - Merkle Tree Implementation
Deterministic binary hash tree used to compress a one-time public key
into a single 32-byte commitment.

Owner: Protocol/Crypto Engineer
Module ID: M02

Canonical Commitment Rules (Hard Contracts):
1. Leaves are used as given (the chain tips are already hashes)
2. Parent hashing: parent = sha256(left + right)
3. Padding rule: Duplicate last node if odd number at any level
4. Empty leaves: build_merkle_root([]) returns sha256(b"")
5. Single leaf: root = leaf (the leaf hash itself)

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is the chain order of the public key
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import sha256


# Empty tree sentinel: sha256 of empty bytes
EMPTY_TREE_ROOT: bytes = sha256(b"")


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Parent hash is deterministic: sha256(left + right)
    """
    return sha256(left + right)


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Algorithm:
    1. If empty: return sha256(b"")
    2. If single leaf: return the leaf itself
    3. Otherwise, iteratively build levels:
       - If odd number of nodes, duplicate the last node
       - Pair adjacent nodes and compute parent hashes
       - Repeat until single root remains

    Padding Rule: Duplicate last node at each level if odd.
    Example for a 28-tip public key: 28 -> 14 -> 7 (+1) -> 4 -> 2 -> 1

    Args:
        leaves: Sequence of leaf hashes. Order matters and is preserved.

    Returns:
        32-byte Merkle root
    """
    if len(leaves) == 0:
        return EMPTY_TREE_ROOT

    if len(leaves) == 1:
        return leaves[0]

    current_level: list[bytes] = list(leaves)

    while len(current_level) > 1:
        if len(current_level) % 2 == 1:
            current_level.append(current_level[-1])

        next_level: list[bytes] = []
        for i in range(0, len(current_level), 2):
            parent = merkle_parent(current_level[i], current_level[i + 1])
            next_level.append(parent)

        current_level = next_level

    return current_level[0]


def count_parent_hashes(num_leaves: int) -> int:
    """
    Number of parent hashes build_merkle_root computes for ``num_leaves``.

    Used to price commitment compression against a compute budget.
    """
    total = 0
    n = num_leaves
    while n > 1:
        if n % 2 == 1:
            n += 1
        n = n // 2
        total += n
    return total


__all__ = [
    "EMPTY_TREE_ROOT",
    "merkle_parent",
    "build_merkle_root",
    "count_parent_hashes",
]
