"""
Module 02 - Merkle Tree and Commitments
Deterministic commitment-tree construction ("merklization").

Owner: Protocol/Crypto Engineer
Module ID: M02

Canonical Commitment Rules:
1. Parent hashing: sha256(left + right)
2. Padding: Duplicate last node if odd number at any level
3. Empty tree: sha256(b"")
4. Single leaf: root = leaf

Usage:
    from core.merkle import build_merkle_root

    commitment = build_merkle_root(list(pubkey.tips))
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    merkle_parent,
    build_merkle_root,
    count_parent_hashes,
)


__all__ = [
    "EMPTY_TREE_ROOT",
    "merkle_parent",
    "build_merkle_root",
    "count_parent_hashes",
]
