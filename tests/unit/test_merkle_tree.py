"""
Module 02 - Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py

Tests:
1. Root determinism - same leaves -> same root across runs
2. Padding correctness - odd level counts use the "duplicate last" rule
3. Pinned 28-leaf vector (the size of a one-time public key)
4. Empty leaves - build_merkle_root([]) returns sha256(b"")
5. Single leaf - root equals leaf
6. Parent-hash counting used for compute pricing
"""
import pytest

from core.crypto.hashing import sha256
from core.merkle.merkle_tree import (
    EMPTY_TREE_ROOT,
    build_merkle_root,
    count_parent_hashes,
    merkle_parent,
)


def _leaves(n: int) -> list[bytes]:
    return [sha256(bytes([i])) for i in range(n)]


class TestEmptyTree:
    """Tests for empty tree behavior."""

    def test_empty_leaves_returns_sha256_empty(self):
        """build_merkle_root([]) returns sha256(b"")."""
        assert build_merkle_root([]) == sha256(b"") == EMPTY_TREE_ROOT


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        leaf = sha256(b"single leaf")
        assert build_merkle_root([leaf]) == leaf


class TestRootDeterminism:
    """Tests for root determinism."""

    def test_same_leaves_same_root(self):
        assert build_merkle_root(_leaves(28)) == build_merkle_root(_leaves(28))

    def test_leaf_order_matters(self):
        leaves = _leaves(4)
        swapped = [leaves[1], leaves[0], leaves[2], leaves[3]]
        assert build_merkle_root(leaves) != build_merkle_root(swapped)

    def test_input_not_mutated(self):
        leaves = _leaves(7)
        copy = list(leaves)
        build_merkle_root(leaves)
        assert leaves == copy


class TestPaddingCorrectness:
    """Tests for the duplicate-last padding rule."""

    def test_padding_rule_three_leaves(self):
        a, b, c = _leaves(3)
        expected = merkle_parent(merkle_parent(a, b), merkle_parent(c, c))
        assert build_merkle_root([a, b, c]) == expected

    def test_padding_applies_at_inner_levels(self):
        """6 leaves -> 3 parents, the third is duplicated one level up."""
        leaves = _leaves(6)
        p = [merkle_parent(leaves[i], leaves[i + 1]) for i in range(0, 6, 2)]
        expected = merkle_parent(merkle_parent(p[0], p[1]), merkle_parent(p[2], p[2]))
        assert build_merkle_root(leaves) == expected

    def test_even_leaves_no_padding_needed(self):
        a, b, c, d = _leaves(4)
        expected = merkle_parent(merkle_parent(a, b), merkle_parent(c, d))
        assert build_merkle_root([a, b, c, d]) == expected


class TestPinnedVector:
    """Compatibility vector for 28-leaf commitments."""

    def test_28_leaf_root(self):
        assert build_merkle_root(_leaves(28)).hex() == (
            "991d92a3eeeb41367867d0d7547321b1281944826633c669d64bb00d13b8ee23"
        )


class TestTreeShape:
    """Tests for parent-hash counting."""

    @pytest.mark.parametrize(
        "num_leaves,parents",
        [(0, 0), (1, 0), (2, 1), (3, 3), (4, 3), (28, 28)],
    )
    def test_count_parent_hashes(self, num_leaves, parents):
        assert count_parent_hashes(num_leaves) == parents
