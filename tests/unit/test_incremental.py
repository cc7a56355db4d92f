"""
Module 03 - Incremental Accumulator Unit Tests
Tests for relay_core/merkle/incremental.py

Tests:
1. Empty root equals the empty-subtree digest at full depth
2. Root matches a naive padded tree after every ingestion
3. Branch update level follows the count's trailing one bits
4. Capacity is exactly 2^depth leaves
"""
import pytest

from relay_core.crypto.hashing import KECCAK256, SHA256
from relay_core.merkle.incremental import IncrementalMerkle, TREE_DEPTH, trailing_ones
from relay_core.schemas.errors import ErrorCodes, TreeFullException

from fixtures.common import make_leaves, naive_root


class TestTrailingOnes:
    """Tests for the bit scan driving the update level."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0, 0), (1, 1), (2, 0), (3, 2), (5, 1), (7, 3), (8, 0), (15, 4), (2**32 - 1, 32)],
    )
    def test_trailing_ones(self, value, expected):
        assert trailing_ones(value) == expected


class TestEmptyTree:
    """Tests for a freshly created accumulator."""

    def test_default_depth(self):
        assert IncrementalMerkle().depth == TREE_DEPTH == 32

    def test_empty_count(self):
        assert IncrementalMerkle().count() == 0

    def test_empty_root_is_zero_subtree(self):
        tree = IncrementalMerkle(depth=32)
        assert tree.root() == KECCAK256.zero_hashes(32)[32]

    def test_empty_root_known_value(self):
        """Empty depth-32 keccak tree root used by the on-chain mailbox."""
        assert IncrementalMerkle().root().hex() == (
            "27ae5ba08d7291c96c8cbddcc148bf48a6d68c7974b94356f53754ef6171d757"
        )

    def test_invalid_depth(self):
        with pytest.raises(ValueError):
            IncrementalMerkle(depth=0)


class TestIngest:
    """Tests for leaf ingestion."""

    def test_root_matches_naive_each_step(self):
        leaves = make_leaves(17)
        tree = IncrementalMerkle(depth=32)
        for i, leaf in enumerate(leaves):
            tree.ingest(leaf)
            assert tree.count() == i + 1
            assert tree.root() == naive_root(leaves[: i + 1], 32)

    def test_single_leaf_small_tree(self):
        leaf = b"\x11" * 32
        tree = IncrementalMerkle(depth=1, hasher=SHA256)
        tree.ingest(leaf)
        assert tree.root() == SHA256.combine(leaf, b"\x00" * 32)

    def test_branch_slots_follow_count_bits(self):
        """After 3 leaves: branch[0] = leaf 2, branch[1] = H(leaf 0, leaf 1)."""
        a, b, c = make_leaves(3)
        tree = IncrementalMerkle(depth=4)
        for leaf in (a, b, c):
            tree.ingest(leaf)
        assert tree.branch[0] == c
        assert tree.branch[1] == KECCAK256.combine(a, b)

    def test_root_idempotent(self):
        tree = IncrementalMerkle(depth=8)
        for leaf in make_leaves(5):
            tree.ingest(leaf)
        assert tree.root() == tree.root()
        assert tree.count() == tree.count() == 5

    def test_rejects_non_digest(self):
        tree = IncrementalMerkle(depth=4)
        with pytest.raises(ValueError):
            tree.ingest(b"short")
        assert tree.count() == 0

    def test_different_hashers_different_roots(self):
        keccak_tree = IncrementalMerkle(depth=4, hasher=KECCAK256)
        sha_tree = IncrementalMerkle(depth=4, hasher=SHA256)
        for leaf in make_leaves(3):
            keccak_tree.ingest(leaf)
            sha_tree.ingest(leaf)
        assert keccak_tree.root() != sha_tree.root()


class TestCapacity:
    """Tests for the 2^depth leaf bound."""

    def test_full_tree_root(self):
        leaves = make_leaves(4)
        tree = IncrementalMerkle(depth=2)
        for leaf in leaves:
            tree.ingest(leaf)
        expected = KECCAK256.combine(
            KECCAK256.combine(leaves[0], leaves[1]),
            KECCAK256.combine(leaves[2], leaves[3]),
        )
        assert tree.count() == 4
        assert tree.root() == expected

    def test_overflow_raises_tree_full(self):
        leaves = make_leaves(5)
        tree = IncrementalMerkle(depth=2)
        for leaf in leaves[:4]:
            tree.ingest(leaf)
        root_before = tree.root()
        branch_before = tree.branch

        with pytest.raises(TreeFullException) as exc_info:
            tree.ingest(leaves[4])

        assert exc_info.value.code == ErrorCodes.TREE_FULL
        assert tree.count() == 4
        assert tree.root() == root_before
        assert tree.branch == branch_before
