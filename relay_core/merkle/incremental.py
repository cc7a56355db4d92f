"""
Module 03 - Incremental Merkle Accumulator
Append-only accumulator mirroring the on-chain tree.

State is one branch digest per level plus the leaf count, so space and
per-leaf time are both O(depth). The root is a pure function of
(branch, count) and the hasher's empty-subtree digests.

Update Rule:
- The level a new leaf settles at is the number of trailing one bits
  of the count before the append. Every filled level below it is merged
  into the new node on the way up.
- With exactly 2^depth leaves every level has been merged away; the
  completed tree digest is kept separately.
"""
from __future__ import annotations

from relay_core.crypto.hashing import DEFAULT_HASHER, MerkleHasher, ensure_digest, to_hex
from relay_core.schemas.errors import TreeFullException


# Depth of the on-chain accumulator
TREE_DEPTH = 32


def trailing_ones(value: int) -> int:
    """Number of consecutive set bits starting at bit 0."""
    return ((value ^ (value + 1)).bit_length()) - 1


class IncrementalMerkle:
    """
    Compact append-only merkle accumulator.

    Example:
        >>> tree = IncrementalMerkle(depth=4)
        >>> tree.ingest(b"\\x01" * 32)
        >>> tree.count()
        1
    """

    def __init__(self, depth: int = TREE_DEPTH, hasher: MerkleHasher = DEFAULT_HASHER) -> None:
        if depth < 1:
            raise ValueError(f"Tree depth must be positive, got {depth}")
        self.depth = depth
        self.hasher = hasher
        self._zeros = hasher.zero_hashes(depth)
        self._branch: list[bytes] = list(self._zeros[:depth])
        self._count = 0
        self._full_root: bytes | None = None

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    @property
    def branch(self) -> tuple[bytes, ...]:
        """Copy of the branch array, level 0 first."""
        return tuple(self._branch)

    def count(self) -> int:
        return self._count

    def ingest(self, leaf: bytes) -> None:
        """
        Append a leaf.

        Raises:
            TreeFullException: If the tree already holds 2^depth leaves
        """
        leaf = ensure_digest(leaf)
        if self._count >= self.capacity:
            raise TreeFullException(self.depth, self._count)

        level = trailing_ones(self._count)
        node = leaf
        for i in range(level):
            node = self.hasher.combine(self._branch[i], node)

        if level < self.depth:
            self._branch[level] = node
        else:
            self._full_root = node
        self._count += 1

    def root(self) -> bytes:
        """Root of the depth-D tree, padded with empty leaves."""
        if self._full_root is not None:
            return self._full_root

        node = self._zeros[0]
        for i in range(self.depth):
            if (self._count >> i) & 1:
                node = self.hasher.combine(self._branch[i], node)
            else:
                node = self.hasher.combine(node, self._zeros[i])
        return node

    def __repr__(self) -> str:
        return f"IncrementalMerkle(root={to_hex(self.root())}, count={self._count}, depth={self.depth})"


__all__ = [
    "TREE_DEPTH",
    "IncrementalMerkle",
    "trailing_ones",
]
