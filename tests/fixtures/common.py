"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Message-id leaves
- Populated MerkleTreeBuilder instances
- An independent reference root (naive padded tree) to check against
"""

from typing import Sequence

from relay_core.crypto.hashing import DEFAULT_HASHER, MerkleHasher
from relay_core.merkle.builder import MerkleTreeBuilder


# =============================================================================
# Leaf Factories
# =============================================================================

def make_leaf(i: int, hasher: MerkleHasher = DEFAULT_HASHER) -> bytes:
    """Deterministic 32-byte message id for leaf i."""
    return hasher.digest(f"message-{i}".encode("utf-8"))


def make_leaves(n: int, hasher: MerkleHasher = DEFAULT_HASHER) -> list[bytes]:
    """Deterministic leaves 0..n-1."""
    return [make_leaf(i, hasher) for i in range(n)]


# =============================================================================
# Builder Factory
# =============================================================================

def make_builder(
    n: int = 0,
    depth: int = 32,
    hasher: MerkleHasher = DEFAULT_HASHER,
) -> MerkleTreeBuilder:
    """Create a builder with n leaves already ingested."""
    builder = MerkleTreeBuilder(depth=depth, hasher=hasher)
    for leaf in make_leaves(n, hasher):
        builder.ingest(leaf)
    return builder


# =============================================================================
# Reference Implementation
# =============================================================================

def naive_root(
    leaves: Sequence[bytes],
    depth: int,
    hasher: MerkleHasher = DEFAULT_HASHER,
) -> bytes:
    """
    Root of a depth-D tree padded with empty leaves, built level by level.

    Independent of the accumulator and prover code paths: it only relies
    on the hasher's zero digests.
    """
    zeros = hasher.zero_hashes(depth)
    if not leaves:
        return zeros[depth]

    level = list(leaves)
    for height in range(depth):
        if len(level) % 2 == 1:
            level.append(zeros[height])
        level = [
            hasher.combine(level[i], level[i + 1])
            for i in range(0, len(level), 2)
        ]
    assert len(level) == 1
    return level[0]
