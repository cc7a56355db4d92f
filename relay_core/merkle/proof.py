"""
Module 03 - Merkle Proofs
Inclusion proof value and bottom-up verification.

A proof carries one sibling per tree level (exactly `depth` entries,
leaf level first). At level i the leaf's ancestor is a left child when
bit i of the leaf index is 0 and a right child otherwise.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from relay_core.crypto.hashing import DEFAULT_HASHER, MerkleHasher, to_hex
from relay_core.schemas.errors import MerkleVerificationException


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf against a (possibly historical) root.

    Attributes:
        leaf: The leaf digest being proven (32 bytes)
        index: The 0-based index of the leaf
        path: Sibling digests from leaf level to just below the root
        root: The root this proof folds to
    """
    leaf: bytes
    index: int
    path: tuple[bytes, ...]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        if self.index >> len(self.path):
            raise ValueError(
                f"Leaf index {self.index} does not fit a path of depth {len(self.path)}"
            )

    @property
    def depth(self) -> int:
        return len(self.path)

    def __str__(self) -> str:
        return (
            f"MerkleProof {{ index: {self.index}, leaf: {to_hex(self.leaf)}, "
            f"root: {to_hex(self.root)}, depth: {self.depth} }}"
        )


def branch_root(
    leaf: bytes,
    path: Sequence[bytes],
    index: int,
    hasher: MerkleHasher = DEFAULT_HASHER,
) -> bytes:
    """
    Fold a leaf with its authentication path into a root.

    Algorithm:
    1. Start with the leaf digest
    2. For each sibling at level i (bottom-up):
       - bit i of index is 0: node = H(node, sibling)
       - bit i of index is 1: node = H(sibling, node)
    3. The final node is the root
    """
    node = leaf
    for level, sibling in enumerate(path):
        if (index >> level) & 1:
            node = hasher.combine(sibling, node)
        else:
            node = hasher.combine(node, sibling)
    return node


def verify_merkle_proof(proof: MerkleProof, hasher: MerkleHasher = DEFAULT_HASHER) -> bool:
    """Check that folding the proof's leaf and path reproduces its root."""
    return branch_root(proof.leaf, proof.path, proof.index, hasher) == proof.root


def assert_merkle_proof(proof: MerkleProof, hasher: MerkleHasher = DEFAULT_HASHER) -> None:
    """
    Verify a proof, raising on failure.

    Raises:
        MerkleVerificationException: If the fold does not reproduce the root
    """
    computed = branch_root(proof.leaf, proof.path, proof.index, hasher)
    if computed != proof.root:
        raise MerkleVerificationException(
            f"Proof for leaf {proof.index} folds to {to_hex(computed)}, "
            f"expected {to_hex(proof.root)}",
            leaf_index=proof.index,
            details={"computed_root": to_hex(computed), "claimed_root": to_hex(proof.root)},
        )


__all__ = [
    "MerkleProof",
    "branch_root",
    "verify_merkle_proof",
    "assert_merkle_proof",
]
