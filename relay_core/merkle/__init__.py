"""
Modules 03/04 - Merkle Accumulator and Proof Builder

This package provides:
- IncrementalMerkle: O(depth) append-only accumulator mirroring the on-chain tree
- Prover / TreeSnapshot: full tree answering proofs against historical roots
- MerkleTreeBuilder: keeps both trees consistent, the relayer-facing surface
- MerkleProof, branch_root, verify_merkle_proof: proof value and verification

Usage:
    from relay_core.merkle import MerkleTreeBuilder, verify_merkle_proof

    builder = MerkleTreeBuilder()
    for message_id in message_ids:
        builder.ingest(message_id)

    # Prove leaf 3 against a checkpoint signed when the tree held 10 leaves
    proof = builder.get_proof(leaf_index=3, root_index=9)
    assert verify_merkle_proof(proof, builder.hasher)
"""
from .incremental import (
    TREE_DEPTH,
    IncrementalMerkle,
    trailing_ones,
)

from .proof import (
    MerkleProof,
    branch_root,
    verify_merkle_proof,
    assert_merkle_proof,
)

from .prover import (
    Prover,
    TreeSnapshot,
    subtree_digest,
)

from .builder import (
    MerkleTreeBuilder,
)


__all__ = [
    # Constants
    "TREE_DEPTH",
    # Trees
    "IncrementalMerkle",
    "Prover",
    "TreeSnapshot",
    "MerkleTreeBuilder",
    # Proofs
    "MerkleProof",
    "branch_root",
    "verify_merkle_proof",
    "assert_merkle_proof",
    # Helpers
    "subtree_digest",
    "trailing_ones",
]
