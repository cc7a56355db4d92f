"""
Module 04 - Merkle Tree Builder
Keeps the prover tree and the incremental accumulator in lockstep.

The builder is the only merkle surface the rest of the relayer talks to.
It owns one Prover and one IncrementalMerkle and checks after every
ingestion that both report the same root. A mismatch means the local
state can no longer produce proofs the destination chain will accept,
so it is fatal for the instance.

Concurrency:
- ingest() must be called by a single writer, in leaf-index order
- get_proof() and rendering are read-only but must not race ingest();
  concurrent readers should work on snapshot() instead
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from relay_core.crypto.hashing import DEFAULT_HASHER, MerkleHasher, ensure_digest, to_hex
from relay_core.merkle.incremental import TREE_DEPTH, IncrementalMerkle
from relay_core.merkle.proof import MerkleProof
from relay_core.merkle.prover import Prover, TreeSnapshot
from relay_core.schemas.errors import (
    BuilderProverException,
    CheckpointMismatchException,
    ProverException,
    RootMismatchException,
)

if TYPE_CHECKING:
    from relay_core.config.runtime import RuntimeConfig
    from relay_core.schemas.records import CheckpointRecord


logger = logging.getLogger(__name__)


class MerkleTreeBuilder:
    """
    Owner of the two tree representations.

    Example:
        >>> builder = MerkleTreeBuilder()
        >>> builder.ingest(message_id)
        >>> proof = builder.get_proof(leaf_index=0, root_index=builder.count() - 1)
    """

    def __init__(self, depth: int = TREE_DEPTH, hasher: MerkleHasher = DEFAULT_HASHER) -> None:
        self.depth = depth
        self.hasher = hasher
        self.prover = Prover(depth=depth, hasher=hasher)
        self.incremental = IncrementalMerkle(depth=depth, hasher=hasher)
        self._mismatch: RootMismatchException | None = None

    @classmethod
    def from_config(cls, config: "RuntimeConfig") -> "MerkleTreeBuilder":
        """Create an empty builder using the configured depth and hasher."""
        return cls(depth=config.tree.depth, hasher=config.tree.get_hasher())

    @property
    def failed(self) -> bool:
        """True once a root mismatch has been detected."""
        return self._mismatch is not None

    def count(self) -> int:
        """Number of leaves ingested, as reported by the prover."""
        return self.prover.count()

    def root(self) -> bytes:
        return self.prover.root()

    def ingest(self, leaf: bytes) -> None:
        """
        Ingest one message id into both trees.

        Raises:
            BuilderProverException: If the prover rejects the leaf (tree full);
                the incremental tree is left untouched
            RootMismatchException: If the two trees disagree afterwards
        """
        context = "When ingesting message id"
        if self._mismatch is not None:
            raise self._mismatch

        leaf = ensure_digest(leaf)
        logger.debug(f"Ingesting leaf {to_hex(leaf)} at index {self.count()}")

        try:
            self.prover.ingest(leaf)
        except ProverException as e:
            raise BuilderProverException(e, context) from e

        self.incremental.ingest(leaf)

        prover_root = self.prover.root()
        incremental_root = self.incremental.root()
        if prover_root != incremental_root:
            self._mismatch = RootMismatchException(
                prover_root=to_hex(prover_root),
                incremental_root=to_hex(incremental_root),
                count=self.count(),
            )
            logger.error(f"{context}: {self._mismatch.message}; builder state: {self}")
            raise self._mismatch

    def get_proof(self, leaf_index: int, root_index: int) -> MerkleProof:
        """
        Prove a leaf against the root the tree had with root_index + 1 leaves.

        Raises:
            BuilderProverException: If the indices are out of bounds or inverted
        """
        logger.debug(
            f"Fetching proof leaf_index={leaf_index} root_index={root_index} "
            f"prover_latest_index={self.count() - 1}"
        )
        try:
            return self.prover.prove_against_previous(leaf_index, root_index)
        except ProverException as e:
            raise BuilderProverException(e, "When fetching proof") from e

    def get_proof_for_checkpoint(self, leaf_index: int, checkpoint: "CheckpointRecord") -> MerkleProof:
        """
        Prove a leaf against a signed checkpoint.

        Raises:
            BuilderProverException: If the indices are invalid for the local tree
            CheckpointMismatchException: If the local historical root differs
                from the checkpoint's signed root
        """
        proof = self.get_proof(leaf_index, checkpoint.index)
        if proof.root != checkpoint.root_bytes():
            error = CheckpointMismatchException(
                checkpoint_root=checkpoint.root,
                local_root=to_hex(proof.root),
                index=checkpoint.index,
            )
            logger.warning(error.message)
            raise error
        return proof

    def snapshot(self) -> TreeSnapshot:
        """Immutable prover view at the current count, safe for concurrent readers."""
        return self.prover.snapshot()

    def describe(self) -> dict[str, Any]:
        """Both trees' (root, count) pairs, for logs and metrics."""
        return {
            "incremental": {
                "root": to_hex(self.incremental.root()),
                "count": self.incremental.count(),
            },
            "prover": {
                "root": to_hex(self.prover.root()),
                "count": self.prover.count(),
            },
        }

    def __str__(self) -> str:
        state = self.describe()
        incremental = state["incremental"]
        prover = state["prover"]
        return (
            "MerkleTreeBuilder { "
            f"incremental: {{ root: {incremental['root']}, size: {incremental['count']} }}, "
            f"prover: {{ root: {prover['root']}, size: {prover['count']} }} "
            "}"
        )

    __repr__ = __str__


__all__ = [
    "MerkleTreeBuilder",
]
