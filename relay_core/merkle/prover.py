"""
Module 03 - Full Prover Tree
Merkle tree retaining every completed subtree, for historical proofs.

Validators sign checkpoints over a tree size fixed at signing time while
the local tree keeps growing. A proof submitted later must validate
against the signed (possibly stale) root, so the prover answers queries
for any past leaf count, not just the latest one.

Storage:
- levels[h][j] is the digest of leaves [j * 2^h, (j + 1) * 2^h)
- a digest is appended to levels[h] the moment its subtree completes
- completed subtrees never change afterwards

Historical Queries:
A TreeSnapshot fixes a leaf count C. At count C a subtree is either
complete (read from levels), empty (the hasher's zero digest for that
height) or straddles the frontier (recomputed from its two children).
Only one subtree per height straddles the frontier, so a root or a
proof costs O(depth) combine calls.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from relay_core.crypto.hashing import DEFAULT_HASHER, MerkleHasher, ensure_digest, to_hex
from relay_core.merkle.incremental import TREE_DEPTH
from relay_core.merkle.proof import MerkleProof
from relay_core.schemas.errors import InvalidProofRequestException, TreeFullException


@dataclass(frozen=True)
class TreeSnapshot:
    """
    Immutable view of the prover tree at a fixed leaf count.

    The levels lists may be shared with a live Prover. Appending leaves
    only adds entries beyond this snapshot's count, so every answer is
    fixed at construction time.
    """
    depth: int
    hasher: MerkleHasher
    levels: Sequence[Sequence[bytes]]
    count: int

    def __post_init__(self) -> None:
        if not 0 <= self.count <= (1 << self.depth):
            raise ValueError(f"Snapshot count {self.count} out of range for depth {self.depth}")
        if self.count > len(self.levels[0]):
            raise ValueError(
                f"Snapshot count {self.count} exceeds {len(self.levels[0])} stored leaves"
            )

    def root(self) -> bytes:
        """Root of the tree as it stood with exactly `count` leaves."""
        return subtree_digest(self, self.depth, 0)

    def leaf(self, index: int) -> bytes:
        if not 0 <= index < self.count:
            raise IndexError(f"Leaf index {index} out of range for {self.count} leaves")
        return self.levels[0][index]

    def prove(self, leaf_index: int) -> MerkleProof:
        """
        Authentication path for a leaf at this snapshot's count.

        Raises:
            InvalidProofRequestException: If leaf_index is not below count
        """
        if not 0 <= leaf_index < self.count:
            raise InvalidProofRequestException(
                f"Leaf index {leaf_index} out of range for tree of {self.count} leaves",
                leaf_index=leaf_index,
                count=self.count,
            )
        path = tuple(
            subtree_digest(self, height, (leaf_index >> height) ^ 1)
            for height in range(self.depth)
        )
        return MerkleProof(
            leaf=self.levels[0][leaf_index],
            index=leaf_index,
            path=path,
            root=self.root(),
        )


def subtree_digest(snapshot: TreeSnapshot, height: int, position: int) -> bytes:
    """
    Digest of the subtree at (height, position) as of the snapshot's count.

    Pure function of the snapshot: completed subtrees come from storage,
    subtrees past the frontier are empty-subtree digests, and the one
    straddling the frontier is rebuilt from its children.
    """
    first = position << height
    end = first + (1 << height)
    if end <= snapshot.count:
        return snapshot.levels[height][position]
    if first >= snapshot.count:
        return snapshot.hasher.zero_hashes(snapshot.depth)[height]
    left = subtree_digest(snapshot, height - 1, position * 2)
    right = subtree_digest(snapshot, height - 1, position * 2 + 1)
    return snapshot.hasher.combine(left, right)


class Prover:
    """
    Full merkle tree answering proofs against current and past roots.

    Example:
        >>> prover = Prover(depth=4)
        >>> for leaf in leaves:
        ...     prover.ingest(leaf)
        >>> proof = prover.prove_against_previous(leaf_index=0, root_index=2)
    """

    def __init__(self, depth: int = TREE_DEPTH, hasher: MerkleHasher = DEFAULT_HASHER) -> None:
        if depth < 1:
            raise ValueError(f"Tree depth must be positive, got {depth}")
        self.depth = depth
        self.hasher = hasher
        self._levels: list[list[bytes]] = [[] for _ in range(depth + 1)]
        self._root_cache: tuple[int, bytes] | None = None

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    def count(self) -> int:
        return len(self._levels[0])

    def leaf(self, index: int) -> bytes:
        return self._levels[0][index]

    def ingest(self, leaf: bytes) -> None:
        """
        Append a leaf and record every subtree it completes.

        Raises:
            TreeFullException: If the tree already holds 2^depth leaves
        """
        leaf = ensure_digest(leaf)
        count = self.count()
        if count >= self.capacity:
            raise TreeFullException(self.depth, count)

        self._levels[0].append(leaf)
        position = count
        height = 0
        # A right child completes its parent.
        while position & 1:
            level = self._levels[height]
            parent = self.hasher.combine(level[position - 1], level[position])
            self._levels[height + 1].append(parent)
            position >>= 1
            height += 1

    def snapshot(self, count: int | None = None) -> TreeSnapshot:
        """
        Immutable view of the tree at a historical (or the current) count.

        Raises:
            InvalidProofRequestException: If count exceeds the current count
        """
        current = self.count()
        if count is None:
            count = current
        if not 0 <= count <= current:
            raise InvalidProofRequestException(
                f"Cannot snapshot tree at count {count}, current count is {current}",
                count=current,
            )
        return TreeSnapshot(depth=self.depth, hasher=self.hasher, levels=self._levels, count=count)

    def root(self) -> bytes:
        """Current (latest) root."""
        count = self.count()
        if self._root_cache is None or self._root_cache[0] != count:
            self._root_cache = (count, self.snapshot(count).root())
        return self._root_cache[1]

    def prove(self, leaf_index: int) -> MerkleProof:
        """Proof against the current root."""
        return self.prove_against_previous(leaf_index, self.count() - 1)

    def prove_against_previous(self, leaf_index: int, root_index: int) -> MerkleProof:
        """
        Prove a leaf against the root the tree had with root_index + 1 leaves.

        root_index is zero-based: it is the index of the last leaf covered
        by the checkpoint, i.e. the leaf count at signing time minus one.

        Raises:
            InvalidProofRequestException: Unless 0 <= leaf_index <= root_index < count()
        """
        count = self.count()
        if leaf_index < 0 or root_index < 0:
            raise InvalidProofRequestException(
                f"Indices must be non-negative, got leaf_index={leaf_index}, root_index={root_index}",
                leaf_index=leaf_index,
                root_index=root_index,
                count=count,
            )
        if leaf_index > root_index:
            raise InvalidProofRequestException(
                f"Leaf index {leaf_index} is past root index {root_index}",
                leaf_index=leaf_index,
                root_index=root_index,
                count=count,
            )
        if root_index >= count:
            raise InvalidProofRequestException(
                f"Root index {root_index} not yet ingested, tree holds {count} leaves",
                leaf_index=leaf_index,
                root_index=root_index,
                count=count,
            )
        return self.snapshot(root_index + 1).prove(leaf_index)

    def __repr__(self) -> str:
        return f"Prover(root={to_hex(self.root())}, count={self.count()}, depth={self.depth})"


__all__ = [
    "TreeSnapshot",
    "subtree_digest",
    "Prover",
]
