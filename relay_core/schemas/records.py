"""
Module 02 - Schemas
File: records.py

Purpose: JSON-facing forms of proofs and checkpoints.
Digests are carried as 0x-prefixed hex strings and validated to be
exactly 32 bytes; conversion to the in-memory MerkleProof is lossless.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from relay_core.crypto.hashing import digest_from_hex, to_hex
from relay_core.merkle.proof import MerkleProof


def _check_digest_hex(value: str) -> str:
    digest_from_hex(value)
    return value.lower()


class CheckpointRecord(BaseModel):
    """
    A validator-signed (root, index) pair.

    index is zero-based: the index of the last leaf covered by the root,
    i.e. the leaf count at signing time minus one.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = Field(
        ...,
        description="Signed merkle root (0x-prefixed hex)",
    )
    index: int = Field(
        ...,
        ge=0,
        description="Index of the last leaf covered by the root",
    )

    @field_validator("root")
    @classmethod
    def _validate_root(cls, value: str) -> str:
        return _check_digest_hex(value)

    @property
    def count(self) -> int:
        """Leaf count the root commits to."""
        return self.index + 1

    def root_bytes(self) -> bytes:
        return digest_from_hex(self.root)

    @classmethod
    def from_root(cls, root: bytes, index: int) -> "CheckpointRecord":
        return cls(root=to_hex(root), index=index)


class ProofRecord(BaseModel):
    """Serialized inclusion proof, as handed to the submission layer."""

    model_config = ConfigDict(extra="forbid")

    leaf: str = Field(..., description="Leaf digest (0x-prefixed hex)")
    index: int = Field(..., ge=0, description="Leaf index")
    path: list[str] = Field(
        ...,
        min_length=1,
        description="Sibling digests, leaf level first",
    )
    root: str = Field(..., description="Root the path folds to")

    @field_validator("leaf", "root")
    @classmethod
    def _validate_digest(cls, value: str) -> str:
        return _check_digest_hex(value)

    @field_validator("path")
    @classmethod
    def _validate_path(cls, value: list[str]) -> list[str]:
        return [_check_digest_hex(item) for item in value]

    @classmethod
    def from_proof(cls, proof: MerkleProof) -> "ProofRecord":
        return cls(
            leaf=to_hex(proof.leaf),
            index=proof.index,
            path=[to_hex(sibling) for sibling in proof.path],
            root=to_hex(proof.root),
        )

    def to_proof(self) -> MerkleProof:
        return MerkleProof(
            leaf=digest_from_hex(self.leaf),
            index=self.index,
            path=tuple(digest_from_hex(sibling) for sibling in self.path),
            root=digest_from_hex(self.root),
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
