"""
Module 03 - Merkle Proof Unit Tests
Tests for relay_core/merkle/proof.py and relay_core/schemas/records.py

Tests:
1. branch_root ordering follows the leaf index bits
2. Tamper detection - tampered sibling/leaf/root/index fails verification
3. ProofRecord / CheckpointRecord validation and conversion
"""
import pytest
from pydantic import ValidationError

from relay_core.crypto.hashing import SHA256, to_hex
from relay_core.merkle.proof import (
    MerkleProof,
    assert_merkle_proof,
    branch_root,
    verify_merkle_proof,
)
from relay_core.merkle.prover import Prover
from relay_core.schemas.errors import ErrorCodes, MerkleVerificationException
from relay_core.schemas.records import CheckpointRecord, ProofRecord

from fixtures.common import make_leaves


@pytest.fixture
def proof():
    prover = Prover(depth=8)
    for leaf in make_leaves(6):
        prover.ingest(leaf)
    return prover.prove_against_previous(5, 5)


class TestBranchRoot:
    """Tests for the bottom-up fold."""

    def test_left_and_right_ordering(self):
        leaf, s0, s1 = b"\x01" * 32, b"\x02" * 32, b"\x03" * 32
        # index 2 = 0b10: left child at level 0, right child at level 1
        expected = SHA256.combine(s1, SHA256.combine(leaf, s0))
        assert branch_root(leaf, [s0, s1], 2, SHA256) == expected

    def test_empty_path_returns_leaf(self):
        leaf = b"\x05" * 32
        assert branch_root(leaf, [], 0) == leaf


class TestMerkleProofValue:
    """Tests for MerkleProof construction."""

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            MerkleProof(leaf=b"\x00" * 32, index=-1, path=(b"\x00" * 32,), root=b"\x00" * 32)

    def test_index_must_fit_depth(self):
        with pytest.raises(ValueError, match="does not fit"):
            MerkleProof(leaf=b"\x00" * 32, index=2, path=(b"\x00" * 32,), root=b"\x00" * 32)

    def test_depth_property(self, proof):
        assert proof.depth == 8

    def test_str_contains_hex_root(self, proof):
        assert to_hex(proof.root) in str(proof)


class TestTamperDetection:
    """Tampered proofs must fail verification."""

    def test_valid_proof(self, proof):
        assert verify_merkle_proof(proof)
        assert_merkle_proof(proof)

    def test_tampered_sibling(self, proof):
        path = list(proof.path)
        path[1] = b"\xff" * 32
        tampered = MerkleProof(leaf=proof.leaf, index=proof.index, path=tuple(path), root=proof.root)
        assert not verify_merkle_proof(tampered)

    def test_tampered_leaf(self, proof):
        tampered = MerkleProof(leaf=b"\xff" * 32, index=proof.index, path=proof.path, root=proof.root)
        assert not verify_merkle_proof(tampered)

    def test_tampered_index(self, proof):
        tampered = MerkleProof(leaf=proof.leaf, index=4, path=proof.path, root=proof.root)
        assert not verify_merkle_proof(tampered)

    def test_wrong_hasher(self, proof):
        assert not verify_merkle_proof(proof, SHA256)

    def test_assert_raises_with_details(self, proof):
        tampered = MerkleProof(leaf=proof.leaf, index=proof.index, path=proof.path, root=b"\x00" * 32)
        with pytest.raises(MerkleVerificationException) as exc_info:
            assert_merkle_proof(tampered)
        assert exc_info.value.code == ErrorCodes.MERKLE_PROOF_INVALID
        assert exc_info.value.details["leaf_index"] == proof.index
        assert exc_info.value.details["claimed_root"] == to_hex(b"\x00" * 32)


class TestProofRecord:
    """Tests for the JSON proof form."""

    def test_from_proof_and_back(self, proof):
        record = ProofRecord.from_proof(proof)
        assert record.leaf == to_hex(proof.leaf)
        assert len(record.path) == 8
        assert record.to_proof() == proof

    def test_json_round_trip(self, proof):
        record = ProofRecord.from_proof(proof)
        parsed = ProofRecord.model_validate_json(record.model_dump_json())
        assert parsed.to_proof() == proof

    def test_uppercase_hex_normalised(self, proof):
        record = ProofRecord.from_proof(proof)
        data = record.to_dict()
        data["root"] = "0x" + data["root"][2:].upper()
        assert ProofRecord(**data).root == record.root

    def test_rejects_short_digest(self, proof):
        data = ProofRecord.from_proof(proof).to_dict()
        data["leaf"] = "0xdeadbeef"
        with pytest.raises(ValidationError):
            ProofRecord(**data)

    def test_rejects_extra_fields(self, proof):
        data = ProofRecord.from_proof(proof).to_dict()
        data["extra"] = 1
        with pytest.raises(ValidationError):
            ProofRecord(**data)


class TestCheckpointRecord:
    """Tests for signed checkpoint records."""

    def test_count_is_index_plus_one(self):
        checkpoint = CheckpointRecord(root="0x" + "11" * 32, index=9)
        assert checkpoint.count == 10

    def test_root_bytes(self):
        root = b"\x22" * 32
        checkpoint = CheckpointRecord.from_root(root, 3)
        assert checkpoint.root_bytes() == root
        assert checkpoint.root == to_hex(root)

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            CheckpointRecord(root="0x" + "11" * 32, index=-1)

    def test_bad_root_rejected(self):
        with pytest.raises(ValidationError):
            CheckpointRecord(root="11" * 32, index=0)
