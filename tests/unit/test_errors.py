"""
Module 02 - Error Taxonomy Unit Tests
Tests for relay_core/schemas/errors.py
"""
import pytest

from relay_core.schemas.errors import (
    BuilderProverException,
    ConfigurationException,
    ErrorCodes,
    MerkleVerificationException,
    RelayError,
    TreeFullException,
    UpstreamException,
)


class TestDetails:
    """Exceptions must not mutate details passed in by the caller."""

    def test_upstream_copies_details(self):
        details = {"path": "leaves.json"}
        error = UpstreamException("read failed", source="persistence", details=details)
        assert details == {"path": "leaves.json"}
        assert error.details == {"path": "leaves.json", "source": "persistence"}

    def test_verification_copies_details(self):
        details = {"claimed_root": "0x00"}
        error = MerkleVerificationException("bad proof", leaf_index=3, details=details)
        assert "leaf_index" not in details
        assert error.details["leaf_index"] == 3

    def test_configuration_copies_details(self):
        details = {"value": 5}
        error = ConfigurationException("bad value", field_path="tree.depth", details=details)
        assert "field_path" not in details
        assert error.details == {"value": 5, "field_path": "tree.depth"}

    def test_shared_details_not_leaked_between_errors(self):
        shared = {}
        UpstreamException("a", source="chain", details=shared)
        second = UpstreamException("b", source="persistence", details=shared)
        assert shared == {}
        assert second.details["source"] == "persistence"


class TestErrorModels:
    """Tests for conversion to the pydantic error model."""

    def test_to_error_model(self):
        error = UpstreamException("timeout", source="chain", retryable=True)
        model = error.to_error_model()
        assert isinstance(model, RelayError)
        assert model.code == ErrorCodes.UPSTREAM_ERROR
        assert model.retryable
        assert model.details["source"] == "chain"

    def test_wrapped_prover_error_keeps_code(self):
        inner = TreeFullException(depth=2, count=4)
        wrapped = BuilderProverException(inner, "When ingesting message id")
        assert wrapped.code == ErrorCodes.TREE_FULL
        assert wrapped.message.startswith("When ingesting message id: ")
        assert wrapped.details == inner.details
        assert wrapped.details is not inner.details

    def test_error_model_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            RelayError(code="X", message="m", unexpected=True)
