"""
Module 02 - Schemas
File: errors.py

Purpose: Standard error taxonomy for the relay merkle subsystem.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the relayer core."""

    # Tree capacity & proof request errors
    TREE_FULL = "TREE_FULL"
    INVALID_PROOF_REQUEST = "INVALID_PROOF_REQUEST"

    # Consistency errors
    ROOT_MISMATCH = "ROOT_MISMATCH"
    CHECKPOINT_ROOT_MISMATCH = "CHECKPOINT_ROOT_MISMATCH"
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"

    # Collaborator errors (chain communication, persistence)
    UPSTREAM_ERROR = "UPSTREAM_ERROR"

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class RelayError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error has to cross a process boundary (CLI JSON output,
    metrics, logs) without carrying the exception object itself.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.ROOT_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


class RootMismatchError(RelayError):
    """Error model for a desync between the two tree representations."""

    code: str = Field(default=ErrorCodes.ROOT_MISMATCH)
    prover_root: str | None = Field(
        default=None,
        description="Hex root of the prover tree",
    )
    incremental_root: str | None = Field(
        default=None,
        description="Hex root of the incremental tree",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class RelayException(Exception):
    """
    Base exception for all relay merkle errors.

    Carries structured error information and can be converted
    to a RelayError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "RELAY_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> RelayError:
        """Convert this exception to a RelayError model."""
        return RelayError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# --- Prover-level errors -----------------------------------------------------

class ProverException(RelayException):
    """Base for errors raised by the tree implementations themselves."""


class TreeFullException(ProverException):
    """Raised when a tree already holds 2^depth leaves."""

    def __init__(self, depth: int, count: int) -> None:
        super().__init__(
            message=f"Merkle tree full: depth {depth} holds at most {1 << depth} leaves",
            code=ErrorCodes.TREE_FULL,
            details={"depth": depth, "count": count},
            retryable=False,
        )


class InvalidProofRequestException(ProverException):
    """Raised for out-of-bounds or inverted (leaf_index, root_index) pairs."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        root_index: int | None = None,
        count: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if leaf_index is not None:
            details["leaf_index"] = leaf_index
        if root_index is not None:
            details["root_index"] = root_index
        if count is not None:
            details["count"] = count
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PROOF_REQUEST,
            details=details,
            retryable=False,
        )


# --- Builder-level errors ----------------------------------------------------

class MerkleTreeBuilderException(RelayException):
    """Base for every error surfaced by MerkleTreeBuilder."""


class BuilderProverException(MerkleTreeBuilderException):
    """A prover error wrapped into the builder's taxonomy."""

    def __init__(self, prover_error: ProverException, context: str) -> None:
        super().__init__(
            message=f"{context}: {prover_error.message}",
            code=prover_error.code,
            details=dict(prover_error.details),
            retryable=prover_error.retryable,
        )
        self.prover_error = prover_error


class RootMismatchException(MerkleTreeBuilderException):
    """
    Raised when the prover root differs from the incremental root.

    Fatal for the builder instance: any proof generated afterwards may be
    rejected on-chain.
    """

    def __init__(self, prover_root: str, incremental_root: str, count: int) -> None:
        super().__init__(
            message=(
                f"Prover root does not match incremental root: "
                f"prover: {prover_root}, incremental: {incremental_root}"
            ),
            code=ErrorCodes.ROOT_MISMATCH,
            details={
                "prover_root": prover_root,
                "incremental_root": incremental_root,
                "count": count,
            },
            retryable=False,
        )
        self.prover_root = prover_root
        self.incremental_root = incremental_root

    def to_error_model(self) -> RootMismatchError:
        return RootMismatchError(
            message=self.message,
            details=self.details,
            prover_root=self.prover_root,
            incremental_root=self.incremental_root,
        )


class CheckpointMismatchException(MerkleTreeBuilderException):
    """Local tree is up to date but its root differs from a signed checkpoint."""

    def __init__(self, checkpoint_root: str, local_root: str, index: int) -> None:
        super().__init__(
            message=(
                f"Local root at index {index} does not match signed checkpoint: "
                f"local: {local_root}, checkpoint: {checkpoint_root}"
            ),
            code=ErrorCodes.CHECKPOINT_ROOT_MISMATCH,
            details={
                "checkpoint_root": checkpoint_root,
                "local_root": local_root,
                "index": index,
            },
            retryable=False,
        )


class UpstreamException(MerkleTreeBuilderException):
    """
    Pass-through error from a chain-communication or persistence collaborator.

    Never generated by the trees; the retry decision belongs to the caller.
    """

    def __init__(
        self,
        message: str,
        source: str,
        details: dict[str, Any] | None = None,
        retryable: bool = True,
    ) -> None:
        full_details = dict(details or {})
        full_details["source"] = source
        super().__init__(
            message=message,
            code=ErrorCodes.UPSTREAM_ERROR,
            details=full_details,
            retryable=retryable,
        )
        self.source = source


# --- Other errors ------------------------------------------------------------

class MerkleVerificationException(RelayException):
    """Exception raised when Merkle proof verification fails."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
            retryable=False,
        )


class ConfigurationException(RelayException):
    """Exception raised when runtime configuration is invalid."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = dict(details or {})
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_INVALID,
            details=full_details,
            retryable=False,
        )
