"""
Module 02 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    BuilderProverException,
    CheckpointMismatchException,
    ConfigurationException,
    ErrorCodes,
    InvalidProofRequestException,
    MerkleTreeBuilderException,
    MerkleVerificationException,
    ProverException,
    RelayError,
    RelayException,
    RootMismatchError,
    RootMismatchException,
    TreeFullException,
    UpstreamException,
)

# Proof and checkpoint records
from .records import (
    CheckpointRecord,
    ProofRecord,
)

__all__ = [
    # Errors
    "BuilderProverException",
    "CheckpointMismatchException",
    "ConfigurationException",
    "ErrorCodes",
    "InvalidProofRequestException",
    "MerkleTreeBuilderException",
    "MerkleVerificationException",
    "ProverException",
    "RelayError",
    "RelayException",
    "RootMismatchError",
    "RootMismatchException",
    "TreeFullException",
    "UpstreamException",
    # Records
    "CheckpointRecord",
    "ProofRecord",
]
