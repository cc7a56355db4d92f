"""
Core digest utilities.

Module 01 provides hashing utilities and the pluggable merkle hasher.
"""
from .hashing import (
    DIGEST_SIZE,
    ZERO_DIGEST,
    sha256,
    keccak256,
    to_hex,
    from_hex,
    digest_from_hex,
    ensure_digest,
    MerkleHasher,
    KECCAK256,
    SHA256,
    DEFAULT_HASHER,
    get_hasher,
    available_hashers,
)

__all__ = [
    "DIGEST_SIZE",
    "ZERO_DIGEST",
    "sha256",
    "keccak256",
    "to_hex",
    "from_hex",
    "digest_from_hex",
    "ensure_digest",
    "MerkleHasher",
    "KECCAK256",
    "SHA256",
    "DEFAULT_HASHER",
    "get_hasher",
    "available_hashers",
]
