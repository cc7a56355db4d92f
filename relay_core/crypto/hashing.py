"""
Module 01 - Digest Primitives
Fixed-width digest functions and hex helpers for the relay accumulator.

This module provides:
- SHA-256 and Keccak-256 hashing of raw bytes
- MerkleHasher: a named two-to-one digest function with empty-subtree digests
- Hex encoding/decoding with 0x prefix

Digest Rules (Hard Contracts):
1. Every digest is exactly 32 bytes
2. Parent hashing: parent = H(left + right)
3. Empty leaf: 32 zero bytes
4. Empty subtree of height h+1: H(Z[h] + Z[h])

The on-chain accumulator uses Keccak-256, so it is the default hasher.
SHA-256 is kept for local tooling and tests.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from eth_utils import keccak


# Width of every leaf and node digest in bytes
DIGEST_SIZE = 32

# Digest of an empty leaf slot
ZERO_DIGEST: bytes = b"\x00" * DIGEST_SIZE


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash of raw bytes (the EVM hash, not NIST SHA3-256).

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def digest_from_hex(hex_string: str) -> bytes:
    """Decode a 0x-prefixed hex string that must hold exactly one digest."""
    return ensure_digest(from_hex(hex_string), "digest")


def ensure_digest(value: bytes, name: str = "leaf") -> bytes:
    """
    Check that a value is a 32-byte digest.

    Raises:
        TypeError: If value is not bytes-like
        ValueError: If value is not exactly DIGEST_SIZE bytes
    """
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")
    if len(value) != DIGEST_SIZE:
        raise ValueError(
            f"{name} must be {DIGEST_SIZE} bytes, got {len(value)}"
        )
    return bytes(value)


@dataclass(frozen=True)
class MerkleHasher:
    """
    A named digest function used to combine tree nodes.

    Attributes:
        name: Registry name ("keccak256", "sha256")
        digest_fn: Function mapping raw bytes to a 32-byte digest
    """
    name: str
    digest_fn: Callable[[bytes], bytes]

    def digest(self, data: bytes) -> bytes:
        """Hash raw bytes into a leaf digest."""
        return self.digest_fn(data)

    def combine(self, left: bytes, right: bytes) -> bytes:
        """Compute the parent digest H(left + right)."""
        return self.digest_fn(left + right)

    def zero_hashes(self, depth: int) -> tuple[bytes, ...]:
        """
        Empty-subtree digests Z[0..depth].

        Z[0] is the empty leaf, Z[h] is the root of an empty subtree of
        height h, so Z[depth] is the root of an empty tree.
        """
        return _zero_hashes(self, depth)

    def __repr__(self) -> str:
        return f"MerkleHasher({self.name!r})"


@lru_cache(maxsize=None)
def _zero_hashes(hasher: MerkleHasher, depth: int) -> tuple[bytes, ...]:
    zeros = [ZERO_DIGEST]
    for _ in range(depth):
        zeros.append(hasher.combine(zeros[-1], zeros[-1]))
    return tuple(zeros)


KECCAK256 = MerkleHasher("keccak256", keccak256)
SHA256 = MerkleHasher("sha256", sha256)

DEFAULT_HASHER = KECCAK256

_HASHERS: dict[str, MerkleHasher] = {
    KECCAK256.name: KECCAK256,
    SHA256.name: SHA256,
}


def get_hasher(name: str) -> MerkleHasher:
    """
    Look up a registered hasher by name.

    Raises:
        KeyError: If no hasher is registered under that name
    """
    try:
        return _HASHERS[name.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown hash function {name!r}, expected one of {sorted(_HASHERS)}"
        ) from None


def available_hashers() -> list[str]:
    """Names of all registered hashers."""
    return sorted(_HASHERS)


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
