"""
Hashing Utilities
Keccak-256 hashing and canonical hashing of node structures.

This module provides:
- Keccak-256 hashing for raw bytes (the trie's hash primitive)
- Canonical hashing for node structures (via encode_canonical)
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Keccak-256 is the original Keccak padding used by Ethereum,
  not NIST SHA3-256
- Always hash raw bytes exactly as specified
- All operations are deterministic
"""
from __future__ import annotations

from typing import Any

from eth_hash.auto import keccak

from mpt.schemas.canonical import encode_canonical


# Digest size of the hash primitive
HASH_LENGTH: int = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(bytes(data))


def hash_canonical(value: Any) -> bytes:
    """
    Hash a node structure using its canonical encoding.

    Rule: digest = keccak256(encode_canonical(value))

    Args:
        value: A byte string or nested list of byte strings

    Returns:
        32-byte Keccak-256 digest of the RLP encoding

    Raises:
        CanonicalizationException: If the value cannot be encoded
    """
    return keccak256(encode_canonical(value))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Args:
        data: Raw bytes

    Returns:
        Hex string with 0x prefix (e.g., "0x1234abcd")

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + bytes(data).hex()


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

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not isinstance(hex_string, str):
        raise ValueError(f"Hex value must be a string, got {type(hex_string).__name__}")

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


__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_canonical",
    "to_hex",
    "from_hex",
]
