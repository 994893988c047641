"""
Cryptographic utilities.

Keccak-256 hashing and hex helpers used across the trie and its proofs.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    hash_canonical,
    to_hex,
    from_hex,
)

__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_canonical",
    "to_hex",
    "from_hex",
]
