"""
Merkle Patricia Trie with Ethereum-compatible hashing.

Usage:
    from mpt import Trie, verify_proof

    trie = Trie()
    trie.put(b"\\x01\\x02\\x03", b"hello")
    proof, found = trie.prove(b"\\x01\\x02\\x03")
    assert verify_proof(trie.hash(), b"\\x01\\x02\\x03", proof) == b"hello"
"""
from mpt.nodes import EMPTY_NODE_HASH
from mpt.proof import ProofStore, is_valid_proof, verify_proof
from mpt.schemas.errors import (
    DecodingException,
    KeyNotFoundException,
    KeyNotProvenException,
    MalformedProofNodeException,
    MptException,
    ProofIncompleteException,
    ProofVerificationException,
    ProofVerificationMismatchException,
    TrieConsistencyException,
)
from mpt.trie import Trie

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "EMPTY_NODE_HASH",
    "Trie",
    "ProofStore",
    "verify_proof",
    "is_valid_proof",
    # Errors
    "MptException",
    "KeyNotFoundException",
    "DecodingException",
    "TrieConsistencyException",
    "ProofVerificationException",
    "ProofIncompleteException",
    "MalformedProofNodeException",
    "KeyNotProvenException",
    "ProofVerificationMismatchException",
]
