"""
Proof Store & Verifier

Usage:
    from mpt.proof import verify_proof

    proof, found = trie.prove(key)
    value = verify_proof(trie.hash(), key, proof)
"""
from .proof_store import ProofStore
from .verifier import verify_proof, is_valid_proof

__all__ = [
    "ProofStore",
    "verify_proof",
    "is_valid_proof",
]
