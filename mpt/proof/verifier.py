"""
Proof Verifier
Replays a key lookup against a ProofStore, starting from a trusted root
hash and without access to the trie that produced the proof.

Algorithm:
1. expected = root_hash
2. Fetch store[expected]; missing -> ProofIncompleteException
3. Optionally check keccak256(entry) == expected; else
   ProofVerificationMismatchException
4. Decode the entry; failure -> MalformedProofNodeException
5. Walk the decoded node with the remaining key nibbles exactly like
   Trie.get(). Inlined children are walked directly; a hash reference
   sets expected and continues at step 2
6. A value at the end of the path is returned; any structural mismatch
   raises KeyNotProvenException

Limitation: KeyNotProvenException covers both a genuine absence and an
incompatible proof. Non-membership is not independently provable.
"""
from __future__ import annotations

import logging
from typing import Optional

from mpt.crypto.hashing import keccak256, to_hex
from mpt.nibbles import from_bytes, prefix_matched_len
from mpt.nodes import BranchNode, EmptyNode, ExtensionNode, HashNode, LeafNode, Node, decode_node
from mpt.proof.proof_store import ProofStore
from mpt.schemas.errors import (
    KeyNotProvenException,
    MalformedProofNodeException,
    ProofIncompleteException,
    ProofVerificationException,
    ProofVerificationMismatchException,
    TrieConsistencyException,
)


logger = logging.getLogger(__name__)


def _load_node(store: ProofStore, expected: bytes, check_hashes: bool) -> Node:
    encoded = store.get(expected)
    if encoded is None:
        raise ProofIncompleteException(
            message=f"Proof is missing node {to_hex(expected)}",
            node_hash=expected,
        )

    if check_hashes and keccak256(encoded) != expected:
        raise ProofVerificationMismatchException(
            message=f"Proof node filed under {to_hex(expected)} hashes to {to_hex(keccak256(encoded))}",
            node_hash=expected,
        )

    try:
        return decode_node(encoded)
    except MalformedProofNodeException as e:
        raise MalformedProofNodeException(
            message=e.message,
            node_hash=expected,
            details=e.details,
        ) from e


def verify_proof(
    root_hash: bytes,
    key: bytes,
    proof: ProofStore,
    check_hashes: bool = True,
) -> bytes:
    """
    Verify that key maps to a value under root_hash using only proof.

    Args:
        root_hash: Trusted 32-byte root digest
        key: The key whose value is being proven
        proof: Store of encoded nodes, keyed by digest
        check_hashes: Recompute each fetched node's digest and compare it
            with the digest it was looked up under

    Returns:
        The proven value

    Raises:
        ProofIncompleteException: A referenced node is not in the proof
        MalformedProofNodeException: A stored node cannot be decoded
        ProofVerificationMismatchException: A stored node does not hash to
            its key (only with check_hashes)
        KeyNotProvenException: The path does not end at a value for key
    """
    path = from_bytes(key)
    expected = bytes(root_hash)

    while True:
        node: Node = _load_node(proof, expected, check_hashes)

        while True:
            if isinstance(node, EmptyNode):
                raise KeyNotProvenException(
                    message=f"Key 0x{key.hex()} ends at an empty subtree",
                    node_hash=expected,
                )

            if isinstance(node, LeafNode):
                if node.path != path:
                    raise KeyNotProvenException(
                        message=f"Leaf path does not match key 0x{key.hex()}",
                        node_hash=expected,
                    )
                logger.debug("Proof verified for key 0x%s", key.hex())
                return node.value

            if isinstance(node, BranchNode):
                if not path:
                    if node.value is None:
                        raise KeyNotProvenException(
                            message=f"Key 0x{key.hex()} ends at a branch without a value",
                            node_hash=expected,
                        )
                    logger.debug("Proof verified for key 0x%s", key.hex())
                    return node.value
                node, path = node.children[path[0]], path[1:]
                continue

            if isinstance(node, ExtensionNode):
                matched = prefix_matched_len(node.path, path)
                if matched < len(node.path):
                    raise KeyNotProvenException(
                        message=f"Extension path does not prefix key 0x{key.hex()}",
                        node_hash=expected,
                    )
                node, path = node.next, path[matched:]
                continue

            if isinstance(node, HashNode):
                expected = node.digest
                break

            raise TrieConsistencyException(
                message=f"Unknown node kind in proof: {type(node).__name__}",
                node_type=type(node).__name__,
            )


def is_valid_proof(
    root_hash: bytes,
    key: bytes,
    proof: ProofStore,
    expected_value: Optional[bytes] = None,
    check_hashes: bool = True,
) -> bool:
    """
    Boolean wrapper around verify_proof.

    Args:
        root_hash: Trusted 32-byte root digest
        key: The key being proven
        proof: Store of encoded nodes
        expected_value: If given, the proven value must also equal it
        check_hashes: Passed through to verify_proof

    Returns:
        True if the proof verifies (and matches expected_value, if given)
    """
    try:
        value = verify_proof(root_hash, key, proof, check_hashes=check_hashes)
    except ProofVerificationException as e:
        logger.debug("Proof rejected for key 0x%s: %s", key.hex(), e.code)
        return False
    if expected_value is not None and value != expected_value:
        return False
    return True


__all__ = [
    "verify_proof",
    "is_valid_proof",
]
