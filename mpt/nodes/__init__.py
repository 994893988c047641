"""
Node Model

Usage:
    from mpt.nodes import LeafNode, BranchNode, ExtensionNode

    leaf = LeafNode.from_bytes(b"\\x01\\x02\\x03\\x04", b"hello")
    leaf.serialize()  # canonical RLP bytes
    leaf.hash()       # 32-byte Keccak-256 digest
"""
from .nodes import (
    BRANCH_WIDTH,
    INLINE_THRESHOLD,
    EMPTY_NODE_RAW,
    EMPTY_NODE_HASH,
    EMPTY_NODE,
    EmptyNode,
    LeafNode,
    ExtensionNode,
    BranchNode,
    HashNode,
    Node,
    child_ref,
    node_from_raw,
    decode_node,
)

__all__ = [
    # Constants
    "BRANCH_WIDTH",
    "INLINE_THRESHOLD",
    "EMPTY_NODE_RAW",
    "EMPTY_NODE_HASH",
    "EMPTY_NODE",
    # Node kinds
    "EmptyNode",
    "LeafNode",
    "ExtensionNode",
    "BranchNode",
    "HashNode",
    "Node",
    # Encoding helpers
    "child_ref",
    "node_from_raw",
    "decode_node",
]
