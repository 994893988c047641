"""
Trie Engine
Lookup, insertion and proof generation over the node graph.

Put rules, applied at the node where the remaining key nibbles stop:
- EmptyNode: replace with a leaf holding the remaining nibbles
- LeafNode: same path -> replace the value; otherwise split into a
  branch (behind an extension for any shared prefix) holding the old
  leaf and the new value
- BranchNode: no nibbles left -> set the branch value; otherwise descend
  into the slot for the next nibble
- ExtensionNode: fully matched -> descend into next; otherwise split the
  extension at the divergence point around a new branch

Nodes are immutable: put() rebuilds the nodes along the key's path and
swaps the root once the new subtree is complete. Siblings off that path
are shared, not copied.

Deletion is not supported and branches are never collapsed.

Concurrency: a Trie is not thread-safe. Callers must serialise put()
against every other operation on the same instance. Proofs returned by
prove() are independent snapshots.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from mpt.crypto.hashing import to_hex
from mpt.nibbles import Nibbles, from_bytes, prefix_matched_len
from mpt.nodes import (
    BRANCH_WIDTH,
    EMPTY_NODE,
    BranchNode,
    EmptyNode,
    ExtensionNode,
    LeafNode,
    Node,
)
from mpt.proof.proof_store import ProofStore
from mpt.schemas.errors import KeyNotFoundException, TrieConsistencyException


logger = logging.getLogger(__name__)


def _require_bytes(name: str, data: object) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Trie {name} must be bytes, got {type(data).__name__}")
    return bytes(data)


def _unknown_node(node: object) -> TrieConsistencyException:
    return TrieConsistencyException(
        message=f"Unknown node kind in trie: {type(node).__name__}",
        node_type=type(node).__name__,
    )


class Trie:
    """
    Merkle Patricia Trie over byte-string keys and values.

    Example:
        >>> trie = Trie()
        >>> trie.put(b"\\x01\\x02\\x03\\x04", b"hello")
        >>> trie.get(b"\\x01\\x02\\x03\\x04")
        b'hello'
        >>> len(trie.hash())
        32
    """

    def __init__(self) -> None:
        self._root: Node = EMPTY_NODE

    @classmethod
    def from_items(cls, items: Iterable[tuple[bytes, bytes]]) -> "Trie":
        """Build a trie by putting every (key, value) pair in order."""
        trie = cls()
        for key, value in items:
            trie.put(key, value)
        return trie

    @property
    def root(self) -> Node:
        """The current root node (immutable)."""
        return self._root

    def hash(self) -> bytes:
        """Root digest; EMPTY_NODE_HASH for an empty trie."""
        return self._root.hash()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, key: bytes) -> Optional[bytes]:
        """
        Look up the value stored under key.

        Returns:
            The value, or None if the key is absent
        """
        key = _require_bytes("key", key)
        node = self._root
        path = from_bytes(key)

        while True:
            if isinstance(node, EmptyNode):
                return None

            if isinstance(node, LeafNode):
                if node.path != path:
                    return None
                return node.value

            if isinstance(node, BranchNode):
                if not path:
                    return node.value
                node, path = node.children[path[0]], path[1:]
                continue

            if isinstance(node, ExtensionNode):
                matched = prefix_matched_len(node.path, path)
                if matched < len(node.path):
                    return None
                node, path = node.next, path[matched:]
                continue

            raise _unknown_node(node)

    def __getitem__(self, key: bytes) -> bytes:
        value = self.get(key)
        if value is None:
            raise KeyNotFoundException(bytes(key))
        return value

    def __setitem__(self, key: bytes, value: bytes) -> None:
        self.put(key, value)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (bytes, bytearray, memoryview)):
            return False
        return self.get(key) is not None

    # -------------------------------------------------------------------------
    # Insertion
    # -------------------------------------------------------------------------

    def put(self, key: bytes, value: bytes) -> None:
        """
        Insert or overwrite the value stored under key.

        Raises:
            TypeError: If key or value is not a byte string (the trie is
                left unchanged)
        """
        key = _require_bytes("key", key)
        value = _require_bytes("value", value)

        new_root = self._put(self._root, from_bytes(key), value)
        self._root = new_root
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("put key=0x%s root=%s", key.hex(), to_hex(new_root.hash()))

    def _put(self, node: Node, path: Nibbles, value: bytes) -> Node:
        if isinstance(node, EmptyNode):
            return LeafNode(path, value)

        if isinstance(node, LeafNode):
            return self._put_leaf(node, path, value)

        if isinstance(node, BranchNode):
            if not path:
                return node.with_value(value)
            slot = path[0]
            return node.with_child(slot, self._put(node.children[slot], path[1:], value))

        if isinstance(node, ExtensionNode):
            matched = prefix_matched_len(node.path, path)
            if matched == len(node.path):
                return ExtensionNode(node.path, self._put(node.next, path[matched:], value))
            return self._split_extension(node, path, value, matched)

        raise _unknown_node(node)

    @staticmethod
    def _put_leaf(leaf: LeafNode, path: Nibbles, value: bytes) -> Node:
        matched = prefix_matched_len(leaf.path, path)

        # Same key: overwrite, even when the value is unchanged
        if matched == len(leaf.path) and matched == len(path):
            return LeafNode(leaf.path, value)

        children: list[Node] = [EMPTY_NODE] * BRANCH_WIDTH
        branch_value: Optional[bytes] = None

        if matched == len(leaf.path):
            branch_value = leaf.value
        else:
            # leaf.path[matched] selects the slot and is not kept in the child
            children[leaf.path[matched]] = LeafNode(leaf.path[matched + 1:], leaf.value)

        if matched == len(path):
            branch_value = value
        else:
            children[path[matched]] = LeafNode(path[matched + 1:], value)

        branch = BranchNode(tuple(children), branch_value)
        if matched > 0:
            return ExtensionNode(leaf.path[:matched], branch)
        return branch

    @staticmethod
    def _split_extension(ext: ExtensionNode, path: Nibbles, value: bytes, matched: int) -> Node:
        if matched > len(path):
            raise TrieConsistencyException(
                message=f"Matched {matched} nibbles of a {len(path)} nibble key",
                node_type=type(ext).__name__,
            )

        children: list[Node] = [EMPTY_NODE] * BRANCH_WIDTH
        branch_value: Optional[bytes] = None

        ext_slot, ext_rest = ext.path[matched], ext.path[matched + 1:]
        if ext_rest:
            children[ext_slot] = ExtensionNode(ext_rest, ext.next)
        else:
            children[ext_slot] = ext.next

        if matched < len(path):
            children[path[matched]] = LeafNode(path[matched + 1:], value)
        else:
            branch_value = value

        branch = BranchNode(tuple(children), branch_value)
        if matched > 0:
            return ExtensionNode(ext.path[:matched], branch)
        return branch

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def prove(self, key: bytes) -> tuple[ProofStore, bool]:
        """
        Collect the nodes visited while looking up key.

        Every node on the lookup path, inlined ones included, is recorded
        as store[node.hash()] = node.serialize().

        Returns:
            Tuple of (proof store, whether key was found). The store is
            returned in both cases.
        """
        key = _require_bytes("key", key)
        proof = ProofStore()
        node = self._root
        path = from_bytes(key)

        while True:
            proof.put(node.hash(), node.serialize())

            if isinstance(node, EmptyNode):
                found = False
                break

            if isinstance(node, LeafNode):
                found = node.path == path
                break

            if isinstance(node, BranchNode):
                if not path:
                    # b"" in a branch encodes like no value and cannot be proven
                    found = bool(node.value)
                    break
                node, path = node.children[path[0]], path[1:]
                continue

            if isinstance(node, ExtensionNode):
                matched = prefix_matched_len(node.path, path)
                if matched < len(node.path):
                    found = False
                    break
                node, path = node.next, path[matched:]
                continue

            raise _unknown_node(node)

        logger.debug("prove key=0x%s found=%s nodes=%d", key.hex(), found, len(proof))
        return proof, found

    def __repr__(self) -> str:
        return f"Trie(root={to_hex(self.hash())})"


__all__ = [
    "Trie",
]
