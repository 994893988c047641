"""
Node Model
The closed set of trie node kinds and their canonical encodings.

Node kinds:
- EmptyNode: absence of a subtree (singleton EMPTY_NODE)
- LeafNode: remaining key path + stored value
- ExtensionNode: shared path run leading to a single child
- BranchNode: 16 child slots (one per nibble) + optional value
- HashNode: proof-side reference to a child known only by digest;
  produced by the decoder, never by the trie engine

Canonical Encoding Rules (Hard Contracts):
1. Leaf raw:      [to_bytes(to_prefixed(path, True)), value]
2. Extension raw: [to_bytes(to_prefixed(path, False)), child_ref(next)]
3. Branch raw:    [child_ref(c) for c in children] + [value or b""]
4. Empty raw:     b""
5. child_ref(c) = c.raw() if len(rlp(c.raw())) < 32 else keccak256(rlp(c.raw()))
6. serialize() = rlp(raw()), hash() = keccak256(serialize())

Nodes are immutable. Encodings and digests are computed once per node
and memoised.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Optional, Union

from mpt.crypto.hashing import HASH_LENGTH, keccak256
from mpt.nibbles import Nibbles, decode_prefixed, from_bytes, to_bytes, to_prefixed
from mpt.schemas.canonical import RawValue, decode_canonical, encode_canonical
from mpt.schemas.errors import DecodingException, MalformedProofNodeException, TrieConsistencyException


BRANCH_WIDTH: int = 16

# Children whose encoding is at least this long are referenced by hash
INLINE_THRESHOLD: int = 32

EMPTY_NODE_RAW: bytes = b""

# keccak256(rlp(b"")) = 56e81f17...e363b421
EMPTY_NODE_HASH: bytes = keccak256(encode_canonical(EMPTY_NODE_RAW))


class _EncodedNode:
    """Shared serialize/hash behaviour on top of raw()."""

    def raw(self) -> RawValue:
        raise NotImplementedError

    @cached_property
    def _encoded(self) -> bytes:
        return encode_canonical(self.raw())

    @cached_property
    def _digest(self) -> bytes:
        return keccak256(self._encoded)

    def serialize(self) -> bytes:
        """Canonical RLP encoding of raw()."""
        return self._encoded

    def hash(self) -> bytes:
        """Keccak-256 of serialize()."""
        return self._digest


@dataclass(frozen=True)
class EmptyNode(_EncodedNode):
    """The absence of a subtree."""

    def raw(self) -> bytes:
        return EMPTY_NODE_RAW

    def hash(self) -> bytes:
        return EMPTY_NODE_HASH


EMPTY_NODE = EmptyNode()


@dataclass(frozen=True)
class LeafNode(_EncodedNode):
    """
    Terminal node.

    Attributes:
        path: The remaining (not yet consumed) key nibbles
        value: The stored payload
    """
    path: Nibbles
    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_bytes(cls, key: bytes, value: bytes) -> "LeafNode":
        """Leaf whose path is the full nibble expansion of key."""
        return cls(from_bytes(key), value)

    @classmethod
    def from_nibble_bytes(cls, data: bytes, value: bytes) -> "LeafNode":
        """
        Leaf from an already hex-prefix encoded path buffer.

        Raises:
            DecodingException: If data is not a valid hex-prefix buffer or
                carries the extension flag
        """
        try:
            path, is_leaf = decode_prefixed(data)
        except DecodingException as e:
            raise DecodingException(
                message=f"Could not build leaf node from nibbles: {e.message}",
                details=e.details,
            ) from e
        if not is_leaf:
            raise DecodingException(
                message="Could not build leaf node from nibbles: buffer has an extension flag",
                details={"data": "0x" + bytes(data).hex()},
            )
        return cls(path, value)

    def raw(self) -> list[RawValue]:
        return [to_bytes(to_prefixed(self.path, True)), self.value]


@dataclass(frozen=True)
class ExtensionNode(_EncodedNode):
    """
    Single child reached by consuming a run of shared nibbles.

    Attributes:
        path: Shared nibbles; never empty
        next: The child node; never EmptyNode
    """
    path: Nibbles
    next: "Node"

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        if not self.path:
            raise ValueError("Extension node path must not be empty")
        if isinstance(self.next, EmptyNode):
            raise ValueError("Extension node must point at a non-empty child")

    def raw(self) -> list[RawValue]:
        return [to_bytes(to_prefixed(self.path, False)), child_ref(self.next)]


def _empty_children() -> tuple["Node", ...]:
    return (EMPTY_NODE,) * BRANCH_WIDTH


@dataclass(frozen=True)
class BranchNode(_EncodedNode):
    """
    16-way fan-out node.

    Attributes:
        children: One slot per nibble value; EMPTY_NODE marks an absent slot
        value: Payload for a key ending exactly here, or None
    """
    children: tuple["Node", ...] = field(default_factory=_empty_children)
    value: Optional[bytes] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        if len(self.children) != BRANCH_WIDTH:
            raise ValueError(
                f"Branch node needs {BRANCH_WIDTH} children, got {len(self.children)}"
            )
        if self.value is not None:
            object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def empty(cls) -> "BranchNode":
        return cls()

    @property
    def has_value(self) -> bool:
        return self.value is not None

    def with_child(self, nibble: int, child: "Node") -> "BranchNode":
        """Copy of this branch with one slot replaced; other slots are shared."""
        children = list(self.children)
        children[nibble] = child
        return replace(self, children=tuple(children))

    def with_value(self, value: Optional[bytes]) -> "BranchNode":
        """Copy of this branch with its value replaced."""
        return replace(self, value=value)

    def raw(self) -> list[RawValue]:
        refs: list[RawValue] = [child_ref(child) for child in self.children]
        refs.append(self.value if self.value is not None else b"")
        return refs


@dataclass(frozen=True)
class HashNode(_EncodedNode):
    """Reference to a non-inlined child, known only by its digest."""
    digest: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", bytes(self.digest))
        if len(self.digest) != HASH_LENGTH:
            raise ValueError(
                f"Hash reference must be {HASH_LENGTH} bytes, got {len(self.digest)}"
            )

    def raw(self) -> bytes:
        return self.digest

    def serialize(self) -> bytes:
        raise TrieConsistencyException(
            message="Hash reference has no encoding of its own",
            node_type=type(self).__name__,
        )

    def hash(self) -> bytes:
        return self.digest


Node = Union[EmptyNode, LeafNode, ExtensionNode, BranchNode, HashNode]


def child_ref(node: Node) -> RawValue:
    """
    How a parent embeds a child: inline raw structure if the child's
    encoding is shorter than INLINE_THRESHOLD bytes, else its digest.
    """
    if isinstance(node, HashNode):
        return node.digest
    if len(node.serialize()) < INLINE_THRESHOLD:
        return node.raw()
    return node.hash()


# =============================================================================
# Decoding (proof side)
# =============================================================================

def _malformed(message: str, **details) -> MalformedProofNodeException:
    return MalformedProofNodeException(message=message, details=details)


def _child_from_ref(ref: RawValue) -> Node:
    if isinstance(ref, list):
        return node_from_raw(ref)
    if ref == b"":
        return EMPTY_NODE
    if len(ref) == HASH_LENGTH:
        return HashNode(ref)
    raise _malformed(
        f"Child reference must be inline, empty or {HASH_LENGTH} bytes, got {len(ref)} bytes",
        ref="0x" + ref.hex(),
    )


def node_from_raw(raw: RawValue) -> Node:
    """
    Rebuild a node from its raw structure (the inverse of raw()).

    Children referenced by digest become HashNode; inlined children are
    decoded recursively.

    Raises:
        MalformedProofNodeException: If raw is not a valid node structure
    """
    if isinstance(raw, bytes):
        if raw == EMPTY_NODE_RAW:
            return EMPTY_NODE
        raise _malformed("Node structure must be a list or the empty string", length=len(raw))

    if len(raw) == BRANCH_WIDTH + 1:
        children = tuple(_child_from_ref(ref) for ref in raw[:BRANCH_WIDTH])
        value = raw[BRANCH_WIDTH]
        if not isinstance(value, bytes):
            raise _malformed("Branch value must be a byte string")
        return BranchNode(children, value or None)

    if len(raw) == 2:
        encoded_path, payload = raw
        if not isinstance(encoded_path, bytes):
            raise _malformed("Node path must be a byte string")
        try:
            path, is_leaf = decode_prefixed(encoded_path)
        except DecodingException as e:
            raise _malformed(f"Invalid node path: {e.message}", **e.details) from e

        if is_leaf:
            if not isinstance(payload, bytes):
                raise _malformed("Leaf value must be a byte string")
            return LeafNode(path, payload)

        if not path:
            raise _malformed("Extension node has an empty path")
        child = _child_from_ref(payload)
        if isinstance(child, EmptyNode):
            raise _malformed("Extension node points at an empty child")
        return ExtensionNode(path, child)

    raise _malformed(f"Node structure has {len(raw)} items, expected 2 or {BRANCH_WIDTH + 1}", items=len(raw))


def decode_node(encoded: bytes) -> Node:
    """
    Decode a serialized node.

    Raises:
        MalformedProofNodeException: If the bytes are not a valid node
    """
    try:
        raw = decode_canonical(encoded)
    except DecodingException as e:
        raise MalformedProofNodeException(
            message=f"Node is not valid RLP: {e.message}",
            details=e.details,
        ) from e
    return node_from_raw(raw)
