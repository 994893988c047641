"""
Proof Store
In-memory map from node digest to the node's canonical encoding.

A store returned by Trie.prove() owns copies of the encodings it holds,
so it stays valid after the source trie is mutated further.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Optional

from mpt.crypto.hashing import keccak256


class ProofStore:
    """
    Hash -> encoded node store.

    Example:
        >>> store = ProofStore()
        >>> store.put(b"\\x01" * 32, b"\\xc0")
        >>> store.has(b"\\x01" * 32)
        True
    """

    def __init__(self) -> None:
        self._kv: dict[bytes, bytes] = {}

    @classmethod
    def from_nodes(cls, encodings: Iterable[bytes]) -> "ProofStore":
        """
        Rebuild a store from a serialized node list.

        Each encoding is filed under its own Keccak-256 digest, so the
        result is exactly what the producer's store held.
        """
        store = cls()
        for encoded in encodings:
            encoded = bytes(encoded)
            store.put(keccak256(encoded), encoded)
        return store

    def put(self, key: bytes, value: bytes) -> None:
        self._kv[bytes(key)] = bytes(value)

    def get(self, key: bytes) -> Optional[bytes]:
        """Stored encoding for key, or None if absent."""
        return self._kv.get(bytes(key))

    def has(self, key: bytes) -> bool:
        return bytes(key) in self._kv

    def delete(self, key: bytes) -> None:
        self._kv.pop(bytes(key), None)

    def serialize(self) -> list[bytes]:
        """All stored encodings; order carries no meaning."""
        return list(self._kv.values())

    def keys(self) -> list[bytes]:
        return list(self._kv.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (bytes, bytearray)) and bytes(key) in self._kv

    def __getitem__(self, key: bytes) -> bytes:
        return self._kv[bytes(key)]

    def __len__(self) -> int:
        return len(self._kv)

    def __iter__(self) -> Iterator[bytes]:
        return iter(list(self._kv))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProofStore):
            return NotImplemented
        return self._kv == other._kv

    def __repr__(self) -> str:
        return f"ProofStore(nodes={len(self._kv)})"
