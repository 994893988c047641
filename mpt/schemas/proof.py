"""
Schemas & Canonicalization
File: proof.py

Purpose: Transport schema for trie proofs. A ProofBundle carries the
root it was produced against, the key, and the unordered list of node
encodings, all as 0x-prefixed hex so it can be written as JSON.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mpt.crypto.hashing import HASH_LENGTH, from_hex, to_hex
from mpt.proof.proof_store import ProofStore

PROOF_SCHEMA_VERSION = "1.0"


def _check_hex(value: str) -> str:
    from_hex(value)
    return value.lower()


class ProofBundle(BaseModel):
    """
    Serializable form of a ProofStore plus the lookup it answers.

    The nodes list is the ProofStore's serialize() output; the receiver
    rebuilds the hash-keyed store with to_store().
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=PROOF_SCHEMA_VERSION)
    root: str = Field(..., description="0x-prefixed root hash the proof was generated against")
    key: str = Field(..., description="0x-prefixed key")
    nodes: list[str] = Field(default_factory=list, description="0x-prefixed node encodings")
    found: bool = Field(default=False, description="Whether the key was present when proven")
    value: Optional[str] = Field(default=None, description="0x-prefixed value, when found")

    @field_validator("root")
    @classmethod
    def _validate_root(cls, v: str) -> str:
        if len(from_hex(v)) != HASH_LENGTH:
            raise ValueError(f"root must be {HASH_LENGTH} bytes")
        return v.lower()

    @field_validator("key")
    @classmethod
    def _validate_key(cls, v: str) -> str:
        return _check_hex(v)

    @field_validator("value")
    @classmethod
    def _validate_value(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_hex(v)

    @field_validator("nodes")
    @classmethod
    def _validate_nodes(cls, v: list[str]) -> list[str]:
        return [_check_hex(node) for node in v]

    @classmethod
    def from_store(
        cls,
        root: bytes,
        key: bytes,
        store: ProofStore,
        found: bool,
        value: Optional[bytes] = None,
    ) -> "ProofBundle":
        # Sorted so the same proof always serializes to the same JSON
        nodes = sorted(to_hex(encoded) for encoded in store.serialize())
        return cls(
            root=to_hex(root),
            key=to_hex(key),
            nodes=nodes,
            found=found,
            value=to_hex(value) if value is not None else None,
        )

    def to_store(self) -> ProofStore:
        return ProofStore.from_nodes(from_hex(node) for node in self.nodes)

    @property
    def root_bytes(self) -> bytes:
        return from_hex(self.root)

    @property
    def key_bytes(self) -> bytes:
        return from_hex(self.key)

    @property
    def value_bytes(self) -> Optional[bytes]:
        return from_hex(self.value) if self.value is not None else None
