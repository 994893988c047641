"""
Schemas, canonical encoding and the error taxonomy.

The proof transport model lives in ``mpt.schemas.proof`` and is imported
from there directly.
"""
from .canonical import (
    RawValue,
    canonicalize_value,
    encode_canonical,
    decode_canonical,
    canonical_equals,
)
from .errors import (
    ErrorCodes,
    MptError,
    MptException,
    KeyNotFoundException,
    DecodingException,
    CanonicalizationException,
    TrieConsistencyException,
    ProofVerificationException,
    ProofIncompleteException,
    MalformedProofNodeException,
    KeyNotProvenException,
    ProofVerificationMismatchException,
)

__all__ = [
    # Canonical encoding
    "RawValue",
    "canonicalize_value",
    "encode_canonical",
    "decode_canonical",
    "canonical_equals",
    # Errors
    "ErrorCodes",
    "MptError",
    "MptException",
    "KeyNotFoundException",
    "DecodingException",
    "CanonicalizationException",
    "TrieConsistencyException",
    "ProofVerificationException",
    "ProofIncompleteException",
    "MalformedProofNodeException",
    "KeyNotProvenException",
    "ProofVerificationMismatchException",
]
