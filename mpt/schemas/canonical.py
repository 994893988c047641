"""
Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic binary serialization of node structures before
hashing. Nodes are encoded with Recursive Length Prefix (RLP), the
length-prefixed, self-describing codec used by Ethereum, so digests are
byte-identical with other implementations.

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

from __future__ import annotations

from typing import Any, Union

import rlp
from rlp.exceptions import DecodingError, EncodingError

from .errors import CanonicalizationException, DecodingException

# A canonical value is a byte string or a (possibly nested) list of them.
RawValue = Union[bytes, list["RawValue"]]


def canonicalize_value(value: Any, path: str = "") -> RawValue:
    """
    Recursively normalize a value into bytes / lists of bytes.

    Args:
        value: A byte string (bytes, bytearray, memoryview) or a
            list/tuple of such values.
        path: Current path for error reporting.

    Returns:
        The same structure with every leaf as ``bytes`` and every
        sequence as ``list``.

    Raises:
        CanonicalizationException: If the value contains anything other
            than byte strings and sequences.
    """
    if isinstance(value, bytes):
        return value

    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path or "<root>", "type": type(value).__name__},
    )


def encode_canonical(value: Any) -> bytes:
    """
    Serialize a byte string or nested list of byte strings to RLP.

    Args:
        value: The structure to encode (see canonicalize_value).

    Returns:
        The canonical RLP encoding.

    Raises:
        CanonicalizationException: If the value cannot be encoded.

    Example:
        >>> encode_canonical(b"").hex()
        '80'
        >>> encode_canonical([b"\\x20", b"dog"]).hex()
        'c52083646f67'
    """
    canonicalized = canonicalize_value(value)
    try:
        return rlp.encode(canonicalized)
    except EncodingError as e:
        raise CanonicalizationException(
            message=f"Failed to encode canonical value: {e}",
            details={"type": type(value).__name__},
        ) from e


def _normalize_decoded(value: Any) -> RawValue:
    # rlp may hand back tuples or bytearrays depending on the release
    if isinstance(value, (list, tuple)):
        return [_normalize_decoded(item) for item in value]
    return bytes(value)


def decode_canonical(data: bytes) -> RawValue:
    """
    Parse an RLP encoding back into bytes / nested lists of bytes.

    Args:
        data: A complete RLP encoding with no trailing bytes.

    Returns:
        The decoded structure.

    Raises:
        DecodingException: If the input is not a single well-formed item.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodingException(
            message=f"Expected bytes to decode, got {type(data).__name__}",
            details={"type": type(data).__name__},
        )
    try:
        return _normalize_decoded(rlp.decode(bytes(data)))
    except DecodingError as e:
        raise DecodingException(
            message=f"Malformed canonical encoding: {e}",
            details={"length": len(data)},
        ) from e


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """
    Check if two structures have identical canonical encodings.

    Args:
        obj1: First structure.
        obj2: Second structure.

    Returns:
        True if the encodings are byte-identical.
    """
    try:
        return encode_canonical(obj1) == encode_canonical(obj2)
    except CanonicalizationException:
        return False
