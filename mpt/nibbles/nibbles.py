"""
Nibble Codec
Conversion between byte strings and 4-bit nibble paths, plus the
hex-prefix scheme that tags leaf and extension paths.

A path is a tuple of ints in 0..15. Each key byte expands to two nibbles,
high nibble first.

Hex-prefix rules (leaf/extension path encoding):
1. Flag nibble = 2 * is_leaf + (len(path) % 2)
2. Odd path: flag is followed directly by the path
3. Even path: flag is followed by a 0 padding nibble, then the path
4. The result always has an even nibble count and packs into bytes
"""
from __future__ import annotations

from typing import Iterable

from mpt.schemas.errors import DecodingException

Nibbles = tuple[int, ...]

EMPTY_PATH: Nibbles = ()

# Flag nibble bits
_ODD_FLAG = 1
_LEAF_FLAG = 2


def is_nibble(value: int) -> bool:
    """Return True if value is an int in 0..15."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 0xF


def from_nibbles(values: Iterable[int]) -> Nibbles:
    """
    Build a path from already-split nibble values.

    Raises:
        ValueError: If any value is outside 0..15
    """
    path = tuple(values)
    for i, n in enumerate(path):
        if not is_nibble(n):
            raise ValueError(f"Invalid nibble {n!r} at position {i}")
    return path


def from_bytes(key: bytes) -> Nibbles:
    """
    Expand a byte string into nibbles, high nibble first.

    Example:
        >>> from_bytes(b"\\x01\\xab")
        (0, 1, 10, 11)
    """
    path: list[int] = []
    for byte in key:
        path.append(byte >> 4)
        path.append(byte & 0x0F)
    return tuple(path)


def prefix_matched_len(a: Nibbles, b: Nibbles) -> int:
    """Length of the longest common prefix of two paths."""
    matched = 0
    for x, y in zip(a, b):
        if x != y:
            break
        matched += 1
    return matched


def to_prefixed(path: Nibbles, is_leaf: bool) -> Nibbles:
    """
    Prepend the hex-prefix flag (and padding when needed) to a path.

    Args:
        path: The node's path
        is_leaf: True for a leaf path, False for an extension path

    Returns:
        An even-length path starting with the flag nibble

    Example:
        >>> to_prefixed((1, 2, 3), True)
        (3, 1, 2, 3)
        >>> to_prefixed((1, 2), False)
        (0, 0, 1, 2)
    """
    odd = len(path) % 2
    flag = _LEAF_FLAG * int(bool(is_leaf)) + odd
    if odd:
        return (flag,) + tuple(path)
    return (flag, 0) + tuple(path)


def to_bytes(path: Nibbles) -> bytes:
    """
    Pack an even-length path two nibbles per byte.

    Raises:
        ValueError: If the path has an odd length
    """
    if len(path) % 2 != 0:
        raise ValueError(f"Cannot pack odd-length path of {len(path)} nibbles")
    return bytes((path[i] << 4) | path[i + 1] for i in range(0, len(path), 2))


def decode_prefixed(data: bytes) -> tuple[Nibbles, bool]:
    """
    Decode a hex-prefix encoded buffer.

    Args:
        data: Bytes produced by to_bytes(to_prefixed(path, is_leaf))

    Returns:
        Tuple of (path, is_leaf)

    Raises:
        DecodingException: If the buffer is empty, the flag nibble is not
            one of 0..3, or the padding nibble of an even path is not 0
    """
    if not data:
        raise DecodingException(
            message="Hex-prefix buffer is empty",
            details={"length": 0},
        )

    split = from_bytes(data)
    flag = split[0]
    if flag > (_LEAF_FLAG | _ODD_FLAG):
        raise DecodingException(
            message=f"Invalid hex-prefix flag nibble {flag}",
            details={"flag": flag, "data": "0x" + bytes(data).hex()},
        )

    is_leaf = bool(flag & _LEAF_FLAG)
    if flag & _ODD_FLAG:
        return split[1:], is_leaf

    if split[1] != 0:
        raise DecodingException(
            message=f"Non-zero padding nibble {split[1]} in even hex-prefix path",
            details={"padding": split[1], "data": "0x" + bytes(data).hex()},
        )
    return split[2:], is_leaf


def from_nibble_bytes(data: bytes) -> Nibbles:
    """
    Split a hex-prefix encoded buffer back into its path nibbles.

    Raises:
        DecodingException: If the buffer is malformed (see decode_prefixed)
    """
    path, _ = decode_prefixed(data)
    return path


__all__ = [
    "Nibbles",
    "EMPTY_PATH",
    "is_nibble",
    "from_nibbles",
    "from_bytes",
    "prefix_matched_len",
    "to_prefixed",
    "to_bytes",
    "decode_prefixed",
    "from_nibble_bytes",
]
