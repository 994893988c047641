"""
Nibble Codec

Usage:
    from mpt.nibbles import from_bytes, to_prefixed, to_bytes

    path = from_bytes(b"\\x01\\x02")           # (0, 1, 0, 2)
    packed = to_bytes(to_prefixed(path, True))  # b"\\x20\\x01\\x02"
"""
from .nibbles import (
    Nibbles,
    EMPTY_PATH,
    is_nibble,
    from_nibbles,
    from_bytes,
    prefix_matched_len,
    to_prefixed,
    to_bytes,
    decode_prefixed,
    from_nibble_bytes,
)

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
