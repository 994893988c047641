"""
Common test fixtures shared by all modules.

Provides factory functions and reference data:
- make_trie / make_dataset: tries built from known or generated pairs
- make_hashed_trie: a trie whose leaves are too large to inline
- Ethereum reference vectors with their published root hashes
"""

import random
from typing import Iterable, Optional

from mpt.trie import Trie


# Published vectors from the Ethereum trie test suite (insertion-order
# independent). Keys and values are ASCII.
PUPPY_ITEMS: list[tuple[bytes, bytes]] = [
    (b"do", b"verb"),
    (b"horse", b"stallion"),
    (b"doge", b"coin"),
    (b"dog", b"puppy"),
]
PUPPY_ROOT = "5991bb8c6514148a29db676a14ac506cd2cd5775ace63c30a4fe457715e9ac84"

DOGS_ITEMS: list[tuple[bytes, bytes]] = [
    (b"doe", b"reindeer"),
    (b"dog", b"puppy"),
    (b"dogglesworth", b"cat"),
]
DOGS_ROOT = "8aad789dff2f538bca5d8ea56e8abe10f4c7ba3a5dea95fea4cd6e7c3a1168d3"

EMPTY_ROOT = "56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"


def make_trie(items: Optional[Iterable[tuple[bytes, bytes]]] = None) -> Trie:
    """Trie containing items (default: the two-key trie used by proof tests)."""
    if items is None:
        items = [
            (bytes([1, 2, 3]), b"hello"),
            (bytes([1, 2, 3, 4, 5]), b"world"),
        ]
    return Trie.from_items(items)


def make_dataset(
    count: int = 64,
    seed: int = 7,
    max_key_len: int = 6,
    value_len: int = 40,
) -> list[tuple[bytes, bytes]]:
    """
    Deterministic pseudo-random pairs with unique keys.

    Short keys over a small alphabet force shared prefixes, keys that are
    prefixes of other keys, and every split case of put().
    """
    rng = random.Random(seed)
    pairs: dict[bytes, bytes] = {}
    while len(pairs) < count:
        key_len = rng.randint(1, max_key_len)
        key = bytes(rng.choice([0x00, 0x01, 0x10, 0x11, 0x12, 0xAB]) for _ in range(key_len))
        value = bytes(rng.randrange(256) for _ in range(rng.randint(1, value_len)))
        pairs[key] = value
    return list(pairs.items())


def make_hashed_trie() -> tuple[Trie, bytes, bytes]:
    """
    Trie whose leaves and branch are referenced by hash, not inlined.

    Returns:
        Tuple of (trie, first key, second key)
    """
    key1 = bytes([1, 2, 3])
    key2 = bytes([1, 2, 4])
    trie = Trie.from_items([
        (key1, b"a" * 40),
        (key2, b"b" * 40),
    ])
    return trie, key1, key2
