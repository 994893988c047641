"""
Test fixtures package for trie tests.

This package provides factory functions and reference vectors.

Usage:
    from fixtures.common import make_trie, PUPPY_ITEMS, PUPPY_ROOT

    def test_something():
        trie = make_trie(PUPPY_ITEMS)
        assert trie.hash().hex() == PUPPY_ROOT
"""

from .common import (
    PUPPY_ITEMS,
    PUPPY_ROOT,
    DOGS_ITEMS,
    DOGS_ROOT,
    EMPTY_ROOT,
    make_trie,
    make_dataset,
    make_hashed_trie,
)

__all__ = [
    # Reference vectors
    "PUPPY_ITEMS",
    "PUPPY_ROOT",
    "DOGS_ITEMS",
    "DOGS_ROOT",
    "EMPTY_ROOT",
    # Factories
    "make_trie",
    "make_dataset",
    "make_hashed_trie",
]
