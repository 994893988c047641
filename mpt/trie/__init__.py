"""
Trie Engine

Usage:
    from mpt.trie import Trie

    trie = Trie()
    trie.put(b"\\x01\\x02\\x03", b"hello")
    trie.get(b"\\x01\\x02\\x03")     # b"hello"
    proof, found = trie.prove(b"\\x01\\x02\\x03")
"""
from .trie import Trie

__all__ = [
    "Trie",
]
