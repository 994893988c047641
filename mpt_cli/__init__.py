"""
Command-line interface for the Merkle Patricia Trie.
"""

from mpt_cli.main import main

__all__ = ["main"]
