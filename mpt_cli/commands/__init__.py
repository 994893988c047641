"""
CLI command modules.
"""

from mpt_cli.commands import query, prove, verify

__all__ = ["query", "prove", "verify"]
