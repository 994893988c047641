"""
CLI Query Commands

Build a trie from a dataset file and query it.

Usage:
    mpt root data.json [--json]
    mpt get data.json 0x010203 [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from mpt.crypto.hashing import from_hex, to_hex
from mpt_cli.dataset import DatasetError, build_trie


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_NOT_FOUND = 3


def _wants_json(args: Namespace) -> bool:
    if getattr(args, "json", False):
        return True
    config = getattr(args, "cli_config", None)
    return config is not None and config.output_format == "json"


def root_cmd(args: Namespace) -> int:
    """
    Print the root hash of the trie built from a dataset.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        trie = build_trie(Path(args.data))
    except DatasetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    root = to_hex(trie.hash())
    if _wants_json(args):
        print(json.dumps({"root": root}, indent=2))
    else:
        print(root)
    return EXIT_SUCCESS


def get_cmd(args: Namespace) -> int:
    """
    Print the value stored under a key.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (3 when the key is absent)
    """
    try:
        key = from_hex(args.key)
        trie = build_trie(Path(args.data))
    except (DatasetError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    value = trie.get(key)
    found = value is not None

    if _wants_json(args):
        print(json.dumps({
            "key": to_hex(key),
            "found": found,
            "value": to_hex(value) if found else None,
        }, indent=2))
    elif found:
        print(to_hex(value))
    else:
        print(f"not found: {to_hex(key)}", file=sys.stderr)

    return EXIT_SUCCESS if found else EXIT_NOT_FOUND
