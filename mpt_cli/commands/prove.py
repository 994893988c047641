"""
CLI Prove Command

Generate a proof for one key of a dataset and write it as a JSON
ProofBundle.

Usage:
    mpt prove data.json 0x010203 [--out proof.json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from mpt.crypto.hashing import from_hex, to_hex
from mpt.schemas.proof import ProofBundle
from mpt_cli.dataset import DatasetError, build_trie


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_NOT_FOUND = 3


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    The proof is written even when the key is absent, so the caller can
    inspect the path that was walked.

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

    store, found = trie.prove(key)
    bundle = ProofBundle.from_store(
        root=trie.hash(),
        key=key,
        store=store,
        found=found,
        value=trie.get(key) if found else None,
    )
    payload = bundle.model_dump_json(indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(payload + "\n")
        logger.info("Wrote proof with %d nodes to %s", len(bundle.nodes), out_path)
        print(f"proof: {out_path}")
        print(f"root: {bundle.root}")
        print(f"found: {str(found).lower()}")
    else:
        print(payload)

    if not found:
        logger.warning("Key %s is not in the trie", to_hex(key))
        return EXIT_NOT_FOUND
    return EXIT_SUCCESS
