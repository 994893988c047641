"""
CLI Verify Command

Verify a ProofBundle offline, using only the node encodings it carries.

Usage:
    mpt verify proof.json [--root 0x...] [--key 0x...] [--json]

--root pins the trusted root hash; without it the root recorded in the
bundle is used, which only checks that the bundle is self-consistent.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from pydantic import ValidationError

from mpt.crypto.hashing import from_hex, to_hex
from mpt.proof import verify_proof
from mpt.schemas.errors import ProofVerificationException
from mpt.schemas.proof import ProofBundle


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_bundle(path: Path) -> ProofBundle:
    """Read and validate a ProofBundle JSON file."""
    return ProofBundle.model_validate_json(path.read_text())


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    proof_path = Path(args.proof_path)
    config = getattr(args, "cli_config", None)
    output_json = args.json or (config is not None and config.output_format == "json")
    check_hashes = config.check_hashes if config is not None else True

    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        bundle = load_bundle(proof_path)
        root = from_hex(args.root) if args.root else bundle.root_bytes
        key = from_hex(args.key) if args.key else bundle.key_bytes
    except (ValidationError, ValueError) as e:
        print(f"Error loading proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not args.root:
        logger.warning("No --root given; verifying against the root recorded in the proof")

    try:
        value = verify_proof(root, key, bundle.to_store(), check_hashes=check_hashes)
    except ProofVerificationException as e:
        logger.warning("Verification failed: %s", e.message)
        if output_json:
            print(json.dumps({
                "ok": False,
                "root": to_hex(root),
                "key": to_hex(key),
                "error": e.to_error_model().model_dump(),
            }, indent=2))
        else:
            print(f"verification failed [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    if output_json:
        print(json.dumps({
            "ok": True,
            "root": to_hex(root),
            "key": to_hex(key),
            "value": to_hex(value),
        }, indent=2))
    else:
        print(f"root: {to_hex(root)}")
        print(f"key: {to_hex(key)}")
        print(f"value: {to_hex(value)}")
        print("ok: true")

    logger.info("Verification passed")
    return EXIT_SUCCESS
