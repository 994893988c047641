"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m mpt_cli root <data.json> [--json]
    python -m mpt_cli get <data.json> <0xkey> [--json]
    python -m mpt_cli prove <data.json> <0xkey> [--out PATH]
    python -m mpt_cli verify <proof.json> [--root 0x...] [--key 0x...] [--json]
    python -m mpt_cli config --init

Environment Variables:
    MPT_LOG_LEVEL         Log level (default: WARNING)
    MPT_LOG_FILE          Also log to this file
    MPT_OUTPUT_FORMAT     human or json
    MPT_CHECK_HASHES      Recompute proof node hashes during verify (default: true)
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from mpt import __version__
from mpt_cli.commands import prove, query, verify
from mpt_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2
EXIT_NOT_FOUND = 3


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="mpt",
        description="Merkle Patricia Trie CLI - Compute root hashes, generate and verify proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./mpt.json or ~/.config/mpt/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks for unexpected errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the root hash of a dataset",
        description="Build a trie from a JSON dataset and print its root hash.",
    )
    root_parser.add_argument("data", type=str, help="Dataset JSON file (0x-hex keys to 0x-hex values)")
    root_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    root_parser.set_defaults(func=query.root_cmd)

    # --- get command ---
    get_parser = subparsers.add_parser(
        "get",
        help="Look up one key in a dataset",
        description="Build a trie from a JSON dataset and print the value stored under a key.",
    )
    get_parser.add_argument("data", type=str, help="Dataset JSON file")
    get_parser.add_argument("key", type=str, help="0x-prefixed key")
    get_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    get_parser.set_defaults(func=query.get_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate a proof for one key",
        description="Build a trie from a JSON dataset and write a proof bundle for a key.",
    )
    prove_parser.add_argument("data", type=str, help="Dataset JSON file")
    prove_parser.add_argument("key", type=str, help="0x-prefixed key")
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof bundle here instead of stdout",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof bundle offline",
        description="Replay a key lookup against the nodes in a proof bundle.",
    )
    verify_parser.add_argument("proof_path", type=str, help="Proof bundle JSON file")
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Trusted 0x-prefixed root hash (default: the root recorded in the bundle)",
    )
    verify_parser.add_argument(
        "--key",
        type=str,
        default=None,
        help="0x-prefixed key to verify (default: the key recorded in the bundle)",
    )
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show configuration",
        description="Print the effective configuration or a template config file.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Print a default configuration file",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        print(get_default_config_template(), end="")
        return EXIT_SUCCESS

    for name, value in args.cli_config.to_dict().items():
        print(f"{name}: {value}")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed, 3=key not found)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
