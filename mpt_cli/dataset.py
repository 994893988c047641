"""
Dataset loading for CLI commands.

A dataset file is JSON, either an object mapping 0x-hex keys to 0x-hex
values or a list of [key, value] pairs (the list form keeps insertion
order and allows a later pair to overwrite an earlier one).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from mpt.crypto.hashing import from_hex
from mpt.trie import Trie


logger = logging.getLogger(__name__)


class DatasetError(ValueError):
    """Raised when a dataset file cannot be read or parsed."""


def _decode_pair(key: object, value: object, position: str) -> tuple[bytes, bytes]:
    try:
        return from_hex(key), from_hex(value)  # type: ignore[arg-type]
    except ValueError as e:
        raise DatasetError(f"Invalid entry at {position}: {e}") from e


def load_dataset(path: Path) -> list[tuple[bytes, bytes]]:
    """
    Read (key, value) pairs from a dataset file.

    Raises:
        DatasetError: If the file is missing, not JSON, or holds
            entries that are not 0x-prefixed hex strings
    """
    if not path.exists():
        raise DatasetError(f"Dataset not found: {path}")

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DatasetError(f"Dataset is not valid JSON: {e}") from e

    if isinstance(data, dict):
        return [_decode_pair(k, v, repr(k)) for k, v in data.items()]

    if isinstance(data, list):
        pairs = []
        for i, item in enumerate(data):
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise DatasetError(f"Invalid entry at [{i}]: expected a [key, value] pair")
            pairs.append(_decode_pair(item[0], item[1], f"[{i}]"))
        return pairs

    raise DatasetError(
        f"Dataset must be a JSON object or list of pairs, got {type(data).__name__}"
    )


def build_trie(path: Path) -> Trie:
    """Load a dataset file and insert every pair into a fresh trie."""
    pairs = load_dataset(path)
    logger.info("Building trie from %d entries in %s", len(pairs), path)
    return Trie.from_items(pairs)
