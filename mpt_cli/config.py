"""
CLI Configuration

Configuration management for the mpt CLI.
Supports environment variables (including a local .env file) and
JSON configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


# Environment variable prefix
ENV_PREFIX = "MPT_"

OUTPUT_FORMATS = ("human", "json")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    # Output
    output_format: str = "human"  # "human" or "json"

    # Verification
    check_hashes: bool = True

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format!r}"
            )

    def to_dict(self) -> dict:
        return asdict(self)


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes")


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.output_format = data.get("output_format", config.output_format)
    config.check_hashes = bool(data.get("check_hashes", config.check_hashes))
    # Re-run validation on the merged values
    return CLIConfig(**config.to_dict())


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. A .env file in the
    working directory is loaded first and never overrides variables that
    are already set.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    load_dotenv(find_dotenv(usecwd=True))

    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "mpt.json",
            Path.cwd() / ".mpt.json",
            Path.home() / ".config" / "mpt" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", config.log_level)
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", config.output_format)
    if os.getenv(f"{ENV_PREFIX}CHECK_HASHES"):
        config.check_hashes = _env_bool(f"{ENV_PREFIX}CHECK_HASHES", config.check_hashes)

    return CLIConfig(**config.to_dict())


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
