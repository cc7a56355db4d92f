"""
Runtime Configuration

Central configuration for the merkle builder and its logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from relay_core.crypto.hashing import MerkleHasher, available_hashers, get_hasher
from relay_core.merkle.incremental import TREE_DEPTH
from relay_core.schemas.errors import ConfigurationException

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "RELAY_"

# Deepest tree the builder accepts
MAX_TREE_DEPTH = 64


@dataclass
class TreeConfig:
    """Configuration for the merkle trees."""
    depth: int = TREE_DEPTH
    hash_function: str = "keccak256"

    def validate(self) -> None:
        if not isinstance(self.depth, int) or isinstance(self.depth, bool) or not 1 <= self.depth <= MAX_TREE_DEPTH:
            raise ConfigurationException(
                f"Tree depth must be an integer in 1..{MAX_TREE_DEPTH}, got {self.depth!r}",
                field_path="tree.depth",
            )
        if not isinstance(self.hash_function, str):
            raise ConfigurationException(
                f"Hash function must be a string, got {self.hash_function!r}",
                field_path="tree.hash_function",
            )
        if self.hash_function.lower() not in available_hashers():
            raise ConfigurationException(
                f"Unknown hash function {self.hash_function!r}, "
                f"expected one of {available_hashers()}",
                field_path="tree.hash_function",
            )

    def get_hasher(self) -> MerkleHasher:
        return get_hasher(self.hash_function)


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None

    def validate(self) -> None:
        if not isinstance(self.level, str):
            raise ConfigurationException(
                f"Log level must be a string, got {self.level!r}",
                field_path="logging.level",
            )
        if self.file is not None and not isinstance(self.file, str):
            raise ConfigurationException(
                f"Log file must be a path string, got {self.file!r}",
                field_path="logging.file",
            )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the relay merkle core.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.tree.validate()
        self.logging.validate()

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - RELAY_TREE_DEPTH: Merkle tree depth
        - RELAY_HASH_FUNCTION: keccak256 or sha256
        - RELAY_LOG_LEVEL: Log level
        - RELAY_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}TREE_DEPTH"):
            raw = os.getenv(f"{ENV_PREFIX}TREE_DEPTH", "")
            try:
                overrides.setdefault("tree", {})["depth"] = int(raw)
            except ValueError:
                raise ConfigurationException(
                    f"{ENV_PREFIX}TREE_DEPTH must be an integer, got {raw!r}",
                    field_path="tree.depth",
                ) from None
        if os.getenv(f"{ENV_PREFIX}HASH_FUNCTION"):
            overrides.setdefault("tree", {})["hash_function"] = os.getenv(f"{ENV_PREFIX}HASH_FUNCTION")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationException(f"Invalid YAML in {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigurationException(f"Config file {path} must contain a mapping")
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {}) or {}
        logging_data = data.get("logging", {}) or {}

        try:
            tree = TreeConfig(**tree_data)
            log = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

        return cls(tree=tree, logging=log, extra=data.get("extra", {}) or {})

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.get("tree", {}).items():
            setattr(new_config.tree, key, value)
        for key, value in overrides.get("logging", {}).items():
            setattr(new_config.logging, key, value)
        new_config.tree.validate()
        new_config.logging.validate()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "depth": self.tree.depth,
                "hash_function": self.tree.hash_function,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


def load_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Without an explicit path
    the first existing default location is used.
    """
    if path is not None:
        return RuntimeConfig.from_yaml(path).with_env_overrides()

    default_paths = [
        Path.cwd() / "relay.yaml",
        Path.cwd() / ".relay.yaml",
        Path.home() / ".config" / "relay" / "config.yaml",
    ]
    for default_path in default_paths:
        if default_path.exists():
            return RuntimeConfig.from_yaml(default_path).with_env_overrides()

    return RuntimeConfig.from_env()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return yaml.safe_dump(RuntimeConfig().to_dict(), sort_keys=False)
