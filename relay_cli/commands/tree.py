"""
Module 06 - CLI Root Command

Rebuild the builder from a leaf file and print both trees' state.

Usage:
    relay root leaves.json [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from relay_core.config.runtime import RuntimeConfig
from relay_core.leaves import load_leaves, rebuild_builder
from relay_core.merkle.builder import MerkleTreeBuilder


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0


def build_from_file(leaves_file: str | Path, config: RuntimeConfig) -> MerkleTreeBuilder:
    """Load persisted leaves and replay them into a fresh builder."""
    records = load_leaves(leaves_file)
    builder = rebuild_builder(records, config)
    logger.debug(f"Rebuilt {builder}")
    return builder


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    builder = build_from_file(args.leaves_file, args.runtime_config)

    if args.json:
        state = builder.describe()
        state["hash_function"] = builder.hasher.name
        state["depth"] = builder.depth
        print(json.dumps(state, indent=2))
    else:
        print(builder)

    return EXIT_SUCCESS
