"""
Module 06 - CLI Prove Command

Generate an inclusion proof against the latest root, an explicit
historical root index, or a signed checkpoint.

Usage:
    relay prove leaves.json --leaf-index 3 [--root-index 9 | --checkpoint cp.json] [--out proof.json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from relay_cli.commands.tree import build_from_file
from relay_core.merkle.proof import MerkleProof
from relay_core.schemas.records import CheckpointRecord, ProofRecord


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_checkpoint(path: str | Path) -> CheckpointRecord:
    """Read a signed checkpoint from a JSON file."""
    return CheckpointRecord.model_validate_json(Path(path).read_text())


def print_proof_human(proof: MerkleProof) -> None:
    """Print proof in human-readable format."""
    record = ProofRecord.from_proof(proof)
    print(f"leaf_index: {record.index}")
    print(f"leaf: {record.leaf}")
    print(f"root: {record.root}")
    print(f"path ({len(record.path)}):")
    for level, sibling in enumerate(record.path):
        print(f"  [{level:2d}] {sibling}")


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    builder = build_from_file(args.leaves_file, args.runtime_config)
    if builder.count() == 0:
        print("Error: leaf file is empty, nothing to prove", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.checkpoint:
        checkpoint = load_checkpoint(args.checkpoint)
        proof = builder.get_proof_for_checkpoint(args.leaf_index, checkpoint)
    else:
        root_index = args.root_index if args.root_index is not None else builder.count() - 1
        proof = builder.get_proof(args.leaf_index, root_index)

    record = ProofRecord.from_proof(proof)
    if args.out:
        Path(args.out).write_text(record.model_dump_json(indent=2))
        logger.info(f"Wrote proof for leaf {proof.index} to {args.out}")

    if args.json:
        print(json.dumps(record.to_dict(), indent=2))
    elif not args.out:
        print_proof_human(proof)
    else:
        print(f"Proof written to {args.out}")

    return EXIT_SUCCESS
