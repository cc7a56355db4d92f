"""
Module 06 - CLI Verify Command

Verify a proof JSON file offline:
- Fold the leaf with its path and compare with the claimed root
- Optionally check the proof against a signed checkpoint

Usage:
    relay verify proof.json [--checkpoint cp.json] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from relay_cli.commands.prove import load_checkpoint
from relay_core.crypto.hashing import to_hex
from relay_core.merkle.proof import branch_root
from relay_core.schemas.records import ProofRecord


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    leaf_index: int = 0
    claimed_root: str = ""
    computed_root: str = ""
    proof_ok: bool = False
    checkpoint_ok: bool | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.checkpoint_ok is None:
            del d["checkpoint_ok"]
        if not d["errors"]:
            del d["errors"]
        return d

    @property
    def all_ok(self) -> bool:
        if not self.proof_ok:
            return False
        if self.checkpoint_ok is not None and not self.checkpoint_ok:
            return False
        return True


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    hasher = args.runtime_config.tree.get_hasher()
    record = ProofRecord.model_validate_json(Path(args.proof_file).read_text())
    proof = record.to_proof()

    computed = branch_root(proof.leaf, proof.path, proof.index, hasher)
    summary = VerifySummary(
        proof_path=args.proof_file,
        leaf_index=proof.index,
        claimed_root=record.root,
        computed_root=to_hex(computed),
        proof_ok=computed == proof.root,
    )
    if not summary.proof_ok:
        summary.errors.append("Proof path does not fold to the claimed root")

    if args.checkpoint:
        checkpoint = load_checkpoint(args.checkpoint)
        summary.checkpoint_ok = (
            checkpoint.root_bytes() == proof.root and proof.index <= checkpoint.index
        )
        if not summary.checkpoint_ok:
            summary.errors.append(
                f"Proof does not match checkpoint (root {checkpoint.root}, index {checkpoint.index})"
            )

    logger.info(f"Verified proof for leaf {proof.index}: ok={summary.all_ok}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"proof: {summary.proof_path}")
        print(f"leaf_index: {summary.leaf_index}")
        print(f"root: {summary.claimed_root}")
        print(f"proof_ok: {str(summary.proof_ok).lower()}")
        if summary.checkpoint_ok is not None:
            print(f"checkpoint_ok: {str(summary.checkpoint_ok).lower()}")
        for err in summary.errors:
            print(f"  ✗ {err}")

    return EXIT_SUCCESS if summary.all_ok else EXIT_VERIFICATION_FAILED
