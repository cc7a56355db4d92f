"""
Module 06 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m relay_cli root <leaves_file> [--json]
    python -m relay_cli prove <leaves_file> --leaf-index N [--root-index M | --checkpoint PATH] [--out PATH] [--json]
    python -m relay_cli verify <proof_file> [--checkpoint PATH] [--json]
    python -m relay_cli config --init | --show

Environment Variables:
    RELAY_TREE_DEPTH            Merkle tree depth (default: 32)
    RELAY_HASH_FUNCTION         keccak256 (default) or sha256
    RELAY_LOG_LEVEL             Log level (default: INFO)
    RELAY_LOG_FILE              Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from relay_cli.commands import prove, tree, verify
from relay_core.config.runtime import get_default_config_template, load_config
from relay_core.schemas.errors import RelayException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="relay",
        description="Relay merkle CLI - Rebuild message trees, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./relay.yaml or ~/.config/relay/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Rebuild the tree from a leaf file and show both roots",
        description="Replay persisted leaves and print the incremental and prover (root, count) pairs.",
    )
    root_parser.add_argument(
        "leaves_file",
        type=str,
        help="Leaf file (JSON array or one 0x-hex digest per line)",
    )
    root_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    root_parser.set_defaults(func=tree.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof against a historical root",
        description="Replay persisted leaves and prove one leaf against the root at a past tree size.",
    )
    prove_parser.add_argument(
        "leaves_file",
        type=str,
        help="Leaf file (JSON array or one 0x-hex digest per line)",
    )
    prove_parser.add_argument(
        "--leaf-index",
        type=int,
        required=True,
        help="Index of the leaf to prove",
    )
    target = prove_parser.add_mutually_exclusive_group()
    target.add_argument(
        "--root-index",
        type=int,
        default=None,
        help="Index of the last leaf covered by the target root (default: latest)",
    )
    target.add_argument(
        "--checkpoint",
        type=str,
        default=None,
        help="Signed checkpoint JSON ({\"root\": \"0x..\", \"index\": N}) to prove against",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof JSON to this path",
    )
    prove_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the proof as JSON",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof JSON file offline",
        description="Fold the proof path and compare with its root, optionally with a signed checkpoint.",
    )
    verify_parser.add_argument(
        "proof_file",
        type=str,
        help="Proof JSON produced by 'relay prove'",
    )
    verify_parser.add_argument(
        "--checkpoint",
        type=str,
        default=None,
        help="Signed checkpoint JSON the proof must match",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="relay.yaml",
        help="Path for config file (default: relay.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (RELAY_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: relay config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, RelayException) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except RelayException as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
