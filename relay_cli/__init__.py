"""
Module 06 - Relay CLI

Command-line interface for the relay merkle core.

Usage:
    python -m relay_cli root leaves.json
    python -m relay_cli prove leaves.json --leaf-index 0 --root-index 2
    python -m relay_cli verify proof.json
    python -m relay_cli config --show
"""

__version__ = "0.1.0"
