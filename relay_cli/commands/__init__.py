"""
CLI command modules.
"""

from relay_cli.commands import prove, tree, verify

__all__ = ["prove", "tree", "verify"]
