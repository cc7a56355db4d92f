"""
Test fixtures package for relay merkle tests.

This package provides factory functions for creating test objects:
- common.py: leaf factories, builder factory and a naive reference root

Usage:
    from fixtures.common import make_leaves, naive_root

    def test_something():
        leaves = make_leaves(5)
        assert builder.root() == naive_root(leaves, depth=32)
"""

from .common import (
    make_leaf,
    make_leaves,
    make_builder,
    naive_root,
)

__all__ = [
    "make_leaf",
    "make_leaves",
    "make_builder",
    "naive_root",
]
