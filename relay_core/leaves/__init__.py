"""
Persisted leaf loading and ordered replay into a MerkleTreeBuilder.
"""
from .replay import (
    LeafRecord,
    iter_leaf_records,
    parse_leaves,
    load_leaves,
    dump_leaves,
    replay_leaves,
    rebuild_builder,
)

__all__ = [
    "LeafRecord",
    "iter_leaf_records",
    "parse_leaves",
    "load_leaves",
    "dump_leaves",
    "replay_leaves",
    "rebuild_builder",
]
