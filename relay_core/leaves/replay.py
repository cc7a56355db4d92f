"""
Module 05 - Leaf Replay
Rebuild a MerkleTreeBuilder from a persisted, ordered leaf sequence.

The builder trusts its caller to ingest leaves strictly in index order.
Replay is such a caller: it checks that persisted records continue
exactly at builder.count() and rejects gaps, duplicates and reordering
before the offending record reaches the trees.

Supported leaf files:
- JSON array of 0x-hex digests (index = position)
- JSON array of {"index": int, "digest": "0x..."} objects
- Plain text, one 0x-hex digest per line ('#' starts a comment line)
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, NamedTuple, Sequence

from relay_core.config.runtime import RuntimeConfig
from relay_core.crypto.hashing import digest_from_hex, to_hex
from relay_core.merkle.builder import MerkleTreeBuilder
from relay_core.schemas.errors import UpstreamException


logger = logging.getLogger(__name__)

PERSISTENCE_SOURCE = "persistence"


class LeafRecord(NamedTuple):
    """A persisted leaf: its assigned index and 32-byte digest."""
    index: int
    digest: bytes


def iter_leaf_records(digests: Iterable[bytes], start: int = 0) -> Iterable[LeafRecord]:
    """Number plain digests consecutively from start."""
    for offset, digest in enumerate(digests):
        yield LeafRecord(start + offset, digest)


def _parse_entry(position: int, entry: object) -> LeafRecord:
    if isinstance(entry, str):
        return LeafRecord(position, digest_from_hex(entry))
    if isinstance(entry, dict):
        index = entry["index"]
        # bool is an int subclass
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValueError(f"Leaf index at position {position} must be an integer, got {index!r}")
        return LeafRecord(index, digest_from_hex(entry["digest"]))
    raise ValueError(f"Unsupported leaf entry at position {position}: {entry!r}")


def parse_leaves(text: str) -> list[LeafRecord]:
    """
    Parse leaf records from the contents of a leaf file.

    Raises:
        UpstreamException: If the contents cannot be decoded
    """
    stripped = text.strip()
    try:
        if stripped.startswith("["):
            entries = json.loads(stripped)
            return [_parse_entry(i, entry) for i, entry in enumerate(entries)]

        lines = [
            line.strip()
            for line in stripped.splitlines()
            if line.strip() and not line.strip().startswith("#")
        ]
        return [LeafRecord(i, digest_from_hex(line)) for i, line in enumerate(lines)]
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise UpstreamException(
            f"Could not decode persisted leaves: {e}",
            source=PERSISTENCE_SOURCE,
            retryable=False,
        ) from e


def load_leaves(path: str | Path) -> list[LeafRecord]:
    """
    Read leaf records from a file.

    Raises:
        UpstreamException: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise UpstreamException(
            f"Could not read leaf file {path}: {e}",
            source=PERSISTENCE_SOURCE,
            details={"path": str(path)},
            retryable=True,
        ) from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise UpstreamException(
            f"Leaf file {path} is not valid UTF-8: {e}",
            source=PERSISTENCE_SOURCE,
            details={"path": str(path)},
            retryable=False,
        ) from e
    records = parse_leaves(text)
    logger.info(f"Loaded {len(records)} leaves from {path}")
    return records


def dump_leaves(digests: Sequence[bytes], path: str | Path) -> None:
    """Write digests as a JSON array of hex strings."""
    Path(path).write_text(json.dumps([to_hex(d) for d in digests], indent=2))


def replay_leaves(builder: MerkleTreeBuilder, records: Iterable[LeafRecord]) -> int:
    """
    Feed persisted records into a builder, in order.

    Returns:
        Number of leaves ingested

    Raises:
        UpstreamException: If a record's index does not continue the builder
        BuilderProverException: If the tree fills up
        RootMismatchException: If the trees drift apart
    """
    ingested = 0
    for record in records:
        expected = builder.count()
        if record.index != expected:
            raise UpstreamException(
                f"Persisted leaf out of order: expected index {expected}, got {record.index}",
                source=PERSISTENCE_SOURCE,
                details={"expected_index": expected, "index": record.index},
                retryable=False,
            )
        builder.ingest(record.digest)
        ingested += 1

    logger.info(f"Replayed {ingested} leaves; {builder}")
    return ingested


def rebuild_builder(
    records: Iterable[LeafRecord],
    config: RuntimeConfig | None = None,
) -> MerkleTreeBuilder:
    """Create a fresh builder and replay records into it."""
    builder = MerkleTreeBuilder.from_config(config or RuntimeConfig())
    replay_leaves(builder, records)
    return builder


__all__ = [
    "LeafRecord",
    "iter_leaf_records",
    "parse_leaves",
    "load_leaves",
    "dump_leaves",
    "replay_leaves",
    "rebuild_builder",
]
