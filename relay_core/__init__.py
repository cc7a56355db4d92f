"""
Relay merkle core.

Merkle accumulator and historical proof builder for a cross-chain
message relayer.
"""

__version__ = "0.1.0"
