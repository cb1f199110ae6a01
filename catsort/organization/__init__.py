"""
Organization module for relocation operations.

This module moves categorized files into a flat, category-keyed layout,
encodes each file's original directory into its new name, journals the
moves, and fingerprints the resulting tree.
"""

from .fingerprint import TreeFingerprint, fingerprint
from .path_encoder import PathEncoder, encode_destination_name, encode_directory
from .relocator import Relocator, ensure_container
from .strategy import RelocationStrategy
from .transaction import (
    MoveMethod,
    TransactionLog,
    TransactionOperation,
    TransactionStatus,
)

__all__ = [
    "TreeFingerprint",
    "fingerprint",
    "PathEncoder",
    "encode_destination_name",
    "encode_directory",
    "Relocator",
    "ensure_container",
    "RelocationStrategy",
    "MoveMethod",
    "TransactionLog",
    "TransactionOperation",
    "TransactionStatus",
]
