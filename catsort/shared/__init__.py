"""
Shared utilities for catsort.
"""

from .fs_utils import (
    compute_checksum,
    regular_file_identity,
    setup_logging,
    verify_checksum,
)

__all__ = [
    "compute_checksum",
    "verify_checksum",
    "regular_file_identity",
    "setup_logging",
]
