"""
Filesystem utilities for catsort.

Checksums, regular-file detection and logging setup used by the scanner,
the relocator and the CLI.
"""

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, bytes, Path]


def compute_checksum(file_path: PathLike, algorithm: str = "sha256") -> Optional[str]:
    """
    Compute cryptographic checksum of a file.

    Args:
        file_path: Path to the file
        algorithm: Hash algorithm (sha256, md5, etc.)

    Returns:
        Hexadecimal checksum string, or None on error
    """
    try:
        hash_obj = hashlib.new(algorithm)

        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                hash_obj.update(chunk)

        return hash_obj.hexdigest()
    except OSError as e:
        logger.error(f"Error computing checksum for {file_path}: {e}")
        return None


def verify_checksum(
    file_path: PathLike, expected_checksum: str, algorithm: str = "sha256"
) -> bool:
    """
    Verify that a file's checksum matches expected value.

    Args:
        file_path: Path to the file
        expected_checksum: Expected checksum value
        algorithm: Hash algorithm

    Returns:
        True if checksums match, False otherwise
    """
    actual_checksum = compute_checksum(file_path, algorithm)
    if actual_checksum is None:
        return False

    return actual_checksum.lower() == expected_checksum.lower()


def regular_file_identity(path: PathLike) -> Optional[Tuple[int, int]]:
    """
    Identity of a regular file, without following symlinks.

    Returns:
        (st_dev, st_ino) for a regular file, None for anything else or on error
    """
    try:
        st = os.lstat(path)
    except OSError:
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return (st.st_dev, st.st_ino)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set logging level to DEBUG
        quiet: If True, set logging level to WARNING
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
