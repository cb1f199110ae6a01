"""
Reproducible fingerprint of a directory tree.

The digest covers the set of regular file paths only, never content or
timestamps. Paths are taken as raw bytes, sorted by byte value and hashed
one per line, which reproduces

    cd ROOT && find . -type f | LC_ALL=C sort | sha256sum

on any host, whatever its locale.
"""

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "."


def sort_canonical(paths: List[bytes]) -> List[bytes]:
    """Byte-value ordering; no locale or collation is consulted."""
    return sorted(paths)


class TreeFingerprint:
    """Enumerate, canonically sort and hash the files under a root."""

    def __init__(self, root: Union[str, bytes, Path], prefix: str = DEFAULT_PREFIX):
        """
        Initialize the fingerprint.

        Args:
            root: Directory to fingerprint
            prefix: Spelling of the root inside each hashed path
        """
        self.root = os.fsencode(root)
        self.prefix = os.fsencode(prefix)

    def _walk(self, directory: bytes, relative: bytes, found: List[bytes]) -> None:
        with os.scandir(directory) as entries:
            for entry in entries:
                child = relative + b"/" + entry.name
                st = entry.stat(follow_symlinks=False)
                if stat.S_ISDIR(st.st_mode):
                    self._walk(entry.path, child, found)
                elif stat.S_ISREG(st.st_mode):
                    found.append(child)

    def paths(self) -> List[bytes]:
        """
        Every regular file under the root, in canonical byte order.

        Symlinks are neither followed nor listed. Directory read errors
        propagate.

        Returns:
            Sorted list of byte paths, each starting with the prefix
        """
        found: List[bytes] = []
        self._walk(self.root, self.prefix, found)
        return sort_canonical(found)

    def listing(self) -> bytes:
        """The exact byte sequence that is hashed."""
        return b"".join(path + b"\n" for path in self.paths())

    def digest(self) -> str:
        """SHA-256 of the canonical listing, as lowercase hex."""
        paths = self.paths()
        hash_obj = hashlib.sha256()
        for path in paths:
            hash_obj.update(path)
            hash_obj.update(b"\n")

        digest = hash_obj.hexdigest()
        logger.info(f"Fingerprint of {os.fsdecode(self.root)}: {digest} ({len(paths)} files)")
        return digest

    def verify(self, expected: str) -> bool:
        """Compare against a previously reported digest (case-insensitive)."""
        return self.digest() == expected.strip().lower()


def fingerprint(root: Union[str, bytes, Path], prefix: str = DEFAULT_PREFIX) -> str:
    """Fingerprint the tree under ``root``."""
    return TreeFingerprint(root, prefix).digest()
