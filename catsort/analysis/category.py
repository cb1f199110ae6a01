"""
Category extraction from file content.

A file declares its category on the first line that starts with the metadata
prefix (``category: `` by default). Matching is anchored at the start of the
line and case-sensitive; later matching lines are ordinary content.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

from ..core.errors import IOFailure

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "category: "


class CategoryExtractor:
    """Read the category declared by a file's first matching metadata line."""

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        """
        Initialize the extractor.

        Args:
            prefix: Literal line prefix that introduces the category value
        """
        if not prefix:
            raise ValueError("Metadata prefix must not be empty")
        self.prefix = prefix
        self._prefix_bytes = os.fsencode(prefix)

    def extract_from_lines(self, lines: Iterable[bytes]) -> Optional[str]:
        """
        Scan lines in order and return the first category value.

        Args:
            lines: Raw lines, with or without their line terminators

        Returns:
            Category string, or None if no line matches or the value is blank
        """
        for line in lines:
            if not line.startswith(self._prefix_bytes):
                continue

            value = line[len(self._prefix_bytes) :].strip()
            if not value:
                return None
            return os.fsdecode(value)

        return None

    def extract_from_stream(self, stream: BinaryIO) -> Optional[str]:
        """Extract the category from an open binary stream."""
        return self.extract_from_lines(stream)

    def extract(self, file_path: Union[str, Path]) -> Optional[str]:
        """
        Extract the category from a file on disk.

        Args:
            file_path: File to read

        Returns:
            Category string, or None when the file declares none

        Raises:
            IOFailure: If the file cannot be read
        """
        try:
            with open(file_path, "rb") as f:
                category = self.extract_from_stream(f)
        except OSError as e:
            raise IOFailure(file_path, f"cannot read file: {e.strerror or e}") from e

        if category is None:
            logger.debug(f"No category line in {file_path}")
        return category


def extract_category(
    file_path: Union[str, Path], prefix: str = DEFAULT_PREFIX
) -> Optional[str]:
    """Convenience wrapper around CategoryExtractor.extract."""
    return CategoryExtractor(prefix).extract(file_path)
