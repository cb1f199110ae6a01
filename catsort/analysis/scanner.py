"""
File discovery.

Walks the root directories and yields every regular file whose leaf name
passes a filter. Roots are normalized and files reachable from overlapping
roots are reported once.
"""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Tuple, Union

from ..core.errors import IOFailure, RootAccessError
from ..core.types import SourceFile
from ..shared.fs_utils import regular_file_identity

logger = logging.getLogger(__name__)

FileFilter = Callable[[str], bool]


def suffix_filter(*suffixes: str) -> FileFilter:
    """Match leaf names ending in any of the given suffixes (case-sensitive)."""
    wanted = tuple(suffixes)

    def _match(name: str) -> bool:
        return name.endswith(wanted)

    return _match


def glob_filter(pattern: str) -> FileFilter:
    """Match leaf names against a shell glob, case-sensitively."""

    def _match(name: str) -> bool:
        return fnmatch.fnmatchcase(name, pattern)

    return _match


def accept_all(name: str) -> bool:
    return True


def normalize_root(root: Union[str, Path]) -> str:
    """Collapse redundant separators and ``.`` segments in a root path."""
    return os.path.normpath(os.fspath(root))


class FileScanner:
    """Discover candidate files under one or more roots."""

    def __init__(self, file_filter: Optional[FileFilter] = None):
        """
        Initialize the scanner.

        Args:
            file_filter: Predicate over leaf names; defaults to accepting all
        """
        self.file_filter = file_filter or accept_all
        self.walk_errors: List[IOFailure] = []

    def _check_root(self, root: str) -> None:
        if not os.path.exists(root):
            raise RootAccessError(root, "does not exist")
        if not os.path.isdir(root):
            raise RootAccessError(root, "not a directory")
        try:
            os.listdir(root)
        except OSError as e:
            raise RootAccessError(root, e.strerror or str(e)) from e

    def _on_walk_error(self, error: OSError) -> None:
        path = error.filename or "<unknown>"
        logger.error(f"Cannot read directory {path}: {error.strerror or error}")
        self.walk_errors.append(
            IOFailure(path, f"cannot read directory: {error.strerror or error}")
        )

    def scan(self, roots: Iterable[Union[str, Path]]) -> List[SourceFile]:
        """
        Enumerate matching regular files under every root.

        Every root is validated before any walking starts, so an inaccessible
        root aborts discovery up front. Unreadable subdirectories are
        collected in ``walk_errors`` and do not stop the scan.

        Args:
            roots: Root directories to scan

        Returns:
            Discovered files, in walk order (sorted within each directory)

        Raises:
            RootAccessError: If a root is missing, not a directory, or unreadable
        """
        normalized: List[str] = []
        for root in roots:
            root_str = normalize_root(root)
            if root_str not in normalized:
                normalized.append(root_str)

        for root_str in normalized:
            self._check_root(root_str)

        self.walk_errors = []
        seen: Set[Tuple[int, int]] = set()
        files: List[SourceFile] = []

        for root_str in normalized:
            found = 0
            for dirpath, dirnames, filenames in os.walk(
                root_str, onerror=self._on_walk_error, followlinks=False
            ):
                dirnames.sort()
                for filename in sorted(filenames):
                    if not self.file_filter(filename):
                        continue

                    file_path = os.path.join(dirpath, filename)
                    # One entry per inode, even across symlinked roots
                    key = regular_file_identity(file_path)
                    if key is None or key in seen:
                        continue

                    seen.add(key)
                    files.append(
                        SourceFile(path=Path(file_path), root=Path(root_str))
                    )
                    found += 1

            logger.info(f"Found {found} files in {root_str}")

        return files


def collect_files(
    roots: Iterable[Union[str, Path]], file_filter: Optional[FileFilter] = None
) -> List[SourceFile]:
    """Convenience wrapper: discover files without keeping walk errors."""
    return FileScanner(file_filter).scan(roots)
