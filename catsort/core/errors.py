"""
Exception hierarchy for relocation runs.

Per-file errors derive from RelocationError and map onto an OutcomeStatus;
the relocator records them and moves on. RootAccessError is the only error
that aborts a whole run.
"""

from pathlib import Path
from typing import Optional, Union

from .types import OutcomeStatus


class CatsortError(Exception):
    """Base class for all catsort errors."""


class RelocationError(CatsortError):
    """A failure confined to a single source file."""

    status: OutcomeStatus = OutcomeStatus.FAILED_IO

    def __init__(
        self,
        path: Union[str, Path],
        reason: str,
        destination: Optional[Path] = None,
    ):
        self.path = Path(path)
        self.reason = reason
        self.destination = destination
        super().__init__(f"{path}: {reason}")


class NoCategory(RelocationError):
    """The file carries no usable category line."""

    status = OutcomeStatus.SKIPPED_NO_CATEGORY


class DestinationConflict(RelocationError):
    """Another file already occupies, or has claimed, the destination."""

    status = OutcomeStatus.FAILED_CONFLICT


class IOFailure(RelocationError):
    """Reading, creating, copying or moving failed at the OS level."""

    status = OutcomeStatus.FAILED_IO


class InvalidCategoryForFilesystem(RelocationError):
    """The category cannot be used as a single directory name."""

    status = OutcomeStatus.FAILED_INVALID_CATEGORY


class RootAccessError(CatsortError):
    """A root directory could not be read at all."""

    def __init__(self, root: Union[str, Path], reason: str):
        self.root = Path(root)
        self.reason = reason
        super().__init__(f"Cannot access root {root}: {reason}")
