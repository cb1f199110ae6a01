"""Core types and errors shared by every catsort component."""

from .errors import (
    CatsortError,
    DestinationConflict,
    InvalidCategoryForFilesystem,
    IOFailure,
    NoCategory,
    RelocationError,
    RootAccessError,
)
from .types import FileOutcome, OutcomeStatus, RelocationReport, SourceFile

__all__ = [
    "CatsortError",
    "DestinationConflict",
    "InvalidCategoryForFilesystem",
    "IOFailure",
    "NoCategory",
    "RelocationError",
    "RootAccessError",
    "FileOutcome",
    "OutcomeStatus",
    "RelocationReport",
    "SourceFile",
]
