"""
Type definitions for the relocation system.
"""

from collections import Counter
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OutcomeStatus(str, Enum):
    """Result of processing a single source file."""

    MOVED = "moved"
    SKIPPED_NO_CATEGORY = "skipped_no_category"
    SKIPPED_ALREADY_PLACED = "skipped_already_placed"
    FAILED_CONFLICT = "failed_conflict"
    FAILED_IO = "failed_io"
    FAILED_INVALID_CATEGORY = "failed_invalid_category"

    @property
    def is_failure(self) -> bool:
        return self.value.startswith("failed_")


class SourceFile(BaseModel):
    """A regular file found during discovery.

    ``path`` is the path exactly as discovery spelled it. Names that are not
    valid UTF-8 are carried with surrogate escapes, so ``os.fsencode`` always
    gives back the original bytes.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: Path
    root: Path

    @property
    def directory(self) -> str:
        """Directory component as a string ('' for a file in the current directory)."""
        parent = str(self.path.parent)
        return "" if parent == "." else parent

    @property
    def name(self) -> str:
        return self.path.name


class FileOutcome(BaseModel):
    """What happened to one source file."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source_path: Path
    status: OutcomeStatus
    category: Optional[str] = None
    destination: Optional[Path] = None
    reason: Optional[str] = None


class RelocationReport(BaseModel):
    """Structured result of a relocation run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcomes: List[FileOutcome] = Field(default_factory=list)
    dry_run: bool = False
    transaction_id: Optional[str] = None
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def total_files(self) -> int:
        return len(self.outcomes)

    def counts(self) -> Dict[OutcomeStatus, int]:
        """Count outcomes per status; every status is present, even when zero."""
        tally = Counter(outcome.status for outcome in self.outcomes)
        return {status: tally.get(status, 0) for status in OutcomeStatus}

    def with_status(self, status: OutcomeStatus) -> List[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == status]

    @property
    def moved(self) -> int:
        return len(self.with_status(OutcomeStatus.MOVED))

    @property
    def skipped_no_category(self) -> int:
        return len(self.with_status(OutcomeStatus.SKIPPED_NO_CATEGORY))

    @property
    def failed_conflict(self) -> int:
        return len(self.with_status(OutcomeStatus.FAILED_CONFLICT))

    @property
    def failed_io(self) -> int:
        return len(self.with_status(OutcomeStatus.FAILED_IO))

    @property
    def failures(self) -> List[FileOutcome]:
        """Every failed outcome, in processing order."""
        return [outcome for outcome in self.outcomes if outcome.status.is_failure]

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)
