"""Tests for report types and the error taxonomy."""

from pathlib import Path

import pytest

from catsort.core.errors import (
    DestinationConflict,
    InvalidCategoryForFilesystem,
    IOFailure,
    NoCategory,
    RelocationError,
    RootAccessError,
)
from catsort.core.types import FileOutcome, OutcomeStatus, RelocationReport, SourceFile


def _outcome(name: str, status: OutcomeStatus) -> FileOutcome:
    return FileOutcome(source_path=Path(name), status=status, reason=status.value)


class TestRelocationReport:
    """Test report accounting."""

    def test_empty_report(self):
        report = RelocationReport()

        assert report.total_files == 0
        assert all(count == 0 for count in report.counts().values())
        assert set(report.counts()) == set(OutcomeStatus)
        assert not report.has_failures

    def test_counts_per_status(self):
        report = RelocationReport()
        report.add(_outcome("a.txt", OutcomeStatus.MOVED))
        report.add(_outcome("b.txt", OutcomeStatus.MOVED))
        report.add(_outcome("c.txt", OutcomeStatus.SKIPPED_NO_CATEGORY))
        report.add(_outcome("d.txt", OutcomeStatus.FAILED_CONFLICT))
        report.add(_outcome("e.txt", OutcomeStatus.FAILED_IO))

        assert report.total_files == 5
        assert report.moved == 2
        assert report.skipped_no_category == 1
        assert report.failed_conflict == 1
        assert report.failed_io == 1
        assert report.counts()[OutcomeStatus.FAILED_INVALID_CATEGORY] == 0

    def test_failures_list_paths_in_order(self):
        report = RelocationReport()
        report.add(_outcome("ok.txt", OutcomeStatus.MOVED))
        report.add(_outcome("clash.txt", OutcomeStatus.FAILED_CONFLICT))
        report.add(_outcome("skip.txt", OutcomeStatus.SKIPPED_ALREADY_PLACED))
        report.add(_outcome("bad.txt", OutcomeStatus.FAILED_INVALID_CATEGORY))

        assert [f.source_path for f in report.failures] == [
            Path("clash.txt"),
            Path("bad.txt"),
        ]
        assert report.has_failures

    @pytest.mark.parametrize(
        "status,is_failure",
        [
            (OutcomeStatus.MOVED, False),
            (OutcomeStatus.SKIPPED_NO_CATEGORY, False),
            (OutcomeStatus.SKIPPED_ALREADY_PLACED, False),
            (OutcomeStatus.FAILED_CONFLICT, True),
            (OutcomeStatus.FAILED_IO, True),
            (OutcomeStatus.FAILED_INVALID_CATEGORY, True),
        ],
    )
    def test_is_failure(self, status, is_failure):
        assert status.is_failure is is_failure


class TestSourceFile:
    """Test the discovered-file model."""

    def test_components(self):
        source = SourceFile(path=Path("archive/2024/file17.txt"), root=Path("archive"))
        assert source.directory == "archive/2024"
        assert source.name == "file17.txt"

    def test_file_in_current_directory(self):
        source = SourceFile(path=Path("file17.txt"), root=Path("."))
        assert source.directory == ""

    def test_immutable(self):
        source = SourceFile(path=Path("a.txt"), root=Path("."))
        with pytest.raises(Exception):
            source.path = Path("b.txt")


class TestErrors:
    """Test the error taxonomy."""

    @pytest.mark.parametrize(
        "error_cls,status",
        [
            (NoCategory, OutcomeStatus.SKIPPED_NO_CATEGORY),
            (DestinationConflict, OutcomeStatus.FAILED_CONFLICT),
            (IOFailure, OutcomeStatus.FAILED_IO),
            (InvalidCategoryForFilesystem, OutcomeStatus.FAILED_INVALID_CATEGORY),
        ],
    )
    def test_status_mapping(self, error_cls, status):
        error = error_cls("archive/a.txt", "reason")
        assert isinstance(error, RelocationError)
        assert error.status == status
        assert error.path == Path("archive/a.txt")
        assert str(error) == "archive/a.txt: reason"

    def test_conflict_carries_destination(self):
        error = DestinationConflict("a.txt", "taken", destination=Path("cafe/a.txt"))
        assert error.destination == Path("cafe/a.txt")

    def test_root_access_error_is_not_per_file(self):
        error = RootAccessError("archive", "does not exist")
        assert not isinstance(error, RelocationError)
        assert "archive" in str(error)
