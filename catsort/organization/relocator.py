"""
Relocator for categorized text files.

Discovers files, reads their category, and moves each one into a
per-category container under a name that encodes its original directory.
Per-file problems are recorded in the report and never abort the run.
"""

import errno
import logging
import os
import shutil
import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set, Union

from ..analysis.category import CategoryExtractor
from ..analysis.scanner import FileFilter, FileScanner
from ..core.errors import (
    DestinationConflict,
    IOFailure,
    NoCategory,
    RelocationError,
)
from ..core.types import FileOutcome, OutcomeStatus, RelocationReport, SourceFile
from ..shared.fs_utils import compute_checksum, verify_checksum
from .strategy import RelocationStrategy
from .transaction import MoveMethod, TransactionLog, TransactionStatus

logger = logging.getLogger(__name__)

OutcomeListener = Callable[[FileOutcome], None]

_NO_HARD_LINKS = {errno.EPERM, errno.EOPNOTSUPP, errno.ENOTSUP}


def ensure_container(directory: Path) -> Path:
    """
    Create a category container if it does not exist yet.

    Calling this again for an existing container is a no-op.

    Raises:
        IOFailure: If the directory cannot be created, or a non-directory
            already occupies the path
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except FileExistsError as e:
        raise IOFailure(directory, "container path exists and is not a directory") from e
    except OSError as e:
        raise IOFailure(directory, f"cannot create container: {e.strerror or e}") from e
    return directory


class Relocator:
    """Move categorized files into a flat, category-keyed layout."""

    def __init__(
        self,
        strategy: Optional[RelocationStrategy] = None,
        extractor: Optional[CategoryExtractor] = None,
        verify_copies: bool = True,
        journal_dir: Optional[Path] = None,
    ):
        """
        Initialize relocator.

        Args:
            strategy: Relocation strategy (output directory, join character)
            extractor: Category extractor
            verify_copies: Verify checksums of cross-device copies before
                deleting the source
            journal_dir: Where to save transaction logs; None disables them
        """
        self.strategy = strategy or RelocationStrategy()
        self.extractor = extractor or CategoryExtractor()
        self.verify_copies = verify_copies
        self.journal_dir = Path(journal_dir) if journal_dir else None
        self.transaction_log: Optional[TransactionLog] = None
        self._listeners: List[OutcomeListener] = []
        self._claimed: Set[str] = set()
        self._walk_errors: List[RelocationError] = []

    def subscribe(self, listener: OutcomeListener) -> None:
        """Register a callback invoked with every per-file outcome."""
        self._listeners.append(listener)

    def _emit(self, report: RelocationReport, outcome: FileOutcome) -> None:
        report.add(outcome)
        for listener in self._listeners:
            listener(outcome)

    def discover(
        self, roots: Iterable[Union[str, Path]], file_filter: Optional[FileFilter] = None
    ) -> List[SourceFile]:
        """
        Enumerate candidate files under the roots.

        Unreadable subdirectories are remembered and reported as I/O
        failures by the next ``relocate`` call.

        Raises:
            RootAccessError: If a root cannot be accessed at all
        """
        scanner = FileScanner(file_filter)
        files = scanner.scan(roots)
        self._walk_errors = list(scanner.walk_errors)
        logger.info(f"Discovered {len(files)} candidate files")
        return files

    def reorganize(
        self,
        roots: Iterable[Union[str, Path]],
        file_filter: Optional[FileFilter] = None,
        dry_run: bool = False,
    ) -> RelocationReport:
        """
        Discover and relocate in one call.

        Args:
            roots: Root directories to scan
            file_filter: Predicate over leaf names
            dry_run: If True, plan every move without touching the filesystem

        Returns:
            Report with one outcome per discovered file
        """
        files = self.discover(roots, file_filter)
        return self.relocate(files, dry_run=dry_run)

    def relocate(
        self, files: Iterable[SourceFile], dry_run: bool = False
    ) -> RelocationReport:
        """
        Relocate already-discovered files.

        Args:
            files: Files to process, in order
            dry_run: If True, plan every move without touching the filesystem

        Returns:
            Report with one outcome per file
        """
        logger.info(f"Starting relocation ({'DRY RUN' if dry_run else 'LIVE'})")

        transaction_id = str(uuid.uuid4())
        report = RelocationReport(dry_run=dry_run, transaction_id=transaction_id)
        self.transaction_log = TransactionLog(
            transaction_id=transaction_id, dry_run=dry_run
        )
        self._claimed = set()

        for error in self._walk_errors:
            self._emit(
                report,
                FileOutcome(
                    source_path=error.path, status=error.status, reason=error.reason
                ),
            )
        self._walk_errors = []

        for source in files:
            self._emit(report, self._process_file(source, dry_run))

        report.finished_at = datetime.now()
        self.transaction_log.completed_at = report.finished_at

        if not dry_run and self.journal_dir is not None:
            self.transaction_log.save(self.journal_dir / f"{transaction_id}.json")

        counts = report.counts()
        logger.info(
            "Relocation complete: "
            + ", ".join(f"{status.value}={count}" for status, count in counts.items())
        )
        return report

    def _process_file(self, source: SourceFile, dry_run: bool) -> FileOutcome:
        """
        Process a single file, turning per-file errors into an outcome.

        Args:
            source: File to process
            dry_run: If True, don't create or move anything

        Returns:
            Outcome for this file
        """
        category: Optional[str] = None
        try:
            category = self.extractor.extract(source.path)
            if category is None:
                raise NoCategory(source.path, "no category line")

            if self.strategy.is_already_placed(source, category):
                logger.debug(f"Skipping {source.path}: already in {category}/")
                return FileOutcome(
                    source_path=source.path,
                    status=OutcomeStatus.SKIPPED_ALREADY_PLACED,
                    category=category,
                    destination=source.path,
                    reason="already in its category container",
                )

            self.strategy.validate_category(source, category)
            target_path = self.strategy.get_target_path(source, category)
            self._claim(source, target_path)

            if dry_run:
                logger.info(f"[DRY RUN] Would move {source.path} → {target_path}")
            else:
                ensure_container(target_path.parent)
                self._move(source, target_path)

            return FileOutcome(
                source_path=source.path,
                status=OutcomeStatus.MOVED,
                category=category,
                destination=target_path,
            )

        except NoCategory as e:
            logger.debug(f"Skipping {source.path}: {e.reason}")
            return FileOutcome(
                source_path=source.path, status=e.status, reason="NoCategory"
            )
        except DestinationConflict as e:
            logger.warning(f"Conflict for {source.path}: {e.reason}")
            return FileOutcome(
                source_path=source.path,
                status=e.status,
                category=category,
                destination=e.destination,
                reason=e.reason,
            )
        except RelocationError as e:
            logger.error(f"Error processing {source.path}: {e.reason}")
            return FileOutcome(
                source_path=source.path,
                status=e.status,
                category=category,
                destination=e.destination,
                reason=e.reason,
            )

    def _claim(self, source: SourceFile, target_path: Path) -> None:
        """
        Reserve a destination for this run.

        Raises:
            DestinationConflict: If the destination exists on disk or was
                already claimed by an earlier file in the run
        """
        key = os.path.abspath(target_path)
        if key in self._claimed:
            raise DestinationConflict(
                source.path,
                f"destination {target_path} already claimed by another file in this run",
                destination=target_path,
            )
        if os.path.lexists(target_path):
            raise DestinationConflict(
                source.path,
                f"destination {target_path} already exists",
                destination=target_path,
            )
        self._claimed.add(key)

    def _move(self, source: SourceFile, target_path: Path) -> None:
        """
        Move one file, atomically where the filesystem allows it.

        Raises:
            DestinationConflict: If the destination appeared in the meantime
            IOFailure: If the move fails; the source is left in place
        """
        operation_id = str(uuid.uuid4())
        if self.transaction_log:
            self.transaction_log.add_operation(
                operation_id=operation_id,
                source_path=source.path,
                target_path=target_path,
            )

        try:
            try:
                os.rename(source.path, target_path)
                method = MoveMethod.RENAME
                checksum = None
            except OSError as e:
                if e.errno != errno.EXDEV:
                    raise IOFailure(
                        source.path,
                        f"cannot move to {target_path}: {e.strerror or e}",
                        destination=target_path,
                    ) from e
                checksum = self._copy_verify_delete(source, target_path)
                method = MoveMethod.COPY

        except RelocationError as e:
            if self.transaction_log:
                self.transaction_log.update_operation_status(
                    operation_id, TransactionStatus.FAILED, e.reason
                )
            raise

        if self.transaction_log:
            self.transaction_log.update_operation_status(
                operation_id,
                TransactionStatus.COMPLETED,
                method=method,
                checksum=checksum,
            )
        logger.info(f"Moved {source.path} → {target_path}")

    def _copy_verify_delete(self, source: SourceFile, target_path: Path) -> Optional[str]:
        """
        Cross-device fallback: copy to a temporary sibling, verify, publish, delete.

        The destination only ever appears complete, and never replaces a file
        that something else created first. If the source cannot be deleted
        afterwards the published copy is withdrawn again.

        Returns:
            Verified checksum, or None when verification is disabled
        """
        temp_path = target_path.parent / f".{target_path.name}.{uuid.uuid4().hex[:8]}.partial"
        checksum: Optional[str] = None

        try:
            try:
                shutil.copy2(source.path, temp_path)
            except OSError as e:
                raise IOFailure(
                    source.path,
                    f"copy to {target_path} failed: {e.strerror or e}",
                    destination=target_path,
                ) from e

            if self.verify_copies:
                checksum = compute_checksum(source.path)
                if checksum is None or not verify_checksum(temp_path, checksum):
                    raise IOFailure(
                        source.path,
                        f"checksum mismatch after copy to {target_path}",
                        destination=target_path,
                    )

            self._publish(source, temp_path, target_path)
        finally:
            if os.path.lexists(temp_path):
                os.unlink(temp_path)

        try:
            os.unlink(source.path)
        except OSError as e:
            try:
                os.unlink(target_path)
            except OSError as cleanup_error:
                logger.error(
                    f"Could not withdraw {target_path} after failed delete of "
                    f"{source.path}: {cleanup_error}"
                )
            raise IOFailure(
                source.path,
                f"could not delete source after copying to {target_path}: "
                f"{e.strerror or e}",
                destination=target_path,
            ) from e

        logger.debug(f"Copied {source.path} across devices (sha256 {checksum})")
        return checksum

    def _publish(self, source: SourceFile, temp_path: Path, target_path: Path) -> None:
        """
        Give the verified temporary file its final name without overwriting.

        A hard link is used where the filesystem supports one. Elsewhere
        (vfat, exFAT, many SMB mounts) the name is reserved with an exclusive
        create and the temporary file is renamed over the reservation.

        Raises:
            DestinationConflict: If the destination already exists
            IOFailure: If the destination cannot be created
        """
        try:
            try:
                os.link(temp_path, target_path)
                return
            except OSError as e:
                if e.errno not in _NO_HARD_LINKS:
                    raise
                logger.debug(f"No hard links for {target_path}, reserving name instead")

            fd = os.open(target_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o600)
            os.close(fd)
            try:
                os.replace(temp_path, target_path)
            except OSError:
                os.unlink(target_path)
                raise
        except FileExistsError as e:
            raise DestinationConflict(
                source.path,
                f"destination {target_path} appeared during copy",
                destination=target_path,
            ) from e
        except OSError as e:
            raise IOFailure(
                source.path,
                f"cannot publish {target_path}: {e.strerror or e}",
                destination=target_path,
            ) from e

    def rollback(self, log_path: Path) -> TransactionLog:
        """
        Undo a journaled run by moving completed operations back.

        Operations are undone in reverse order. A target that no longer exists,
        or a source path that has been reoccupied, is logged and left alone.

        Args:
            log_path: Transaction log written by a previous run

        Returns:
            Updated transaction log (also saved back to ``log_path``)
        """
        log_path = Path(log_path)
        if not log_path.exists():
            raise ValueError(f"Transaction log not found: {log_path}")

        transaction_log = TransactionLog.load(log_path)
        operations = transaction_log.get_rollback_operations()
        operations.reverse()

        logger.info(
            f"Rolling back {len(operations)} operations of {transaction_log.transaction_id}"
        )

        for operation in operations:
            if not os.path.lexists(operation.target_path):
                logger.warning(f"Cannot roll back, target missing: {operation.target_path}")
                continue
            if os.path.lexists(operation.source_path):
                logger.warning(
                    f"Cannot roll back, source path occupied: {operation.source_path}"
                )
                continue

            try:
                operation.source_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(operation.target_path), str(operation.source_path))
            except OSError as e:
                logger.error(f"Error rolling back {operation.operation_id}: {e}")
                continue

            transaction_log.update_operation_status(
                operation.operation_id, TransactionStatus.ROLLED_BACK
            )
            logger.info(f"Moved back: {operation.target_path} → {operation.source_path}")

        transaction_log.completed_at = datetime.now()
        transaction_log.save(log_path)

        logger.info("Rollback complete")
        return transaction_log
