"""
Transaction logging for relocation runs.

Records every move so that a run can be audited and, on request, undone.
Undo is never automatic: a failed run leaves completed moves in place.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class TransactionStatus(str, Enum):
    """Status of a transaction operation."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    ROLLED_BACK = "rolled_back"


class MoveMethod(str, Enum):
    """How a file reached its destination."""

    RENAME = "rename"
    COPY = "copy"


class TransactionOperation(BaseModel):
    """A single file move in a transaction."""

    operation_id: str = Field(description="Unique operation ID")
    source_path: Path = Field(description="Original file path")
    target_path: Path = Field(description="Destination file path")
    method: MoveMethod = Field(
        default=MoveMethod.RENAME, description="rename, or copy-verify-delete"
    )
    checksum: Optional[str] = Field(
        default=None, description="SHA-256 of the content, when a copy was verified"
    )
    status: TransactionStatus = Field(
        default=TransactionStatus.PENDING,
        description="Operation status",
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When operation was logged",
    )
    error_message: Optional[str] = Field(
        default=None, description="Error message if failed"
    )

    model_config = ConfigDict(use_enum_values=True, arbitrary_types_allowed=True)


class TransactionLog(BaseModel):
    """Transaction log for a relocation run."""

    transaction_id: str = Field(description="Unique transaction ID")
    started_at: datetime = Field(
        default_factory=datetime.now,
        description="When transaction started",
    )
    completed_at: Optional[datetime] = Field(
        default=None, description="When transaction completed"
    )
    operations: List[TransactionOperation] = Field(
        default_factory=list, description="List of operations"
    )
    dry_run: bool = Field(default=False, description="Whether this was a dry run")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def add_operation(
        self,
        operation_id: str,
        source_path: Path,
        target_path: Path,
        method: MoveMethod = MoveMethod.RENAME,
    ) -> TransactionOperation:
        """
        Add an operation to the transaction log.

        Args:
            operation_id: Unique operation ID
            source_path: Original file path
            target_path: Destination file path
            method: Planned move method

        Returns:
            Created operation
        """
        operation = TransactionOperation(
            operation_id=operation_id,
            source_path=source_path,
            target_path=target_path,
            method=method,
        )
        self.operations.append(operation)
        return operation

    def get_operation(self, operation_id: str) -> Optional[TransactionOperation]:
        for op in self.operations:
            if op.operation_id == operation_id:
                return op
        return None

    def update_operation_status(
        self,
        operation_id: str,
        status: TransactionStatus,
        error_message: Optional[str] = None,
        method: Optional[MoveMethod] = None,
        checksum: Optional[str] = None,
    ) -> None:
        """
        Update the status of an operation.

        Args:
            operation_id: Operation ID to update
            status: New status
            error_message: Optional error message
            method: Method actually used, if it differs from the plan
            checksum: Verified checksum, for copies
        """
        op = self.get_operation(operation_id)
        if op is None:
            return

        op.status = status
        if error_message:
            op.error_message = error_message
        if method is not None:
            op.method = method
        if checksum is not None:
            op.checksum = checksum

    def get_statistics(self) -> Dict[str, int]:
        """
        Get transaction statistics.

        Returns:
            Dictionary with operation counts by status
        """
        stats = {"total": len(self.operations)}
        for status in TransactionStatus:
            stats[status.value] = 0

        for op in self.operations:
            key = TransactionStatus(op.status).value
            stats[key] += 1

        return stats

    def save(self, log_path: Path) -> None:
        """
        Save transaction log to file.

        Paths that are not valid UTF-8 are written as escaped surrogates and
        read back unchanged by ``load``.

        Args:
            log_path: Path to save log file
        """
        log_path.parent.mkdir(parents=True, exist_ok=True)

        with open(log_path, "w", encoding="utf-8") as f:
            json.dump(
                self.model_dump(mode="json"),
                f,
                indent=2,
                default=str,
            )

        logger.info(f"Saved transaction log to {log_path}")

    @classmethod
    def load(cls, log_path: Path) -> "TransactionLog":
        """
        Load transaction log from file.

        Args:
            log_path: Path to log file

        Returns:
            Loaded transaction log
        """
        with open(log_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.model_validate(data)

    def get_rollback_operations(self) -> List[TransactionOperation]:
        """
        Get operations that need to be rolled back.

        Returns:
            List of completed operations that can be rolled back
        """
        return [
            op for op in self.operations if op.status == TransactionStatus.COMPLETED
        ]
