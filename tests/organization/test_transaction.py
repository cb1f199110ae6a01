"""Tests for transaction logging."""

import json
import os
from pathlib import Path

import pytest

from catsort.organization.transaction import (
    MoveMethod,
    TransactionLog,
    TransactionOperation,
    TransactionStatus,
)


def _log_with(*operation_ids: str) -> TransactionLog:
    log = TransactionLog(transaction_id="tx123")
    for operation_id in operation_ids:
        log.add_operation(
            operation_id=operation_id,
            source_path=Path(f"archive/{operation_id}.txt"),
            target_path=Path(f"cafe/archive-{operation_id}.txt"),
        )
    return log


class TestTransactionOperation:
    """Test transaction operation model."""

    def test_create_operation(self):
        """Test creating a transaction operation."""
        op = TransactionOperation(
            operation_id="op123",
            source_path=Path("archive/2024/file17.txt"),
            target_path=Path("cafe/archive-2024-file17.txt"),
        )

        assert op.operation_id == "op123"
        assert op.source_path == Path("archive/2024/file17.txt")
        assert op.target_path == Path("cafe/archive-2024-file17.txt")
        assert op.method == MoveMethod.RENAME
        assert op.checksum is None
        assert op.status == TransactionStatus.PENDING
        assert op.error_message is None

    def test_operation_with_error(self):
        """Test operation with error message."""
        op = TransactionOperation(
            operation_id="op123",
            source_path=Path("archive/a.txt"),
            target_path=Path("cafe/archive-a.txt"),
            method=MoveMethod.COPY,
            status=TransactionStatus.FAILED,
            error_message="No space left on device",
        )

        assert op.method == MoveMethod.COPY
        assert op.status == TransactionStatus.FAILED
        assert op.error_message == "No space left on device"


class TestTransactionLog:
    """Test transaction log."""

    def test_create_transaction_log(self):
        """Test creating a transaction log."""
        log = TransactionLog(transaction_id="tx123", dry_run=False)

        assert log.transaction_id == "tx123"
        assert log.dry_run is False
        assert len(log.operations) == 0
        assert log.completed_at is None

    def test_add_operation(self):
        """Test adding operation to log."""
        log = _log_with("op1")

        assert len(log.operations) == 1
        assert log.operations[0].operation_id == "op1"
        assert log.get_operation("op1") is log.operations[0]
        assert log.get_operation("missing") is None

    def test_update_operation_status(self):
        """Test updating status, method and checksum."""
        log = _log_with("op1")

        log.update_operation_status(
            "op1", TransactionStatus.COMPLETED, method=MoveMethod.COPY, checksum="abc"
        )

        op = log.operations[0]
        assert op.status == TransactionStatus.COMPLETED
        assert op.method == MoveMethod.COPY
        assert op.checksum == "abc"

    def test_update_operation_with_error(self):
        """Test updating operation status with error message."""
        log = _log_with("op1")

        log.update_operation_status("op1", TransactionStatus.FAILED, "Checksum mismatch")

        assert log.operations[0].status == TransactionStatus.FAILED
        assert log.operations[0].error_message == "Checksum mismatch"

    def test_update_unknown_operation_is_ignored(self):
        log = _log_with("op1")
        log.update_operation_status("nope", TransactionStatus.FAILED)
        assert log.operations[0].status == TransactionStatus.PENDING

    def test_get_statistics(self):
        """Test getting transaction statistics."""
        log = _log_with("op1", "op2", "op3")

        log.update_operation_status("op1", TransactionStatus.COMPLETED)
        log.update_operation_status("op2", TransactionStatus.FAILED)
        log.update_operation_status("op3", TransactionStatus.ROLLED_BACK)

        stats = log.get_statistics()

        assert stats["total"] == 3
        assert stats["completed"] == 1
        assert stats["failed"] == 1
        assert stats["rolled_back"] == 1
        assert stats["pending"] == 0

    def test_get_rollback_operations(self):
        """Test that only completed operations are rolled back."""
        log = _log_with("op1", "op2", "op3")
        log.update_operation_status("op1", TransactionStatus.COMPLETED)
        log.update_operation_status("op2", TransactionStatus.FAILED)

        rollback_ops = log.get_rollback_operations()

        assert [op.operation_id for op in rollback_ops] == ["op1"]

    def test_save_and_load(self, tmp_path):
        """Test saving and loading transaction log."""
        log = _log_with("op1")
        log.update_operation_status("op1", TransactionStatus.COMPLETED)

        log_path = tmp_path / "tx123.json"
        log.save(log_path)

        with open(log_path) as f:
            data = json.load(f)
        assert data["transaction_id"] == "tx123"
        assert data["operations"][0]["status"] == "completed"
        assert data["operations"][0]["method"] == "rename"

        loaded_log = TransactionLog.load(log_path)

        assert loaded_log.transaction_id == "tx123"
        assert loaded_log.operations[0].operation_id == "op1"
        assert loaded_log.operations[0].status == TransactionStatus.COMPLETED
        assert loaded_log.operations[0].source_path == Path("archive/op1.txt")

    def test_save_creates_parent_directory(self, tmp_path):
        """Test that save creates parent directories."""
        log = TransactionLog(transaction_id="tx123")

        log_path = tmp_path / "transactions" / "tx123.json"
        log.save(log_path)

        assert log_path.exists()

    def test_non_utf8_paths_round_trip(self, tmp_path):
        """Test that surrogate-escaped paths survive JSON."""
        source = Path(os.fsdecode(b"raw/caf\xe9.txt"))
        log = TransactionLog(transaction_id="tx123")
        log.add_operation("op1", source, Path("cafe/raw-x.txt"))

        log_path = tmp_path / "tx123.json"
        log.save(log_path)
        loaded = TransactionLog.load(log_path)

        assert os.fsencode(loaded.operations[0].source_path) == b"raw/caf\xe9.txt"

    @pytest.mark.parametrize("dry_run", [True, False])
    def test_dry_run_flag(self, dry_run):
        assert TransactionLog(transaction_id="tx", dry_run=dry_run).dry_run is dry_run
