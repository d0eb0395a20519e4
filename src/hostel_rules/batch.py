"""Batch validation of student rows with interactive editing and commit."""

import logging
from collections import Counter

from .constants import DEPENDENT_FIELDS, ROW_FIELDS
from .exceptions import AllocationConflictError, InvalidOperationError, RulesEngineError
from .models import (
    BatchSummary,
    CommitFailure,
    CommitResult,
    ErrorMap,
    InvalidRow,
    StudentRow,
    ValidationPartition,
)
from .repository import StudentRepository
from .validators import RowValidator, ValidationContext

logger = logging.getLogger(__name__)


class BatchValidationCoordinator:
    """Holds a working set of rows and their index-aligned ErrorMaps.

    Editing a row re-validates that row only. Commit hands only valid rows to
    the persistence collaborator; the coordinator itself performs no I/O.
    """

    def __init__(
        self,
        rows: list[StudentRow],
        validator: RowValidator | None = None,
        context: ValidationContext | None = None,
    ) -> None:
        self.validator = validator or RowValidator()
        self.context = context or ValidationContext()
        self.rows: list[StudentRow] = list(rows)
        self.errors: list[ErrorMap] = self.validator.validate_all(self.rows, self.context)

        summary = self.summary()
        logger.info(
            f"Validated {summary.total_rows} rows: "
            f"{summary.valid_rows} valid, {summary.invalid_rows} invalid"
        )

    def __len__(self) -> int:
        return len(self.rows)

    def set_field(self, index: int, field: str, value: str | None) -> ErrorMap:
        """Edit one field of a row and re-validate that row.

        Changing Course clears Branch and Batch; changing Gender clears
        Category and RoomNumber; changing Category clears RoomNumber.

        Args:
            index: Row position
            field: Column name (e.g. "Course")
            value: New raw value

        Returns:
            The row's new ErrorMap

        Raises:
            KeyError: If the field is not a known column
            IndexError: If the index is out of range
        """
        if field not in ROW_FIELDS:
            raise KeyError(f"Unknown field: '{field}'")

        row = self.rows[index]
        previous = row.get(field)
        row = row.with_field(field, value.strip() if isinstance(value, str) else value)

        if row.get(field) != previous:
            for dependent in DEPENDENT_FIELDS.get(field, []):
                row = row.with_field(dependent, None)

        self.rows[index] = row
        self.errors[index] = self.validator.validate(row, self.context)
        logger.debug(f"Row {index}: set {field}, {len(self.errors[index])} error(s)")
        return self.errors[index]

    def remove_row(self, index: int) -> StudentRow:
        """Remove a row and its ErrorMap.

        Raises:
            IndexError: If the index is out of range
        """
        row = self.rows.pop(index)
        self.errors.pop(index)
        return row

    def revalidate(self) -> None:
        """Re-run validation over every row (e.g. after reference data changes)."""
        self.errors = self.validator.validate_all(self.rows, self.context)

    def is_valid(self, index: int) -> bool:
        return not self.errors[index]

    def partition(self) -> ValidationPartition:
        """Split rows into valid rows and invalid rows with their errors."""
        partition = ValidationPartition()
        for index, (row, errors) in enumerate(zip(self.rows, self.errors)):
            if errors:
                partition.invalid_rows.append(InvalidRow(index=index, row=row, errors=dict(errors)))
            else:
                partition.valid_rows.append(row)
        return partition

    def summary(self) -> BatchSummary:
        """Count valid/invalid rows and errors per field."""
        by_field: Counter[str] = Counter()
        for errors in self.errors:
            by_field.update(errors.keys())

        invalid = sum(1 for errors in self.errors if errors)
        return BatchSummary(
            total_rows=len(self.rows),
            valid_rows=len(self.rows) - invalid,
            invalid_rows=invalid,
            errors_by_field={f: by_field[f] for f in ROW_FIELDS if by_field[f]},
        )

    def commit(self, repository: StudentRepository) -> CommitResult:
        """Persist valid rows, one at a time.

        A row the repository rejects is reported as failed; it does not stop
        the remaining rows. Saved rows leave the batch, so a later commit only
        retries rejected rows and rows fixed since.

        Raises:
            InvalidOperationError: If there are no valid rows
        """
        valid_indices = [index for index, errors in enumerate(self.errors) if not errors]
        if not valid_indices:
            raise InvalidOperationError("No valid rows to commit")

        result = CommitResult()
        saved: set[int] = set()
        for index in valid_indices:
            row = self.rows[index]
            try:
                repository.save_student(row)
            except AllocationConflictError as e:
                logger.warning(f"Row {row.roll_number} rejected: {e}")
                result.failed.append(CommitFailure(row=row, reason=str(e)))
            except RulesEngineError as e:
                logger.error(f"Row {row.roll_number} could not be saved: {e}")
                result.failed.append(CommitFailure(row=row, reason=str(e)))
            else:
                result.succeeded.append(row)
                saved.add(index)

        self.rows = [row for index, row in enumerate(self.rows) if index not in saved]
        self.errors = [errors for index, errors in enumerate(self.errors) if index not in saved]

        logger.info(
            f"Committed {result.succeeded_count} rows, {result.failed_count} rejected, "
            f"{len(self.rows)} left in batch"
        )
        return result
