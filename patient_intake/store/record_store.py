"""
Editable in-memory store for the current batch of patient records.
"""

import threading
from typing import Callable, Iterable

from patient_intake.core.models import PatientRecord, resolve_field_name
from patient_intake.observability import metrics
from patient_intake.observability.logger import get_logger


logger = get_logger(__name__)

Batch = tuple[PatientRecord, ...]
BatchObserver = Callable[[Batch], None]


class InvalidEditError(ValueError):
    """Raised when an edit addresses a missing row or an unrecognized field."""

    def __init__(self, row_index: int, field_name: str, message: str):
        self.row_index = row_index
        self.field_name = field_name
        self.message = message
        super().__init__(f"row {row_index}, field {field_name!r}: {message}")


class EditableRecordStore:
    """
    Holds the current batch and applies cell-level edits.

    The batch is an immutable tuple: every edit builds a new tuple that reuses
    the unaffected record objects and swaps exactly one position. The observer
    receives the complete new batch synchronously after each applied edit.
    Edits are serialized by a re-entrant lock, so an observer may edit again.
    """

    def __init__(
        self,
        batch: Iterable[PatientRecord] = (),
        observer: BatchObserver | None = None,
    ):
        """
        Initialize the store.

        Args:
            batch: Initial records
            observer: Called with the full batch after every edit
        """
        self._batch: Batch = tuple(batch)
        self._observer = observer
        self._lock = threading.RLock()

    @property
    def batch(self) -> Batch:
        """Current batch (read-only snapshot)."""
        return self._batch

    def snapshot(self) -> Batch:
        """Return the current batch for staging; later edits never alter it."""
        with self._lock:
            return self._batch

    @property
    def is_empty(self) -> bool:
        return not self._batch

    def __len__(self) -> int:
        return len(self._batch)

    def update_field(self, row_index: int, field_name: str, new_value: str) -> Batch:
        """
        Replace one recognized field of one record.

        Args:
            row_index: Position of the record in the batch
            field_name: Recognized field (``email``, ``ehrId``, ``patient_name``, ...)
            new_value: Replacement value

        Returns:
            The new batch

        Raises:
            InvalidEditError: If row_index is out of range, field_name is not
                recognized or new_value is not a string; the batch is left untouched
            Exception: Whatever the observer raises. The edit is already applied
                by then and stays applied.
        """
        with self._lock:
            self._check_edit(row_index, field_name, new_value)

            records = list(self._batch)
            records[row_index] = records[row_index].with_field(field_name, new_value)
            self._batch = tuple(records)

            logger.debug(
                "Record field updated",
                extra={"row_index": row_index, "field_name": field_name},
            )
            metrics.record_field_edit(resolve_field_name(field_name), applied=True)

            if self._observer is not None:
                self._notify(row_index, field_name)

            return self._batch

    def replace_batch(self, new_batch: Iterable[PatientRecord]) -> None:
        """Discard the current batch and hold new_batch instead. The observer is not called."""
        with self._lock:
            self._batch = tuple(new_batch)
            logger.debug("Record batch replaced", extra={"record_count": len(self._batch)})

    def reset(self) -> None:
        """Drop all records."""
        self.replace_batch(())

    def _notify(self, row_index: int, field_name: str) -> None:
        try:
            self._observer(self._batch)
        except Exception as e:
            logger.error(
                f"Observer failed after edit: {e}",
                extra={"row_index": row_index, "field_name": field_name},
                exc_info=True,
            )
            raise

    def _check_edit(self, row_index: int, field_name: str, new_value: str) -> None:
        if isinstance(row_index, bool) or not isinstance(row_index, int):
            self._reject(row_index, field_name, "row index must be an integer")

        if not 0 <= row_index < len(self._batch):
            self._reject(
                row_index,
                field_name,
                f"row index out of range for batch of {len(self._batch)} records",
            )

        if resolve_field_name(field_name) is None:
            self._reject(row_index, field_name, "field is not a recognized patient field")

        if not isinstance(new_value, str):
            self._reject(row_index, field_name, "new value must be a string")

    @staticmethod
    def _reject(row_index: int, field_name: str, message: str) -> None:
        attribute = resolve_field_name(field_name) if isinstance(field_name, str) else None
        metrics.record_field_edit(attribute or "unrecognized", applied=False)
        raise InvalidEditError(row_index, field_name, message)
