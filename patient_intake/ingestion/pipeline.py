"""
Ingestion pipeline orchestration.

Coordinates the flow: select → type check → parse (under timeout) → validate → map
"""

import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Sequence

from patient_intake.core.config import IntakeSettings
from patient_intake.core.models import (
    ClassifiedError,
    ErrorKind,
    IngestionError,
    IngestionResult,
    PatientRecord,
    UploadedFile,
)
from patient_intake.core.validators import (
    BaseValidator,
    FilePresenceValidator,
    FileTypeValidator,
    RequiredColumnsValidator,
    RowCountValidator,
)
from patient_intake.ingestion.completion import OneShotCompletion
from patient_intake.ingestion.readers import CSVParseError, CSVReader
from patient_intake.ingestion.row_mapper import map_rows
from patient_intake.observability import metrics
from patient_intake.observability.logger import get_logger


logger = get_logger(__name__)

PARSE_ERROR_MESSAGE = "Error parsing the CSV file"
TIMEOUT_MESSAGE = "Request timeout"
TIMEOUT_DETAILS = "The file processing took too long. Please try again."

Batch = tuple[PatientRecord, ...]
FileSelection = UploadedFile | Sequence[UploadedFile] | None


class IngestionPipeline:
    """
    Turns one uploaded file into a batch of PatientRecords or a ClassifiedError.

    Flow:
    1. Exactly one file selected
    2. Media type or extension says CSV
    3. Parse on a worker thread, bounded by the timeout
    4. Structural parse (header row, blank lines skipped)
    5. At least one data row
    6. All required columns present
    7. Map every row to a PatientRecord

    Every failure is classified; nothing raises past ingest(). Each attempt
    owns its own completion, so a parse finishing after its timeout is
    discarded without touching any other attempt.
    """

    def __init__(
        self,
        settings: IntakeSettings | None = None,
        reader: CSVReader | None = None,
    ):
        """
        Initialize ingestion pipeline.

        Args:
            settings: Runtime settings (defaults apply when None)
            reader: CSV reader (built from settings when None)
        """
        self.settings = settings or IntakeSettings()
        self.reader = reader or CSVReader(
            delimiter=self.settings.delimiter,
            encoding=self.settings.encoding,
        )

        self.presence_validator = FilePresenceValidator()
        self.type_validator = FileTypeValidator()
        self.table_validators: list[BaseValidator] = [
            RowCountValidator(),
            RequiredColumnsValidator(),
        ]

        self._executor = ThreadPoolExecutor(
            max_workers=self.settings.parse_workers,
            thread_name_prefix="intake-parse",
        )
        self._in_flight = 0
        self._state_lock = threading.Lock()

    @property
    def is_loading(self) -> bool:
        """Whether any ingestion attempt is currently in flight."""
        with self._state_lock:
            return self._in_flight > 0

    def ingest(
        self,
        selection: FileSelection,
        on_success: Callable[[Batch], None] | None = None,
        on_error: Callable[[ClassifiedError], None] | None = None,
    ) -> IngestionResult:
        """
        Ingest one uploaded file.

        Exactly one of on_success / on_error is invoked, once, before returning.

        Args:
            selection: The uploaded file (or the list of dropped files)
            on_success: Called with the batch on success
            on_error: Called with the classified error on failure

        Returns:
            IngestionResult holding either the batch or the error
        """
        attempt_id = uuid.uuid4().hex[:12]
        started = time.monotonic()

        with self._state_lock:
            self._in_flight += 1
        try:
            result = self._run(selection, attempt_id)
        except Exception as e:
            logger.error(
                "Unexpected error during ingestion",
                extra={"attempt_id": attempt_id},
                exc_info=True,
            )
            result = IngestionResult.failure(self._unexpected_error(e))
        finally:
            with self._state_lock:
                self._in_flight -= 1

        duration = time.monotonic() - started
        self._report(result, attempt_id, duration)

        if result.ok:
            if on_success is not None:
                on_success(result.batch)
        elif on_error is not None:
            on_error(result.error)

        return result

    def close(self) -> None:
        """Release the parse worker threads without waiting for stragglers."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "IngestionPipeline":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _run(self, selection: FileSelection, attempt_id: str) -> IngestionResult:
        try:
            upload = self.presence_validator.select(selection)
        except IngestionError as e:
            return IngestionResult.failure(e.error)

        try:
            self.type_validator.validate(upload)
        except IngestionError as e:
            return IngestionResult.failure(e.error, getattr(upload, "name", None))

        logger.info(
            "Ingestion started",
            extra={"attempt_id": attempt_id, "file_name": upload.name, "size_bytes": upload.size},
        )

        return self._parse_with_timeout(upload, attempt_id)

    def _parse_with_timeout(self, upload: UploadedFile, attempt_id: str) -> IngestionResult:
        """Race the parse worker against the timeout; first to settle wins."""
        completion: OneShotCompletion[IngestionResult] = OneShotCompletion()

        future = self._executor.submit(self._parse, upload)
        future.add_done_callback(
            lambda done: self._settle_parse(completion, done, upload.name, attempt_id)
        )

        if not completion.wait(self.settings.timeout_seconds):
            timed_out = IngestionResult.failure(
                ClassifiedError(
                    kind=ErrorKind.TRANSPORT_TIMEOUT,
                    message=TIMEOUT_MESSAGE,
                    details=TIMEOUT_DETAILS,
                ),
                upload.name,
            )
            if completion.settle(timed_out):
                future.cancel()

        return completion.value

    def _settle_parse(
        self,
        completion: OneShotCompletion[IngestionResult],
        future: Future,
        source_name: str,
        attempt_id: str,
    ) -> None:
        if future.cancelled():
            return

        try:
            outcome = IngestionResult.success(future.result(), source_name)
        except IngestionError as e:
            outcome = IngestionResult.failure(e.error, source_name)
        except Exception as e:
            logger.error(
                "Unexpected error while parsing upload",
                extra={"attempt_id": attempt_id, "file_name": source_name},
                exc_info=True,
            )
            outcome = IngestionResult.failure(self._unexpected_error(e), source_name)

        if not completion.settle(outcome):
            logger.warning(
                "Discarded parse result that arrived after timeout",
                extra={"attempt_id": attempt_id, "file_name": source_name},
            )

    @staticmethod
    def _unexpected_error(e: Exception) -> ClassifiedError:
        return ClassifiedError(
            kind=ErrorKind.MALFORMED_STRUCTURE,
            message=PARSE_ERROR_MESSAGE,
            details=str(e) or type(e).__name__,
        )

    def _parse(self, upload: UploadedFile) -> Batch:
        """
        Parse, validate and map one upload (runs on a worker thread).

        Raises:
            IngestionError: If parsing or a table check fails
        """
        try:
            table = self.reader.read(upload.content)
        except CSVParseError as e:
            raise IngestionError(ErrorKind.MALFORMED_STRUCTURE, PARSE_ERROR_MESSAGE, e.message) from e

        for validator in self.table_validators:
            validator.validate(table)

        return map_rows(table)

    def _report(self, result: IngestionResult, attempt_id: str, duration: float) -> None:
        if result.ok:
            logger.info(
                "Ingestion succeeded",
                extra={
                    "attempt_id": attempt_id,
                    "file_name": result.source_name,
                    "record_count": len(result.batch),
                    "duration_seconds": round(duration, 3),
                },
            )
            metrics.record_ingestion(True, None, len(result.batch), duration)
        else:
            logger.warning(
                "Ingestion failed",
                extra={
                    "attempt_id": attempt_id,
                    "file_name": result.source_name,
                    "error_kind": result.error.kind.value,
                    "error_message": result.error.message,
                    "error_details": result.error.details,
                    "duration_seconds": round(duration, 3),
                },
            )
            metrics.record_ingestion(False, result.error.kind.value, 0, duration)
