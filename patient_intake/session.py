"""
Intake session: the page-level controller tying upload, grid and sync together.
"""

from typing import Callable

from patient_intake.core.config import IntakeSettings
from patient_intake.core.models import (
    ClassifiedError,
    IngestionResult,
    PatientRecord,
    SyncPayload,
)
from patient_intake.ingestion import IngestionPipeline
from patient_intake.ingestion.pipeline import FileSelection
from patient_intake.observability.logger import get_logger
from patient_intake.store import EditableRecordStore, SyncStager
from patient_intake.store.sync_stager import SyncConsumer


logger = get_logger(__name__)

Batch = tuple[PatientRecord, ...]

# (header label, record field) in grid column order
GRID_COLUMNS: tuple[tuple[str, str], ...] = (
    ("EHR ID", "ehrId"),
    ("Patient Name", "patientName"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("Referring Provider", "referringProvider"),
)


class IntakeSession:
    """
    One user's upload-edit-stage session.

    States:
    - awaiting upload: no batch loaded, last_error shows the latest failure
    - data loaded: the store holds the batch and accepts edits

    A successful upload replaces the batch and clears last_error. A failed
    upload records the error and leaves any loaded data as it was.
    """

    def __init__(
        self,
        settings: IntakeSettings | None = None,
        pipeline: IngestionPipeline | None = None,
        on_data_change: Callable[[Batch], None] | None = None,
        sync_consumer: SyncConsumer | None = None,
    ):
        """
        Initialize session.

        Args:
            settings: Runtime settings for the default pipeline
            pipeline: Ingestion pipeline (built from settings when None)
            on_data_change: Called with the full batch after every edit
            sync_consumer: Receives payloads from prepare_for_sync()
        """
        self.pipeline = pipeline or IngestionPipeline(settings)
        self.store = EditableRecordStore(observer=self._handle_data_change)
        self.stager = SyncStager(sync_consumer)
        self.last_error: ClassifiedError | None = None
        self.is_data_loaded = False
        self._on_data_change = on_data_change

    @property
    def is_loading(self) -> bool:
        return self.pipeline.is_loading

    @property
    def records(self) -> Batch:
        return self.store.batch

    def upload(self, selection: FileSelection) -> IngestionResult:
        """Ingest a file and, on success, load its batch into the store."""
        return self.pipeline.ingest(
            selection,
            on_success=self._handle_data_parsed,
            on_error=self._handle_error,
        )

    def edit(self, row_index: int, field_name: str, new_value: str) -> Batch:
        """Apply one cell edit; raises InvalidEditError on a bad row or field."""
        return self.store.update_field(row_index, field_name, new_value)

    def prepare_for_sync(self) -> SyncPayload:
        """Stage the current batch for CRM sync."""
        return self.stager.prepare(self.store)

    def start_new_upload(self) -> None:
        """Return to the upload state; the loaded batch stays until the next success."""
        logger.info("Upload view reset", extra={"record_count": len(self.store)})
        self.is_data_loaded = False

    def rows(self) -> list[list[str]]:
        """Grid cell values per record, in GRID_COLUMNS order."""
        return [
            [record.to_row()[field] for _, field in GRID_COLUMNS]
            for record in self.store.batch
        ]

    def close(self) -> None:
        self.pipeline.close()

    def _handle_data_parsed(self, batch: Batch) -> None:
        self.store.replace_batch(batch)
        self.is_data_loaded = True
        self.last_error = None

    def _handle_error(self, error: ClassifiedError) -> None:
        self.last_error = error

    def _handle_data_change(self, batch: Batch) -> None:
        if self._on_data_change is not None:
            self._on_data_change(batch)
