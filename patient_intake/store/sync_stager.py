"""
Staging of the current batch for downstream CRM synchronization.
"""

from typing import Callable

from patient_intake.core.models import SyncPayload
from patient_intake.observability import metrics
from patient_intake.observability.logger import get_logger, log_operation
from .record_store import EditableRecordStore


logger = get_logger(__name__)

SyncConsumer = Callable[[SyncPayload], None]


def log_sync_payload(payload: SyncPayload) -> None:
    """Default consumer: the transport is not wired up, so only log what would be sent."""
    logger.info(
        "Data ready for CRM sync",
        extra={"record_count": payload.record_count, "prepared_at": payload.prepared_at.isoformat()},
    )


class SyncStager:
    """
    Builds a read-only SyncPayload from the store and hands it to a consumer.

    The stager never mutates the store and never transmits anything itself.
    """

    def __init__(self, consumer: SyncConsumer | None = None):
        """
        Initialize stager.

        Args:
            consumer: Receives each prepared payload (defaults to logging it)
        """
        self.consumer = consumer or log_sync_payload

    def prepare(self, store: EditableRecordStore) -> SyncPayload:
        """
        Snapshot the store and pass the payload to the consumer.

        Args:
            store: Store holding the current batch

        Returns:
            The payload handed to the consumer
        """
        batch = store.snapshot()

        with log_operation("Preparing CRM sync payload", logger=logger, record_count=len(batch)):
            payload = SyncPayload(
                records=[record.to_row() for record in batch],
                record_count=len(batch),
            )
            self.consumer(payload)

        metrics.record_sync_staged()
        return payload
