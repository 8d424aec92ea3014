"""
IngestionResult model representing the terminal outcome of one ingestion attempt.
"""

from pydantic import BaseModel, model_validator

from .classified_error import ClassifiedError
from .patient_record import PatientRecord


class IngestionResult(BaseModel):
    """
    Outcome of ingesting one file: a batch of records xor a classified error.

    Attributes:
        source_name: Name of the uploaded file (None when nothing was selected)
        batch: Parsed records in source order (success only)
        error: Failure classification (failure only)
    """

    source_name: str | None = None
    batch: tuple[PatientRecord, ...] | None = None
    error: ClassifiedError | None = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_exactly_one_outcome(self) -> "IngestionResult":
        """Validate that exactly one of batch / error is set."""
        if (self.batch is None) == (self.error is None):
            raise ValueError("IngestionResult requires exactly one of batch or error")
        return self

    @classmethod
    def success(cls, batch: tuple[PatientRecord, ...], source_name: str | None = None) -> "IngestionResult":
        return cls(source_name=source_name, batch=batch)

    @classmethod
    def failure(cls, error: ClassifiedError, source_name: str | None = None) -> "IngestionResult":
        return cls(source_name=source_name, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
