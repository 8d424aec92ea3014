"""
Core data models for the patient intake pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .classified_error import ClassifiedError, ErrorKind, IngestionError
from .ingestion_result import IngestionResult
from .parsed_table import ParsedTable
from .patient_record import (
    RECOGNIZED_COLUMNS,
    REQUIRED_COLUMNS,
    PatientRecord,
    resolve_field_name,
)
from .sync_payload import SyncPayload
from .uploaded_file import UploadedFile

__all__ = [
    "RECOGNIZED_COLUMNS",
    "REQUIRED_COLUMNS",
    "PatientRecord",
    "resolve_field_name",
    "ClassifiedError",
    "ErrorKind",
    "IngestionError",
    "IngestionResult",
    "ParsedTable",
    "SyncPayload",
    "UploadedFile",
]
