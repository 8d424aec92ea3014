"""
Ingestion check implementations.

Provides validators for file selection, file type, empty tables and
required header columns.
"""

from .base_validator import BaseValidator
from .file_presence_validator import FilePresenceValidator
from .file_type_validator import CSV_EXTENSION, CSV_MEDIA_TYPE, FileTypeValidator
from .required_columns_validator import RequiredColumnsValidator
from .row_count_validator import RowCountValidator

__all__ = [
    "BaseValidator",
    "FilePresenceValidator",
    "FileTypeValidator",
    "RowCountValidator",
    "RequiredColumnsValidator",
    "CSV_EXTENSION",
    "CSV_MEDIA_TYPE",
]
