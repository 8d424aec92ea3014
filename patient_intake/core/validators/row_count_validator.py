"""
RowCountValidator - ensures a parsed table has at least one data row.
"""

from patient_intake.core.models import ParsedTable
from .base_validator import BaseValidator


class RowCountValidator(BaseValidator):
    """Validates that the parsed table is not header-only or blank."""

    def validate(self, subject: ParsedTable) -> None:
        if not subject.rows:
            raise self.fail("Empty CSV file", "The uploaded file does not contain any data rows")

    @property
    def check_name(self) -> str:
        return "row_count"
