"""
RequiredColumnsValidator - ensures every required column is in the header row.
"""

from typing import Any, Sequence

from patient_intake.core.models import REQUIRED_COLUMNS, ParsedTable
from .base_validator import BaseValidator


class RequiredColumnsValidator(BaseValidator):
    """
    Validates that the header row is a superset of the required columns.

    Header names match exactly (case- and whitespace-sensitive). The failure
    details list the missing names, in required-set order, joined by ", ".
    """

    def __init__(self, parameters: dict[str, Any] | None = None):
        super().__init__(parameters)
        self.required_columns: Sequence[str] = self.parameters.get(
            "required_columns", REQUIRED_COLUMNS
        )

    def missing_columns(self, fieldnames: Sequence[str]) -> list[str]:
        """Return required columns absent from fieldnames, in required-set order."""
        present = set(fieldnames)
        return [column for column in self.required_columns if column not in present]

    def validate(self, subject: ParsedTable) -> None:
        """
        Validate the table header.

        Args:
            subject: The parsed table

        Raises:
            IngestionError: If any required column is missing
        """
        missing = self.missing_columns(subject.fieldnames)
        if missing:
            raise self.fail("Missing required columns", ", ".join(missing))

    @property
    def check_name(self) -> str:
        return "required_columns"
