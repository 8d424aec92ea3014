"""
Base validator interface for upload and table checks.

All validators inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any

from patient_intake.core.models import ErrorKind, IngestionError


class BaseValidator(ABC):
    """
    Abstract base class for all ingestion validators.

    Each validator guards one step of the ingestion sequence and raises
    IngestionError with its classification when the step fails.
    """

    def __init__(self, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            parameters: Check-specific parameters (e.g., accepted extension)
        """
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, subject: Any) -> None:
        """
        Validate a subject against this check.

        Args:
            subject: What the check inspects (file selection, file, or parsed table)

        Raises:
            IngestionError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def check_name(self) -> str:
        """Return the check identifier."""
        pass

    @property
    def error_kind(self) -> ErrorKind:
        return ErrorKind.MISSING_REQUIRED_DATA

    def fail(self, message: str, details: str | None = None) -> IngestionError:
        """Build the IngestionError for this check."""
        return IngestionError(self.error_kind, message, details)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(params={self.parameters})"
