"""
ClassifiedError model representing one failed ingestion attempt.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """
    Flat ingestion failure taxonomy.

    Values are the tags existing upload UIs match on.
    """

    MALFORMED_STRUCTURE = "parse"
    MISSING_REQUIRED_DATA = "validation"
    TRANSPORT_TIMEOUT = "network"


class ClassifiedError(BaseModel):
    """
    Tagged failure outcome of an ingestion attempt.

    Attributes:
        kind: Failure class
        message: Short human-readable summary (matched verbatim by UIs)
        details: Optional diagnostic elaboration
    """

    kind: ErrorKind
    message: str = Field(..., min_length=1)
    details: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "kind": "validation",
                "message": "Missing required columns",
                "details": "Email, Phone, Referring Provider",
            }
        }


class IngestionError(Exception):
    """Raised inside the ingestion pipeline when a step fails; carries the classification."""

    def __init__(self, kind: ErrorKind, message: str, details: str | None = None):
        self.error = ClassifiedError(kind=kind, message=message, details=details)
        super().__init__(f"[{kind.value}] {message}" + (f": {details}" if details else ""))

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind
