"""
SyncPayload model representing a staged snapshot handed to the CRM sync consumer.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator


class SyncPayload(BaseModel):
    """
    Read-only snapshot of the current batch, prepared for CRM synchronization.

    Attributes:
        records: One flat dict per record (recognized fields by alias plus extra fields)
        record_count: Number of records staged
        prepared_at: When the snapshot was taken (UTC)
    """

    records: list[dict[str, Any]] = Field(default_factory=list)
    record_count: int = Field(..., ge=0)
    prepared_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("record_count")
    @classmethod
    def check_count_matches_records(cls, v, info):
        """Validate that record_count equals the number of staged records."""
        records = info.data.get("records", [])
        if v != len(records):
            raise ValueError(
                f"record_count ({v}) must match number of records ({len(records)})"
            )
        return v

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "records": [
                    {
                        "ehrId": "001",
                        "patientName": "Jane Doe",
                        "email": "jane@x.com",
                        "phone": "555-1212",
                        "referringProvider": "Dr. Smith",
                    }
                ],
                "record_count": 1,
            }
        }
