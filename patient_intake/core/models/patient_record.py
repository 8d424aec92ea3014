"""
PatientRecord model representing one patient contact entry parsed from an upload.
"""

from typing import Any

from pydantic import BaseModel, Field


# Source header name -> serialization alias, in required-set order
RECOGNIZED_COLUMNS: dict[str, str] = {
    "EHR ID": "ehrId",
    "Patient Name": "patientName",
    "Email": "email",
    "Phone": "phone",
    "Referring Provider": "referringProvider",
}

REQUIRED_COLUMNS: tuple[str, ...] = tuple(RECOGNIZED_COLUMNS)

# Accepted edit names (alias or attribute) -> model attribute
_FIELD_ATTRIBUTES: dict[str, str] = {
    "ehrId": "ehr_id",
    "patientName": "patient_name",
    "email": "email",
    "phone": "phone",
    "referringProvider": "referring_provider",
    "ehr_id": "ehr_id",
    "patient_name": "patient_name",
    "referring_provider": "referring_provider",
}


def resolve_field_name(field_name: str) -> str | None:
    """
    Map a recognized field name to its model attribute.

    Args:
        field_name: camelCase alias (``ehrId``) or attribute name (``ehr_id``)

    Returns:
        Attribute name, or None if the field is not recognized
    """
    return _FIELD_ATTRIBUTES.get(field_name)


class PatientRecord(BaseModel):
    """
    One patient contact entry.

    Recognized fields always exist (empty string when the source had no value).
    Columns outside the recognized set are carried verbatim in extra_fields.

    Attributes:
        ehr_id: EHR identifier (alias ehrId)
        patient_name: Full patient name (alias patientName)
        email: Contact email
        phone: Contact phone
        referring_provider: Referring provider name (alias referringProvider)
        extra_fields: Unrecognized source columns, header name -> raw value
    """

    ehr_id: str = Field(default="", alias="ehrId")
    patient_name: str = Field(default="", alias="patientName")
    email: str = ""
    phone: str = ""
    referring_provider: str = Field(default="", alias="referringProvider")
    extra_fields: dict[str, str] = Field(default_factory=dict)

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "ehrId": "001",
                "patientName": "Jane Doe",
                "email": "jane@x.com",
                "phone": "555-1212",
                "referringProvider": "Dr. Smith",
                "extra_fields": {"Insurance": "Acme"},
            }
        }

    @classmethod
    def from_row(cls, row: dict[str, str]) -> "PatientRecord":
        """
        Build a record from one parsed CSV row keyed by header name.

        Args:
            row: Header name -> cell value

        Returns:
            PatientRecord with recognized fields defaulted to ""
        """
        values: dict[str, Any] = {
            alias: row.get(header) or "" for header, alias in RECOGNIZED_COLUMNS.items()
        }
        values["extra_fields"] = {
            header: value for header, value in row.items() if header not in RECOGNIZED_COLUMNS
        }
        return cls(**values)

    def with_field(self, field_name: str, value: str) -> "PatientRecord":
        """
        Return a copy with one recognized field replaced.

        The copy is validated and owns its own extra_fields mapping.

        Raises:
            KeyError: If field_name is not a recognized field
            ValidationError: If value is not a string
        """
        attribute = resolve_field_name(field_name)
        if attribute is None:
            raise KeyError(field_name)
        return type(self).model_validate({**self.model_dump(), attribute: value})

    def to_row(self) -> dict[str, str]:
        """Merge extra fields and recognized fields (by alias) into one flat dict."""
        row = dict(self.extra_fields)
        row.update(self.model_dump(by_alias=True, exclude={"extra_fields"}))
        return row
