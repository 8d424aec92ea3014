"""
Unit tests for Pydantic data models.

Tests record mapping, immutability and outcome constraints.
"""

import pytest
from pydantic import ValidationError

from patient_intake.core.models import (
    ClassifiedError,
    ErrorKind,
    IngestionError,
    IngestionResult,
    PatientRecord,
    SyncPayload,
    UploadedFile,
    resolve_field_name,
)


class TestPatientRecord:
    """Tests for PatientRecord model"""

    def test_from_row_maps_recognized_columns(self):
        """Test header names map onto the recognized fields"""
        record = PatientRecord.from_row({
            "EHR ID": "001",
            "Patient Name": "Jane Doe",
            "Email": "jane@x.com",
            "Phone": "555-1212",
            "Referring Provider": "Dr. Smith",
        })
        assert record.ehr_id == "001"
        assert record.patient_name == "Jane Doe"
        assert record.email == "jane@x.com"
        assert record.phone == "555-1212"
        assert record.referring_provider == "Dr. Smith"
        assert record.extra_fields == {}

    def test_from_row_defaults_missing_values_to_empty_string(self):
        """Test absent and empty source values become empty strings"""
        record = PatientRecord.from_row({"EHR ID": "", "Email": "a@b.c"})
        assert record.ehr_id == ""
        assert record.patient_name == ""
        assert record.email == "a@b.c"
        assert record.referring_provider == ""

    def test_from_row_keeps_unrecognized_columns(self):
        """Test open schema: unknown columns are preserved verbatim"""
        record = PatientRecord.from_row({"EHR ID": "1", "Insurance": "Acme", "Notes ": " x "})
        assert record.extra_fields == {"Insurance": "Acme", "Notes ": " x "}

    def test_header_match_is_exact(self):
        """Test differently cased headers are treated as extra columns"""
        record = PatientRecord.from_row({"email": "a@b.c"})
        assert record.email == ""
        assert record.extra_fields == {"email": "a@b.c"}

    def test_to_row_merges_aliases_and_extras(self):
        """Test to_row flattens recognized fields by alias plus extras"""
        record = PatientRecord(ehrId="1", email="a@b.c", extra_fields={"Insurance": "Acme"})
        assert record.to_row() == {
            "Insurance": "Acme",
            "ehrId": "1",
            "patientName": "",
            "email": "a@b.c",
            "phone": "",
            "referringProvider": "",
        }

    def test_to_row_recognized_field_wins_on_clash(self):
        """Test an extra column named like an alias does not shadow the field"""
        record = PatientRecord(email="real@x.com", extra_fields={"email": "shadow"})
        assert record.to_row()["email"] == "real@x.com"

    def test_record_is_frozen(self):
        """Test records cannot be mutated in place"""
        record = PatientRecord(email="a@b.c")
        with pytest.raises(ValidationError):
            record.email = "other@b.c"

    def test_with_field_returns_new_record(self):
        """Test with_field copies the record and keeps other fields"""
        record = PatientRecord(ehrId="1", email="a@b.c", extra_fields={"Insurance": "Acme"})
        updated = record.with_field("patientName", "Jane")

        assert updated is not record
        assert updated.patient_name == "Jane"
        assert updated.ehr_id == "1"
        assert updated.email == "a@b.c"
        assert updated.extra_fields == {"Insurance": "Acme"}
        assert record.patient_name == ""

    def test_with_field_rejects_unknown_field(self):
        """Test with_field refuses fields outside the recognized set"""
        with pytest.raises(KeyError):
            PatientRecord().with_field("Insurance", "x")

    def test_with_field_does_not_share_extra_fields(self):
        """Test the copy owns its extra_fields mapping"""
        record = PatientRecord(extra_fields={"Notes": "original"})
        updated = record.with_field("email", "a@b.c")

        updated.extra_fields["Notes"] = "changed"

        assert record.extra_fields == {"Notes": "original"}

    @pytest.mark.parametrize("value", [None, 42, ["a@b.c"]])
    def test_with_field_validates_value(self, value):
        """Test recognized fields stay strings after an edit"""
        with pytest.raises(ValidationError):
            PatientRecord().with_field("email", value)

    @pytest.mark.parametrize("name,attribute", [
        ("ehrId", "ehr_id"),
        ("ehr_id", "ehr_id"),
        ("patientName", "patient_name"),
        ("email", "email"),
        ("phone", "phone"),
        ("referringProvider", "referring_provider"),
        ("referring_provider", "referring_provider"),
    ])
    def test_resolve_field_name(self, name, attribute):
        """Test both alias and attribute spellings resolve"""
        assert resolve_field_name(name) == attribute

    @pytest.mark.parametrize("name", ["Email", "EHR ID", "extra_fields", ""])
    def test_resolve_field_name_unknown(self, name):
        """Test header names and internals are not editable fields"""
        assert resolve_field_name(name) is None


class TestClassifiedError:
    """Tests for ClassifiedError model"""

    def test_kind_tags(self):
        """Test error kinds keep the UI wire tags"""
        assert ErrorKind.MALFORMED_STRUCTURE.value == "parse"
        assert ErrorKind.MISSING_REQUIRED_DATA.value == "validation"
        assert ErrorKind.TRANSPORT_TIMEOUT.value == "network"

    def test_details_optional(self):
        """Test details may be omitted"""
        error = ClassifiedError(kind=ErrorKind.MISSING_REQUIRED_DATA, message="Empty CSV file")
        assert error.details is None

    def test_empty_message_rejected(self):
        """Test message must not be empty"""
        with pytest.raises(ValidationError):
            ClassifiedError(kind=ErrorKind.MALFORMED_STRUCTURE, message="")

    def test_ingestion_error_carries_classification(self):
        """Test IngestionError wraps a ClassifiedError"""
        exc = IngestionError(ErrorKind.MISSING_REQUIRED_DATA, "Missing required columns", "Email")
        assert exc.kind == ErrorKind.MISSING_REQUIRED_DATA
        assert exc.error.message == "Missing required columns"
        assert exc.error.details == "Email"
        assert "Missing required columns" in str(exc)


class TestIngestionResult:
    """Tests for IngestionResult model"""

    def test_success(self):
        """Test a success result holds a batch and no error"""
        result = IngestionResult.success((PatientRecord(),), "a.csv")
        assert result.ok
        assert len(result.batch) == 1
        assert result.error is None

    def test_empty_batch_is_still_a_batch(self):
        """Test an empty tuple counts as a batch outcome"""
        assert IngestionResult(batch=()).ok

    def test_failure(self):
        """Test a failure result holds an error and no batch"""
        error = ClassifiedError(kind=ErrorKind.TRANSPORT_TIMEOUT, message="Request timeout")
        result = IngestionResult.failure(error)
        assert not result.ok
        assert result.batch is None

    def test_both_outcomes_rejected(self):
        """Test batch and error are mutually exclusive"""
        error = ClassifiedError(kind=ErrorKind.TRANSPORT_TIMEOUT, message="Request timeout")
        with pytest.raises(ValidationError):
            IngestionResult(batch=(), error=error)

    def test_no_outcome_rejected(self):
        """Test one outcome is required"""
        with pytest.raises(ValidationError):
            IngestionResult()


class TestSyncPayload:
    """Tests for SyncPayload model"""

    def test_valid_payload(self):
        """Test a payload with matching count"""
        payload = SyncPayload(records=[{"ehrId": "1"}], record_count=1)
        assert payload.record_count == 1
        assert payload.prepared_at.tzinfo is not None

    def test_count_mismatch_rejected(self):
        """Test record_count must equal len(records)"""
        with pytest.raises(ValidationError) as exc_info:
            SyncPayload(records=[{"ehrId": "1"}], record_count=2)
        assert "record_count" in str(exc_info.value)


class TestUploadedFile:
    """Tests for UploadedFile model"""

    def test_from_path_guesses_csv_type(self, tmp_path):
        """Test reading a local .csv file"""
        path = tmp_path / "patients.csv"
        path.write_bytes(b"EHR ID\n1\n")

        upload = UploadedFile.from_path(path)

        assert upload.name == "patients.csv"
        assert upload.content_type == "text/csv"
        assert upload.content == b"EHR ID\n1\n"
        assert upload.size == 9

    def test_from_path_unknown_type(self, tmp_path):
        """Test unknown extensions get an empty content type"""
        path = tmp_path / "patients.zzunknown"
        path.write_bytes(b"x")
        assert UploadedFile.from_path(path).content_type == ""

    def test_text_content_kept_as_text(self):
        """Test str content is not coerced to bytes"""
        upload = UploadedFile(name="a.csv", content="EHR ID\n")
        assert upload.content == "EHR ID\n"
