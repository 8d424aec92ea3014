"""
FileTypeValidator - ensures the upload is declared or named as CSV.
"""

from typing import Any

from patient_intake.core.models import UploadedFile
from .base_validator import BaseValidator

CSV_MEDIA_TYPE = "text/csv"
CSV_EXTENSION = ".csv"


class FileTypeValidator(BaseValidator):
    """
    Validates the declared media type or the file name extension.

    Passes when the media type is text/csv OR the name ends with ".csv"
    (case-sensitive). Content is never inspected.
    """

    def __init__(self, parameters: dict[str, Any] | None = None):
        super().__init__(parameters)
        self.media_type = self.parameters.get("media_type", CSV_MEDIA_TYPE)
        self.extension = self.parameters.get("extension", CSV_EXTENSION)

    def validate(self, subject: UploadedFile) -> None:
        """
        Validate the file type.

        Args:
            subject: The uploaded file

        Raises:
            IngestionError: If the subject is not an upload, or neither the
                media type nor the extension match
        """
        if not isinstance(subject, UploadedFile):
            raise self.fail("Invalid file type", "Please upload a CSV file")
        if subject.content_type != self.media_type and not subject.name.endswith(self.extension):
            raise self.fail("Invalid file type", "Please upload a CSV file")

    @property
    def check_name(self) -> str:
        return "file_type"
