"""
FilePresenceValidator - ensures exactly one file was selected.
"""

from typing import Any, Sequence

from patient_intake.core.models import UploadedFile
from .base_validator import BaseValidator


class FilePresenceValidator(BaseValidator):
    """
    Validates that the upload selection holds exactly one file.

    Fails if:
    - Nothing was selected (None or an empty selection)
    - More than one file was dropped
    """

    def validate(self, subject: UploadedFile | Sequence[UploadedFile] | None) -> None:
        """
        Validate the selection.

        Args:
            subject: A single file, an iterable of files, or None

        Raises:
            IngestionError: If zero or several files were selected
        """
        self.select(subject)

    def select(self, subject: Any) -> Any:
        """
        Validate the selection and return its only entry.

        The selection is consumed once, so one-shot iterables are safe.
        The entry is returned as given; the type check decides whether it
        is an acceptable upload.

        Raises:
            IngestionError: If zero or several files were selected
        """
        files = self._as_list(subject)

        if not files:
            raise self.fail("No file selected", "Please select a CSV file to upload")

        if len(files) > 1:
            raise self.fail("Multiple files selected", "Please upload a single CSV file")

        return files[0]

    @staticmethod
    def _as_list(subject: Any) -> list[Any]:
        if subject is None:
            return []
        if isinstance(subject, (UploadedFile, str, bytes)):
            return [subject]
        try:
            return list(subject)
        except TypeError:
            return [subject]

    @property
    def check_name(self) -> str:
        return "file_presence"
