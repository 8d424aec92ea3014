"""
UploadedFile model representing the single file handed to the ingestion pipeline.
"""

import mimetypes
from pathlib import Path

from pydantic import BaseModel, Field


class UploadedFile(BaseModel):
    """
    A file-like upload held entirely in memory.

    Attributes:
        name: File name as supplied by the client
        content_type: Declared media type (empty when the client sent none)
        content: Raw bytes or already-decoded text
    """

    name: str
    content_type: str = ""
    content: bytes | str = Field(default=b"", repr=False)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "patients.csv",
                "content_type": "text/csv",
                "content": "EHR ID,Patient Name,Email,Phone,Referring Provider\n",
            }
        }

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadedFile":
        """
        Read a local file into an UploadedFile, guessing its media type.

        Args:
            path: Local file path

        Returns:
            UploadedFile with the file's bytes
        """
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=file_path.name,
            content_type=content_type or "",
            content=file_path.read_bytes(),
        )

    @property
    def size(self) -> int:
        return len(self.content)
