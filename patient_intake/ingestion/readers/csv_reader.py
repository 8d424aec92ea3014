"""
CSV reader for in-memory uploads.
"""

import csv
import io
import sys

from patient_intake.core.models import ParsedTable

# Cells have no size cap; the csv module defaults to 128 KiB per field
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


class CSVParseError(Exception):
    """Raised when an upload cannot be decoded or parsed as delimited text."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CSVReader:
    """
    Reads CSV content held in memory into a ParsedTable.

    The first non-blank row is the header. Blank lines are skipped and never
    counted as records. A repeated header name is kept as a separate column
    with a numeric suffix (``Notes``, ``Notes_1``). Parsing is strict: malformed quoting, a data row whose
    width differs from the header, or undecodable bytes raise CSVParseError
    on the first problem found.
    """

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8"):
        """
        Initialize CSV reader.

        Args:
            delimiter: Field delimiter
            encoding: Text encoding used when content is bytes
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def read(self, content: bytes | str) -> ParsedTable:
        """
        Parse CSV content.

        Args:
            content: Raw bytes or decoded text

        Returns:
            ParsedTable with header names and data rows

        Raises:
            CSVParseError: On the first decoding or structural error
        """
        text = self._decode(content)
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self.delimiter, strict=True)

        fieldnames: list[str] | None = None
        rows: list[dict[str, str]] = []

        try:
            for row in reader:
                if not row:
                    continue
                if fieldnames is None:
                    fieldnames = self._unique_headers(row)
                    continue
                self._check_width(fieldnames, row, len(rows) + 1)
                rows.append(dict(zip(fieldnames, row)))
        except csv.Error as e:
            raise CSVParseError(f"{e} (line {reader.line_num})") from e

        return ParsedTable(fieldnames=tuple(fieldnames or ()), rows=rows)

    def _decode(self, content: bytes | str) -> str:
        """Decode bytes, dropping a leading BOM."""
        if isinstance(content, str):
            return content.lstrip("\ufeff")

        encoding = self.encoding
        if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
            encoding = "utf-8-sig"  # Strip BOM if present

        try:
            return content.decode(encoding)
        except UnicodeDecodeError as e:
            raise CSVParseError(f"Unable to decode file as {self.encoding}: {e.reason}") from e
        except LookupError as e:
            raise CSVParseError(f"Unknown encoding: {self.encoding}") from e

    @staticmethod
    def _check_width(fieldnames: list[str], row: list[str], row_number: int) -> None:
        expected, parsed = len(fieldnames), len(row)
        if parsed < expected:
            raise CSVParseError(
                f"Too few fields: expected {expected} fields but parsed {parsed} (row {row_number})"
            )
        if parsed > expected:
            raise CSVParseError(
                f"Too many fields: expected {expected} fields but parsed {parsed} (row {row_number})"
            )

    @staticmethod
    def _unique_headers(headers: list[str]) -> list[str]:
        """Rename repeated header names to ``name_1``, ``name_2``, ... so no column is lost."""
        seen: set[str] = set()
        counts: dict[str, int] = {}
        unique: list[str] = []

        for header in headers:
            name = header
            while name in seen:
                counts[header] = counts.get(header, 0) + 1
                name = f"{header}_{counts[header]}"
            seen.add(name)
            unique.append(name)

        return unique
