"""
ParsedTable model representing the structural parse of a CSV upload (ephemeral).
"""

from pydantic import BaseModel, Field


class ParsedTable(BaseModel):
    """
    Header names and data rows of a parsed delimited file.

    Note: ParsedTable is ephemeral; it exists only between the structural
    parse and row mapping.

    Attributes:
        fieldnames: Header row, in file order
        rows: One dict per non-blank data row, header name -> cell value
    """

    fieldnames: tuple[str, ...] = ()
    rows: list[dict[str, str]] = Field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)
