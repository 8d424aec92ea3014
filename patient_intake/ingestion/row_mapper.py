"""
Row mapping from parsed CSV rows to PatientRecord batches.
"""

from patient_intake.core.models import ParsedTable, PatientRecord


def map_rows(table: ParsedTable) -> tuple[PatientRecord, ...]:
    """
    Map every data row of a parsed table to a PatientRecord.

    No row is dropped: the batch length always equals table.row_count.

    Args:
        table: Parsed CSV table

    Returns:
        Records in source order
    """
    return tuple(PatientRecord.from_row(row) for row in table.rows)
