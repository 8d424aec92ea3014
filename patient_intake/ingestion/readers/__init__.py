"""
Upload content readers.
"""

from .csv_reader import CSVParseError, CSVReader

__all__ = [
    "CSVParseError",
    "CSVReader",
]
