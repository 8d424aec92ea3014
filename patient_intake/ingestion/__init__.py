"""
Upload ingestion module.
"""

from .completion import OneShotCompletion
from .pipeline import IngestionPipeline
from .readers import CSVParseError, CSVReader
from .row_mapper import map_rows

__all__ = [
    "IngestionPipeline",
    "OneShotCompletion",
    "CSVParseError",
    "CSVReader",
    "map_rows",
]
