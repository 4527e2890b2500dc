"""
Roster Ingestion
Heuristic column detection over semi-structured tabular input.
"""

from .adapter import IngestionResult, parse_roster_rows, find_header_row, resolve_columns
from .dates import normalize_date, serial_to_date
from .errors import (
    IngestionError,
    NoDataRowsError,
    HeaderNotFoundError,
    RequiredColumnsError,
    UnreadableFileError,
)
from .workbook import read_workbook_rows, read_csv_rows, read_roster_file

__all__ = [
    "IngestionResult",
    "parse_roster_rows",
    "find_header_row",
    "resolve_columns",
    "normalize_date",
    "serial_to_date",
    "IngestionError",
    "NoDataRowsError",
    "HeaderNotFoundError",
    "RequiredColumnsError",
    "UnreadableFileError",
    "read_workbook_rows",
    "read_csv_rows",
    "read_roster_file",
]
