"""
Roster Ingestion — File-level Errors

Row-level problems never raise: the row is skipped and counted.
Only whole-file problems surface as an IngestionError, and the roster is
left untouched.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base for every file-level ingestion failure."""

    rule: str = "ingestion"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class NoDataRowsError(IngestionError):
    rule = "no_data_rows"


class HeaderNotFoundError(IngestionError):
    rule = "header_not_found"


class RequiredColumnsError(IngestionError):
    rule = "required_columns"


class UnreadableFileError(IngestionError):
    """The upload is not a readable workbook / CSV file."""

    rule = "unreadable_file"
