"""
Roster Ingestion — File Readers

Turn an uploaded spreadsheet into rows of cells for the adapter.
``.xlsx`` / ``.xlsm`` go through openpyxl (first sheet, cached values);
``.csv`` through the csv module.
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from pathlib import Path
from typing import Any, List, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import UnreadableFileError

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, bytearray, io.IOBase]

WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")
CSV_SUFFIXES = (".csv",)


def read_workbook_rows(source: Source) -> List[List[Any]]:
    """Every row of the first worksheet, as lists of cell values."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        wb = load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise UnreadableFileError(f"Cannot open workbook: {exc}") from exc

    try:
        ws = wb.worksheets[0]
        rows = [list(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    logger.debug("Read %d row(s) from worksheet %r", len(rows), ws.title)
    return rows


def read_csv_rows(source: Source) -> List[List[str]]:
    """Every CSV record as a list of strings. Bytes are decoded as UTF-8 (BOM ok)."""
    if isinstance(source, (str, Path)) and Path(source).suffix.lower() in CSV_SUFFIXES:
        text = Path(source).read_text(encoding="utf-8-sig")
    elif isinstance(source, (bytes, bytearray)):
        try:
            text = bytes(source).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise UnreadableFileError(f"CSV is not UTF-8: {exc}") from exc
    elif isinstance(source, str):
        text = source
    else:
        text = source.read()
        if isinstance(text, bytes):
            text = text.decode("utf-8-sig")

    return [row for row in csv.reader(io.StringIO(text))]


def read_roster_file(filename: str, content: bytes) -> List[List[Any]]:
    """Dispatch on the file extension of an uploaded roster."""
    suffix = Path(filename or "").suffix.lower()
    if suffix in WORKBOOK_SUFFIXES:
        return read_workbook_rows(content)
    if suffix in CSV_SUFFIXES:
        return read_csv_rows(content)
    raise UnreadableFileError(
        f"Unsupported file type {suffix or filename!r}; "
        f"expected one of {list(WORKBOOK_SUFFIXES + CSV_SUFFIXES)}"
    )
