"""
Roster Ingestion — Adapter

Rows of cells (as read from a workbook or CSV) -> roster records.

  1. Header: first of the first HEADER_SCAN_LIMIT rows holding both an
     id label and a name label.
  2. Columns: exact alias matches first, then substring matches over
     still-unclaimed columns.
  3. Rows: blank id or name -> skipped; company carried forward; dates
     normalized; birth date from the national-id field; is_head inferred.

Independent of the synthesizer. Pure apart from logging.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from org_hierarchy.domain_types import Employee, EmployeeStatus
from org_hierarchy.keywords import infer_is_head

from .column_aliases import (
    COLUMN_ALIASES,
    FIELD_ID,
    FIELD_NAME,
    HEADER_SCAN_LIMIT,
    REQUIRED_FIELDS,
    SUBSTRING_ORDER,
    matches_alias,
)
from .dates import normalize_date
from .errors import HeaderNotFoundError, NoDataRowsError, RequiredColumnsError

logger = logging.getLogger(__name__)

_NON_DIGIT = re.compile(r"\D")


@dataclass
class IngestionResult:
    """Outcome of a successful parse. Nothing is persisted yet."""

    employees: List[Employee] = field(default_factory=list)
    success_count: int = 0
    skipped_rows: int = 0
    header_row_index: int = -1
    column_map: Dict[str, int] = field(default_factory=dict)
    last_company: str = ""

    def to_dict(self) -> dict:
        return {
            "success_count": self.success_count,
            "skipped_rows": self.skipped_rows,
            "header_row_index": self.header_row_index,
            "column_map": dict(self.column_map),
            "companies": sorted({e.primary_company for e in self.employees}),
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_roster_rows(
    rows: Sequence[Sequence[Any]], default_company: str = "",
) -> IngestionResult:
    """
    Parse tabular *rows* into roster records.

    ``default_company`` fills ``primary_company`` until the first non-blank
    company cell is seen (or throughout, when there is no company column).

    Raises NoDataRowsError (also when every data row is skipped),
    HeaderNotFoundError or RequiredColumnsError.
    """
    rows = [list(r) if r is not None else [] for r in rows]
    if len(rows) < 2:
        raise NoDataRowsError("The file has no data rows")

    header_index = find_header_row(rows)
    if header_index is None:
        raise HeaderNotFoundError(
            f"No header row with both an id and a name column in the first "
            f"{HEADER_SCAN_LIMIT} rows"
        )

    columns = resolve_columns(rows[header_index])
    missing = [f for f in REQUIRED_FIELDS if f not in columns]
    if missing:
        raise RequiredColumnsError(
            f"Required column(s) not recognized: {', '.join(missing)}"
        )

    result = IngestionResult(header_row_index=header_index, column_map=columns)
    last_company = default_company
    seen_ids = set()

    for row in rows[header_index + 1:]:
        if not any(_cell_text(c) for c in row):
            continue

        emp_id = _cell_text(_cell(row, columns, FIELD_ID))
        name = _cell_text(_cell(row, columns, FIELD_NAME))
        if not emp_id or not name or emp_id in seen_ids:
            result.skipped_rows += 1
            continue
        seen_ids.add(emp_id)

        company = _cell_text(_cell(row, columns, "company"))
        if company:
            last_company = company

        duty = _text(row, columns, "duty")
        result.employees.append(Employee(
            id=emp_id,
            name=name,
            primary_company=last_company,
            division=_text(row, columns, "division"),
            department=_text(row, columns, "department"),
            team=_text(row, columns, "team"),
            position=_text(row, columns, "position"),
            duty=duty,
            english_name=_text(row, columns, "english_name"),
            email=_text(row, columns, "email"),
            phone=_text(row, columns, "phone"),
            extension_number=_text(row, columns, "extension"),
            joined_date=normalize_date(_cell(row, columns, "joined_date")),
            birth_date=_birth_date(_text(row, columns, "national_id")),
            status=EmployeeStatus.ACTIVE,
            is_head=infer_is_head(duty),
        ))

    if not result.employees:
        raise NoDataRowsError(
            f"No valid data rows below the header ({result.skipped_rows} skipped)"
        )

    result.success_count = len(result.employees)
    result.last_company = last_company
    logger.info(
        "Parsed %d roster row(s), skipped %d (header at row %d)",
        result.success_count, result.skipped_rows, header_index,
    )
    return result


def find_header_row(rows: Sequence[Sequence[Any]]) -> Optional[int]:
    """Index of the first row holding both an id and a name label."""
    for i, row in enumerate(rows[:HEADER_SCAN_LIMIT]):
        has_id = any(matches_alias(c, FIELD_ID) for c in row)
        has_name = any(matches_alias(c, FIELD_NAME) for c in row)
        if has_id and has_name:
            return i
    return None


def resolve_columns(header: Sequence[Any]) -> Dict[str, int]:
    """
    Field -> column index. A column is claimed by at most one field;
    within a pass, the leftmost matching column wins.
    """
    columns: Dict[str, int] = {}
    claimed = set()

    for exact in (True, False):
        for fname in SUBSTRING_ORDER:
            if fname in columns:
                continue
            for idx, cell in enumerate(header):
                if idx in claimed:
                    continue
                if matches_alias(cell, fname, exact=exact):
                    columns[fname] = idx
                    claimed.add(idx)
                    break

    return {f: columns[f] for f in COLUMN_ALIASES if f in columns}


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------

def _cell(row: Sequence[Any], columns: Dict[str, int], fname: str) -> Any:
    idx = columns.get(fname)
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _text(row: Sequence[Any], columns: Dict[str, int], fname: str) -> str:
    return _cell_text(_cell(row, columns, fname))


def _birth_date(national_id: str) -> Optional[str]:
    digits = _NON_DIGIT.sub("", national_id)
    if len(digits) < 6:
        return None
    return digits[:6]
