"""
Roster Ingestion — Adapter / Reader Tests

  1-5:  Header detection, column resolution, file-level failures
  6-10: Row parsing (skips, company carry-forward, dates, birth date, is_head)
  11-12: openpyxl workbook and CSV readers
  13-14: numeric YYYYMMDD dates, out-of-range serials, header-only files

Run:  python -m pytest roster_ingest/test_adapter.py
"""

from __future__ import annotations

import io
from datetime import date, datetime

import pytest
from openpyxl import Workbook

from roster_ingest.adapter import find_header_row, parse_roster_rows, resolve_columns
from roster_ingest.dates import normalize_date, serial_to_date
from roster_ingest.errors import (
    HeaderNotFoundError,
    IngestionError,
    NoDataRowsError,
    RequiredColumnsError,
    UnreadableFileError,
)
from roster_ingest.workbook import read_csv_rows, read_roster_file, read_workbook_rows


HEADER = ["회사", "사 번", "성명", "영문성명", "부서명", "팀", "직위", "직책",
          "주민번호", "휴대폰", "입사일", "이메일", "내선"]


def _rows() -> list:
    return [
        ["2025 임직원 현황", None],
        [],
        HEADER,
        ["Acme", "1001", "김철수", "Kim Chulsoo", "영업부", "1팀", "부장", "부서장",
         "800101-1234567", "010-1111-2222", "2010-03-02", "kim@acme.test", "101"],
        [None, 1002.0, "이영희", "", "영업부", "1팀", "대리", "",
         "", "", 43831, "", ""],
        ["", "1003", "", "", "영업부", "", "", "", "", "", "", "", ""],
        [None, "1004", "박민수", "", "개발부", "", "", "팀장",
         "9912", "", "2019.7.15", "", ""],
        ["Beta", "2001", "최지원", "", "경영지원", "", "", "대표이사",
         "", "", "20200102", "", ""],
        [None, "1001", "중복", "", "", "", "", "", "", "", "", "", ""],
    ]


# ───────────────────────────────────────────────────────────────
# Header and columns
# ───────────────────────────────────────────────────────────────

def test_01_header_found_after_title_rows():
    assert find_header_row(_rows()) == 2


def test_02_exact_match_beats_substring():
    columns = resolve_columns(HEADER)
    assert columns["id"] == 1
    assert columns["name"] == 2
    assert columns["english_name"] == 3
    assert columns["department"] == 4
    assert columns["national_id"] == 8
    assert columns["extension"] == 12


def test_03_substring_match_on_unclaimed_columns():
    columns = resolve_columns(["Employee ID", "Full Name (KR)", "English Name", "Dept."])
    assert columns == {"id": 0, "name": 1, "english_name": 2, "department": 3}


def test_04_file_level_failures():
    with pytest.raises(NoDataRowsError):
        parse_roster_rows([["사번", "성명"]])
    with pytest.raises(NoDataRowsError):
        parse_roster_rows([])

    no_header = [["a", "b"]] * 25 + [["사번", "성명"], ["1", "Kim"]]
    with pytest.raises(HeaderNotFoundError):
        parse_roster_rows(no_header)

    # "영문성명" satisfies the header scan but is claimed by english_name
    with pytest.raises(RequiredColumnsError) as exc:
        parse_roster_rows([["사번", "영문성명"], ["1", "Kim"]])
    assert exc.value.rule == "required_columns"
    assert isinstance(exc.value, IngestionError)


def test_05_no_company_column_uses_default():
    result = parse_roster_rows([["사번", "성명"], ["1", "Kim"]], default_company="Acme")
    assert result.employees[0].primary_company == "Acme"
    assert "company" not in result.column_map


# ───────────────────────────────────────────────────────────────
# Rows
# ───────────────────────────────────────────────────────────────

def test_06_blank_name_dropped_and_count_matches():
    result = parse_roster_rows(_rows())
    ids = [e.id for e in result.employees]

    assert ids == ["1001", "1002", "1004", "2001"]
    assert "1003" not in ids
    assert result.success_count == len(result.employees) == 4
    # blank name + duplicate id
    assert result.skipped_rows == 2


def test_07_company_carried_forward():
    result = parse_roster_rows(_rows(), default_company="Default")
    companies = [e.primary_company for e in result.employees]
    assert companies == ["Acme", "Acme", "Acme", "Beta"]
    assert result.last_company == "Beta"


def test_08_dates_normalized():
    by_id = {e.id: e for e in parse_roster_rows(_rows()).employees}
    assert by_id["1001"].joined_date == "2010-03-02"
    assert by_id["1002"].joined_date == "2020-01-01"
    assert by_id["1004"].joined_date == "2019-07-15"
    assert by_id["2001"].joined_date == "2020-01-02"


def test_09_serial_and_text_agree():
    assert serial_to_date(43831) == date(2020, 1, 1)
    assert normalize_date(43831) == normalize_date("2020-01-01") == "2020-01-01"
    assert normalize_date(43831.75) == "2020-01-01"
    assert normalize_date("43831") == "2020-01-01"
    assert normalize_date(datetime(2021, 5, 6, 9, 30)) == "2021-05-06"
    assert normalize_date(date(2021, 5, 6)) == "2021-05-06"
    assert normalize_date("2021/5/6") == "2021-05-06"
    assert normalize_date("2021.05.06.") == "2021-05-06"
    assert normalize_date(None) == ""
    assert normalize_date(True) == ""
    assert normalize_date("  ") == ""
    assert normalize_date("unknown") == "unknown"


def test_10_birth_date_and_is_head():
    by_id = {e.id: e for e in parse_roster_rows(_rows()).employees}
    assert by_id["1001"].birth_date == "800101"
    assert by_id["1002"].birth_date is None
    assert by_id["1004"].birth_date is None
    assert by_id["1001"].is_head is True
    assert by_id["1002"].is_head is False
    assert by_id["1004"].is_head is True
    assert by_id["2001"].is_head is True
    assert by_id["1002"].id == "1002"
    assert by_id["1001"].extension_number == "101"
    assert by_id["1001"].english_name == "Kim Chulsoo"


# ───────────────────────────────────────────────────────────────
# Readers
# ───────────────────────────────────────────────────────────────

def _xlsx_bytes() -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.append(["사원 명부"])
    ws.append(["사번", "성명", "부서", "입사일"])
    ws.append([1001, "Kim", "Sales", datetime(2015, 4, 1)])
    ws.append([1002, "Lee", "Sales", 43831])
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def test_11_workbook_rows():
    rows = read_workbook_rows(_xlsx_bytes())
    result = parse_roster_rows(rows, default_company="Acme")

    assert result.header_row_index == 1
    assert [(e.id, e.joined_date) for e in result.employees] == [
        ("1001", "2015-04-01"), ("1002", "2020-01-01"),
    ]
    assert read_roster_file("roster.XLSX", _xlsx_bytes()) == rows

    with pytest.raises(UnreadableFileError):
        read_workbook_rows(b"not a zip file")


def test_12_csv_rows():
    content = "\ufeff사번,성명,회사\n1,Kim,Acme\n2,Lee,\n".encode("utf-8")
    rows = read_csv_rows(content)
    assert rows[0] == ["사번", "성명", "회사"]

    result = parse_roster_rows(read_roster_file("people.csv", content))
    assert [(e.id, e.primary_company) for e in result.employees] == [
        ("1", "Acme"), ("2", "Acme"),
    ]

    with pytest.raises(UnreadableFileError):
        read_roster_file("people.pdf", b"%PDF")


# ───────────────────────────────────────────────────────────────
# Numeric dates and empty imports
# ───────────────────────────────────────────────────────────────

def test_13_numeric_compact_dates_and_out_of_range_serials():
    assert normalize_date(20240115) == "2024-01-15"
    assert normalize_date(20240115.0) == "2024-01-15"
    # not a real calendar day: kept as entered
    assert normalize_date(20241345) == "20241345"
    assert normalize_date(1234567890) == "1234567890"
    assert normalize_date(float("inf")) == "inf"
    with pytest.raises(ValueError):
        serial_to_date(10 ** 7)

    rows = [["회사", "사번", "성명", "입사일"],
            ["Acme", "1", "Kim", 20240115],
            [None, "2", "Lee", 99999999999]]
    by_id = {e.id: e for e in parse_roster_rows(rows).employees}
    assert by_id["1"].joined_date == "2024-01-15"
    assert by_id["2"].joined_date == "99999999999"


def test_14_header_without_valid_rows_is_a_file_error():
    rows = [["회사", "사번", "성명"], ["Acme", "2", ""], [], [None, "", "Lee"]]
    with pytest.raises(NoDataRowsError) as exc:
        parse_roster_rows(rows)
    assert "2 skipped" in str(exc.value)
