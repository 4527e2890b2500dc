"""
Roster Ingestion — Column Alias Tables

Header cells are compared after ``normalize_header`` (all whitespace
removed, lowercased). Each field lists its accepted labels; the adapter
tries exact matches first, then substring matches over columns no other
field has claimed.
"""

from __future__ import annotations

from typing import Dict, Tuple

from org_hierarchy.keywords import normalize_text as normalize_header

# --- Required fields ---
FIELD_ID = "id"
FIELD_NAME = "name"

REQUIRED_FIELDS: Tuple[str, ...] = (FIELD_ID, FIELD_NAME)

COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    FIELD_ID: (
        "사번", "사원번호", "직원번호",
        "employeeid", "employeeno", "employeenumber", "empno", "staffid",
    ),
    FIELD_NAME: ("성명", "이름", "name", "fullname"),
    "english_name": ("영문성명", "영문이름", "englishname"),
    "company": ("회사", "회사명", "company"),
    "division": ("t_division", "본부", "division"),
    "department": ("부서명", "부서", "department", "dept"),
    "team": ("팀명", "팀", "team"),
    "position": ("직위", "직급", "position", "grade"),
    "duty": ("직책", "duty", "jobtitle", "title"),
    "national_id": ("주민번호", "주민등록번호", "nationalid", "residentid"),
    "phone": ("핸드폰", "휴대폰", "휴대전화", "mobile", "phone"),
    "joined_date": (
        "입사일", "최초입사일", "입사일자", "joineddate", "joindate", "hiredate",
    ),
    "email": ("메일", "이메일", "email", "e-mail"),
    "extension": ("내선", "내선번호", "extension", "ext"),
}

# Substring pass order: fields whose labels contain another field's label
# ("영문성명" ⊃ "성명", "englishname" ⊃ "name") are resolved first.
SUBSTRING_ORDER: Tuple[str, ...] = (
    "english_name",
    "national_id",
    "joined_date",
    "extension",
    "email",
    "phone",
    "company",
    "division",
    "department",
    "team",
    "position",
    "duty",
    FIELD_ID,
    FIELD_NAME,
)

# Rows scanned for the header before giving up.
HEADER_SCAN_LIMIT: int = 20


def matches_alias(cell: object, field: str, exact: bool = False) -> bool:
    text = normalize_header(cell)
    if not text:
        return False
    aliases = COLUMN_ALIASES[field]
    if exact:
        return text in aliases
    return any(a in text for a in aliases)

