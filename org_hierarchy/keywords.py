"""
Organizational Hierarchy — Duty Keyword Tables

Every heuristic over the free-text ``duty`` field reads one of the tables
below. Matching is whitespace-insensitive and case-insensitive; the tables
hold already-normalized entries (see ``normalize_text``).

Korean entries mirror the titles used in the source rosters.
"""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, Tuple

from .constants import DEFAULT_DUTY_PRIORITY
from .domain_types import NodeType

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: object) -> str:
    """Drop all whitespace and lowercase. ``None`` becomes ""."""
    if value is None:
        return ""
    return _WHITESPACE.sub("", str(value)).lower()


# ── Top executive (exact match) ───────────────────────────────
# Exact, because "사장" is a substring of "부사장" (vice president).
TOP_EXECUTIVE_DUTIES: FrozenSet[str] = frozenset({
    "대표이사",
    "사장",
    "ceo",
    "president",
    "chiefexecutiveofficer",
})

# ── Executive-tier unit labels (exact match on department / division) ──
EXECUTIVE_UNIT_LABELS: FrozenSet[str] = frozenset({
    "경영진",
    "executive",
    "executives",
    "executiveoffice",
})

# ── Unit leader titles (substring match), per level ───────────
LEADER_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    NodeType.DIVISION: ("본부장", "divisionhead", "headofdivision"),
    NodeType.DEPARTMENT: (
        "부서장", "소장", "departmenthead", "headofdepartment",
    ),
    NodeType.TEAM: ("팀장", "파트장", "teamlead", "partlead"),
}

# ── is_head heuristic (ingestion) ─────────────────────────────
HEAD_KEYWORDS: Tuple[str, ...] = ("장", "head", "chief", "lead")
SENIOR_EXECUTIVE_DUTIES: FrozenSet[str] = frozenset({
    "ceo",
    "이사",
    "상무",
    "전무",
    "부사장",
    "director",
    "vicepresident",
})

# ── Duty priority (lower sorts first) ─────────────────────────
DUTY_PRIORITY: Dict[str, int] = {
    "대표이사": 1,
    "ceo": 1,
    "사장": 1,
    "president": 1,
    "부사장": 2,
    "vicepresident": 2,
    "전무": 3,
    "상무": 4,
    "이사": 5,
    "director": 5,
    "본부장": 10,
    "divisionhead": 10,
    "부서장": 20,
    "departmenthead": 20,
    "소장": 25,
    "팀장": 30,
    "teamlead": 30,
    "teamleader": 30,
    "파트장": 35,
    "partlead": 35,
}


def is_top_executive(duty: str) -> bool:
    return normalize_text(duty) in TOP_EXECUTIVE_DUTIES


def is_executive_unit(label: str) -> bool:
    return normalize_text(label) in EXECUTIVE_UNIT_LABELS


def matches_leader_keyword(duty: str, level: str) -> bool:
    """True if *duty* carries the leader title of *level*."""
    d = normalize_text(duty)
    if not d:
        return False
    return any(k in d for k in LEADER_KEYWORDS.get(level, ()))


def leader_level_of_duty(duty: str) -> str | None:
    """Highest level whose leader title *duty* carries, or None."""
    if is_top_executive(duty):
        return NodeType.CEO
    for level in (NodeType.DIVISION, NodeType.DEPARTMENT, NodeType.TEAM):
        if matches_leader_keyword(duty, level):
            return level
    return None


def infer_is_head(duty: str) -> bool:
    d = normalize_text(duty)
    if not d:
        return False
    if d in SENIOR_EXECUTIVE_DUTIES or d in TOP_EXECUTIVE_DUTIES:
        return True
    return any(k in d for k in HEAD_KEYWORDS)


def duty_priority(duty: str) -> int:
    return DUTY_PRIORITY.get(normalize_text(duty), DEFAULT_DUTY_PRIORITY)
