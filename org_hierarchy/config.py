"""
Organizational Hierarchy — Configuration Resolution

Pure lookups over OrgConfig tables: division derivation, sibling
ordering keys, member ordering keys. No caching, no mutation.
"""

from __future__ import annotations

import unicodedata
from typing import Dict, Iterable, List, Mapping, Tuple

from .constants import (
    DEFAULT_SORT_PRIORITY,
    EXECUTIVE_DIVISION,
    UNCLASSIFIED_DIVISION,
)
from .domain_types import Employee, OrgConfig
from .keywords import duty_priority, is_executive_unit, is_top_executive


def create_config(
    grouping: Mapping[str, str] | None = None,
    sort_order: Mapping[str, int] | None = None,
    leaders: Mapping[str, str] | None = None,
    cross_unit: Mapping[str, Iterable[str]] | None = None,
    member_tags: Mapping[str, str] | None = None,
) -> OrgConfig:
    """Create an OrgConfig from plain mappings, copying every table."""
    return OrgConfig(
        grouping=dict(grouping or {}),
        sort_order=dict(sort_order or {}),
        leaders=dict(leaders or {}),
        cross_unit={k: tuple(v) for k, v in (cross_unit or {}).items()},
        member_tags=dict(member_tags or {}),
    )


# ---------------------------------------------------------------------------
# Division derivation
# ---------------------------------------------------------------------------

def is_executive_tier(employee: Employee) -> bool:
    """Executives are folded into the executive division regardless of mapping."""
    return (
        is_top_executive(employee.duty)
        or is_executive_unit(employee.department)
        or is_executive_unit(employee.division)
    )


def resolve_division(employee: Employee, grouping: Mapping[str, str]) -> str:
    """
    Division label for *employee*:
      executive tier -> EXECUTIVE_DIVISION
      explicit division field
      grouping[department], then grouping[team]
      UNCLASSIFIED_DIVISION
    """
    if is_executive_tier(employee):
        return EXECUTIVE_DIVISION
    if employee.division:
        return employee.division
    if employee.department and grouping.get(employee.department):
        return grouping[employee.department]
    if employee.team and grouping.get(employee.team):
        return grouping[employee.team]
    return UNCLASSIFIED_DIVISION


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def collation_key(name: str) -> Tuple[str, str]:
    """
    Locale-independent name ordering: compatibility-normalized casefold,
    then the raw name so distinct spellings never compare equal.
    """
    return unicodedata.normalize("NFKC", name).casefold(), name


def sort_priority(sort_order: Mapping[str, int], key: str) -> int:
    return sort_order.get(key, DEFAULT_SORT_PRIORITY)


def sort_labels(
    labels: Iterable[str],
    sort_order: Mapping[str, int],
    key_fn,
) -> List[str]:
    """Order sibling labels by Sort-Order priority, then name."""
    return sorted(
        set(labels),
        key=lambda label: (sort_priority(sort_order, key_fn(label)), collation_key(label)),
    )


def employee_order_key(employee: Employee) -> tuple:
    """Duty priority, then earliest joined date (unknown last), name, id."""
    return (
        duty_priority(employee.duty),
        employee.joined_date == "",
        employee.joined_date,
        collation_key(employee.name),
        employee.id,
    )


def seniority_key(employee: Employee) -> tuple:
    """Tie-break between several keyword matches: earliest joined date, then id."""
    return (employee.joined_date == "", employee.joined_date, employee.id)


def divisions_by_label(
    employees: Iterable[Employee], grouping: Mapping[str, str],
) -> Dict[str, List[Employee]]:
    buckets: Dict[str, List[Employee]] = {}
    for emp in employees:
        buckets.setdefault(resolve_division(emp, grouping), []).append(emp)
    return buckets
