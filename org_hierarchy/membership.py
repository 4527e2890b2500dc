"""
Organizational Hierarchy — Cross-Unit Membership

Injection of borrowed employees into a unit's working pool, and the
derived "external" flag. Formal placement is never altered by injection.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import resolve_division
from .domain_types import Employee


def injected_members(
    key: str,
    cross_unit: Mapping[str, Sequence[str]],
    index: Mapping[str, Employee],
) -> List[Employee]:
    """Resolve the registry entry for *key*; dangling ids are skipped."""
    return [index[eid] for eid in cross_unit.get(key, ()) if eid in index]


def merge_pool(
    pool: Iterable[Employee], extra: Iterable[Employee],
) -> List[Employee]:
    """Append *extra* to *pool*, deduplicated by id, first occurrence wins."""
    merged: List[Employee] = []
    seen = set()
    for emp in list(pool) + list(extra):
        if emp.id in seen:
            continue
        seen.add(emp.id)
        merged.append(emp)
    return merged


def formal_placement(
    employee: Employee, grouping: Mapping[str, str],
) -> Tuple[str, str, str]:
    return (
        resolve_division(employee, grouping),
        employee.department,
        employee.team,
    )


def is_external(
    employee: Employee,
    company: str,
    grouping: Mapping[str, str],
    division: str,
    department: Optional[str] = None,
    team: Optional[str] = None,
) -> bool:
    """
    True when *employee* is displayed outside their company or their formal
    placement. ``department`` / ``team`` of None mean the member is displayed
    directly under the enclosing unit (no department / no team).
    """
    if employee.primary_company != company:
        return True
    formal_div, formal_dept, formal_team = formal_placement(employee, grouping)
    if formal_div != division:
        return True
    if formal_dept != (department or ""):
        return True
    if department is not None and formal_team != (team or ""):
        return True
    return False
