"""
Organizational Hierarchy — Flat Projections

Derived, non-tree views over the roster used by list / card / admin
screens. All functions are pure and order their output deterministically.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

from .config import (
    collation_key,
    employee_order_key,
    is_executive_tier,
    resolve_division,
    sort_labels,
    sort_priority,
)
from .domain_types import (
    Employee,
    OrgConfig,
    department_key,
    division_key,
    team_key,
)

# Fields matched by the free-text employee search.
SEARCH_FIELDS = (
    "name",
    "english_name",
    "department",
    "team",
    "position",
    "duty",
    "email",
    "extension_number",
)


def list_companies(roster: Iterable[Employee]) -> List[str]:
    """Distinct non-empty ``primary_company`` values, name-ordered."""
    return sorted(
        {e.primary_company for e in roster if e.primary_company},
        key=collation_key,
    )


def sorted_company_employees(
    roster: Iterable[Employee], company: str,
) -> List[Employee]:
    """Employees of *company*, by duty priority then joined date."""
    return sorted(
        (e for e in roster if e.primary_company == company),
        key=employee_order_key,
    )


def search_employees(
    employees: Sequence[Employee], term: str,
) -> List[Employee]:
    """
    Case-insensitive substring search over SEARCH_FIELDS.
    A blank term returns *employees* unchanged (order preserved).
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(employees)
    return [
        e for e in employees
        if any(needle in str(getattr(e, f) or "").lower() for f in SEARCH_FIELDS)
    ]


def group_company_employees(
    roster: Iterable[Employee], company: str, config: OrgConfig,
) -> List[dict]:
    """
    Division → department → team buckets for card views.

    Executives are collected into one bucket with no department and no
    team. ``""`` stands for "direct" at the department and team level.
    Every level is ordered by Sort-Order then name; members by duty
    priority then joined date.
    """
    tree: Dict[str, Dict[str, Dict[str, List[Employee]]]] = {}
    for emp in sorted_company_employees(roster, company):
        division = resolve_division(emp, config.grouping)
        if is_executive_tier(emp):
            dept, team = "", ""
        else:
            dept, team = emp.department, emp.team
        tree.setdefault(division, {}).setdefault(dept, {}).setdefault(team, []).append(emp)

    groups: List[dict] = []
    for division in sort_labels(tree, config.sort_order, division_key):
        departments = []
        for dept in _ordered(tree[division], config.sort_order, department_key):
            teams = [
                {"team": team, "members": tree[division][dept][team]}
                for team in _ordered(tree[division][dept], config.sort_order, team_key)
            ]
            departments.append({"department": dept, "teams": teams})
        groups.append({"division": division, "departments": departments})
    return groups


def unit_hierarchy(
    roster: Iterable[Employee], company: str, config: OrgConfig,
) -> List[dict]:
    """
    Ordered division → department → team labels of *company*, with each
    unit's node key and effective Sort-Order priority. Feeds the
    ordering admin panel.
    """
    labels: Dict[str, Dict[str, set]] = {}
    for emp in roster:
        if emp.primary_company != company:
            continue
        depts = labels.setdefault(resolve_division(emp, config.grouping), {})
        if emp.department:
            teams = depts.setdefault(emp.department, set())
            if emp.team:
                teams.add(emp.team)

    so = config.sort_order
    return [
        {
            "division": div,
            "key": division_key(div),
            "priority": sort_priority(so, division_key(div)),
            "departments": [
                {
                    "department": dept,
                    "key": department_key(dept),
                    "priority": sort_priority(so, department_key(dept)),
                    "teams": [
                        {
                            "team": team,
                            "key": team_key(team),
                            "priority": sort_priority(so, team_key(team)),
                        }
                        for team in sort_labels(labels[div][dept], so, team_key)
                    ],
                }
                for dept in sort_labels(labels[div], so, department_key)
            ],
        }
        for div in sort_labels(labels, so, division_key)
    ]


def _ordered(buckets: Mapping[str, object], sort_order, key_fn) -> List[str]:
    """Sorted labels with the direct bucket ("") last."""
    named = sort_labels((k for k in buckets if k), sort_order, key_fn)
    return named + ([""] if "" in buckets else [])
