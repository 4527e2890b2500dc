# file: org_runtime/drift.py
"""
Roster Drift — pure function, no side effects.

Structured diff between the stored roster and a candidate replacement,
shown to the administrator before a destructive import is confirmed.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from org_hierarchy.domain_types import Employee


def compare_rosters(
    current: Iterable[Employee], candidate: Iterable[Employee],
) -> dict:
    """
    Compare two rosters by employee id.

    Returns dict with:
        count_current, count_candidate, count_delta,
        added, removed, changed (sorted id lists),
        companies_current, companies_candidate
    """
    by_id_a: Dict[str, Employee] = {e.id: e for e in current}
    by_id_b: Dict[str, Employee] = {e.id: e for e in candidate}

    added = sorted(by_id_b.keys() - by_id_a.keys())
    removed = sorted(by_id_a.keys() - by_id_b.keys())
    changed: List[str] = [
        eid for eid in sorted(by_id_a.keys() & by_id_b.keys())
        if by_id_a[eid] != by_id_b[eid]
    ]

    return {
        "count_current": len(by_id_a),
        "count_candidate": len(by_id_b),
        "count_delta": len(by_id_b) - len(by_id_a),
        "added": added,
        "removed": removed,
        "changed": changed,
        "companies_current": _company_counts(by_id_a.values()),
        "companies_candidate": _company_counts(by_id_b.values()),
    }


def _company_counts(employees: Iterable[Employee]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for emp in employees:
        counts[emp.primary_company] = counts.get(emp.primary_company, 0) + 1
    return dict(sorted(counts.items()))
