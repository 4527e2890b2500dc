"""
Organizational Hierarchy — Leader Resolution

Resolution order for every unit:
  1. explicit Leadership Assignment whose id exists in the roster
  2. title inference over the unit's pool (level keyword table)
  3. vacant (None)

A dangling assignment behaves exactly like no assignment.
Several keyword matches are broken by seniority (earliest joined date, id),
never by roster order.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from .config import seniority_key
from .domain_types import Employee, NodeType, parse_node_key
from .keywords import is_top_executive, leader_level_of_duty, matches_leader_keyword


def assigned_leader(
    key: str,
    leaders: Mapping[str, str],
    index: Mapping[str, Employee],
) -> Optional[Employee]:
    """The explicitly assigned leader of *key*, if the id still resolves."""
    emp_id = leaders.get(key)
    if not emp_id:
        return None
    return index.get(emp_id)


def infer_leader(
    pool: Iterable[Employee], level: str,
) -> Optional[Employee]:
    """Most senior pool member whose duty carries *level*'s leader title."""
    if level == NodeType.CEO:
        candidates = [e for e in pool if is_top_executive(e.duty)]
    else:
        candidates = [e for e in pool if matches_leader_keyword(e.duty, level)]
    if not candidates:
        return None
    return min(candidates, key=seniority_key)


def resolve_leader(
    key: str,
    level: str,
    pool: Iterable[Employee],
    leaders: Mapping[str, str],
    index: Mapping[str, Employee],
) -> Optional[Employee]:
    leader = assigned_leader(key, leaders, index)
    if leader is not None:
        return leader
    return infer_leader(pool, level)


def leader_role_of(
    employee_id: str,
    roster: Iterable[Employee],
    leaders: Mapping[str, str],
) -> Optional[Dict[str, str]]:
    """
    Which level *employee_id* leads, for badges and pickers.

    Explicit assignments win (first key in sorted order); otherwise the
    duty title decides. Returns ``{"role": <NodeType>, "node_key": <key or "">}``
    or None.
    """
    for key in sorted(leaders):
        if leaders[key] == employee_id:
            level, _ = parse_node_key(key)
            return {"role": level, "node_key": key}

    for emp in roster:
        if emp.id == employee_id:
            level = leader_level_of_duty(emp.duty)
            if level is None:
                return None
            return {"role": level, "node_key": ""}
    return None
