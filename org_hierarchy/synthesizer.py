"""
Organizational Hierarchy — Synthesizer

Pure function: (company, roster, configuration) -> OrgNode tree.

    CEO:<company>
      DIV:<division>          sorted by Sort-Order, then name
        DEPT:<department>     sorted likewise
          TEAM:<team>         sorted likewise
            MEMBER:<id>
          MEMBER:<id>         department-direct members
        MEMBER:<id>           division-direct members

Rules:
  - Cross-unit members are merged into a unit's pool before it is split.
  - A unit's resolved leader is rendered as its ``manager`` and never as
    one of its own MEMBER children. The split itself uses the full pool,
    so a leader still appears inside their own department or team.
  - Units with an empty pool and no leader are omitted unless a
    configuration table names them.
  - Never raises. Every lookup degrades to a documented fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from .config import divisions_by_label, employee_order_key, sort_labels
from .domain_types import (
    Employee,
    NodeType,
    OrgConfig,
    OrgNode,
    ceo_key,
    department_key,
    division_key,
    member_key,
    parse_node_key,
    team_key,
)
from .leadership import assigned_leader, infer_leader, resolve_leader
from .membership import injected_members, is_external, merge_pool


_KEY_FN = {
    NodeType.DIVISION: division_key,
    NodeType.DEPARTMENT: department_key,
    NodeType.TEAM: team_key,
}

_CHILD_LEVEL = {
    NodeType.DIVISION: NodeType.DEPARTMENT,
    NodeType.DEPARTMENT: NodeType.TEAM,
}


@dataclass(frozen=True)
class _Context:
    company: str
    config: OrgConfig
    index: Mapping[str, Employee]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_org_tree(
    company: str,
    roster: Sequence[Employee],
    config: OrgConfig | None = None,
) -> OrgNode:
    """
    Build the organization tree of *company*.

    Only employees whose ``primary_company`` is *company* are partitioned;
    employees of other companies enter through Cross-Unit Membership or a
    Leadership Assignment.
    """
    config = config or OrgConfig()
    index: Dict[str, Employee] = {}
    for emp in roster:
        index.setdefault(emp.id, emp)
    ctx = _Context(company=company, config=config, index=index)

    staff = [e for e in index.values() if e.primary_company == company]

    root_key = ceo_key(company)
    ceo = assigned_leader(root_key, config.leaders, index)
    if ceo is None:
        ceo = infer_leader(staff, NodeType.CEO)

    root = OrgNode(id=root_key, name=company, type=NodeType.CEO)
    _set_manager(root, ceo, company)

    partition = divisions_by_label(
        (e for e in staff if ceo is None or e.id != ceo.id),
        config.grouping,
    )
    labels = set(partition) | _configured_divisions(ctx)

    for label in sort_labels(labels, config.sort_order, division_key):
        node = _build_unit(
            ctx, NodeType.DIVISION, label, partition.get(label, []), (label,),
        )
        if node is not None:
            root.children.append(node)
    return root


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------

def _build_unit(
    ctx: _Context,
    level: str,
    label: str,
    formal_members: List[Employee],
    placement: Tuple[str, ...],
) -> Optional[OrgNode]:
    key = _KEY_FN[level](label)
    config = ctx.config

    pool = merge_pool(
        formal_members, injected_members(key, config.cross_unit, ctx.index),
    )
    leader = resolve_leader(key, level, pool, config.leaders, ctx.index)

    if not pool and leader is None and not _is_configured(key, config):
        return None

    node = OrgNode(id=key, name=label, type=level)
    _set_manager(node, leader, ctx.company)

    child_level = _CHILD_LEVEL.get(level)
    direct: List[Employee] = []
    if child_level is None:
        direct = list(pool)
    else:
        groups: Dict[str, List[Employee]] = {}
        for emp in pool:
            sub = emp.department if child_level == NodeType.DEPARTMENT else emp.team
            if sub:
                groups.setdefault(sub, []).append(emp)
            else:
                direct.append(emp)

        for sub_label in sort_labels(groups, config.sort_order, _KEY_FN[child_level]):
            child = _build_unit(
                ctx, child_level, sub_label, groups[sub_label],
                placement + (sub_label,),
            )
            if child is not None:
                node.children.append(child)

    if leader is not None:
        direct = [e for e in direct if e.id != leader.id]
    for emp in sorted(direct, key=employee_order_key):
        node.children.append(_member_node(ctx, emp, placement))
    return node


def _member_node(
    ctx: _Context, emp: Employee, placement: Tuple[str, ...],
) -> OrgNode:
    division = placement[0]
    department = placement[1] if len(placement) > 1 else None
    team = placement[2] if len(placement) > 2 else None
    return OrgNode(
        id=member_key(emp.id),
        name=emp.name,
        type=NodeType.MEMBER,
        employee=emp,
        is_external=is_external(
            emp, ctx.company, ctx.config.grouping, division, department, team,
        ),
        member_tag=ctx.config.member_tags.get(emp.id),
    )


def _set_manager(node: OrgNode, leader: Optional[Employee], company: str) -> None:
    if leader is None:
        return
    node.manager = leader.name
    node.manager_id = leader.id
    node.manager_is_external = leader.primary_company != company


def _is_configured(key: str, config: OrgConfig) -> bool:
    return (
        key in config.leaders
        or bool(config.cross_unit.get(key))
        or key in config.sort_order
    )


def _configured_divisions(ctx: _Context) -> Set[str]:
    """
    Divisions that exist only through configuration:
      - a Cross-Unit Membership entry with at least one id
      - a Leadership Assignment whose leader belongs to this company
      - a Sort-Order entry for a label the grouping table maps to
    """
    labels: Set[str] = set()
    for key, ids in ctx.config.cross_unit.items():
        if ids and key.startswith("DIV:"):
            labels.add(parse_node_key(key)[1])
    for key, emp_id in ctx.config.leaders.items():
        if not key.startswith("DIV:"):
            continue
        leader = ctx.index.get(emp_id)
        if leader is not None and leader.primary_company == ctx.company:
            labels.add(parse_node_key(key)[1])
    targets = set(ctx.config.grouping.values())
    for key in ctx.config.sort_order:
        if key.startswith("DIV:") and parse_node_key(key)[1] in targets:
            labels.add(parse_node_key(key)[1])
    return labels
