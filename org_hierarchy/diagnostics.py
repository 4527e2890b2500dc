"""
Organizational Hierarchy — Diagnostics

Summarize a synthesized tree and the configuration that produced it:
vacant units, unclassified members, borrowed members and configuration
entries that no longer resolve.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from .constants import UNCLASSIFIED_DIVISION
from .domain_types import Employee, NodeType, OrgConfig, OrgNode, division_key


def compute_diagnostics(
    root: OrgNode, roster: Sequence[Employee], config: OrgConfig,
) -> dict:
    """Return a diagnostic dict for the tree *root* built from *roster*."""
    ids = {e.id for e in roster}

    units = [n for n in root.walk() if n.type not in (NodeType.CEO, NodeType.MEMBER)]
    members = [n for n in root.walk() if n.type == NodeType.MEMBER]
    vacant = [n.id for n in units if n.manager_id is None]
    external = sorted({n.employee.id for n in members if n.is_external and n.employee})

    unclassified = 0
    for n in root.children:
        if n.id == division_key(UNCLASSIFIED_DIVISION):
            unclassified = sum(1 for m in n.walk() if m.type == NodeType.MEMBER)

    dangling_leaders = sorted(k for k, v in config.leaders.items() if v not in ids)
    dangling_cross_unit: Dict[str, List[str]] = {}
    for key, members_ids in sorted(config.cross_unit.items()):
        missing = [eid for eid in members_ids if eid not in ids]
        if missing:
            dangling_cross_unit[key] = missing

    warnings: list[str] = []

    if root.manager_id is None:
        warnings.append(f"No top executive resolved for {root.name!r}")
    if vacant:
        warnings.append(f"{len(vacant)} vacant unit(s): {', '.join(vacant)}")
    if unclassified:
        warnings.append(
            f"{unclassified} member(s) without a division; add a grouping entry"
        )
    if dangling_leaders:
        warnings.append(
            f"{len(dangling_leaders)} leader assignment(s) point to missing "
            f"employees: {', '.join(dangling_leaders)}"
        )
    if dangling_cross_unit:
        warnings.append(
            f"{len(dangling_cross_unit)} cross-unit entr(ies) point to missing "
            f"employees: {', '.join(dangling_cross_unit)}"
        )

    return {
        "company": root.name,
        "unit_count": len(units),
        "member_count": len(members),
        "vacant_units": vacant,
        "unclassified_count": unclassified,
        "external_members": external,
        "dangling_leader_assignments": dangling_leaders,
        "dangling_cross_unit_members": dangling_cross_unit,
        "warnings": warnings,
    }
