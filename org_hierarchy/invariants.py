"""
Organizational Hierarchy — Invariant Checks

Hard-fail validation. Every check raises RosterValidationError on failure.

Roster checks run after every action the engine applies; tree checks are
used by tests and diagnostics to assert synthesizer output shape.
"""

from __future__ import annotations

from typing import Iterable, Set

from .domain_types import Employee, NodeType, OrgNode


class RosterValidationError(Exception):
    """Raised when a roster or tree invariant is violated."""

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[INVARIANT:{rule}] {detail}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_roster(roster: Iterable[Employee]) -> None:
    """Raise RosterValidationError on the first failing roster check."""
    roster = list(roster)
    _check_required_fields(roster)
    _check_unique_ids(roster)


def validate_tree(root: OrgNode) -> None:
    """Raise RosterValidationError on the first failing tree check."""
    _check_root_type(root)
    _check_member_leaves(root)
    _check_leader_not_member(root)
    _check_unique_node_ids(root)


# ---------------------------------------------------------------------------
# Individual checks (private)
# ---------------------------------------------------------------------------

def _check_required_fields(roster: list) -> None:
    """Every record has a non-blank id and name."""
    for pos, emp in enumerate(roster):
        if not emp.id or not emp.id.strip():
            raise RosterValidationError(
                "required_fields", f"Roster entry #{pos} has a blank id"
            )
        if not emp.name or not emp.name.strip():
            raise RosterValidationError(
                "required_fields", f"Employee {emp.id!r} has a blank name"
            )


def _check_unique_ids(roster: list) -> None:
    """Ids are unique across the whole roster, whatever the company."""
    seen: Set[str] = set()
    for emp in roster:
        if emp.id in seen:
            raise RosterValidationError(
                "unique_ids", f"Duplicate employee id {emp.id!r}"
            )
        seen.add(emp.id)


def _check_root_type(root: OrgNode) -> None:
    if root.type != NodeType.CEO:
        raise RosterValidationError(
            "root_type", f"Tree root {root.id!r} has type {root.type}"
        )


def _check_member_leaves(root: OrgNode) -> None:
    for node in root.walk():
        if node.type == NodeType.MEMBER and node.children:
            raise RosterValidationError(
                "member_leaves", f"MEMBER node {node.id!r} has children"
            )


def _check_leader_not_member(root: OrgNode) -> None:
    """A unit's resolved leader is never one of its own MEMBER children."""
    for node in root.walk():
        if node.manager_id is None:
            continue
        for child in node.children:
            if child.type == NodeType.MEMBER and child.employee is not None \
                    and child.employee.id == node.manager_id:
                raise RosterValidationError(
                    "leader_not_member",
                    f"Leader {node.manager_id!r} of {node.id!r} is also a member child",
                )


def _check_unique_node_ids(root: OrgNode) -> None:
    """Sibling node ids are unique (member ids may repeat across units)."""
    for node in root.walk():
        ids = [c.id for c in node.children]
        if len(ids) != len(set(ids)):
            raise RosterValidationError(
                "unique_node_ids", f"Duplicate child ids under {node.id!r}"
            )
