"""
Organizational Hierarchy — Centralized Transition Logic

ALL roster / configuration mutation logic lives here.
State is immutable: every handler builds a new ChartState and reports the
persisted slots it touched in the ActionResult.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Tuple

from .constants import (
    SLOT_CROSS_UNIT,
    SLOT_GROUPING,
    SLOT_LEADERS,
    SLOT_MEMBER_TAGS,
    SLOT_ROSTER,
    SLOT_SORT_ORDER,
)
from .domain_types import (
    ActionResult,
    ChartState,
    Employee,
    MemberTag,
    NodeType,
    parse_node_key,
)
from .actions import BaseAction


_UNIT_TYPES = (NodeType.DIVISION, NodeType.DEPARTMENT, NodeType.TEAM)
_LEADABLE_TYPES = (NodeType.CEO,) + _UNIT_TYPES


# ---------------------------------------------------------------------------
# Public dispatcher
# ---------------------------------------------------------------------------

def apply_action(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    """
    Apply *action* to *state* and return ``(new_state, result)``.
    The original state is never mutated.
    """
    atype = action.action_type

    if atype == "replace_roster":
        return _apply_replace_roster(state, action)
    elif atype == "save_employee":
        return _apply_save_employee(state, action)
    elif atype == "delete_employee":
        return _apply_delete_employee(state, action)
    elif atype == "set_division_mapping":
        return _apply_set_division_mapping(state, action)
    elif atype == "set_sort_priority":
        return _apply_set_sort_priority(state, action)
    elif atype == "assign_leader":
        return _apply_assign_leader(state, action)
    elif atype == "add_cross_unit_member":
        return _apply_add_cross_unit_member(state, action)
    elif atype == "remove_cross_unit_member":
        return _apply_remove_cross_unit_member(state, action)
    elif atype == "set_member_tag":
        return _apply_set_member_tag(state, action)
    else:
        raise ValueError(f"Unknown action type: {atype}")


# ---------------------------------------------------------------------------
# Roster handlers (private)
# ---------------------------------------------------------------------------

def _coerce_employee(value: Any) -> Employee:
    if isinstance(value, Employee):
        return value
    if isinstance(value, dict):
        return Employee.from_dict(value)
    raise ValueError(f"Cannot build an employee from {type(value).__name__}")


def _apply_replace_roster(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    roster = tuple(
        _coerce_employee(e) for e in action.payload.get("employees", [])
    )
    return replace(state, roster=roster), ActionResult(
        action_type="replace_roster",
        changed_slots=(SLOT_ROSTER,),
    )


def _apply_save_employee(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    employee = _coerce_employee(action.payload["employee"])

    roster = list(state.roster)
    for i, existing in enumerate(roster):
        if existing.id == employee.id:
            roster[i] = employee
            break
    else:
        roster.append(employee)

    return replace(state, roster=tuple(roster)), ActionResult(
        action_type="save_employee",
        changed_slots=(SLOT_ROSTER,),
    )


def _apply_delete_employee(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    employee_id = action.payload["employee_id"]
    roster = tuple(e for e in state.roster if e.id != employee_id)
    if len(roster) == len(state.roster):
        raise KeyError(f"Employee {employee_id!r} does not exist")
    return replace(state, roster=roster), ActionResult(
        action_type="delete_employee",
        changed_slots=(SLOT_ROSTER,),
    )


# ---------------------------------------------------------------------------
# Configuration handlers (private)
# ---------------------------------------------------------------------------

def _unit_key(key: str, allowed: Tuple[str, ...]) -> str:
    node_type, label = parse_node_key(key)
    if node_type not in allowed:
        raise ValueError(
            f"Node key {key!r} has type {node_type}; expected one of {list(allowed)}"
        )
    if not label:
        raise ValueError(f"Node key {key!r} has an empty label")
    return key


def _with_config(state: ChartState, **tables: Dict[str, Any]) -> ChartState:
    return replace(state, config=replace(state.config, **tables))


def _apply_set_division_mapping(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    label = str(action.payload.get("label", "")).strip()
    division = str(action.payload.get("division") or "").strip()
    if not label:
        raise ValueError("Division mapping requires a department or team label")

    grouping = dict(state.config.grouping)
    if division:
        grouping[label] = division
    else:
        grouping.pop(label, None)

    return _with_config(state, grouping=grouping), ActionResult(
        action_type="set_division_mapping",
        changed_slots=(SLOT_GROUPING,),
    )


def _apply_set_sort_priority(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    key = _unit_key(action.payload["node_key"], _UNIT_TYPES)
    priority = action.payload.get("priority")
    if priority is not None and (
        isinstance(priority, bool) or not isinstance(priority, int)
    ):
        raise ValueError(f"Sort priority must be an integer, got {priority!r}")

    sort_order = dict(state.config.sort_order)
    if priority is None:
        sort_order.pop(key, None)
    else:
        sort_order[key] = priority

    return _with_config(state, sort_order=sort_order), ActionResult(
        action_type="set_sort_priority",
        changed_slots=(SLOT_SORT_ORDER,),
    )


def _apply_assign_leader(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    key = _unit_key(action.payload["node_key"], _LEADABLE_TYPES)
    employee_id = str(action.payload.get("employee_id") or "").strip()

    leaders = dict(state.config.leaders)
    if employee_id:
        leaders[key] = employee_id
    else:
        # Clearing falls back to title inference, not to vacancy.
        leaders.pop(key, None)

    return _with_config(state, leaders=leaders), ActionResult(
        action_type="assign_leader",
        changed_slots=(SLOT_LEADERS,),
    )


def _apply_add_cross_unit_member(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    key = _unit_key(action.payload["node_key"], _UNIT_TYPES)
    employee_id = str(action.payload.get("employee_id") or "").strip()
    if not employee_id:
        raise ValueError("Cross-unit membership requires an employee id")

    current = state.config.cross_unit.get(key, ())
    if employee_id in current:
        return state, ActionResult(
            action_type="add_cross_unit_member",
            success=False,
            reason=f"{employee_id!r} is already a member of {key}",
        )

    cross_unit = dict(state.config.cross_unit)
    cross_unit[key] = current + (employee_id,)
    return _with_config(state, cross_unit=cross_unit), ActionResult(
        action_type="add_cross_unit_member",
        changed_slots=(SLOT_CROSS_UNIT,),
    )


def _apply_remove_cross_unit_member(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    key = _unit_key(action.payload["node_key"], _UNIT_TYPES)
    employee_id = str(action.payload.get("employee_id") or "").strip()

    current = state.config.cross_unit.get(key, ())
    if employee_id not in current:
        return state, ActionResult(
            action_type="remove_cross_unit_member",
            success=False,
            reason=f"{employee_id!r} is not a member of {key}",
        )

    cross_unit = dict(state.config.cross_unit)
    remaining = tuple(e for e in current if e != employee_id)
    if remaining:
        cross_unit[key] = remaining
    else:
        del cross_unit[key]
    return _with_config(state, cross_unit=cross_unit), ActionResult(
        action_type="remove_cross_unit_member",
        changed_slots=(SLOT_CROSS_UNIT,),
    )


def _apply_set_member_tag(
    state: ChartState, action: BaseAction,
) -> Tuple[ChartState, ActionResult]:
    employee_id = str(action.payload.get("employee_id") or "").strip()
    tag = str(action.payload.get("tag") or "").strip().upper()
    if not employee_id:
        raise ValueError("Member tag requires an employee id")
    if tag and tag not in MemberTag.ALL:
        raise ValueError(
            f"Unknown member tag {tag!r}; expected one of {list(MemberTag.ALL)}"
        )

    member_tags = dict(state.config.member_tags)
    if tag:
        member_tags[employee_id] = tag
    else:
        member_tags.pop(employee_id, None)

    return _with_config(state, member_tags=member_tags), ActionResult(
        action_type="set_member_tag",
        changed_slots=(SLOT_MEMBER_TAGS,),
    )
