"""
Organizational Hierarchy — Administrative Action Definitions

Actions are **pure data**. They carry intent and payload only.
They contain ZERO transition logic (see transitions.py).

Every mutation an administrator can perform on the roster or on one of
the configuration tables is one of the actions below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class BaseAction:
    """Base for all administrative actions — pure data container."""

    action_type: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "action_type": self.action_type,
            "payload": dict(self.payload),
        }


@dataclass
class ReplaceRosterAction(BaseAction):
    """Wholesale roster replacement (confirmed ingestion)."""

    action_type: str = "replace_roster"
    # payload keys: employees (list of Employee or employee dicts)


@dataclass
class SaveEmployeeAction(BaseAction):
    """Insert or update one employee record, matched by id."""

    action_type: str = "save_employee"
    # payload keys: employee (Employee or employee dict)


@dataclass
class DeleteEmployeeAction(BaseAction):
    action_type: str = "delete_employee"
    # payload keys: employee_id


@dataclass
class SetDivisionMappingAction(BaseAction):
    """Map a department or team label to a division. Empty division removes."""

    action_type: str = "set_division_mapping"
    # payload keys: label, division


@dataclass
class SetSortPriorityAction(BaseAction):
    """Set a node key's Sort-Order value. ``priority=None`` removes."""

    action_type: str = "set_sort_priority"
    # payload keys: node_key, priority


@dataclass
class AssignLeaderAction(BaseAction):
    """Explicit leader override. Empty ``employee_id`` clears it."""

    action_type: str = "assign_leader"
    # payload keys: node_key, employee_id


@dataclass
class AddCrossUnitMemberAction(BaseAction):
    action_type: str = "add_cross_unit_member"
    # payload keys: node_key, employee_id


@dataclass
class RemoveCrossUnitMemberAction(BaseAction):
    action_type: str = "remove_cross_unit_member"
    # payload keys: node_key, employee_id


@dataclass
class SetMemberTagAction(BaseAction):
    """Tag a member CONCURRENT / DISPATCH / SUPPORT. Empty tag clears it."""

    action_type: str = "set_member_tag"
    # payload keys: employee_id, tag


# Strict action-type → class mapping.
_ACTION_CLASS_MAP = {
    "replace_roster": ReplaceRosterAction,
    "save_employee": SaveEmployeeAction,
    "delete_employee": DeleteEmployeeAction,
    "set_division_mapping": SetDivisionMappingAction,
    "set_sort_priority": SetSortPriorityAction,
    "assign_leader": AssignLeaderAction,
    "add_cross_unit_member": AddCrossUnitMemberAction,
    "remove_cross_unit_member": RemoveCrossUnitMemberAction,
    "set_member_tag": SetMemberTagAction,
}


def reconstruct_action(action_dict: dict) -> BaseAction:
    """
    Rebuild a typed action from a plain dict.
    Raises ValueError for unknown types.
    """
    atype = action_dict.get("action_type", "")
    cls = _ACTION_CLASS_MAP.get(atype)
    if cls is None:
        raise ValueError(
            f"Unknown action_type {atype!r}. "
            f"Known types: {sorted(_ACTION_CLASS_MAP)}"
        )
    return cls(payload=dict(action_dict.get("payload", {})))
