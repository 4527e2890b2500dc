"""
Organizational Hierarchy
Pure, in-process synthesis of an organization tree from a flat roster
plus configuration tables (grouping, sort order, leaders, cross-unit
membership, member tags).
"""

from .domain_types import (
    NodeType, EmployeeStatus, MemberTag, Employee, OrgNode, OrgConfig,
    ChartState, ActionResult, node_key, ceo_key, division_key,
    department_key, team_key, member_key, parse_node_key,
)
from .actions import (
    BaseAction,
    ReplaceRosterAction,
    SaveEmployeeAction,
    DeleteEmployeeAction,
    SetDivisionMappingAction,
    SetSortPriorityAction,
    AssignLeaderAction,
    AddCrossUnitMemberAction,
    RemoveCrossUnitMemberAction,
    SetMemberTagAction,
    reconstruct_action,
)
from .config import create_config, resolve_division
from .engine import OrgChartEngine
from .hashing import canonical_serialize, canonical_hash, tree_hash
from .invariants import RosterValidationError, validate_roster, validate_tree
from .synthesizer import build_org_tree
from .transitions import apply_action
from .constants import (
    DEFAULT_SORT_PRIORITY,
    UNCLASSIFIED_DIVISION,
    EXECUTIVE_DIVISION,
)

__all__ = [
    "NodeType",
    "EmployeeStatus",
    "MemberTag",
    "Employee",
    "OrgNode",
    "OrgConfig",
    "ChartState",
    "ActionResult",
    "node_key",
    "ceo_key",
    "division_key",
    "department_key",
    "team_key",
    "member_key",
    "parse_node_key",
    "BaseAction",
    "ReplaceRosterAction",
    "SaveEmployeeAction",
    "DeleteEmployeeAction",
    "SetDivisionMappingAction",
    "SetSortPriorityAction",
    "AssignLeaderAction",
    "AddCrossUnitMemberAction",
    "RemoveCrossUnitMemberAction",
    "SetMemberTagAction",
    "reconstruct_action",
    "create_config",
    "resolve_division",
    "OrgChartEngine",
    "canonical_serialize",
    "canonical_hash",
    "tree_hash",
    "RosterValidationError",
    "validate_roster",
    "validate_tree",
    "build_org_tree",
    "apply_action",
    "DEFAULT_SORT_PRIORITY",
    "UNCLASSIFIED_DIVISION",
    "EXECUTIVE_DIVISION",
]
