"""
Organizational Hierarchy — Core Domain Types

Pure data. No behaviour, no synthesis logic.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Roster:
    Every employee record known to the system, across all companies.

Node Key:
    Deterministic identity of a tree position, namespaced by level and
    label (``DIV:Sales``). Derived from labels, never from storage ids.

Leadership Assignment:
    Explicit leader override for a node key.

Cross-Unit Membership:
    Display of an employee as an extra member of a unit outside their
    formal placement.

Vacant:
    A unit with no resolvable leader (override and inference both failed).

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


# ── Node types ────────────────────────────────────────────────

class NodeType:
    CEO = "CEO"
    DIVISION = "DIVISION"
    DEPARTMENT = "DEPARTMENT"
    TEAM = "TEAM"
    MEMBER = "MEMBER"


class EmployeeStatus:
    ACTIVE = "ACTIVE"
    LEAVE = "LEAVE"


class MemberTag:
    """Display tag for a member working outside a plain single placement."""

    CONCURRENT = "CONCURRENT"
    DISPATCH = "DISPATCH"
    SUPPORT = "SUPPORT"

    ALL = (CONCURRENT, DISPATCH, SUPPORT)


# ── Node keys ─────────────────────────────────────────────────

_KEY_PREFIXES: Dict[str, str] = {
    NodeType.CEO: "CEO",
    NodeType.DIVISION: "DIV",
    NodeType.DEPARTMENT: "DEPT",
    NodeType.TEAM: "TEAM",
    NodeType.MEMBER: "MEMBER",
}
_PREFIX_TO_TYPE: Dict[str, str] = {v: k for k, v in _KEY_PREFIXES.items()}


def node_key(node_type: str, label: str) -> str:
    return f"{_KEY_PREFIXES[node_type]}:{label}"


def ceo_key(company: str) -> str:
    return node_key(NodeType.CEO, company)


def division_key(label: str) -> str:
    return node_key(NodeType.DIVISION, label)


def department_key(label: str) -> str:
    return node_key(NodeType.DEPARTMENT, label)


def team_key(label: str) -> str:
    return node_key(NodeType.TEAM, label)


def member_key(employee_id: str) -> str:
    return node_key(NodeType.MEMBER, employee_id)


def parse_node_key(key: str) -> Tuple[str, str]:
    """Split a node key into ``(node_type, label)``. Hard fail on bad prefix."""
    prefix, sep, label = key.partition(":")
    if not sep or prefix not in _PREFIX_TO_TYPE:
        raise ValueError(
            f"Invalid node key {key!r}: expected one of "
            f"{sorted(_PREFIX_TO_TYPE)} followed by ':'"
        )
    return _PREFIX_TO_TYPE[prefix], label


# ── Core Domain Types ─────────────────────────────────────────

@dataclass(frozen=True)
class Employee:
    """One real person's assignment record."""

    id: str
    name: str
    primary_company: str = ""
    division: str = ""            # explicit override; empty = derive
    department: str = ""
    team: str = ""
    position: str = ""            # job grade
    duty: str = ""                # functional title, drives leader inference
    english_name: str = ""
    email: str = ""
    phone: str = ""
    extension_number: str = ""
    joined_date: str = ""         # YYYY-MM-DD when known
    birth_date: Optional[str] = None  # YYMMDD
    status: str = EmployeeStatus.ACTIVE
    is_head: bool = False
    avatar_url: str = ""
    display_order: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "primary_company": self.primary_company,
            "division": self.division,
            "department": self.department,
            "team": self.team,
            "position": self.position,
            "duty": self.duty,
            "english_name": self.english_name,
            "email": self.email,
            "phone": self.phone,
            "extension_number": self.extension_number,
            "joined_date": self.joined_date,
            "birth_date": self.birth_date,
            "status": self.status,
            "is_head": self.is_head,
            "avatar_url": self.avatar_url,
            "display_order": self.display_order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Employee":
        """
        Build an Employee from a plain dict. Unknown keys are ignored,
        missing optional text fields become "". ``id`` and ``name`` are
        required (KeyError otherwise).
        """
        def _text(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value).strip()

        display_order = data.get("display_order")
        if isinstance(display_order, bool) or not isinstance(display_order, int):
            display_order = None

        birth_date = data.get("birth_date")
        return cls(
            id=str(data["id"]).strip(),
            name=str(data["name"]).strip(),
            primary_company=_text("primary_company"),
            division=_text("division"),
            department=_text("department"),
            team=_text("team"),
            position=_text("position"),
            duty=_text("duty"),
            english_name=_text("english_name"),
            email=_text("email"),
            phone=_text("phone"),
            extension_number=_text("extension_number"),
            joined_date=_text("joined_date"),
            birth_date=str(birth_date) if birth_date else None,
            status=_text("status") or EmployeeStatus.ACTIVE,
            is_head=bool(data.get("is_head", False)),
            avatar_url=_text("avatar_url"),
            display_order=display_order,
        )


@dataclass
class OrgNode:
    """
    A node in the synthesized organization tree.

    ``manager`` / ``manager_id`` are None for a vacant unit.
    MEMBER nodes carry the raw ``employee`` and never have children.
    """

    id: str
    name: str
    type: str
    manager: Optional[str] = None
    manager_id: Optional[str] = None
    children: List["OrgNode"] = field(default_factory=list)
    employee: Optional[Employee] = None
    is_external: bool = False
    manager_is_external: bool = False
    member_tag: Optional[str] = None

    def to_dict(self) -> dict:
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "manager": self.manager,
            "manager_id": self.manager_id,
            "children": [c.to_dict() for c in self.children],
        }
        if self.type == NodeType.MEMBER:
            d["employee"] = self.employee.to_dict() if self.employee else None
            d["is_external"] = self.is_external
            d["member_tag"] = self.member_tag
        else:
            d["manager_is_external"] = self.manager_is_external
        return d

    def walk(self):
        """Yield this node and every descendant, depth-first, in order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class OrgConfig:
    """
    The configuration tables consumed by the synthesizer.

    Never mutated in place: transitions build a new OrgConfig.
    """

    grouping: Dict[str, str] = field(default_factory=dict)
    sort_order: Dict[str, int] = field(default_factory=dict)
    leaders: Dict[str, str] = field(default_factory=dict)
    cross_unit: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    member_tags: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "grouping": dict(sorted(self.grouping.items())),
            "sort_order": dict(sorted(self.sort_order.items())),
            "leaders": dict(sorted(self.leaders.items())),
            "cross_unit": {
                k: list(v) for k, v in sorted(self.cross_unit.items())
            },
            "member_tags": dict(sorted(self.member_tags.items())),
        }


@dataclass(frozen=True)
class ChartState:
    """Complete input of the synthesizer: roster plus configuration."""

    roster: Tuple[Employee, ...] = ()
    config: OrgConfig = field(default_factory=OrgConfig)

    def employee_index(self) -> Dict[str, Employee]:
        return {e.id: e for e in self.roster}


@dataclass(frozen=True)
class ActionResult:
    """
    Structured, immutable outcome of an administrative action.

    ``changed_slots`` names the persisted tables the action touched, so the
    caller saves exactly those.
    """

    action_type: str = ""
    success: bool = True
    changed_slots: Tuple[str, ...] = ()
    reason: str = ""
