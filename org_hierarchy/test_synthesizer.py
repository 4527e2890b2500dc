"""
Organizational Hierarchy — Synthesizer Tests

  1-3:   End-to-end scenarios (lone CEO, grouped department, cross-unit member)
  4-9:   Tree properties (determinism, leader exclusion, dangling refs,
         sibling order, company isolation)
  10-18: Leader resolution, member ordering, configured empty units, tags

Run:  python -m pytest org_hierarchy/test_synthesizer.py
"""

from __future__ import annotations

import random

from org_hierarchy.config import create_config
from org_hierarchy.constants import EXECUTIVE_DIVISION, UNCLASSIFIED_DIVISION
from org_hierarchy.domain_types import Employee, NodeType, OrgNode
from org_hierarchy.hashing import tree_hash
from org_hierarchy.invariants import validate_tree
from org_hierarchy.synthesizer import build_org_tree


def _emp(emp_id: str, name: str, company: str = "Acme", **kw) -> Employee:
    return Employee(id=emp_id, name=name, primary_company=company, **kw)


def _child(node: OrgNode, node_id: str) -> OrgNode:
    matches = [c for c in node.children if c.id == node_id]
    assert matches, f"{node_id} not under {node.id}: {[c.id for c in node.children]}"
    return matches[0]


def _member_ids(node: OrgNode) -> list:
    return [c.employee.id for c in node.children if c.type == NodeType.MEMBER]


# ───────────────────────────────────────────────────────────────
# End-to-end scenarios
# ───────────────────────────────────────────────────────────────

def test_01_lone_ceo_has_no_children():
    roster = [_emp("1", "Kim", duty="CEO")]
    tree = build_org_tree("Acme", roster, create_config())

    assert tree.id == "CEO:Acme"
    assert tree.type == NodeType.CEO
    assert tree.name == "Acme"
    assert tree.manager == "Kim"
    assert tree.manager_id == "1"
    assert tree.children == []


def test_02_grouped_department_with_head():
    roster = [
        _emp("1", "Lee", department="Sales", duty="Department Head"),
        _emp("2", "Park", department="Sales"),
    ]
    config = create_config(grouping={"Sales": "Commercial"})
    tree = build_org_tree("Acme", roster, config)

    assert tree.manager is None
    assert [c.id for c in tree.children] == ["DIV:Commercial"]
    division = tree.children[0]
    assert division.manager is None
    assert [c.id for c in division.children] == ["DEPT:Sales"]
    sales = division.children[0]
    assert sales.manager == "Lee"
    assert sales.manager_id == "1"
    assert [c.id for c in sales.children] == ["MEMBER:2"]
    assert sales.children[0].employee.name == "Park"


def test_03_cross_unit_member_rendered_twice():
    roster = [
        _emp("x", "Xavier", division="A"),
        _emp("y", "Yoon", division="B"),
    ]
    config = create_config(cross_unit={"DIV:B": ["x"]})
    tree = build_org_tree("Acme", roster, config)

    div_a = _child(tree, "DIV:A")
    div_b = _child(tree, "DIV:B")
    assert _member_ids(div_a) == ["x"]
    assert sorted(_member_ids(div_b)) == ["x", "y"]

    assert _child(div_a, "MEMBER:x").is_external is False
    assert _child(div_b, "MEMBER:x").is_external is True
    assert _child(div_b, "MEMBER:y").is_external is False


# ───────────────────────────────────────────────────────────────
# Tree properties
# ───────────────────────────────────────────────────────────────

def _sample_roster() -> list:
    return [
        _emp("100", "Choi", duty="대표이사"),
        _emp("101", "Han", department="Sales", team="Retail", duty="팀장",
             joined_date="2016-04-01"),
        _emp("102", "Jung", department="Sales", team="Retail", joined_date="2019-01-02"),
        _emp("103", "Kang", department="Sales", duty="부서장", joined_date="2010-05-05"),
        _emp("104", "Oh", department="R&D", team="Platform"),
        _emp("105", "Seo", department="R&D", team="Platform", duty="Team Lead"),
        _emp("106", "Yoo", department="Finance"),
        _emp("200", "Moon", company="Beta", department="Sales", duty="팀장"),
    ]


def _sample_config():
    return create_config(
        grouping={"Sales": "Commercial", "R&D": "Technology"},
        sort_order={"DIV:Technology": 1},
        leaders={"DEPT:R&D": "200"},
        cross_unit={"TEAM:Platform": ["200"]},
        member_tags={"104": "DISPATCH"},
    )


def test_04_same_inputs_same_tree():
    roster = _sample_roster()
    first = build_org_tree("Acme", roster, _sample_config())
    second = build_org_tree("Acme", roster, _sample_config())
    assert first.to_dict() == second.to_dict()
    assert tree_hash(first) == tree_hash(second)


def test_05_roster_order_does_not_matter():
    roster = _sample_roster()
    shuffled = list(roster)
    random.Random(7).shuffle(shuffled)
    assert tree_hash(build_org_tree("Acme", roster, _sample_config())) == \
        tree_hash(build_org_tree("Acme", shuffled, _sample_config()))


def test_06_leader_never_member_of_own_unit():
    tree = build_org_tree("Acme", _sample_roster(), _sample_config())
    validate_tree(tree)

    for node in tree.walk():
        if node.manager_id is not None:
            assert node.manager_id not in _member_ids(node)

    # Borrowed from Beta and assigned to R&D
    rnd = _child(_child(tree, "DIV:Technology"), "DEPT:R&D")
    assert rnd.manager_id == "200"
    assert rnd.manager_is_external is True


def test_07_dangling_assignment_equals_no_assignment():
    roster = _sample_roster()
    base = create_config(grouping={"Sales": "Commercial"})
    dangling = create_config(
        grouping={"Sales": "Commercial"},
        leaders={"DEPT:Sales": "ghost", "TEAM:Retail": "ghost"},
    )
    assert build_org_tree("Acme", roster, base).to_dict() == \
        build_org_tree("Acme", roster, dangling).to_dict()

    sales = _child(_child(build_org_tree("Acme", roster, dangling), "DIV:Commercial"),
                   "DEPT:Sales")
    assert sales.manager_id == "103"

    vacant = build_org_tree(
        "Acme",
        [_emp("1", "Lim", department="Ops")],
        create_config(leaders={"DEPT:Ops": "ghost"}),
    )
    ops = _child(_child(vacant, f"DIV:{UNCLASSIFIED_DIVISION}"), "DEPT:Ops")
    assert ops.manager is None


def test_08_sibling_order_by_priority_then_name():
    roster = [
        _emp("1", "A", division="Zeta"),
        _emp("2", "B", division="beta"),
        _emp("3", "C", division="Alpha"),
    ]
    unsorted = build_org_tree("Acme", roster, create_config())
    assert [c.name for c in unsorted.children] == ["Alpha", "beta", "Zeta"]

    prioritized = build_org_tree(
        "Acme", roster, create_config(sort_order={"DIV:Zeta": 1}),
    )
    assert [c.name for c in prioritized.children] == ["Zeta", "Alpha", "beta"]


def test_09_only_own_company_units():
    roster = _sample_roster() + [_emp("300", "Ahn", company="Beta", division="Logistics")]
    tree = build_org_tree("Acme", roster, create_config())

    assert "DIV:Logistics" not in [c.id for c in tree.children]
    for node in tree.walk():
        if node.type == NodeType.MEMBER:
            assert node.employee.primary_company == "Acme"


# ───────────────────────────────────────────────────────────────
# Leader resolution and member emission
# ───────────────────────────────────────────────────────────────

def test_10_keyword_tie_breaks_by_joined_date_then_id():
    roster = [
        _emp("3", "Baek", department="Dev", team="Core", duty="팀장", joined_date="2020-01-01"),
        _emp("2", "Cho", department="Dev", team="Core", duty="팀장", joined_date="2015-03-01"),
        _emp("1", "Do", department="Dev", team="Core", duty="팀장", joined_date="2015-03-01"),
    ]
    tree = build_org_tree("Acme", roster, create_config(grouping={"Dev": "Eng"}))
    team = _child(_child(_child(tree, "DIV:Eng"), "DEPT:Dev"), "TEAM:Core")
    assert team.manager_id == "1"
    assert _member_ids(team) == ["2", "3"]


def test_10b_team_without_department_is_division_direct():
    roster = [
        _emp("1", "Do", team="Core", joined_date="2015-03-01"),
        _emp("2", "Cho", team="Core", joined_date="2020-01-01"),
    ]
    tree = build_org_tree("Acme", roster, create_config(grouping={"Core": "Eng"}))
    division = _child(tree, "DIV:Eng")

    assert [c.id for c in division.children] == ["MEMBER:1", "MEMBER:2"]
    assert all(c.is_external is False for c in division.children)


def test_11_division_head_stays_in_own_department():
    roster = [
        _emp("1", "Nam", division="Ops", department="Planning", duty="본부장"),
        _emp("2", "Ryu", division="Ops", department="Field"),
    ]
    tree = build_org_tree("Acme", roster, create_config())
    ops = _child(tree, "DIV:Ops")

    assert ops.manager_id == "1"
    assert [c.id for c in ops.children] == ["DEPT:Field", "DEPT:Planning"]
    assert "1" not in _member_ids(ops)

    planning = _child(ops, "DEPT:Planning")
    assert planning.manager is None
    assert _member_ids(planning) == ["1"]
    validate_tree(tree)


def test_12_executives_fold_into_executive_division():
    roster = [
        _emp("1", "Kim", duty="CEO"),
        _emp("2", "Song", duty="부사장", department="경영진"),
        _emp("3", "Woo", division="Ops"),
    ]
    tree = build_org_tree("Acme", roster, create_config(grouping={"경영진": "Ops"}))

    assert tree.manager_id == "1"
    executive = _child(tree, f"DIV:{EXECUTIVE_DIVISION}")
    ids = [n.employee.id for n in executive.walk() if n.type == NodeType.MEMBER]
    assert ids == ["2"]
    assert "1" not in [n.employee.id for n in tree.walk() if n.type == NodeType.MEMBER]


def test_13_unclassified_bucket_only_when_non_empty():
    mapped = build_org_tree(
        "Acme",
        [_emp("1", "Bae", department="Sales")],
        create_config(grouping={"Sales": "Commercial"}),
    )
    assert f"DIV:{UNCLASSIFIED_DIVISION}" not in [c.id for c in mapped.children]

    unmapped = build_org_tree("Acme", [_emp("1", "Bae", department="Sales")], create_config())
    assert [c.id for c in unmapped.children] == [f"DIV:{UNCLASSIFIED_DIVISION}"]


def test_14_member_order_and_direct_members_after_units():
    roster = [
        _emp("1", "Ga", division="Ops", joined_date=""),
        _emp("2", "Na", division="Ops", joined_date="2018-01-01"),
        _emp("3", "Da", division="Ops", joined_date="2012-01-01"),
        _emp("4", "Ra", division="Ops", duty="이사", joined_date="2021-01-01"),
        _emp("5", "Ma", division="Ops", department="Field"),
    ]
    tree = build_org_tree("Acme", roster, create_config())
    ops = _child(tree, "DIV:Ops")

    assert [c.id for c in ops.children] == [
        "DEPT:Field", "MEMBER:4", "MEMBER:3", "MEMBER:2", "MEMBER:1",
    ]


def test_15_configured_empty_unit_is_vacant_and_childless():
    roster = [_emp("1", "Jo", division="Ops")]
    config = create_config(cross_unit={"DIV:Ghost": ["missing"]})
    tree = build_org_tree("Acme", roster, config)

    ghost = _child(tree, "DIV:Ghost")
    assert ghost.manager is None
    assert ghost.children == []


def test_16_foreign_leader_assignment_is_flagged():
    roster = [
        _emp("1", "Jo", division="Ops"),
        _emp("9", "Vance", company="Beta", duty="CEO"),
    ]
    config = create_config(leaders={"DIV:Ops": "9", "CEO:Acme": "9"})
    tree = build_org_tree("Acme", roster, config)

    assert tree.manager_id == "9"
    assert tree.manager_is_external is True
    ops = _child(tree, "DIV:Ops")
    assert ops.manager == "Vance"
    assert ops.manager_is_external is True
    assert _member_ids(ops) == ["1"]


def test_17_member_tag_and_dict_shape():
    tree = build_org_tree("Acme", _sample_roster(), _sample_config())
    platform = _child(_child(_child(tree, "DIV:Technology"), "DEPT:R&D"), "TEAM:Platform")
    oh = _child(platform, "MEMBER:104")

    assert oh.member_tag == "DISPATCH"
    d = oh.to_dict()
    assert d["type"] == NodeType.MEMBER
    assert d["employee"]["id"] == "104"
    assert d["member_tag"] == "DISPATCH"
    assert d["children"] == []

    # Technology carries priority 1, so it precedes Commercial
    assert [c.id for c in tree.children][:2] == ["DIV:Technology", "DIV:Commercial"]


def test_18_sort_order_entry_renders_vacant_division():
    roster = [_emp("1", "Kim", duty="CEO"), _emp("2", "Ryu", division="Ops")]
    config = create_config(
        grouping={"Sales": "Commercial"},
        sort_order={"DIV:Commercial": 1, "DIV:Stale": 2},
    )
    tree = build_org_tree("Acme", roster, config)

    assert [c.id for c in tree.children] == ["DIV:Commercial", "DIV:Ops"]
    commercial = tree.children[0]
    assert commercial.manager is None
    assert commercial.children == []
