"""
Organizational Hierarchy — Engine

Top-level orchestrator. Delegates mutation to transitions.py,
validates via invariants.py, synthesizes via synthesizer.py,
reports via diagnostics.py.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .actions import BaseAction
from .diagnostics import compute_diagnostics
from .domain_types import ActionResult, ChartState, Employee, OrgConfig, OrgNode
from .hashing import canonical_hash
from .invariants import validate_roster
from .leadership import leader_role_of
from .projection import (
    group_company_employees,
    list_companies,
    search_employees,
    sorted_company_employees,
    unit_hierarchy,
)
from .synthesizer import build_org_tree
from .transitions import apply_action as _transition_apply


class OrgChartEngine:
    """
    Stateful holder of (roster, configuration) around the pure layers.

      - Every action goes through transitions.apply_action
      - Roster invariants are checked before a new state is accepted;
        a failing action leaves the engine unchanged
      - The last tree per company is memoized against a fingerprint of
        its inputs and recomputed whenever any input changes
    """

    def __init__(self, state: ChartState | None = None) -> None:
        self._state = ChartState()
        self._trees: Dict[str, Tuple[str, OrgNode]] = {}
        if state is not None:
            self.load(state.roster, state.config)

    # -- State access -------------------------------------------------------

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def roster(self) -> Tuple[Employee, ...]:
        return self._state.roster

    @property
    def config(self) -> OrgConfig:
        return self._state.config

    # -- Mutation -----------------------------------------------------------

    def load(self, roster: Iterable[Employee], config: OrgConfig) -> ChartState:
        """Replace the whole state, e.g. from persisted slots."""
        roster = tuple(roster)
        validate_roster(roster)
        self._state = ChartState(roster=roster, config=config)
        self._trees.clear()
        return self._state

    def apply_action(
        self, action: BaseAction,
    ) -> Tuple[ChartState, ActionResult]:
        """
        Apply a single action:
          1. Delegate to transitions.apply_action
          2. Validate roster invariants on the new state
          3. Store and return
        """
        new_state, result = _transition_apply(self._state, action)
        if new_state.roster is not self._state.roster:
            validate_roster(new_state.roster)
        self._state = new_state
        return new_state, result

    def apply_sequence(self, actions: List[BaseAction]) -> ChartState:
        for action in actions:
            self.apply_action(action)
        return self._state

    # -- Synthesis ----------------------------------------------------------

    def build_tree(self, company: str) -> OrgNode:
        """
        Tree for *company*. Returned nodes are shared with the memo and
        must be treated as read-only.
        """
        fingerprint = canonical_hash(company, self._state.roster, self._state.config)
        cached = self._trees.get(company)
        if cached is not None and cached[0] == fingerprint:
            return cached[1]
        tree = build_org_tree(company, self._state.roster, self._state.config)
        self._trees[company] = (fingerprint, tree)
        return tree

    # -- Projections --------------------------------------------------------

    def companies(self) -> List[str]:
        return list_companies(self._state.roster)

    def employees(self, company: str, term: str = "") -> List[Employee]:
        return search_employees(
            sorted_company_employees(self._state.roster, company), term,
        )

    def grouped_employees(self, company: str) -> List[dict]:
        return group_company_employees(self._state.roster, company, self._state.config)

    def units(self, company: str) -> List[dict]:
        return unit_hierarchy(self._state.roster, company, self._state.config)

    def leader_role(self, employee_id: str) -> Optional[dict]:
        return leader_role_of(employee_id, self._state.roster, self._state.config.leaders)

    def get_diagnostics(self, company: str) -> dict:
        """Return diagnostic snapshot of *company*'s current tree."""
        return compute_diagnostics(
            self.build_tree(company), self._state.roster, self._state.config,
        )
