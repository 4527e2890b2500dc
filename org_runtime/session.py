# file: org_runtime/session.py
"""
Org Chart Session — orchestrates engine + slot persistence.

Apply-before-persist order:
  1. admin gate                      — PermissionDeniedError
  2. engine.apply_action(action)     — may raise RosterValidationError,
                                       ValueError, KeyError
  3. store.put(slot, ...)            — only the slots the action changed,
                                       only if step 2 succeeded

A failed action therefore never reaches the store.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from org_hierarchy.actions import BaseAction, ReplaceRosterAction
from org_hierarchy.domain_types import ActionResult, ChartState, OrgNode
from org_hierarchy.engine import OrgChartEngine
from roster_ingest.adapter import IngestionResult

from .codec import encode_slot, load_state
from .drift import compare_rosters
from .store import KeyValueStore

logger = logging.getLogger(__name__)


class PermissionDeniedError(Exception):
    """Raised when a non-administrator session attempts a mutation."""

    def __init__(self, action_type: str) -> None:
        self.action_type = action_type
        super().__init__(
            f"Administrator rights required for {action_type!r}"
        )


class OrgChartSession:
    """
    Binds an OrgChartEngine to a KeyValueStore and an ``is_admin`` flag.

    Reads are open to everyone; every mutation requires ``is_admin``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        is_admin: bool = False,
        engine: Optional[OrgChartEngine] = None,
    ) -> None:
        self._store = store
        self._is_admin = is_admin
        self._engine = engine or OrgChartEngine()

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def initialize(self) -> "OrgChartSession":
        """Load every slot from the store (malformed slots become empty)."""
        state = load_state(self._store)
        self._engine.load(state.roster, state.config)
        logger.debug("Loaded %d employee(s) from store", len(state.roster))
        return self

    # ------------------------------------------------------------------
    # Mutation (apply-before-persist)
    # ------------------------------------------------------------------

    def apply_action(self, action: BaseAction) -> Tuple[ChartState, ActionResult]:
        if not self._is_admin:
            raise PermissionDeniedError(action.action_type)

        state, result = self._engine.apply_action(action)

        for slot in result.changed_slots:
            self._store.put(slot, encode_slot(slot, state))
        if result.success:
            logger.info(
                "Applied %s (saved: %s)",
                action.action_type, ", ".join(result.changed_slots) or "-",
            )
        else:
            logger.info("Rejected %s: %s", action.action_type, result.reason)
        return state, result

    def import_roster(
        self, ingestion: IngestionResult, confirmed: bool = False,
    ) -> dict:
        """
        Ingestion confirmation gate.

        Without ``confirmed`` nothing changes and the preview (parse summary
        plus roster diff) is returned. With it, the roster is replaced
        wholesale; configuration tables are kept.
        """
        if not self._is_admin:
            raise PermissionDeniedError("replace_roster")

        report = ingestion.to_dict()
        report["diff"] = compare_rosters(self._engine.roster, ingestion.employees)
        report["applied"] = False

        if not confirmed:
            return report

        self.apply_action(ReplaceRosterAction(
            payload={"employees": list(ingestion.employees)},
        ))
        report["applied"] = True
        logger.info(
            "Roster replaced: %d employee(s), %d skipped row(s)",
            ingestion.success_count, ingestion.skipped_rows,
        )
        return report

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def get_metrics(self, company: str) -> "SessionMetrics":
        from .observability import collect_metrics
        return collect_metrics(self, company)

    # ------------------------------------------------------------------
    # Delegates
    # ------------------------------------------------------------------

    def build_tree(self, company: str) -> OrgNode:
        return self._engine.build_tree(company)

    def get_diagnostics(self, company: str) -> dict:
        return self._engine.get_diagnostics(company)

    @property
    def engine(self) -> OrgChartEngine:
        return self._engine

    @property
    def state(self) -> ChartState:
        return self._engine.state

    @property
    def is_admin(self) -> bool:
        return self._is_admin
