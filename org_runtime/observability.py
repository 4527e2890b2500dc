# file: org_runtime/observability.py
"""
Observability — In-process metrics collection.

No external dependencies. Uses compute_diagnostics + timing.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from org_hierarchy.hashing import canonical_hash
from org_hierarchy.synthesizer import build_org_tree

if TYPE_CHECKING:
    from .session import OrgChartSession


@dataclass(frozen=True)
class SessionMetrics:
    """Snapshot of observable metrics for one company's chart."""

    company: str
    build_latency_ms: float
    employee_count: int
    unit_count: int
    member_count: int
    vacant_unit_count: int
    input_hash: str
    warnings: list

    def to_dict(self) -> dict:
        return {
            "company": self.company,
            "build_latency_ms": self.build_latency_ms,
            "employee_count": self.employee_count,
            "unit_count": self.unit_count,
            "member_count": self.member_count,
            "vacant_unit_count": self.vacant_unit_count,
            "input_hash": self.input_hash,
            "warnings": list(self.warnings),
        }


def collect_metrics(session: "OrgChartSession", company: str) -> SessionMetrics:
    """
    Collect metrics for *company*.

    Times an uncached synthesis so the latency reflects a full recompute.
    """
    state = session.state

    start = time.perf_counter()
    build_org_tree(company, state.roster, state.config)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    diagnostics = session.get_diagnostics(company)

    return SessionMetrics(
        company=company,
        build_latency_ms=round(elapsed_ms, 2),
        employee_count=sum(1 for e in state.roster if e.primary_company == company),
        unit_count=diagnostics["unit_count"],
        member_count=diagnostics["member_count"],
        vacant_unit_count=len(diagnostics["vacant_units"]),
        input_hash=canonical_hash(company, state.roster, state.config),
        warnings=diagnostics["warnings"],
    )
