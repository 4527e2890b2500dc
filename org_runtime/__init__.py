# file: org_runtime/__init__.py
"""
Organizational Runtime — Persistence Layer

Named-slot persistence and the administrative session around the
in-memory OrgChartEngine.
"""

from .store import KeyValueStore, SqliteKeyValueStore
from .codec import encode_slot, decode_roster, decode_config, load_state
from .session import OrgChartSession, PermissionDeniedError
from .drift import compare_rosters
from .observability import SessionMetrics, collect_metrics

__all__ = [
    "KeyValueStore",
    "SqliteKeyValueStore",
    "encode_slot",
    "decode_roster",
    "decode_config",
    "load_state",
    "OrgChartSession",
    "PermissionDeniedError",
    "compare_rosters",
    "SessionMetrics",
    "collect_metrics",
]
