"""
Organizational Hierarchy — Canonical Hashing

Deterministic canonical serialization + SHA-256 hashing, used to
fingerprint synthesizer inputs (memoization) and compare trees.

Rules:
  - Roster sorted by employee id
  - Configuration tables sorted by key
  - Tree children kept in their emitted order (order is part of the output)
  - UTF-8 JSON, no whitespace
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Iterable

from .domain_types import Employee, OrgConfig, OrgNode


def _dumps(obj: Any) -> bytes:
    return json.dumps(
        obj, ensure_ascii=True, separators=(",", ":"), sort_keys=True,
    ).encode("utf-8")


def canonical_serialize(
    company: str, roster: Iterable[Employee], config: OrgConfig,
) -> bytes:
    """Canonical bytes of one synthesizer input."""
    return _dumps(_build_input_dict(company, roster, config))


def canonical_hash(
    company: str, roster: Iterable[Employee], config: OrgConfig,
) -> str:
    """SHA-256 of the canonical input serialization. Lowercase hex."""
    return hashlib.sha256(canonical_serialize(company, roster, config)).hexdigest()


def tree_hash(root: OrgNode) -> str:
    """SHA-256 of a synthesized tree's ``to_dict()``."""
    return hashlib.sha256(_dumps(root.to_dict())).hexdigest()


def _build_input_dict(
    company: str, roster: Iterable[Employee], config: OrgConfig,
) -> Dict[str, Any]:
    return {
        "company": company,
        "roster": [e.to_dict() for e in sorted(roster, key=lambda e: e.id)],
        "config": config.to_dict(),
    }
