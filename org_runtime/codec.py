# file: org_runtime/codec.py
"""
Slot Codec — JSON text <-> roster / configuration tables.

Encoding is canonical (sorted keys, UTF-8 kept readable).
Decoding is tolerant and never raises: a malformed blob becomes an empty
table, a malformed entry is dropped, and both are logged at WARNING.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from org_hierarchy.constants import (
    SLOT_CROSS_UNIT,
    SLOT_GROUPING,
    SLOT_LEADERS,
    SLOT_MEMBER_TAGS,
    SLOT_ROSTER,
    SLOT_SORT_ORDER,
)
from org_hierarchy.domain_types import ChartState, Employee, MemberTag, OrgConfig

from .store import KeyValueStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------

def _dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True)


def encode_slot(name: str, state: ChartState) -> str:
    """JSON text of slot *name* taken from *state*."""
    if name == SLOT_ROSTER:
        return _dumps([e.to_dict() for e in state.roster])
    config = state.config.to_dict()
    key = _CONFIG_FIELDS.get(name)
    if key is None:
        raise ValueError(f"Unknown slot {name!r}")
    return _dumps(config[key])


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------

def _loads(name: str, raw: Optional[str], expected: type) -> Any:
    if raw is None or raw == "":
        return expected()
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as exc:
        logger.warning("Slot %r is not valid JSON (%s); using empty table", name, exc)
        return expected()
    if not isinstance(value, expected):
        logger.warning(
            "Slot %r holds %s, expected %s; using empty table",
            name, type(value).__name__, expected.__name__,
        )
        return expected()
    return value


def decode_roster(raw: Optional[str]) -> Tuple[Employee, ...]:
    """Valid employees of the roster blob; duplicate ids keep the first."""
    entries = _loads(SLOT_ROSTER, raw, list)
    roster: List[Employee] = []
    seen = set()
    for pos, entry in enumerate(entries):
        try:
            emp = Employee.from_dict(entry)
        except (KeyError, TypeError, AttributeError, ValueError):
            logger.warning("Dropping malformed roster entry #%d", pos)
            continue
        if not emp.id or not emp.name or emp.id in seen:
            logger.warning("Dropping roster entry #%d (blank or duplicate id/name)", pos)
            continue
        seen.add(emp.id)
        roster.append(emp)
    return tuple(roster)


def _decode_mapping(
    name: str, raw: Optional[str], accept: Callable[[Any], Any],
) -> Dict[str, Any]:
    table: Dict[str, Any] = {}
    for key, value in _loads(name, raw, dict).items():
        converted = accept(value)
        if converted is None:
            logger.warning("Dropping entry %r of slot %r", key, name)
            continue
        table[key] = converted
    return table


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_id_list(value: Any) -> Optional[Tuple[str, ...]]:
    if not isinstance(value, list):
        return None
    ids: List[str] = []
    for item in value:
        text = _as_text(item)
        if text and text not in ids:
            ids.append(text)
    return tuple(ids)


def _as_tag(value: Any) -> Optional[str]:
    text = _as_text(value)
    if text and text.upper() in MemberTag.ALL:
        return text.upper()
    return None


def decode_config(slots: Dict[str, Optional[str]]) -> OrgConfig:
    """OrgConfig from raw slot texts (missing slots = empty tables)."""
    return OrgConfig(
        grouping=_decode_mapping(SLOT_GROUPING, slots.get(SLOT_GROUPING), _as_text),
        sort_order=_decode_mapping(SLOT_SORT_ORDER, slots.get(SLOT_SORT_ORDER), _as_int),
        leaders=_decode_mapping(SLOT_LEADERS, slots.get(SLOT_LEADERS), _as_text),
        cross_unit=_decode_mapping(SLOT_CROSS_UNIT, slots.get(SLOT_CROSS_UNIT), _as_id_list),
        member_tags=_decode_mapping(SLOT_MEMBER_TAGS, slots.get(SLOT_MEMBER_TAGS), _as_tag),
    )


def load_state(store: KeyValueStore) -> ChartState:
    """Read every slot from *store* into a ChartState."""
    slots = {name: store.get(name) for name in _CONFIG_FIELDS}
    return ChartState(
        roster=decode_roster(store.get(SLOT_ROSTER)),
        config=decode_config(slots),
    )


# slot name -> OrgConfig.to_dict() key
_CONFIG_FIELDS = {
    SLOT_GROUPING: "grouping",
    SLOT_SORT_ORDER: "sort_order",
    SLOT_LEADERS: "leaders",
    SLOT_CROSS_UNIT: "cross_unit",
    SLOT_MEMBER_TAGS: "member_tags",
}
