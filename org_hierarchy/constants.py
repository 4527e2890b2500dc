"""
Organizational Hierarchy — Constants (Default Values)

All sentinels and slot names live here as module-level defaults.
"""

# --- Sibling ordering ---
# Units without a Sort-Order entry sort after every configured unit.
DEFAULT_SORT_PRIORITY: int = 999

# --- Division buckets ---
UNCLASSIFIED_DIVISION: str = "Unclassified"
EXECUTIVE_DIVISION: str = "Executive Office"

# --- Member ordering ---
# Duty priority for anyone whose duty is not in the priority table.
DEFAULT_DUTY_PRIORITY: int = 99

# --- Persisted slot names (one blob per table) ---
SLOT_ROSTER: str = "roster"
SLOT_GROUPING: str = "grouping"
SLOT_SORT_ORDER: str = "sort_order"
SLOT_LEADERS: str = "leader_assignments"
SLOT_CROSS_UNIT: str = "cross_unit_members"
SLOT_MEMBER_TAGS: str = "member_tags"

CONFIG_SLOTS = (
    SLOT_GROUPING,
    SLOT_SORT_ORDER,
    SLOT_LEADERS,
    SLOT_CROSS_UNIT,
    SLOT_MEMBER_TAGS,
)
ALL_SLOTS = (SLOT_ROSTER,) + CONFIG_SLOTS
