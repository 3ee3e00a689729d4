"""WCL combat event type constants and tolerant field accessors."""

AURA_APPLY_TYPES = frozenset({
    "applybuff", "refreshbuff", "applybuffstack",
    "applydebuff", "refreshdebuff", "applydebuffstack",
})
AURA_REMOVE_TYPES = frozenset({"removebuff", "removedebuff"})
AURA_STACK_REMOVE_TYPES = frozenset({"removebuffstack", "removedebuffstack"})

BUFF_APPLY_TYPES = ("applybuff", "refreshbuff", "applybuffstack")
DEBUFF_APPLY_TYPES = ("applydebuff", "refreshdebuff", "applydebuffstack")

RESOURCE_EVENT_TYPES = frozenset({"energize", "resourcechange"})


class ResourceType:
    MANA = 0
    RAGE = 1
    FOCUS = 2
    ENERGY = 3
    COMBO_POINTS = 4
    RUNIC_POWER = 6
    HOLY_POWER = 9


RESOURCE_LABELS: dict[int, str] = {
    ResourceType.MANA: "mana",
    ResourceType.RAGE: "rage",
    ResourceType.FOCUS: "focus",
    ResourceType.ENERGY: "energy",
    ResourceType.COMBO_POINTS: "combo_points",
    ResourceType.RUNIC_POWER: "runic_power",
    ResourceType.HOLY_POWER: "holy_power",
}

# WCL hitType codes
HIT_TYPE_NAMES: dict[int, str] = {
    0: "miss",
    1: "hit",
    2: "crit",
    3: "absorb",
    4: "block",
    5: "crit_block",
    6: "glancing",
    7: "dodge",
    8: "parry",
    10: "immune",
    11: "deflect",
    14: "resist",
    15: "crushing",
}


def hit_type_name(event: dict) -> str | None:
    """Normalize an event's hitType (numeric code or string) to its name."""
    hit_type = event.get("hitType")
    if isinstance(hit_type, bool):
        return None
    if isinstance(hit_type, int):
        return HIT_TYPE_NAMES.get(hit_type)
    if isinstance(hit_type, str):
        return hit_type.lower()
    return None


def ability_id(event: dict) -> int | None:
    value = event.get("abilityGameID")
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def source_instance(event: dict) -> int:
    return event.get("sourceInstance") or 0


def target_instance(event: dict) -> int:
    return event.get("targetInstance") or 0


def number(event: dict, key: str) -> float:
    """Read a numeric field, treating missing or non-numeric values as 0."""
    value = event.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    return value


def sort_events(events: list[dict]) -> list[dict]:
    """Stable sort by timestamp; ties keep their input order."""
    return sorted(events, key=lambda e: number(e, "timestamp"))
