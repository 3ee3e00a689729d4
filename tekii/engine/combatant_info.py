"""Parse WCL CombatantInfo events into aura seeds, gear and talent context."""

import logging

from tekii.engine.types import Actor, ClassThreatConfig, TalentContext, ThreatConfig

logger = logging.getLogger(__name__)

AURA_ID_KEYS = ("ability", "abilityGameID", "abilityID", "abilityId")
TALENT_ID_KEYS = (
    "spellID", "spellId", "abilityGameID", "abilityId", "gameID", "gameId",
    "guid", "id", "talentID", "talentId",
)
TALENT_RANK_KEYS = ("rank", "points", "point", "pointsSpent", "pointSpent", "value")
TALENT_SPLIT_KEYS = ("id", "points", "value")
MAX_TALENT_POINTS_PER_TREE = 61
MAX_TALENT_PARSE_DEPTH = 6


def _read_number(record: dict, keys: tuple[str, ...]) -> int | None:
    for key in keys:
        value = record.get(key)
        if isinstance(value, int | float) and not isinstance(value, bool):
            return int(value)
    return None


def _dedupe(ids) -> list[int]:
    return list(dict.fromkeys(ids))


def parse_aura_ids(event: dict) -> list[int]:
    """Extract aura spell ids from the combatant snapshot, skipping malformed entries."""
    result = []
    for aura in event.get("auras") or []:
        if not isinstance(aura, dict):
            continue
        spell_id = _read_number(aura, AURA_ID_KEYS)
        if spell_id is not None:
            result.append(spell_id)
    return _dedupe(result)


def parse_gear(event: dict) -> list[dict]:
    """Extract equipped gear. Items with id=0 (empty slots) are skipped."""
    return [
        item for item in event.get("gear") or []
        if isinstance(item, dict) and item.get("id", 0) != 0
    ]


def _is_valid_split(points: list[int]) -> bool:
    return len(points) == 3 and all(0 <= p <= MAX_TALENT_POINTS_PER_TREE for p in points)


def parse_talent_points(event: dict) -> tuple[int, ...]:
    """Parse per-tree talent point totals.

    WCL encodes these as `talentRows` (plain numbers) or, for classic
    reports, as `talents: [{"id": 14}, {"id": 5}, {"id": 42}]` where id is
    the points spent in each tree.
    """
    rows = event.get("talentRows")
    if isinstance(rows, list) and rows and all(
        isinstance(r, int | float) and not isinstance(r, bool) for r in rows
    ):
        return tuple(int(r) for r in rows)

    talents = event.get("talents")
    if not isinstance(talents, list) or len(talents) != 3:
        return ()

    points = []
    for entry in talents:
        if isinstance(entry, int | float) and not isinstance(entry, bool):
            points.append(int(entry))
            continue
        if not isinstance(entry, dict) or _read_number(entry, TALENT_RANK_KEYS[:1]) is not None:
            return ()
        value = _read_number(entry, TALENT_SPLIT_KEYS)
        if value is None:
            return ()
        points.append(value)
    return tuple(points) if _is_valid_split(points) else ()


def parse_talent_ranks(event: dict) -> dict[int, int]:
    """Collect explicit talent ranks ({talent id: rank}) from nested talent payloads."""
    ranks: dict[int, int] = {}

    def collect(value, depth: int) -> None:
        if depth > MAX_TALENT_PARSE_DEPTH:
            return
        if isinstance(value, list):
            for item in value:
                collect(item, depth + 1)
            return
        if not isinstance(value, dict):
            return
        talent_id = _read_number(value, TALENT_ID_KEYS)
        rank = _read_number(value, ("rank", "pointsSpent", "pointSpent"))
        if talent_id is not None and rank is not None and rank > 0:
            ranks[talent_id] = max(ranks.get(talent_id, 0), rank)
        for nested in value.values():
            if isinstance(nested, list | dict):
                collect(nested, depth + 1)

    collect(event.get("talents"), 0)
    collect(event.get("talentTree"), 0)
    return ranks


def build_talent_context(event: dict, actor: Actor) -> TalentContext:
    return TalentContext(
        source_actor=actor,
        talent_points=parse_talent_points(event),
        talent_ranks=parse_talent_ranks(event),
    )


def synthetic_auras(
    event: dict,
    actor: Actor,
    config: ThreatConfig,
    class_config: ClassThreatConfig | None,
) -> list[int]:
    """Infer auras the log never records from gear and talents.

    Order: global gear implications, class gear implications, class talent
    implications. Duplicates are dropped.
    """
    gear = parse_gear(event)
    inferred: list[int] = []
    if config.gear_implications is not None:
        inferred.extend(config.gear_implications(gear))
    if class_config is not None:
        if class_config.gear_implications is not None:
            inferred.extend(class_config.gear_implications(gear))
        if class_config.talent_implications is not None:
            inferred.extend(class_config.talent_implications(build_talent_context(event, actor)))
    if inferred:
        logger.debug("Actor %d: synthetic auras %s", actor.id, inferred)
    return _dedupe(inferred)
