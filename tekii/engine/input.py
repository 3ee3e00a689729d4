"""Build per-fight actor, enemy and ability lookups from WCL report metadata."""

import logging
from dataclasses import dataclass, field

from tekii.engine.types import Actor, Enemy
from tekii.wcl.models import Fight, Report

logger = logging.getLogger(__name__)

# WCL reports environmental damage against this pseudo-actor
ENVIRONMENT_TARGET_ID = -1


class FightNotFoundError(Exception):
    """Raised when the requested fight id is not present in the report."""


@dataclass(frozen=True)
class EngineInput:
    fight: Fight
    actor_map: dict[int, Actor] = field(default_factory=dict)
    friendly_actor_ids: frozenset[int] = frozenset()
    enemies: tuple[Enemy, ...] = ()
    ability_school_map: dict[int, int] = field(default_factory=dict)
    encounter_id: int | None = None


def normalize_class(sub_type: str | None) -> str | None:
    """Map a WCL actor subType ("Death Knight") to a class key ("deathknight")."""
    if not sub_type:
        return None
    return sub_type.replace(" ", "").lower()


def _parse_school(ability_type: str | None) -> int | None:
    if ability_type is None:
        return None
    try:
        return int(ability_type)
    except ValueError:
        return None


def build_ability_school_map(report: Report) -> dict[int, int]:
    schools: dict[int, int] = {}
    for ability in report.master_data.abilities:
        school = _parse_school(ability.type)
        if school is not None:
            schools[ability.game_id] = school
    return schools


def build_engine_input(report: Report, fight_id: int) -> EngineInput:
    """Build the actor/enemy index for one fight of a report.

    Args:
        report: Report metadata including fights and masterData.
        fight_id: Fight to index.

    Returns:
        EngineInput with the actor map, friendly ids, expanded enemies and
        the ability school map.

    Raises:
        FightNotFoundError: If fight_id is not in the report.
    """
    fight = report.get_fight(fight_id)
    if fight is None:
        raise FightNotFoundError(
            f"Fight {fight_id} not found in report {report.code or '<unknown>'}"
        )

    roster = {actor.id: actor for actor in report.master_data.actors}
    actor_map: dict[int, Actor] = {}

    for player_id in fight.friendly_players:
        actor = roster.get(player_id)
        if actor is None:
            continue
        actor_map[player_id] = Actor(
            id=actor.id, name=actor.name, wow_class=normalize_class(actor.sub_type),
        )

    for pet in fight.friendly_pets:
        actor = roster.get(pet.id)
        if actor is None:
            continue
        actor_map[pet.id] = Actor(
            id=actor.id, name=actor.name, is_pet=True,
            owner_id=pet.pet_owner if pet.pet_owner is not None else actor.pet_owner,
        )

    enemy_keys: set[tuple[int, int]] = set()
    enemies: list[Enemy] = []
    for enemy in [*fight.enemy_npcs, *fight.enemy_pets]:
        actor = roster.get(enemy.id)
        if actor is None:
            continue
        actor_map.setdefault(enemy.id, Actor(id=actor.id, name=actor.name))
        for instance in range(max(1, enemy.instance_count)):
            if (enemy.id, instance) in enemy_keys:
                continue
            enemy_keys.add((enemy.id, instance))
            enemies.append(Enemy(
                id=enemy.id, name=actor.name, instance=instance,
                game_id=enemy.game_id or actor.game_id,
            ))

    enemies.sort(key=lambda e: (e.id, e.instance))
    friendly_ids = frozenset(
        [pid for pid in fight.friendly_players if pid in actor_map]
        + [pet.id for pet in fight.friendly_pets if pet.id in actor_map]
    )

    logger.debug(
        "Indexed fight %d: %d actors, %d friendly, %d enemy instances",
        fight.id, len(actor_map), len(friendly_ids), len(enemies),
    )
    return EngineInput(
        fight=fight,
        actor_map=actor_map,
        friendly_actor_ids=friendly_ids,
        enemies=tuple(e for e in enemies if e.id != ENVIRONMENT_TARGET_ID),
        ability_school_map=build_ability_school_map(report),
        encounter_id=fight.encounter_id or None,
    )
