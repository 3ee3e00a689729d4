"""Mutable per-run fight state: auras, threat, liveness, positions, targets and threat states."""

import logging
from collections.abc import Iterable, Mapping

from tekii.engine.auras import AuraTracker
from tekii.engine.combatant_info import parse_aura_ids, synthetic_auras
from tekii.engine.prepared import PreparedConfig
from tekii.engine.threat_table import ThreatTable
from tekii.engine.types import Actor, AuraMutation, ThreatState, ThreatStateKind
from tekii.wcl.events import (
    AURA_APPLY_TYPES,
    AURA_REMOVE_TYPES,
    AURA_STACK_REMOVE_TYPES,
    ability_id,
    number,
    source_instance,
    target_instance,
)

logger = logging.getLogger(__name__)

# x/y on an event locate the actor it happened to, or the one acting.
SOURCE_POSITION_TYPES = frozenset({
    "cast", "begincast", "energize", "resourcechange", "summon", "combatantinfo",
})
TARGET_POSITION_TYPES = frozenset({
    "damage", "absorbed", "heal", "interrupt", "death", "resurrect",
    *AURA_APPLY_TYPES, *AURA_REMOVE_TYPES, *AURA_STACK_REMOVE_TYPES,
})


class ThreatStateMap:
    """Active fixate / aggro-loss / invulnerability states per actor, keyed by kind."""

    def __init__(self):
        self._states: dict[tuple[int, str], dict[int, ThreatState]] = {}

    def apply(self, state: ThreatState) -> None:
        key = (state.actor_id, state.kind)
        if state.phase == "start":
            self._states.setdefault(key, {})[state.spell_id] = state
            return
        active = self._states.get(key)
        if active is not None:
            active.pop(state.spell_id, None)
            if not active:
                del self._states[key]

    def is_active(self, actor_id: int, kind: ThreatStateKind) -> bool:
        return bool(self._states.get((actor_id, kind)))

    def snapshot(self) -> list[dict]:
        return [
            state.to_dict()["state"]
            for _, by_spell in sorted(self._states.items())
            for _, state in sorted(by_spell.items())
        ]


class FightState:
    """State threaded from one event to the next during a single engine run."""

    def __init__(
        self,
        actor_map: Mapping[int, Actor],
        prepared: PreparedConfig,
        initial_auras: Mapping[int | str, Iterable[int]] | None = None,
    ):
        self.actor_map = actor_map
        self.prepared = prepared
        self.auras = AuraTracker.from_snapshot(initial_auras, prepared.exclusive_groups)
        self.threat = ThreatTable()
        self.states = ThreatStateMap()
        self._dead: set[tuple[int, int]] = set()
        self._enemy_targets: dict[tuple[int, int], int] = {}
        self._positions: dict[tuple[int, int], tuple[float, float]] = {}

    # -- FightView ---------------------------------------------------------

    def get_threat(self, actor_id: int, enemy_id: int, enemy_instance: int = 0) -> float:
        return self.threat.get(actor_id, enemy_id, enemy_instance)

    def top_actors_by_threat(
        self, enemy_id: int, enemy_instance: int = 0, count: int = 1,
    ) -> list[tuple[int, float]]:
        return self.threat.top_actors(enemy_id, enemy_instance, count)

    def threat_on_enemy(self, enemy_id: int, enemy_instance: int = 0) -> dict[int, float]:
        return self.threat.actors_on(enemy_id, enemy_instance)

    def current_target(self, enemy_id: int, enemy_instance: int = 0) -> int | None:
        return self._enemy_targets.get((enemy_id, enemy_instance))

    def is_alive(self, actor_id: int, instance: int = 0) -> bool:
        return (actor_id, instance) not in self._dead

    def position(self, actor_id: int, instance: int = 0) -> tuple[float, float] | None:
        return self._positions.get((actor_id, instance))

    # -- event processing --------------------------------------------------

    def process_event(self, event: dict) -> None:
        event_type = event.get("type")
        spell_id = ability_id(event)
        target_id = event.get("targetID")
        self._track_position(event)

        if event_type in AURA_APPLY_TYPES and spell_id is not None and target_id is not None:
            self.auras.apply(target_id, spell_id)
        elif event_type in AURA_REMOVE_TYPES and spell_id is not None and target_id is not None:
            self.auras.remove(target_id, spell_id)
        elif event_type in AURA_STACK_REMOVE_TYPES and spell_id is not None:
            if "stacks" in event and number(event, "stacks") <= 0 and target_id is not None:
                self.auras.remove(target_id, spell_id)
        elif event_type == "death" and target_id is not None:
            self._dead.add((target_id, target_instance(event)))
        elif event_type == "resurrect" and target_id is not None:
            self._dead.discard((target_id, target_instance(event)))
        elif event_type == "combatantinfo":
            self._process_combatant_info(event)
        elif event_type == "cast" and spell_id is not None:
            self._process_cast_implications(event, spell_id)
        elif event_type == "damage":
            self._track_enemy_target(event)

    def apply_mutation(self, mutation: AuraMutation) -> None:
        for actor_id in dict.fromkeys(mutation.actor_ids):
            if mutation.action == "apply":
                self.auras.apply(actor_id, mutation.spell_id)
            else:
                self.auras.remove(actor_id, mutation.spell_id)

    def _track_position(self, event: dict) -> None:
        x, y = event.get("x"), event.get("y")
        if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
            return
        event_type = event.get("type")
        if event_type in SOURCE_POSITION_TYPES:
            actor_id, instance = event.get("sourceID"), source_instance(event)
        elif event_type in TARGET_POSITION_TYPES:
            actor_id, instance = event.get("targetID"), target_instance(event)
        else:
            return
        if actor_id is not None and actor_id >= 0:
            self._positions[(actor_id, instance)] = (x, y)

    def _track_enemy_target(self, event: dict) -> None:
        if event.get("sourceIsFriendly") or not event.get("targetIsFriendly"):
            return
        source_id = event.get("sourceID")
        target_id = event.get("targetID")
        if source_id is None or target_id is None:
            return
        self._enemy_targets[(source_id, source_instance(event))] = target_id

    def _process_combatant_info(self, event: dict) -> None:
        actor_id = event.get("sourceID")
        if actor_id is None:
            return
        actor = self.actor_map.get(actor_id) or Actor(id=actor_id, name=event.get("name", "Unknown"))
        self.auras.seed(actor_id, parse_aura_ids(event))
        class_config = self.prepared.class_config(actor.wow_class)
        self.auras.seed(
            actor_id,
            synthetic_auras(event, actor, self.prepared.config, class_config),
        )

    def _process_cast_implications(self, event: dict, spell_id: int) -> None:
        actor_id = event.get("sourceID")
        actor = self.actor_map.get(actor_id) if actor_id is not None else None
        class_config = self.prepared.class_config(actor.wow_class if actor else None)
        if class_config is None or not class_config.aura_implications:
            return
        implied = [
            aura_id
            for aura_id, spell_ids in class_config.aura_implications.items()
            if spell_id in spell_ids
        ]
        for aura_id in implied:
            if not self.auras.is_active(actor_id, aura_id):
                logger.debug("Actor %d: cast %d implies aura %d", actor_id, spell_id, aura_id)
                self.auras.apply(actor_id, aura_id)
