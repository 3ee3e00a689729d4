"""Turn a threat calculation into concrete per-enemy threat changes."""

import logging
from collections.abc import Sequence

from tekii.engine.fight_state import FightState
from tekii.engine.types import (
    CustomThreat,
    Enemy,
    ModifyThreat,
    Taunt,
    ThreatCalculation,
    ThreatChange,
    ThreatFormulaResult,
    ThreatModifier,
    ThreatState,
)
from tekii.wcl.events import source_instance, target_instance

logger = logging.getLogger(__name__)


def build_calculation(
    result: ThreatFormulaResult,
    amount: float,
    modifiers: list[ThreatModifier],
    multiplier: float,
) -> ThreatCalculation:
    return ThreatCalculation(
        formula=result.formula,
        amount=amount,
        base_threat=result.value,
        modified_threat=result.value * multiplier,
        is_split=result.split_among_enemies,
        modifiers=list(modifiers),
        specials=list(result.specials),
        note=result.note,
    )


class _ChangeLog:
    """Applies changes to the threat table and records the non-zero ones."""

    def __init__(self, state: FightState):
        self.state = state
        self.changes: list[ThreatChange] = []

    def add(self, actor_id: int, enemy_id: int, enemy_instance: int, amount: float) -> None:
        before = self.state.threat.get(actor_id, enemy_id, enemy_instance)
        total = self.state.threat.add(actor_id, enemy_id, enemy_instance, amount)
        applied = total - before
        if applied != 0:
            self.changes.append(
                ThreatChange(actor_id, enemy_id, enemy_instance, "add", applied, total)
            )

    def set(self, actor_id: int, enemy_id: int, enemy_instance: int, amount: float) -> None:
        before = self.state.threat.get(actor_id, enemy_id, enemy_instance)
        total = self.state.threat.set(actor_id, enemy_id, enemy_instance, amount)
        if total != before:
            self.changes.append(
                ThreatChange(actor_id, enemy_id, enemy_instance, "set", total, total)
            )

    def multiply(self, actor_id: int, enemy_id: int, enemy_instance: int, multiplier: float) -> None:
        current = self.state.threat.get(actor_id, enemy_id, enemy_instance)
        self.set(actor_id, enemy_id, enemy_instance, current * multiplier)


def _apply_modify_threat(log: _ChangeLog, special: ModifyThreat, event: dict) -> None:
    source_id = event.get("sourceID")
    if source_id is None:
        return

    if event.get("sourceIsFriendly"):
        if special.target == "all":
            for (enemy_id, enemy_instance), _ in log.state.threat.enemies_for(source_id):
                log.multiply(source_id, enemy_id, enemy_instance, special.multiplier)
            return
        target_id = event.get("targetID")
        if target_id is not None:
            log.multiply(source_id, target_id, target_instance(event), special.multiplier)
        return

    enemy_instance = source_instance(event)
    if special.target == "all":
        for actor_id in log.state.threat.actors_on(source_id, enemy_instance):
            log.multiply(actor_id, source_id, enemy_instance, special.multiplier)
        return
    target_id = event.get("targetID")
    if target_id is not None:
        log.multiply(target_id, source_id, enemy_instance, special.multiplier)


def _apply_taunt(
    log: _ChangeLog, special: Taunt, event: dict, untauntable: set[tuple[int, int]],
) -> None:
    source_id = event.get("sourceID")
    target_id = event.get("targetID")
    if source_id is None or target_id is None:
        return
    enemy_instance = target_instance(event)
    if (target_id, enemy_instance) in untauntable:
        logger.debug("Taunt on untauntable enemy %d ignored", target_id)
        return
    top = log.state.threat.top_actors(target_id, enemy_instance, 1)
    top_threat = top[0][1] if top else 0
    current = log.state.threat.get(source_id, target_id, enemy_instance)
    log.set(source_id, target_id, enemy_instance, max(current, top_threat + special.bonus))


def _untauntable_keys(state: FightState, enemies: Sequence[Enemy]) -> set[tuple[int, int]]:
    game_ids = state.prepared.config.untauntable_enemies
    if not game_ids:
        return set()
    return {(e.id, e.instance) for e in enemies if e.game_id in game_ids}


def distribute(
    calculation: ThreatCalculation,
    event: dict,
    state: FightState,
    enemies: Sequence[Enemy],
    recipient_override: int | None = None,
) -> list[ThreatChange]:
    """Apply one event's threat to the fight state and return the resulting changes.

    `event` must already carry resolved `sourceIsFriendly` / `targetIsFriendly`
    flags. Specials are applied before the event's own threat.
    """
    log = _ChangeLog(state)
    event_type = event.get("type")
    source_id = event.get("sourceID")

    if event_type == "death":
        target_id = event.get("targetID")
        if event.get("targetIsFriendly") and target_id is not None:
            for (enemy_id, enemy_instance), _ in state.threat.enemies_for(target_id):
                log.set(target_id, enemy_id, enemy_instance, 0)
        return log.changes

    for special in calculation.specials:
        if isinstance(special, ThreatState):
            state.states.apply(special)

    if event.get("sourceIsFriendly") and source_id is not None and not state.is_alive(source_id):
        return log.changes

    for special in calculation.specials:
        if isinstance(special, CustomThreat):
            for change in special.changes:
                if change.operator == "set":
                    log.set(change.source_id, change.target_id, change.target_instance, change.amount)
                else:
                    log.add(change.source_id, change.target_id, change.target_instance, change.amount)
        elif isinstance(special, ModifyThreat):
            _apply_modify_threat(log, special, event)
        elif isinstance(special, Taunt):
            _apply_taunt(log, special, event, _untauntable_keys(state, enemies))

    if event_type == "damage" and event.get("targetIsFriendly"):
        return log.changes

    recipient = recipient_override if recipient_override is not None else source_id
    if recipient is None or (recipient_override is None and not event.get("sourceIsFriendly")):
        return log.changes

    threat = calculation.modified_threat
    if threat == 0:
        return log.changes

    if calculation.is_split:
        alive = [e for e in enemies if state.is_alive(e.id, e.instance)]
        if not alive:
            return log.changes
        share = threat / len(alive)
        for enemy in alive:
            log.add(recipient, enemy.id, enemy.instance, share)
        return log.changes

    target_id = event.get("targetID")
    enemy_instance = target_instance(event)
    if any(e.id == target_id and e.instance == enemy_instance for e in enemies):
        log.add(recipient, target_id, enemy_instance, threat)
    return log.changes
