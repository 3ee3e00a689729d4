"""Fold the fight's events through the threat engine.

Before the main pass, preprocessors visit every event once to seed
auras the log never shows being applied. Then, for each event, in order:

1. resolve friendliness flags
2. collect preprocessor aura mutations, update fight state, apply them
3. score boss melee as zero threat with a marker
4. let installed interceptors skip or augment the event
5. resolve the formula and apply player modifiers
6. add encounter effects, then derive fixate / aggro-loss / invulnerability
   state markers
7. install interceptors requested by the formula
8. distribute threat and emit the augmented event

A skipped event is emitted with a zero calculation and nothing after
step 4 runs for it.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from tekii.engine.distributor import build_calculation, distribute
from tekii.engine.fight_state import FightState
from tekii.engine.input import EngineInput
from tekii.engine.interceptors import InterceptorRegistry
from tekii.engine.modifiers import active_modifiers, total_multiplier
from tekii.engine.prepared import PreparedConfig, prepare_config
from tekii.engine.preprocessors import (
    ProcessorContext,
    build_processors,
    normalize_initial_auras,
    run_prepass,
)
from tekii.engine.resolver import event_amount, resolve_formula
from tekii.engine.types import (
    ZERO_RESULT,
    Actor,
    AuraMutation,
    EncounterHook,
    EventMarker,
    InstallInterceptor,
    ThreatCalculation,
    ThreatConfig,
    ThreatContext,
    ThreatSpecial,
    ThreatState,
)
from tekii.wcl.events import (
    AURA_APPLY_TYPES,
    AURA_REMOVE_TYPES,
    ability_id,
    number,
    target_instance,
)

logger = logging.getLogger(__name__)

UNKNOWN_ACTOR_NAME = "Unknown"
BOSS_MELEE_SPELL_ID = 1


@dataclass
class ProcessEventsResult:
    augmented_events: list[dict] = field(default_factory=list)
    event_counts: dict[str, int] = field(default_factory=dict)
    final_auras: dict[int, list[int]] = field(default_factory=dict)
    interceptors: list[dict] = field(default_factory=list)
    threat_totals: list[dict] = field(default_factory=list)
    states: list[dict] = field(default_factory=list)
    tank_actor_ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "augmentedEvents": self.augmented_events,
            "eventCounts": self.event_counts,
            "finalAuras": {str(k): v for k, v in self.final_auras.items()},
            "interceptors": self.interceptors,
            "threatTotals": self.threat_totals,
            "states": self.states,
            "tankActorIds": self.tank_actor_ids,
        }


def _resolve_friendliness(event: dict, friendly_ids: frozenset[int]) -> dict:
    resolved = dict(event)
    for prefix in ("source", "target"):
        flag = f"{prefix}IsFriendly"
        if not isinstance(resolved.get(flag), bool):
            resolved[flag] = resolved.get(f"{prefix}ID") in friendly_ids
    return resolved


def is_boss_melee(event: dict) -> bool:
    """An enemy auto-attack landing on a friendly actor."""
    return (
        event.get("type") == "damage"
        and ability_id(event) == BOSS_MELEE_SPELL_ID
        and not event.get("sourceIsFriendly")
        and bool(event.get("targetIsFriendly"))
    )


def _actor(actor_map: Mapping[int, Actor], actor_id: int | None) -> Actor:
    if actor_id is None:
        return Actor(id=0, name=UNKNOWN_ACTOR_NAME)
    return actor_map.get(actor_id) or Actor(id=actor_id, name=UNKNOWN_ACTOR_NAME)


def _augment(raw_event: dict, changes: list, calculation: ThreatCalculation) -> dict:
    return {
        **raw_event,
        "threat": {
            "values": [c.to_dict() for c in changes],
            "calculation": calculation.to_dict(),
        },
    }


def derive_state_marker(event: dict, prepared: PreparedConfig) -> ThreatState | None:
    """Map an aura apply/remove of a fixate, aggro-loss or invulnerability buff to a state marker."""
    event_type = event.get("type")
    if event_type in AURA_APPLY_TYPES:
        phase = "start"
    elif event_type in AURA_REMOVE_TYPES:
        phase = "end"
    else:
        return None

    spell_id = ability_id(event)
    if spell_id is None:
        return None

    if spell_id in prepared.fixate_spells:
        kind = "fixate"
    elif spell_id in prepared.aggro_loss_spells:
        kind = "aggroLoss"
    elif spell_id in prepared.invulnerable_spells:
        kind = "invulnerable"
    else:
        return None

    source_id = event.get("sourceID")
    target_id = event.get("targetID")
    if kind == "fixate":
        if source_id is None:
            return None
        return ThreatState(
            kind=kind, phase=phase, spell_id=spell_id, actor_id=source_id,
            target_id=target_id, target_instance=target_instance(event),
            name=f"Spell {spell_id}",
        )
    if target_id is None:
        return None
    return ThreatState(
        kind=kind, phase=phase, spell_id=spell_id, actor_id=target_id,
        name=f"Spell {spell_id}",
    )


def _encounter_hook(config: ThreatConfig, engine_input: EngineInput) -> EncounterHook | None:
    encounter_id = engine_input.encounter_id
    factory = config.encounters.get(encounter_id) if encounter_id is not None else None
    if factory is None:
        return None
    logger.debug("Using encounter preprocessor for encounter %d", encounter_id)
    return factory(encounter_id, engine_input.enemies)


def _calculate(
    ctx: ThreatContext, prepared: PreparedConfig,
) -> ThreatCalculation:
    result = resolve_formula(ctx, prepared) or ZERO_RESULT
    modifiers = active_modifiers(ctx, prepared, result)
    return build_calculation(result, ctx.amount, modifiers, total_multiplier(modifiers))


def process_events(
    events: Iterable[dict],
    engine_input: EngineInput,
    config: ThreatConfig,
    *,
    initial_auras: Mapping[int | str, Iterable[int]] | None = None,
    interceptors: list[dict] | None = None,
    tank_actor_ids: Iterable[int] | None = None,
    infer_threat_reduction: bool = False,
) -> ProcessEventsResult:
    """Run the threat engine over one fight's ordered events.

    Args:
        events: Events in ascending timestamp order.
        engine_input: Actor/enemy index for the fight.
        config: Rule tables for the report's game version.
        initial_auras: Aura snapshot to resume from ({actor id: [spell ids]}).
        interceptors: Interceptor snapshot to resume from.
        tank_actor_ids: Tanks, excluded from inferred threat reduction and
            passed through to the result.
        infer_threat_reduction: Also assume Salvation for non-tanks when a
            paladin has a blessing to spare, and emulate Tranquil Air from
            detected parties and positions.

    Returns:
        ProcessEventsResult with one augmented event per input event plus
        the final aura, interceptor, threat and state snapshots.
    """
    events = list(events)
    tanks = frozenset(tank_actor_ids or ())
    processors = build_processors(infer_threat_reduction)
    processor_ctx = ProcessorContext(
        engine_input=engine_input,
        initial_auras=normalize_initial_auras(initial_auras),
        tank_actor_ids=tanks,
        infer_threat_reduction=infer_threat_reduction,
    )
    seeded_auras = run_prepass(events, processors, processor_ctx)

    prepared = prepare_config(config)
    encounter_hook = _encounter_hook(config, engine_input)
    state = FightState(engine_input.actor_map, prepared, seeded_auras)
    registry = InterceptorRegistry.from_snapshot(interceptors)
    counts: Counter[str] = Counter()
    augmented: list[dict] = []

    for raw_event in events:
        event = _resolve_friendliness(raw_event, engine_input.friendly_actor_ids)
        event_type = event.get("type", "unknown")

        mutations: list[AuraMutation] = [
            mutation
            for processor in processors
            for mutation in processor.before_state(event, processor_ctx, state)
        ]
        state.process_event(event)
        for mutation in mutations:
            state.apply_mutation(mutation)
        counts[event_type] += 1

        if is_boss_melee(event):
            calculation = build_calculation(ZERO_RESULT, event_amount(event), [], 1.0)
            calculation.specials.extend([*mutations, EventMarker(marker="bossMelee")])
            augmented.append(_augment(raw_event, [], calculation))
            continue

        skipped = False
        recipient_override: int | None = None
        extra_specials: list[ThreatSpecial] = []
        for outcome in registry.evaluate(event, state):
            if outcome.action == "skip":
                skipped = True
            elif outcome.action == "augment":
                if outcome.threat_recipient_override is not None:
                    recipient_override = outcome.threat_recipient_override
                extra_specials.extend(outcome.specials)

        if skipped:
            calculation = build_calculation(ZERO_RESULT, 0, [], 1.0)
            calculation.specials.extend(mutations)
            augmented.append(_augment(raw_event, [], calculation))
            continue

        source_id = event.get("sourceID")
        target_id = event.get("targetID")
        spell_id = ability_id(event)
        ctx = ThreatContext(
            event=event,
            amount=event_amount(event),
            source_actor=_actor(engine_input.actor_map, source_id),
            target_actor=_actor(engine_input.actor_map, target_id),
            source_auras=state.auras.active_set(source_id) if source_id is not None else frozenset(),
            target_auras=state.auras.active_set(target_id) if target_id is not None else frozenset(),
            view=state,
            spell_school=engine_input.ability_school_map.get(spell_id, 0) if spell_id else 0,
            encounter_id=engine_input.encounter_id,
        )
        calculation = _calculate(ctx, prepared)
        calculation.specials[:0] = mutations
        if encounter_hook is not None:
            calculation.specials.extend(encounter_hook(ctx))
        calculation.specials.extend(extra_specials)

        marker = derive_state_marker(event, prepared)
        if marker is not None:
            calculation.specials.append(marker)

        for special in calculation.specials:
            if isinstance(special, InstallInterceptor):
                registry.install(special.interceptor, number(event, "timestamp"))

        changes = distribute(
            calculation, event, state, engine_input.enemies, recipient_override,
        )
        augmented.append(_augment(raw_event, changes, calculation))

    logger.info(
        "Processed %d events for fight %d (%d interceptors left installed)",
        len(augmented), engine_input.fight.id, len(registry),
    )
    return ProcessEventsResult(
        augmented_events=augmented,
        event_counts=dict(sorted(counts.items())),
        final_auras=state.auras.snapshot(),
        interceptors=registry.snapshot(),
        threat_totals=state.threat.snapshot(),
        states=state.states.snapshot(),
        tank_actor_ids=sorted(tanks),
    )
