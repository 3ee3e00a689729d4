"""Collect the threat multipliers that apply to an event's source."""

import math

from tekii.engine.prepared import PreparedConfig
from tekii.engine.types import ThreatContext, ThreatFormulaResult, ThreatModifier
from tekii.wcl.events import RESOURCE_EVENT_TYPES


def _in_scope(modifier: ThreatModifier, ctx: ThreatContext) -> bool:
    if modifier.spell_ids is not None and ctx.ability_id not in modifier.spell_ids:
        return False
    if modifier.schools is not None:
        return any(ctx.spell_school & school for school in modifier.schools)
    return True


def class_modifiers(ctx: ThreatContext, prepared: PreparedConfig) -> list[ThreatModifier]:
    wow_class = ctx.source_actor.wow_class
    modifier = prepared.class_modifiers.get(wow_class) if wow_class else None
    return [modifier] if modifier is not None else []


def aura_modifiers(ctx: ThreatContext, prepared: PreparedConfig) -> list[ThreatModifier]:
    """Modifiers from the source's active auras, walked in ascending spell id order."""
    result = []
    for spell_id in sorted(ctx.source_auras):
        entry = prepared.aura_modifiers.get(spell_id)
        if entry is None:
            continue
        modifier = entry if isinstance(entry, ThreatModifier) else entry(ctx)
        if _in_scope(modifier, ctx):
            result.append(modifier)
    return result


def uses_player_multipliers(ctx: ThreatContext, result: ThreatFormulaResult) -> bool:
    if result.apply_player_multipliers is not None:
        return result.apply_player_multipliers
    return ctx.event_type not in RESOURCE_EVENT_TYPES


def active_modifiers(
    ctx: ThreatContext, prepared: PreparedConfig, result: ThreatFormulaResult,
) -> list[ThreatModifier]:
    if not uses_player_multipliers(ctx, result):
        return []
    return class_modifiers(ctx, prepared) + aura_modifiers(ctx, prepared)


def total_multiplier(modifiers: list[ThreatModifier]) -> float:
    return math.prod((m.value for m in modifiers), start=1.0)
