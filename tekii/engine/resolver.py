"""Pick the formula for an event and evaluate it."""

from tekii.engine.prepared import PreparedConfig
from tekii.engine.types import ZERO_RESULT, ThreatContext, ThreatFormulaResult
from tekii.wcl.events import RESOURCE_EVENT_TYPES, number


def event_amount(event: dict) -> float:
    """Threat-relevant amount: damage dealt, effective healing or resource gained."""
    event_type = event.get("type")
    if event_type == "damage":
        return number(event, "amount")
    if event_type == "heal":
        return max(0, number(event, "amount") - number(event, "overheal"))
    if event_type in RESOURCE_EVENT_TYPES:
        return max(0, number(event, "resourceChange") - number(event, "waste"))
    return 0


def resolve_formula(ctx: ThreatContext, prepared: PreparedConfig) -> ThreatFormulaResult | None:
    """Evaluate the ability formula, falling back to the base formula for the event type.

    Returns None when the ability's formula gates out this event type.
    """
    spell_id = ctx.ability_id
    if spell_id is not None:
        formula = prepared.abilities_for(ctx.source_actor.wow_class).get(spell_id)
        if formula is not None:
            return formula(ctx)

    base = prepared.config.base_threat
    event_type = ctx.event_type
    if event_type == "damage":
        return base.damage(ctx)
    if event_type == "heal":
        return base.heal(ctx)
    if event_type in RESOURCE_EVENT_TYPES:
        return base.energize(ctx)
    return ZERO_RESULT
