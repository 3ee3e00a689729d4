"""Base threat formulas and global gear rules shared by the classic configs."""

from dataclasses import dataclass

from tekii.engine.formulas import CalculateThreat, fmt
from tekii.engine.types import (
    BaseThreatConfig,
    ThreatContext,
    ThreatFormulaResult,
    ThreatModifier,
)
from tekii.wcl.events import RESOURCE_LABELS, ResourceType

# resource type -> threat per point gained
RESOURCE_THREAT_MULTIPLIERS: dict[int, float] = {
    ResourceType.RAGE: 5,
    ResourceType.ENERGY: 0,
}
DEFAULT_RESOURCE_MULTIPLIER = 0.5


@dataclass(frozen=True)
class HealThreat:
    multiplier: float = 0.5

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult:
        return ThreatFormulaResult(
            formula=f"effectiveHeal * {fmt(self.multiplier)}",
            value=ctx.amount * self.multiplier,
            split_among_enemies=True,
        )


@dataclass(frozen=True)
class ResourceThreat:
    """Resource gains: rage x5, energy nothing, anything else x0.5. Split, unmodified."""

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult:
        resource_type = ctx.event.get("resourceChangeType")
        label = RESOURCE_LABELS.get(resource_type, "resource")
        multiplier = RESOURCE_THREAT_MULTIPLIERS.get(resource_type, DEFAULT_RESOURCE_MULTIPLIER)
        if multiplier == 0:
            return ThreatFormulaResult(formula="0", value=0, apply_player_multipliers=False)
        return ThreatFormulaResult(
            formula=f"{label} * {fmt(multiplier)}",
            value=ctx.amount * multiplier,
            split_among_enemies=True,
            apply_player_multipliers=False,
        )


BASE_THREAT = BaseThreatConfig(
    damage=CalculateThreat(),
    heal=HealThreat(),
    energize=ResourceThreat(),
)


class Enchants:
    GLOVES_THREAT = 2613
    CLOAK_SUBTLETY = 2621


# Synthetic aura ids for enchants, reusing the enchant id as the aura id
GEAR_AURA_MODIFIERS: dict[int, ThreatModifier] = {
    Enchants.GLOVES_THREAT: ThreatModifier(source="gear", name="Enchant Gloves - Threat", value=1.02),
    Enchants.CLOAK_SUBTLETY: ThreatModifier(source="gear", name="Enchant Cloak - Subtlety", value=0.98),
}


def enchant_implications(gear: list[dict]) -> list[int]:
    """Synthetic aura ids for threat-relevant permanent enchants."""
    enchants = {item.get("permanentEnchant") for item in gear}
    return [enchant for enchant in GEAR_AURA_MODIFIERS if enchant in enchants]
