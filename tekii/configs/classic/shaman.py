"""Shaman threat rules."""

from tekii.configs.talents import infer_talent
from tekii.engine.formulas import CalculateThreat, MarkEvent
from tekii.engine.types import ClassThreatConfig, TalentContext, ThreatModifier


class Spells:
    TRANQUIL_AIR_BUFF = 25909
    TRANQUIL_AIR_TOTEM = 25908
    HEALING_GRACE_RANKS = (29187, 29189, 29191)
    EARTH_SHOCK_RANKS = (8042, 8044, 8045, 8046, 10412, 10413, 10414)


EARTH_SHOCK_MODIFIER = 2.0
TRANQUIL_AIR_FACTOR = 0.8
HEALING_GRACE_PER_RANK = 0.05

HEALING_SPELLS = frozenset({
    8004, 8008, 8010, 10466, 10467, 10468,  # Lesser Healing Wave
    331, 332, 547, 913, 939, 959, 8005, 10395, 10396, 25357,  # Healing Wave
    1064, 10622, 10623,  # Chain Heal
})


def talent_implications(ctx: TalentContext) -> list[int]:
    return infer_talent(ctx, Spells.HEALING_GRACE_RANKS)


SHAMAN = ClassThreatConfig(
    abilities={
        **{
            spell_id: CalculateThreat(modifier=EARTH_SHOCK_MODIFIER)
            for spell_id in Spells.EARTH_SHOCK_RANKS
        },
        Spells.TRANQUIL_AIR_TOTEM: MarkEvent("tranquilAirTotem"),
    },
    aura_modifiers={
        # Never reported by the log; applied by Tranquil Air emulation.
        Spells.TRANQUIL_AIR_BUFF: ThreatModifier(
            source="aura", name="Tranquil Air Totem", value=TRANQUIL_AIR_FACTOR,
        ),
        **{
            spell_id: ThreatModifier(
                source="talent",
                name=f"Healing Grace (Rank {rank})",
                value=round(1 - HEALING_GRACE_PER_RANK * rank, 4),
                spell_ids=HEALING_SPELLS,
            )
            for rank, spell_id in enumerate(Spells.HEALING_GRACE_RANKS, start=1)
        },
    },
    talent_implications=talent_implications,
)
