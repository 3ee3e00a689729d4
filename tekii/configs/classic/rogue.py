"""Rogue threat rules."""

from tekii.engine.formulas import CalculateThreat, ModifyThreatFormula
from tekii.engine.types import ClassThreatConfig


class Spells:
    VANISH_RANKS = (1856, 1857)
    FEINT_RANKS = (1966, 6768, 8637, 11303, 25302)


FEINT_THREAT = (-150, -240, -390, -600, -800)

ROGUE = ClassThreatConfig(
    base_threat_factor=0.71,
    abilities={
        **{
            spell_id: ModifyThreatFormula(multiplier=0, target="all")
            for spell_id in Spells.VANISH_RANKS
        },
        **{
            spell_id: CalculateThreat(modifier=0, bonus=threat)
            for spell_id, threat in zip(Spells.FEINT_RANKS, FEINT_THREAT, strict=True)
        },
    },
)
