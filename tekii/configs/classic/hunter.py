"""Hunter threat rules."""

from tekii.engine.formulas import CalculateThreat, ModifyThreatFormula
from tekii.engine.types import ClassThreatConfig


class Spells:
    FEIGN_DEATH = 5384
    MISDIRECTION = 34477
    DISTRACTING_SHOT_RANKS = (20736, 14274, 15629, 15630, 15631, 15632)
    DISENGAGE_RANKS = (781, 14272, 14273)


DISTRACTING_SHOT_THREAT = (110, 160, 250, 350, 465, 600)
DISENGAGE_THREAT = (-140, -280, -405)

HUNTER = ClassThreatConfig(
    abilities={
        Spells.FEIGN_DEATH: ModifyThreatFormula(multiplier=0, target="all"),
        **{
            spell_id: CalculateThreat(bonus=bonus)
            for spell_id, bonus in zip(Spells.DISTRACTING_SHOT_RANKS, DISTRACTING_SHOT_THREAT, strict=True)
        },
        **{
            spell_id: CalculateThreat(modifier=0, bonus=threat)
            for spell_id, threat in zip(Spells.DISENGAGE_RANKS, DISENGAGE_THREAT, strict=True)
        },
    },
)
