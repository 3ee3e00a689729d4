"""Warlock threat rules."""

from tekii.engine.formulas import CalculateThreat, threat_on_debuff
from tekii.engine.types import ClassThreatConfig


class Spells:
    SEARING_PAIN_RANKS = (5676, 17919, 17920, 17921, 17922, 17923)
    FEAR = 5782


# curse ranks -> flat threat per application
CURSES: dict[str, tuple[tuple[int, float], ...]] = {
    "Curse of Recklessness": ((704, 28), (7658, 56), (7659, 84), (11717, 112)),
    "Curse of Tongues": ((1714, 52), (11719, 100)),
    "Curse of Weakness": ((702, 8), (1108, 24), (6205, 44), (7646, 64), (11707, 84), (11708, 104)),
    "Curse of the Elements": ((1490, 64), (11721, 92), (11722, 120)),
    "Curse of Shadow": ((17862, 88), (17937, 112)),
}

WARLOCK = ClassThreatConfig(
    abilities={
        **{spell_id: CalculateThreat(modifier=2) for spell_id in Spells.SEARING_PAIN_RANKS},
        **{
            spell_id: threat_on_debuff(threat)
            for ranks in CURSES.values()
            for spell_id, threat in ranks
        },
        Spells.FEAR: threat_on_debuff(16),
    },
)
