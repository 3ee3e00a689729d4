"""Paladin threat rules."""

from tekii.engine.formulas import CalculateThreat, threat_on_buff
from tekii.engine.types import ClassThreatConfig, SpellSchool, ThreatModifier


class Spells:
    RIGHTEOUS_FURY = 25780
    IMPROVED_RIGHTEOUS_FURY_R1 = 20468
    IMPROVED_RIGHTEOUS_FURY_R2 = 20469

    BLESSING_OF_KINGS = 25898
    BLESSING_OF_SALVATION = 1038
    BLESSING_OF_MIGHT = 27140
    BLESSING_OF_WISDOM = 27142
    BLESSING_OF_SANCTUARY = 25899
    BLESSING_OF_LIGHT = 27144
    GREATER_BLESSING_OF_KINGS = 25894
    GREATER_BLESSING_OF_SALVATION = 25895

    JUDGEMENT_OF_LIGHT = 20271
    JUDGEMENT_OF_WISDOM = 20186
    JUDGEMENT_OF_RIGHTEOUSNESS = 25713
    CONSECRATION = 27173
    EXORCISM = 27138
    HOLY_SHIELD = 27179


RIGHTEOUS_FURY = 1.6
HOLY = frozenset({SpellSchool.HOLY})

BLESSINGS = (
    Spells.BLESSING_OF_KINGS,
    Spells.BLESSING_OF_SALVATION,
    Spells.BLESSING_OF_MIGHT,
    Spells.BLESSING_OF_WISDOM,
    Spells.BLESSING_OF_SANCTUARY,
    Spells.BLESSING_OF_LIGHT,
    Spells.GREATER_BLESSING_OF_KINGS,
    Spells.GREATER_BLESSING_OF_SALVATION,
)


def _improved_righteous_fury(rank: int, total: float) -> ThreatModifier:
    return ThreatModifier(
        source="talent",
        name=f"Improved Righteous Fury (Rank {rank})",
        value=(total + RIGHTEOUS_FURY) / RIGHTEOUS_FURY,
        schools=HOLY,
    )


PALADIN = ClassThreatConfig(
    abilities={
        Spells.JUDGEMENT_OF_LIGHT: CalculateThreat(modifier=0, bonus=194),
        Spells.JUDGEMENT_OF_WISDOM: CalculateThreat(modifier=0, bonus=194),
        Spells.JUDGEMENT_OF_RIGHTEOUSNESS: CalculateThreat(),
        Spells.HOLY_SHIELD: CalculateThreat(bonus=35),
        Spells.CONSECRATION: CalculateThreat(),
        Spells.EXORCISM: CalculateThreat(),
        **{blessing: threat_on_buff(60) for blessing in BLESSINGS},
    },
    aura_modifiers={
        Spells.RIGHTEOUS_FURY: ThreatModifier(
            source="buff", name="Righteous Fury", value=RIGHTEOUS_FURY, schools=HOLY,
        ),
        Spells.IMPROVED_RIGHTEOUS_FURY_R1: _improved_righteous_fury(1, 1.7),
        Spells.IMPROVED_RIGHTEOUS_FURY_R2: _improved_righteous_fury(2, 1.9),
        Spells.BLESSING_OF_SALVATION: ThreatModifier(
            source="buff", name="Blessing of Salvation", value=0.7,
        ),
        Spells.GREATER_BLESSING_OF_SALVATION: ThreatModifier(
            source="buff", name="Greater Blessing of Salvation", value=0.7,
        ),
        Spells.BLESSING_OF_SANCTUARY: ThreatModifier(
            source="buff", name="Blessing of Sanctuary", value=1.0,
        ),
    },
    # Normal and greater versions of one blessing replace each other
    exclusive_auras=(
        frozenset({Spells.BLESSING_OF_KINGS, Spells.GREATER_BLESSING_OF_KINGS}),
        frozenset({Spells.BLESSING_OF_SALVATION, Spells.GREATER_BLESSING_OF_SALVATION}),
    ),
    invulnerability_buffs=frozenset({498, 5573, 642, 1020, 1022, 5599, 10278, 19752}),
)
