"""Druid threat rules."""

from dataclasses import dataclass

from tekii.configs.talents import infer_talent, tree_points
from tekii.engine.formulas import (
    CalculateThreat,
    NoThreat,
    TauntTarget,
    ThreatOnCastRollbackOnMiss,
    threat_on_debuff,
)
from tekii.engine.types import ClassThreatConfig, TalentContext, ThreatContext, ThreatModifier


class Spells:
    BEAR_FORM = 5487
    DIRE_BEAR_FORM = 9634
    CAT_FORM = 768
    MOONKIN_FORM = 24858

    MAUL_RANKS = (6807, 6808, 6809, 8972, 9745, 9880, 9881)
    SWIPE_RANKS = (779, 780, 769, 9754, 9908)
    DEMORALIZING_ROAR_RANKS = (99, 1735, 9490, 9747, 9898)
    GROWL = 6795
    CHALLENGING_ROAR = 5209
    BASH = 8983
    ENRAGE = 5229
    FUROR = 17057

    CLAW = 9850
    SHRED = 9830
    RAKE = 9904
    FEROCIOUS_BITE = 22829
    RAVAGE = 9867
    RIP = 9896
    POUNCE = 9827
    PROWL = 9913
    TIGERS_FURY = 9846
    DASH_RANKS = (1850, 9821)
    COWER_RANKS = (8998, 9000, 9892)

    FAERIE_FIRE_RANKS = (16857, 17390, 17391, 17392, 770, 778, 9749, 9907)

    CLEARCASTING = 16870
    INNERVATE = 29166
    LEADER_OF_THE_PACK = 24932

    FERAL_INSTINCT_RANKS = (16947, 16948, 16949, 16950, 16951)
    SUBTLETY_RANKS = (17118, 17119, 17120, 17121, 17122)


BEAR_FORM_FACTOR = 1.3
CAT_FORM_FACTOR = 0.71
FERAL_INSTINCT_PER_RANK = 0.03
SUBTLETY_PER_RANK = 0.04
MAUL_SWIPE_FACTOR = 1.75

FERAL_TREE = 1
RESTORATION_TREE = 2

DEMORALIZING_ROAR_THREAT = (9, 15, 20, 30, 39)
COWER_THREAT = (-240, -390, -600)

HEALING_SPELLS = frozenset({
    # Healing Touch
    5185, 5186, 5187, 5188, 5189, 6778, 8903, 9758, 9888, 9889, 25297,
    # Regrowth
    8936, 8938, 8939, 8940, 8941, 9750, 9856, 9857, 9858,
    # Rejuvenation
    774, 1058, 1430, 2090, 2091, 3627, 8910, 9839, 9840, 9841, 25299,
    # Tranquility
    740, 8918, 9862, 9863,
})

FORMS = frozenset({Spells.BEAR_FORM, Spells.DIRE_BEAR_FORM, Spells.CAT_FORM, Spells.MOONKIN_FORM})


@dataclass(frozen=True)
class FeralInstinct:
    """Additive with bear form, so expressed as a ratio over the form factor."""

    rank: int

    def __call__(self, ctx: ThreatContext) -> ThreatModifier:
        in_bear_form = bool(ctx.source_auras & {Spells.BEAR_FORM, Spells.DIRE_BEAR_FORM})
        value = (
            (BEAR_FORM_FACTOR + FERAL_INSTINCT_PER_RANK * self.rank) / BEAR_FORM_FACTOR
            if in_bear_form else 1.0
        )
        return ThreatModifier(source="talent", name=f"Feral Instinct (Rank {self.rank})", value=value)


def talent_implications(ctx: TalentContext) -> list[int]:
    return [
        *infer_talent(
            ctx, Spells.FERAL_INSTINCT_RANKS,
            lambda points: 5 if tree_points(points, FERAL_TREE) >= 31 else 0,
        ),
        *infer_talent(
            ctx, Spells.SUBTLETY_RANKS,
            lambda points: 5 if tree_points(points, RESTORATION_TREE) >= 15 else 0,
        ),
    ]


DRUID = ClassThreatConfig(
    abilities={
        **{form: NoThreat() for form in sorted(FORMS)},
        **{spell_id: CalculateThreat(modifier=MAUL_SWIPE_FACTOR) for spell_id in Spells.MAUL_RANKS},
        **{spell_id: CalculateThreat(modifier=MAUL_SWIPE_FACTOR) for spell_id in Spells.SWIPE_RANKS},
        **{
            spell_id: threat_on_debuff(threat)
            for spell_id, threat in zip(Spells.DEMORALIZING_ROAR_RANKS, DEMORALIZING_ROAR_THREAT, strict=True)
        },
        Spells.GROWL: TauntTarget(bonus=0),
        Spells.CHALLENGING_ROAR: NoThreat(),
        Spells.BASH: NoThreat(),
        **{
            spell_id: ThreatOnCastRollbackOnMiss(threat)
            for spell_id, threat in zip(Spells.COWER_RANKS, COWER_THREAT, strict=True)
        },
        **{spell_id: threat_on_debuff(108) for spell_id in Spells.FAERIE_FIRE_RANKS},
        Spells.PROWL: NoThreat(),
        Spells.TIGERS_FURY: NoThreat(),
        **{spell_id: NoThreat() for spell_id in Spells.DASH_RANKS},
        Spells.CLEARCASTING: NoThreat(),
        Spells.INNERVATE: NoThreat(),
        Spells.LEADER_OF_THE_PACK: NoThreat(),
    },
    aura_modifiers={
        Spells.BEAR_FORM: ThreatModifier(source="stance", name="Bear Form", value=BEAR_FORM_FACTOR),
        Spells.DIRE_BEAR_FORM: ThreatModifier(source="stance", name="Dire Bear Form", value=BEAR_FORM_FACTOR),
        Spells.CAT_FORM: ThreatModifier(source="stance", name="Cat Form", value=CAT_FORM_FACTOR),
        **{
            spell_id: FeralInstinct(rank)
            for rank, spell_id in enumerate(Spells.FERAL_INSTINCT_RANKS, start=1)
        },
        **{
            spell_id: ThreatModifier(
                source="talent", name=f"Subtlety (Rank {rank})",
                value=1 - SUBTLETY_PER_RANK * rank, spell_ids=HEALING_SPELLS,
            )
            for rank, spell_id in enumerate(Spells.SUBTLETY_RANKS, start=1)
        },
    },
    exclusive_auras=(FORMS,),
    aura_implications={
        Spells.DIRE_BEAR_FORM: frozenset({
            *Spells.MAUL_RANKS, *Spells.SWIPE_RANKS, *Spells.DEMORALIZING_ROAR_RANKS,
            Spells.GROWL, Spells.ENRAGE, Spells.FUROR, Spells.BASH,
        }),
        Spells.CAT_FORM: frozenset({
            Spells.CLAW, Spells.SHRED, Spells.RAKE, Spells.FEROCIOUS_BITE, Spells.RAVAGE,
            Spells.RIP, Spells.POUNCE, Spells.PROWL, Spells.TIGERS_FURY, *Spells.DASH_RANKS,
        }),
    },
    fixate_buffs=frozenset({Spells.GROWL, Spells.CHALLENGING_ROAR}),
    talent_implications=talent_implications,
)
