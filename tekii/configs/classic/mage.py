"""Mage threat rules."""

from tekii.configs.talents import infer_talent, tree_points
from tekii.engine.types import ClassThreatConfig, SpellSchool, TalentContext, ThreatModifier


class Spells:
    ICE_BLOCK = 11958
    POLYMORPH_RANKS = (118, 12824, 12825, 28272, 28271, 12826)

    ARCANE_SUBTLETY_RANKS = (11210, 12592)
    BURNING_SOUL_RANKS = (11083, 12351)
    FROST_CHANNELING_RANKS = (11160, 12518, 12519)


FIRE_TREE = 1

# talent ranks, per-rank reduction, school
SCHOOL_TALENTS = (
    ("Arcane Subtlety", Spells.ARCANE_SUBTLETY_RANKS, 0.2, SpellSchool.ARCANE),
    ("Burning Soul", Spells.BURNING_SOUL_RANKS, 0.05, SpellSchool.FIRE),
    ("Frost Channeling", Spells.FROST_CHANNELING_RANKS, 0.1, SpellSchool.FROST),
)


def talent_implications(ctx: TalentContext) -> list[int]:
    return [
        *infer_talent(ctx, Spells.ARCANE_SUBTLETY_RANKS),
        *infer_talent(
            ctx, Spells.BURNING_SOUL_RANKS,
            lambda points: 2 if tree_points(points, FIRE_TREE) >= 12 else 0,
        ),
        *infer_talent(ctx, Spells.FROST_CHANNELING_RANKS),
    ]


MAGE = ClassThreatConfig(
    aura_modifiers={
        spell_id: ThreatModifier(
            source="talent", name=f"{name} (Rank {rank})",
            value=1 - per_rank * rank, schools=frozenset({school}),
        )
        for name, ranks, per_rank, school in SCHOOL_TALENTS
        for rank, spell_id in enumerate(ranks, start=1)
    },
    aggro_loss_buffs=frozenset(Spells.POLYMORPH_RANKS),
    invulnerability_buffs=frozenset({Spells.ICE_BLOCK}),
    talent_implications=talent_implications,
)
