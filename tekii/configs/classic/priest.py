"""Priest threat rules."""

from tekii.configs.talents import infer_talent, tree_points
from tekii.engine.formulas import CalculateThreat, NoThreat
from tekii.engine.types import ClassThreatConfig, SpellSchool, TalentContext, ThreatModifier


class Spells:
    MIND_BLAST_RANKS = (8092, 8102, 8103, 8104, 8105, 8106, 10945, 10946, 10947)
    HOLY_NOVA_DAMAGE_RANKS = (15237, 15430, 15431, 27799, 27800, 27801)
    HOLY_NOVA_HEAL_RANKS = (23455, 23458, 23459, 27803, 27804, 27805)
    WEAKENED_SOUL = 6788

    SILENT_RESOLVE_RANKS = (14523, 14784, 14785, 14786, 14787)
    SHADOW_AFFINITY_RANKS = (15318, 15319, 15320)


MIND_BLAST_THREAT = (40, 77, 121, 180, 236, 303, 380, 460, 540)
SILENT_RESOLVE_PER_RANK = 0.04
SHADOW_AFFINITY_PER_RANK = 0.25 / 3
SHADOW_TREE = 2


def talent_implications(ctx: TalentContext) -> list[int]:
    # Healing builds rarely take Silent Resolve, so no point inference for it
    return [
        *infer_talent(ctx, Spells.SILENT_RESOLVE_RANKS),
        *infer_talent(
            ctx, Spells.SHADOW_AFFINITY_RANKS,
            lambda points: 3 if tree_points(points, SHADOW_TREE) >= 21 else 0,
        ),
    ]


PRIEST = ClassThreatConfig(
    abilities={
        **{
            spell_id: CalculateThreat(bonus=bonus)
            for spell_id, bonus in zip(Spells.MIND_BLAST_RANKS, MIND_BLAST_THREAT, strict=True)
        },
        **{spell_id: NoThreat() for spell_id in Spells.HOLY_NOVA_DAMAGE_RANKS},
        **{spell_id: NoThreat() for spell_id in Spells.HOLY_NOVA_HEAL_RANKS},
        Spells.WEAKENED_SOUL: NoThreat(),
    },
    aura_modifiers={
        **{
            spell_id: ThreatModifier(
                source="talent", name=f"Silent Resolve (Rank {rank})",
                value=1 - SILENT_RESOLVE_PER_RANK * rank,
            )
            for rank, spell_id in enumerate(Spells.SILENT_RESOLVE_RANKS, start=1)
        },
        **{
            spell_id: ThreatModifier(
                source="talent", name=f"Shadow Affinity (Rank {rank})",
                value=1 - SHADOW_AFFINITY_PER_RANK * rank,
                schools=frozenset({SpellSchool.SHADOW}),
            )
            for rank, spell_id in enumerate(Spells.SHADOW_AFFINITY_RANKS, start=1)
        },
    },
    talent_implications=talent_implications,
)
