"""Warrior deltas for TBC: extra ranks, 3-rank Defiance, stance-gated talents."""

import dataclasses
from dataclasses import dataclass

from tekii.configs.classic import warrior as era
from tekii.configs.classic.warrior import WARRIOR as ERA_WARRIOR
from tekii.configs.talents import infer_talent, tree_points
from tekii.engine.formulas import (
    CalculateThreat,
    NoThreat,
    TauntTarget,
    ThreatOnCastRollbackOnMiss,
    ThreatOnSuccessfulHit,
    threat_on_buff,
    threat_on_debuff,
)
from tekii.engine.types import TalentContext, ThreatContext, ThreatModifier


class Spells(era.Spells):
    HEROIC_STRIKE_R10 = 29707
    HEROIC_STRIKE_R11 = 30324
    SHIELD_SLAM_R5 = 25258
    SHIELD_SLAM_R6 = 30356
    SHIELD_BASH_R4 = 29704
    REVENGE_R7 = 25269
    REVENGE_R8 = 30357
    DEVASTATE_RANKS = (20243, 30016, 30022)
    BATTLE_SHOUT_R8 = 2048
    COMMANDING_SHOUT = 469
    SPELL_REFLECT = 23920
    SUNDER_ARMOR = 25225
    MORTAL_STRIKE_RANKS = (12294, 21551, 21552, 21553, 25248, 30330)
    HAMSTRING = 25212
    DEMORALIZING_SHOUT = 25203
    SHIELD_BASH = 1672
    MOCKING_BLOW = 20560

    DEFIANCE_RANKS = (12301, 12302, 12303)
    # Synthetic talent auras; these ids are not real spells.
    IMPROVED_BERSERKER_STANCE_RANKS = (910001, 910002, 910003, 910004, 910005)
    TACTICAL_MASTERY_RANKS = (910011, 910012, 910013)


ARMS_TREE = 0
FURY_TREE = 1
PROTECTION_TREE = 2
DEFIANCE_PROTECTION_POINTS = 10
IMPROVED_BERSERKER_STANCE_FURY_POINTS = 35
TACTICAL_MASTERY_ARMS_POINTS = 3

TACTICAL_MASTERY_SPELLS = frozenset({
    *Spells.BLOODTHIRST_RANKS,
    Spells.BLOODTHIRST_HEAL,
    *Spells.MORTAL_STRIKE_RANKS,
})


@dataclass(frozen=True)
class StanceTalent:
    """A talent that only modifies threat while its stance is active."""

    name: str
    stance: int
    value: float
    spell_ids: frozenset[int] | None = None

    def __call__(self, ctx: ThreatContext) -> ThreatModifier:
        return ThreatModifier(
            source="talent",
            name=self.name,
            value=self.value if self.stance in ctx.source_auras else 1.0,
            spell_ids=self.spell_ids,
        )


def _stance_talents(
    name: str, rank_ids: tuple[int, ...], stance: int, per_rank: float,
    spell_ids: frozenset[int] | None = None,
) -> dict[int, StanceTalent]:
    return {
        spell_id: StanceTalent(
            name=f"{name} (Rank {rank})",
            stance=stance,
            value=round(1 + per_rank * rank, 4),
            spell_ids=spell_ids,
        )
        for rank, spell_id in enumerate(rank_ids, start=1)
    }


def _full_rank_when(tree_index: int, threshold: int, ranks: tuple[int, ...]):
    return lambda points: len(ranks) if tree_points(points, tree_index) >= threshold else 0


def talent_implications(ctx: TalentContext) -> list[int]:
    return [
        *infer_talent(
            ctx, Spells.DEFIANCE_RANKS,
            _full_rank_when(PROTECTION_TREE, DEFIANCE_PROTECTION_POINTS, Spells.DEFIANCE_RANKS),
        ),
        *infer_talent(
            ctx, Spells.IMPROVED_BERSERKER_STANCE_RANKS,
            _full_rank_when(
                FURY_TREE, IMPROVED_BERSERKER_STANCE_FURY_POINTS, Spells.IMPROVED_BERSERKER_STANCE_RANKS,
            ),
        ),
        *infer_talent(
            ctx, Spells.TACTICAL_MASTERY_RANKS,
            _full_rank_when(ARMS_TREE, TACTICAL_MASTERY_ARMS_POINTS, Spells.TACTICAL_MASTERY_RANKS),
        ),
    ]


def _on_hit(bonus: float, modifier: float = 1) -> ThreatOnSuccessfulHit:
    return ThreatOnSuccessfulHit(modifier=modifier, bonus=bonus)


def _on_damage(modifier: float = 1, bonus: float = 0) -> CalculateThreat:
    return CalculateThreat(modifier=modifier, bonus=bonus, event_types=("damage",))


_NO_THREAT = NoThreat()

TBC_ABILITIES = {
    Spells.HEROIC_STRIKE_R10: _on_hit(194),
    Spells.HEROIC_STRIKE_R11: _on_hit(220),
    Spells.SHIELD_SLAM_R5: _on_hit(278),
    Spells.SHIELD_SLAM_R6: _on_hit(305),
    Spells.SHIELD_BASH_R4: _on_hit(192, modifier=1.5),
    Spells.REVENGE_R7: _on_hit(185),
    Spells.REVENGE_R8: _on_hit(200),
    **{spell_id: _on_hit(401.5) for spell_id in Spells.DEVASTATE_RANKS},
    **{spell_id: _on_damage(modifier=1.75) for spell_id in Spells.THUNDER_CLAP_RANKS[:-1]},
    11551: threat_on_buff(52, split=False),
    Spells.BATTLE_SHOUT_R8: threat_on_buff(69, split=False),
    Spells.COMMANDING_SHOUT: threat_on_buff(69, split=False),
    Spells.SPELL_REFLECT: _NO_THREAT,
    Spells.SWEEPING_STRIKES: _NO_THREAT,
    11601: _on_hit(150),
    Spells.REVENGE_STUN: _on_hit(20),
    Spells.SUNDER_ARMOR_RANKS[0]: ThreatOnCastRollbackOnMiss(45),
}

# Flat top-rank values.
TOP_RANK_ABILITIES = {
    Spells.SHIELD_SLAM: _on_damage(modifier=2, bonus=150),
    Spells.REVENGE: _on_damage(bonus=355),
    Spells.SUNDER_ARMOR: CalculateThreat(modifier=0, bonus=301, event_types=("cast",)),
    Spells.HEROIC_STRIKE: _on_damage(bonus=145),
    Spells.CLEAVE: _on_damage(bonus=100),
    Spells.THUNDER_CLAP: _on_damage(bonus=175),
    Spells.BATTLE_SHOUT: threat_on_buff(70),
    Spells.DEMORALIZING_SHOUT: threat_on_debuff(56),
    Spells.SHIELD_BASH: _on_damage(bonus=187),
    Spells.HAMSTRING: _on_damage(bonus=141),
    Spells.TAUNT: TauntTarget(bonus=1),
    Spells.MOCKING_BLOW: TauntTarget(modifier=1, event_types=("damage",)),
    Spells.CHALLENGING_SHOUT: TauntTarget(),
}

_battle_stance = ERA_WARRIOR.aura_implications[Spells.BATTLE_STANCE] - {
    *Spells.THUNDER_CLAP_RANKS, Spells.SWEEPING_STRIKES,
}
_defensive_stance = ERA_WARRIOR.aura_implications[Spells.DEFENSIVE_STANCE] | {
    *Spells.SHIELD_SLAM_RANKS,
    Spells.SHIELD_SLAM_R5,
    Spells.SHIELD_SLAM_R6,
    Spells.REVENGE_R7,
    Spells.REVENGE_R8,
}

TBC_WARRIOR = dataclasses.replace(
    ERA_WARRIOR,
    abilities={**ERA_WARRIOR.abilities, **TBC_ABILITIES, **TOP_RANK_ABILITIES},
    aura_modifiers={
        **ERA_WARRIOR.aura_modifiers,
        **_stance_talents("Defiance", Spells.DEFIANCE_RANKS, Spells.DEFENSIVE_STANCE, 0.05),
        **_stance_talents(
            "Improved Berserker Stance", Spells.IMPROVED_BERSERKER_STANCE_RANKS,
            Spells.BERSERKER_STANCE, -0.02,
        ),
        **_stance_talents(
            "Tactical Mastery", Spells.TACTICAL_MASTERY_RANKS, Spells.DEFENSIVE_STANCE, 0.21,
            spell_ids=TACTICAL_MASTERY_SPELLS,
        ),
        Spells.MIGHT_8PC: ThreatModifier(
            source="gear", name="Might 8pc", value=1.15,
            spell_ids=frozenset({*Spells.SUNDER_ARMOR_RANKS, Spells.SUNDER_ARMOR}),
        ),
    },
    aura_implications={
        **ERA_WARRIOR.aura_implications,
        Spells.BATTLE_STANCE: _battle_stance,
        Spells.DEFENSIVE_STANCE: _defensive_stance,
    },
    talent_implications=talent_implications,
)
