"""Shaman deltas for TBC: Frost Shock, proc no-threat ids, synthetic talents."""

import dataclasses

from tekii.configs.classic.shaman import SHAMAN
from tekii.configs.classic.shaman import Spells as EraSpells
from tekii.configs.talents import infer_talent, tree_points
from tekii.engine.formulas import CalculateThreat, NoThreat
from tekii.engine.types import SpellSchool, TalentContext, ThreatModifier


class Spells(EraSpells):
    FROST_SHOCK_RANKS = (8056, 8058, 10472, 10473, 25464)
    CLEARCASTING = 16246
    WINDFURY_ATTACK_RANKS = (8516, 10608, 25584)
    UNLEASHED_RAGE_RANKS = (30802, 30807)
    SHAMANISTIC_RAGE_CAST = 30823
    FLURRY = 16280
    WATER_SHIELD = (24398, 33736, 23575, 33737)
    ELEMENTAL_MASTERY = 16166
    LIGHTNING_OVERLOAD = (45284, *range(45286, 45297))
    CHAIN_LIGHTNING_OVERLOAD = tuple(range(45297, 45303))

    # Synthetic talent auras; these ids are not real spells.
    SPIRIT_WEAPONS = 910101
    ELEMENTAL_PRECISION_FIRE = 910111
    ELEMENTAL_PRECISION_NATURE = 910112
    ELEMENTAL_PRECISION_FROST = 910113


ELEMENTAL_TREE = 0
ENHANCEMENT_TREE = 1
ELEMENTAL_PRECISION_POINTS = 28
SPIRIT_WEAPONS_POINTS = 21

NO_THREAT_SPELLS = (
    Spells.CLEARCASTING,
    *Spells.WINDFURY_ATTACK_RANKS,
    *Spells.UNLEASHED_RAGE_RANKS,
    Spells.SHAMANISTIC_RAGE_CAST,
    Spells.FLURRY,
    *Spells.WATER_SHIELD,
    Spells.ELEMENTAL_MASTERY,
    *Spells.LIGHTNING_OVERLOAD,
    *Spells.CHAIN_LIGHTNING_OVERLOAD,
)


def talent_implications(ctx: TalentContext) -> list[int]:
    auras = [*SHAMAN.talent_implications(ctx)]
    auras += infer_talent(
        ctx, (Spells.SPIRIT_WEAPONS,),
        lambda points: 1 if tree_points(points, ENHANCEMENT_TREE) >= SPIRIT_WEAPONS_POINTS else 0,
    )
    if infer_talent(
        ctx, (Spells.ELEMENTAL_PRECISION_FIRE,),
        lambda points: 1 if tree_points(points, ELEMENTAL_TREE) >= ELEMENTAL_PRECISION_POINTS else 0,
    ):
        auras += [
            Spells.ELEMENTAL_PRECISION_FIRE,
            Spells.ELEMENTAL_PRECISION_NATURE,
            Spells.ELEMENTAL_PRECISION_FROST,
        ]
    return auras


def _elemental_precision(school_name: str, school: int) -> ThreatModifier:
    return ThreatModifier(
        source="talent", name=f"Elemental Precision ({school_name})", value=0.9,
        schools=frozenset({school}),
    )


TBC_SHAMAN = dataclasses.replace(
    SHAMAN,
    abilities={
        **SHAMAN.abilities,
        **{spell_id: CalculateThreat(modifier=2) for spell_id in Spells.FROST_SHOCK_RANKS},
        **{spell_id: NoThreat() for spell_id in NO_THREAT_SPELLS},
    },
    aura_modifiers={
        **SHAMAN.aura_modifiers,
        Spells.SPIRIT_WEAPONS: ThreatModifier(
            source="talent", name="Spirit Weapons", value=0.7,
            schools=frozenset({SpellSchool.PHYSICAL}),
        ),
        Spells.ELEMENTAL_PRECISION_FIRE: _elemental_precision("Fire", SpellSchool.FIRE),
        Spells.ELEMENTAL_PRECISION_NATURE: _elemental_precision("Nature", SpellSchool.NATURE),
        Spells.ELEMENTAL_PRECISION_FROST: _elemental_precision("Frost", SpellSchool.FROST),
    },
    talent_implications=talent_implications,
)
