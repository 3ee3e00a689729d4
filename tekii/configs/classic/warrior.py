"""Warrior threat rules (Era ranks)."""

from collections import Counter

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
from tekii.engine.types import ClassThreatConfig, TalentContext, ThreatModifier


class Spells:
    HEROIC_STRIKE_RANKS = (78, 284, 285, 1608, 11564, 11565, 11566, 11567, 25286)
    SHIELD_SLAM_RANKS = (23922, 23923, 23924, 23925)
    SHIELD_BASH_RANKS = (72, 1671, 1672)
    REVENGE_RANKS = (6572, 6574, 7379, 11600, 11601, 25288)
    REVENGE_STUN = 12798
    CLEAVE_RANKS = (845, 7369, 11608, 11609, 20569, 25231)
    WHIRLWIND = 1680
    MORTAL_STRIKE = 25248
    EXECUTE_RANKS = (20647, 25236)
    THUNDER_CLAP_RANKS = (6343, 8198, 8204, 8205, 11580, 11581, 23931)
    HAMSTRING_RANKS = (1715, 7372, 7373, 25212)
    INTERCEPT_RANKS = (20252, 20616, 20617)
    INTERCEPT_STUNS = (20253, 20614, 20615)
    SUNDER_ARMOR_RANKS = (7386, 7405, 8380, 11596, 11597)
    BATTLE_SHOUT_RANKS = (6673, 5242, 6192, 11549, 11550, 11551, 25289)
    DEMORALIZING_SHOUT_RANKS = (11556, 25203)
    MOCKING_BLOW_RANKS = (694, 7400, 7402, 20559, 20560)
    OVERPOWER_RANKS = (7384, 7887, 11584, 11585)
    CHARGE_RANKS = (100, 6178, 11578)
    CHARGE_STUN = 7922
    PUMMEL_RANKS = (6552, 6554)
    BLOODTHIRST_RANKS = (23881, 23892, 23893, 23894)
    BLOODTHIRST_BUFFS = (23888, 23885)
    BLOODTHIRST_HEAL = 23891
    FLURRY_RANKS = (12966, 12967, 12968, 12969, 12970)

    SHIELD_SLAM = 23922
    REVENGE = 25288
    HEROIC_STRIKE = 25286
    CLEAVE = 25231
    THUNDER_CLAP = 23931
    SUNDER_ARMOR = 11597
    BATTLE_SHOUT = 25289
    TAUNT = 355
    CHALLENGING_SHOUT = 1161
    DISARM = 676
    RETALIATION = 20230
    SWEEPING_STRIKES = 12292
    BERSERKER_RAGE = 18499
    RECKLESSNESS = 1719
    SHIELD_WALL = 871
    SHIELD_BLOCK = 2565
    DEATH_WISH = 12328
    PIERCING_HOWL = 12323
    ENRAGE = 14204
    LAST_STAND_CAST = 12975
    LAST_STAND_BUFF = 12976
    MIGHT_PROC = 29478
    SHIELD_SPECIALIZATION = 23602
    REND = 11574
    DEEP_WOUNDS = 12721

    BLOODRAGE_CAST = 2687
    BLOODRAGE_RAGE_GAIN = 29131
    UNBRIDLED_WRATH = 12964

    DEFENSIVE_STANCE = 71
    BERSERKER_STANCE = 2458
    BATTLE_STANCE = 2457

    DEFIANCE_RANKS = (12301, 12302, 12303, 12304, 12305)
    MIGHT_8PC = 23561
    CONQUEROR_4PC = 23302


MIGHT_SET_ID = 209
PROTECTION_TREE = 2
# Tree splits without per-talent ranks still mark a tanking build.
DEFIANCE_PROTECTION_POINTS = 14

STANCES = frozenset({Spells.DEFENSIVE_STANCE, Spells.BERSERKER_STANCE, Spells.BATTLE_STANCE})
RAGE_EVENT_TYPES = ("energize", "resourcechange")

_NO_THREAT = NoThreat()


def _on_hit(bonus: float, modifier: float = 1) -> ThreatOnSuccessfulHit:
    return ThreatOnSuccessfulHit(modifier=modifier, bonus=bonus)


def _on_damage(modifier: float = 1, bonus: float = 0) -> CalculateThreat:
    return CalculateThreat(modifier=modifier, bonus=bonus, event_types=("damage",))


def _rage_gain(apply_player_multipliers: bool) -> CalculateThreat:
    return CalculateThreat(
        modifier=5, split=True, event_types=RAGE_EVENT_TYPES,
        apply_player_multipliers=apply_player_multipliers,
    )


def _ranks(spell_ids, formula) -> dict:
    return {spell_id: formula for spell_id in spell_ids}


def _defiance(rank: int) -> ThreatModifier:
    return ThreatModifier(source="talent", name=f"Defiance (Rank {rank})", value=1 + 0.03 * rank)


def gear_implications(gear: list[dict]) -> list[int]:
    pieces = Counter(item.get("setID") for item in gear if item.get("setID"))
    if pieces[MIGHT_SET_ID] >= 8:
        return [Spells.MIGHT_8PC]
    return []


def talent_implications(ctx: TalentContext) -> list[int]:
    return infer_talent(
        ctx,
        Spells.DEFIANCE_RANKS,
        lambda points: (
            len(Spells.DEFIANCE_RANKS)
            if tree_points(points, PROTECTION_TREE) >= DEFIANCE_PROTECTION_POINTS else 0
        ),
    )


BATTLE_STANCE_ABILITIES = frozenset({
    *Spells.OVERPOWER_RANKS,
    *Spells.CHARGE_RANKS,
    *Spells.THUNDER_CLAP_RANKS,
    *Spells.MOCKING_BLOW_RANKS,
    Spells.RETALIATION,
    Spells.SWEEPING_STRIKES,
})
BERSERKER_STANCE_ABILITIES = frozenset({
    *Spells.INTERCEPT_RANKS,
    *Spells.PUMMEL_RANKS,
    Spells.WHIRLWIND,
    Spells.MORTAL_STRIKE,
    Spells.BERSERKER_RAGE,
    Spells.RECKLESSNESS,
})
DEFENSIVE_STANCE_ABILITIES = frozenset({
    *Spells.REVENGE_RANKS,
    Spells.TAUNT,
    Spells.DISARM,
    Spells.SHIELD_BLOCK,
    Spells.SHIELD_WALL,
})

NO_THREAT_SPELLS = (
    Spells.DEFENSIVE_STANCE,
    Spells.BATTLE_STANCE,
    Spells.BERSERKER_STANCE,
    Spells.REVENGE_STUN,
    Spells.MIGHT_PROC,
    Spells.SHIELD_SPECIALIZATION,
    Spells.CHARGE_RANKS[-1],
    Spells.CHARGE_STUN,
    Spells.BERSERKER_RAGE,
    *Spells.FLURRY_RANKS,
    Spells.DEATH_WISH,
    Spells.SHIELD_WALL,
    Spells.RECKLESSNESS,
    Spells.PIERCING_HOWL,
    Spells.ENRAGE,
    Spells.LAST_STAND_CAST,
    Spells.LAST_STAND_BUFF,
    Spells.SHIELD_BLOCK,
    *Spells.BLOODTHIRST_BUFFS,
    *Spells.INTERCEPT_STUNS,
    Spells.CHALLENGING_SHOUT,
)

WARRIOR = ClassThreatConfig(
    abilities={
        **_ranks(NO_THREAT_SPELLS, _NO_THREAT),
        **{
            spell_id: _on_hit(bonus)
            for spell_id, bonus in zip(
                Spells.HEROIC_STRIKE_RANKS, (16, 39, 59, 78, 98, 118, 137, 145, 175), strict=True,
            )
        },
        **{
            spell_id: _on_hit(bonus)
            for spell_id, bonus in zip(Spells.SHIELD_SLAM_RANKS, (178, 203, 229, 254), strict=True)
        },
        **{
            spell_id: _on_hit(bonus, modifier=1.5)
            for spell_id, bonus in zip(Spells.SHIELD_BASH_RANKS, (36, 96, 96), strict=True)
        },
        11601: _on_hit(243, modifier=2.25),
        25288: _on_hit(270, modifier=2.25),
        **{
            spell_id: _on_hit(bonus)
            for spell_id, bonus in zip(Spells.CLEAVE_RANKS, (10, 40, 60, 70, 100, 100), strict=True)
        },
        Spells.WHIRLWIND: _on_damage(modifier=1.25),
        Spells.MORTAL_STRIKE: _on_damage(),
        **_ranks(Spells.THUNDER_CLAP_RANKS, _on_damage(modifier=2.5)),
        1715: _on_hit(20, modifier=1.25),
        7372: _on_hit(80, modifier=1.25),
        7373: _on_hit(145),
        25212: _on_hit(145),
        **_ranks(Spells.INTERCEPT_RANKS, _on_damage(modifier=2)),
        **_ranks(Spells.EXECUTE_RANKS, _on_damage(modifier=1.25)),
        # Rank 4 is interpolated between ranks 3 and 5.
        **{
            spell_id: ThreatOnCastRollbackOnMiss(value)
            for spell_id, value in zip(Spells.SUNDER_ARMOR_RANKS, (45, 90, 135, 180, 261), strict=True)
        },
        **{
            spell_id: threat_on_buff(value)
            for spell_id, value in zip(
                Spells.BATTLE_SHOUT_RANKS, (1, 12, 22, 32, 42, 52, 60), strict=True,
            )
        },
        **_ranks(Spells.DEMORALIZING_SHOUT_RANKS, threat_on_debuff(43)),
        **_ranks(Spells.MOCKING_BLOW_RANKS, _on_damage()),
        Spells.TAUNT: TauntTarget(event_types=("applydebuff",)),
        Spells.DISARM: CalculateThreat(modifier=0, bonus=104, event_types=("cast",)),
        Spells.OVERPOWER_RANKS[-1]: _on_damage(),
        Spells.REND: _on_damage(),
        Spells.DEEP_WOUNDS: _on_damage(),
        Spells.PUMMEL_RANKS[0]: _on_hit(76),
        Spells.PUMMEL_RANKS[1]: _on_hit(116),
        **_ranks(Spells.BLOODTHIRST_RANKS, _on_damage()),
        Spells.BLOODRAGE_CAST: _rage_gain(apply_player_multipliers=True),
        Spells.BLOODRAGE_RAGE_GAIN: _rage_gain(apply_player_multipliers=False),
        Spells.UNBRIDLED_WRATH: _rage_gain(apply_player_multipliers=False),
        Spells.BLOODTHIRST_HEAL: CalculateThreat(modifier=0.5, split=True, event_types=("heal",)),
    },
    aura_modifiers={
        Spells.DEFENSIVE_STANCE: ThreatModifier(source="stance", name="Defensive Stance", value=1.3),
        Spells.BERSERKER_STANCE: ThreatModifier(source="stance", name="Berserker Stance", value=0.8),
        **{
            spell_id: _defiance(rank)
            for rank, spell_id in enumerate(Spells.DEFIANCE_RANKS, start=1)
        },
        Spells.MIGHT_8PC: ThreatModifier(
            source="gear", name="Might 8pc", value=1.15,
            spell_ids=frozenset(Spells.SUNDER_ARMOR_RANKS),
        ),
        Spells.CONQUEROR_4PC: ThreatModifier(source="gear", name="Conqueror 4pc", value=1.1),
    },
    exclusive_auras=(STANCES,),
    aura_implications={
        Spells.BATTLE_STANCE: BATTLE_STANCE_ABILITIES,
        Spells.BERSERKER_STANCE: BERSERKER_STANCE_ABILITIES,
        Spells.DEFENSIVE_STANCE: DEFENSIVE_STANCE_ABILITIES,
    },
    fixate_buffs=frozenset({Spells.TAUNT, Spells.CHALLENGING_SHOUT, *Spells.MOCKING_BLOW_RANKS}),
    talent_implications=talent_implications,
    gear_implications=gear_implications,
)
