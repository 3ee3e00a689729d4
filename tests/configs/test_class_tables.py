"""Spot checks for class and raid rule tables."""

from unittest.mock import MagicMock

import pytest

from tekii.configs.anniversary import ANNIVERSARY_CONFIG
from tekii.configs.classic import druid, general, paladin, raids, warlock, warrior
from tekii.configs.classic.hunter import HUNTER
from tekii.configs.classic.hunter import Spells as HunterSpells
from tekii.configs.classic.shaman import SHAMAN
from tekii.configs.era import ERA_CONFIG
from tekii.configs.tbc import shaman as tbc_shaman
from tekii.configs.tbc import warrior as tbc_warrior
from tekii.configs.tbc.hunter import TBC_HUNTER
from tekii.configs.tbc.shaman import TBC_SHAMAN
from tekii.configs.tbc.warrior import TBC_WARRIOR
from tekii.engine.formulas import HatefulStrike, InstallMisdirection
from tekii.engine.types import (
    Actor,
    Enemy,
    EventMarker,
    ModifyThreat,
    SpellSchool,
    TalentContext,
    ThreatContext,
)


def _make_ctx(event: dict, amount: float = 0, auras=()) -> ThreatContext:
    return ThreatContext(
        event=event,
        amount=amount,
        source_actor=Actor(id=1, name="Source"),
        target_actor=Actor(id=100, name="Boss"),
        source_auras=frozenset(auras),
        target_auras=frozenset(),
        view=MagicMock(),
    )


class TestWarrior:
    @pytest.mark.parametrize(("spell_id", "amount", "expected"), [
        (tbc_warrior.Spells.SHIELD_SLAM, 2500, 5150),
        (tbc_warrior.Spells.REVENGE, 1000, 1355),
        (tbc_warrior.Spells.HEROIC_STRIKE, 1000, 1145),
        (tbc_warrior.Spells.CLEAVE, 1000, 1100),
    ])
    def test_top_rank_damage_abilities(self, spell_id, amount, expected):
        formula = TBC_WARRIOR.abilities[spell_id]
        assert formula(_make_ctx({"type": "damage"}, amount)).value == expected
        assert formula(_make_ctx({"type": "cast"})) is None

    def test_might_set_needs_eight_pieces(self):
        gear = [{"id": i, "setID": warrior.MIGHT_SET_ID} for i in range(1, 8)]
        assert warrior.gear_implications(gear) == []
        assert warrior.gear_implications([*gear, {"id": 9, "setID": 209}]) == [23561]

    def test_stances_exclusive(self):
        assert warrior.STANCES in warrior.WARRIOR.exclusive_auras
        assert warrior.STANCES in TBC_WARRIOR.exclusive_auras


class TestEraWarriorRanks:
    @pytest.mark.parametrize(("spell_id", "expected"), [
        (7386, 45), (7405, 90), (8380, 135), (11596, 180), (11597, 261),
    ])
    def test_sunder_ranks_on_cast(self, spell_id, expected):
        formula = warrior.WARRIOR.abilities[spell_id]
        assert formula(_make_ctx({"type": "cast"})).value == expected

    def test_sunder_miss_rolls_back(self):
        formula = warrior.WARRIOR.abilities[11597]
        assert formula(_make_ctx({"type": "damage", "hitType": "parry"})).value == -261

    @pytest.mark.parametrize(("spell_id", "amount", "expected"), [
        (23922, 1000, 1178),
        (23923, 1000, 1203),
        (25286, 1000, 1175),
        (78, 100, 116),
        (25288, 1000, 2520),
        (72, 100, 186),
        (23931, 100, 250),
        (1715, 100, 145),
    ])
    def test_rank_values_on_hit(self, spell_id, amount, expected):
        formula = warrior.WARRIOR.abilities[spell_id]
        assert formula(_make_ctx({"type": "damage", "hitType": 1}, amount)).value == pytest.approx(expected)

    def test_successful_hit_formulas_skip_misses(self):
        formula = warrior.WARRIOR.abilities[23923]
        assert formula(_make_ctx({"type": "damage", "hitType": "dodge"})) is None

    def test_battle_shout_ranks_split(self):
        for spell_id, value in [(6673, 1), (11551, 52), (25289, 60)]:
            result = warrior.WARRIOR.abilities[spell_id](_make_ctx({"type": "applybuff"}))
            assert (result.value, result.split_among_enemies) == (value, True)

    def test_might_covers_every_sunder_rank(self):
        modifier = warrior.WARRIOR.aura_modifiers[warrior.Spells.MIGHT_8PC]
        assert modifier.spell_ids == frozenset(warrior.Spells.SUNDER_ARMOR_RANKS)

    def test_era_has_no_tbc_ranks(self):
        for spell_id in (25225, 30356, 20243, 469):
            assert spell_id not in warrior.WARRIOR.abilities

    def test_bloodrage_rage_gain_skips_player_multipliers(self):
        result = warrior.WARRIOR.abilities[29131](_make_ctx({"type": "energize"}, 10))
        assert result.value == 50
        assert result.apply_player_multipliers is False


class TestTbcWarrior:
    @pytest.mark.parametrize(("spell_id", "amount", "expected"), [
        (30356, 1000, 1305),
        (25258, 1000, 1278),
        (30016, 1000, 1401.5),
        (30357, 1000, 1200),
        (29704, 100, 342),
        (30324, 1000, 1220),
    ])
    def test_tbc_ranks(self, spell_id, amount, expected):
        formula = TBC_WARRIOR.abilities[spell_id]
        assert formula(_make_ctx({"type": "damage", "hitType": 1}, amount)).value == pytest.approx(expected)

    def test_commanding_shout_is_unsplit_buff_threat(self):
        result = TBC_WARRIOR.abilities[tbc_warrior.Spells.COMMANDING_SHOUT](_make_ctx({"type": "applybuff"}))
        assert (result.value, result.split_among_enemies) == (69, False)

    def test_spell_reflect_is_threat_free(self):
        result = TBC_WARRIOR.abilities[tbc_warrior.Spells.SPELL_REFLECT](_make_ctx({"type": "cast"}))
        assert result.value == 0

    def test_sunder_top_rank_flat(self):
        formula = TBC_WARRIOR.abilities[tbc_warrior.Spells.SUNDER_ARMOR]
        assert formula(_make_ctx({"type": "cast"}, 5000)).value == 301

    def test_era_ranks_inherited(self):
        assert TBC_WARRIOR.abilities[11596] is warrior.WARRIOR.abilities[11596]

    def test_defiance_only_in_defensive_stance(self):
        modifier = TBC_WARRIOR.aura_modifiers[12303]
        defensive = modifier(_make_ctx({"type": "damage"}, auras={tbc_warrior.Spells.DEFENSIVE_STANCE}))
        battle = modifier(_make_ctx({"type": "damage"}, auras={tbc_warrior.Spells.BATTLE_STANCE}))
        assert (defensive.name, defensive.value) == ("Defiance (Rank 3)", pytest.approx(1.15))
        assert battle.value == 1.0

    def test_improved_berserker_stance(self):
        modifier = TBC_WARRIOR.aura_modifiers[910005]
        result = modifier(_make_ctx({"type": "damage"}, auras={tbc_warrior.Spells.BERSERKER_STANCE}))
        assert result.value == pytest.approx(0.9)

    def test_defiance_inferred_from_ten_protection_points(self):
        ctx = TalentContext(source_actor=Actor(id=1, name="Tank", wow_class="warrior"), talent_points=(0, 0, 10))
        assert tbc_warrior.talent_implications(ctx) == [12303]

    def test_defiance_explicit_rank(self):
        ctx = TalentContext(
            source_actor=Actor(id=1, name="Tank", wow_class="warrior"), talent_ranks={12302: 2},
        )
        assert tbc_warrior.talent_implications(ctx) == [12302]

    def test_fury_and_arms_talents(self):
        ctx = TalentContext(source_actor=Actor(id=1, name="Dps", wow_class="warrior"), talent_points=(5, 41, 15))
        assert tbc_warrior.talent_implications(ctx) == [12303, 910005, 910013]

    def test_might_covers_tbc_sunder(self):
        modifier = TBC_WARRIOR.aura_modifiers[tbc_warrior.Spells.MIGHT_8PC]
        assert {11597, 25225} <= modifier.spell_ids

    def test_shield_slam_implies_defensive_stance(self):
        implied = TBC_WARRIOR.aura_implications[tbc_warrior.Spells.DEFENSIVE_STANCE]
        assert {23922, 30356, 25269, 30357} <= implied
        assert 23931 not in TBC_WARRIOR.aura_implications[tbc_warrior.Spells.BATTLE_STANCE]


class TestPaladin:
    def test_blessings_are_split_buff_threat(self):
        for blessing in paladin.BLESSINGS:
            result = paladin.PALADIN.abilities[blessing](_make_ctx({"type": "applybuff"}))
            assert result.value == 60
            assert result.split_among_enemies is True

    def test_improved_righteous_fury(self):
        modifier = paladin.PALADIN.aura_modifiers[paladin.Spells.IMPROVED_RIGHTEOUS_FURY_R2]
        assert modifier.value == pytest.approx(3.5 / 1.6)
        assert modifier.schools == paladin.HOLY


class TestDruid:
    def test_feral_instinct_ratio(self):
        modifier = druid.FeralInstinct(5)(_make_ctx({"type": "damage"}, auras={druid.Spells.DIRE_BEAR_FORM}))
        assert modifier.value == pytest.approx(1.45 / 1.3)

    def test_subtlety_scoped_to_healing(self):
        modifier = druid.DRUID.aura_modifiers[druid.Spells.SUBTLETY_RANKS[-1]]
        assert modifier.value == pytest.approx(0.8)
        assert 25297 in modifier.spell_ids

    def test_cower_rolls_back_on_miss(self):
        formula = druid.DRUID.abilities[druid.Spells.COWER_RANKS[-1]]
        assert formula(_make_ctx({"type": "cast"})).value == -600
        assert formula(_make_ctx({"type": "damage", "hitType": "dodge"})).value == 600

    def test_forms_produce_no_threat(self):
        for form in druid.FORMS:
            assert druid.DRUID.abilities[form](_make_ctx({"type": "applybuff"})).value == 0


class TestWarlock:
    def test_curse_threat(self):
        result = warlock.WARLOCK.abilities[11717](_make_ctx({"type": "applydebuff"}))
        assert result.value == 112

    def test_searing_pain_doubles(self):
        assert warlock.WARLOCK.abilities[17923](_make_ctx({"type": "damage"}, 500)).value == 1000


class TestGeneral:
    def test_enchant_implications(self):
        gear = [{"id": 1, "permanentEnchant": 2613}, {"id": 2, "permanentEnchant": 2621}, {"id": 3}]
        assert general.enchant_implications(gear) == [2613, 2621]


class TestRaids:
    def test_hateful_strike_values_per_era(self):
        era = ERA_CONFIG.abilities[raids.Spells.HATEFUL_STRIKE]
        tbc = ANNIVERSARY_CONFIG.abilities[raids.Spells.HATEFUL_STRIKE]
        assert era == HatefulStrike(500, 500)
        assert tbc == HatefulStrike(1000, 2000)

    def test_black_temple_tables_only_in_anniversary(self):
        assert raids.Spells.INSIGNIFICANCE in ANNIVERSARY_CONFIG.aura_modifiers
        assert raids.Spells.INSIGNIFICANCE not in ERA_CONFIG.aura_modifiers
        assert raids.Spells.FEL_RAGE in ANNIVERSARY_CONFIG.fixate_buffs

    def test_zul_gurub_tables_only_in_era(self):
        assert raids.Spells.FORCE_PUNCH in ERA_CONFIG.abilities
        assert raids.Spells.CAUSE_INSANITY in ERA_CONFIG.aggro_loss_buffs
        assert raids.Spells.FORCE_PUNCH not in ANNIVERSARY_CONFIG.abilities

    def test_arlokk_hook_registered_for_both_encounter_ids(self):
        for config in (ERA_CONFIG, ANNIVERSARY_CONFIG):
            assert config.encounters[791] is raids.ArlokkReappearanceWipe
            assert config.encounters[150791] is raids.ArlokkReappearanceWipe


class TestArlokkReappearanceWipe:
    ENEMIES = (
        Enemy(id=100, name="High Priestess Arlokk", game_id=raids.ARLOKK_GAME_ID),
        Enemy(id=101, name="Zulian Prowler", game_id=15101),
    )

    def _event(self, source_id: int, timestamp: int) -> dict:
        return {"timestamp": timestamp, "type": "cast", "sourceID": source_id, "abilityGameID": 24210}

    def test_wipes_after_long_absence(self):
        hook = raids.ArlokkReappearanceWipe(791, self.ENEMIES)
        assert hook(_make_ctx(self._event(100, 1000))) == ()
        assert hook(_make_ctx(self._event(100, 31000))) == ()
        assert hook(_make_ctx(self._event(100, 61001))) == (ModifyThreat(multiplier=0, target="all"),)

    def test_other_enemies_ignored(self):
        hook = raids.ArlokkReappearanceWipe(791, self.ENEMIES)
        assert hook(_make_ctx(self._event(101, 1000))) == ()
        assert hook(_make_ctx(self._event(101, 90000))) == ()

    def test_state_is_per_instance(self):
        first = raids.ArlokkReappearanceWipe(791, self.ENEMIES)
        first(_make_ctx(self._event(100, 1000)))
        second = raids.ArlokkReappearanceWipe(791, self.ENEMIES)
        assert second(_make_ctx(self._event(100, 90000))) == ()


class TestHunter:
    def test_misdirection_is_tbc_only(self):
        assert HunterSpells.MISDIRECTION not in HUNTER.abilities
        assert isinstance(TBC_HUNTER.abilities[HunterSpells.MISDIRECTION], InstallMisdirection)
        assert TBC_HUNTER.abilities[HunterSpells.FEIGN_DEATH] is HUNTER.abilities[HunterSpells.FEIGN_DEATH]


class TestShaman:
    def test_earth_shock_doubles_damage(self):
        formula = SHAMAN.abilities[10414]
        assert formula(_make_ctx({"type": "damage"}, 1000)).value == 2000

    def test_frost_shock_only_in_tbc(self):
        assert 25464 not in SHAMAN.abilities
        assert TBC_SHAMAN.abilities[25464](_make_ctx({"type": "damage"}, 500)).value == 1000

    def test_tranquil_air_totem_summon_is_marked(self):
        formula = SHAMAN.abilities[tbc_shaman.Spells.TRANQUIL_AIR_TOTEM]
        result = formula(_make_ctx({"type": "summon"}))
        assert result.value == 0
        assert result.specials == (EventMarker(marker="tranquilAirTotem"),)
        assert formula(_make_ctx({"type": "cast"})) is None

    def test_tranquil_air_buff_modifier(self):
        modifier = TBC_SHAMAN.aura_modifiers[tbc_shaman.Spells.TRANQUIL_AIR_BUFF]
        assert (modifier.value, modifier.spell_ids, modifier.schools) == (0.8, None, None)

    def test_healing_grace_scoped_to_heals(self):
        modifier = SHAMAN.aura_modifiers[29191]
        assert modifier.value == pytest.approx(0.85)
        assert 25357 in modifier.spell_ids
        assert 10414 not in modifier.spell_ids

    def test_overload_procs_threat_free(self):
        for spell_id in (45284, 45296, 45297, 45302):
            assert TBC_SHAMAN.abilities[spell_id](_make_ctx({"type": "damage"}, 800)).value == 0

    def test_spirit_weapons_inferred_and_physical_only(self):
        ctx = TalentContext(source_actor=Actor(id=9, name="Enh", wow_class="shaman"), talent_points=(0, 41, 20))
        assert tbc_shaman.talent_implications(ctx) == [tbc_shaman.Spells.SPIRIT_WEAPONS]
        modifier = TBC_SHAMAN.aura_modifiers[tbc_shaman.Spells.SPIRIT_WEAPONS]
        assert (modifier.value, modifier.schools) == (0.7, frozenset({SpellSchool.PHYSICAL}))

    def test_elemental_precision_covers_three_schools(self):
        ctx = TalentContext(source_actor=Actor(id=9, name="Ele", wow_class="shaman"), talent_points=(41, 0, 20))
        assert tbc_shaman.talent_implications(ctx) == [910111, 910112, 910113]
        schools = {
            school
            for spell_id in (910111, 910112, 910113)
            for school in TBC_SHAMAN.aura_modifiers[spell_id].schools
        }
        assert schools == {SpellSchool.FIRE, SpellSchool.NATURE, SpellSchool.FROST}

    def test_healing_grace_explicit_rank(self):
        ctx = TalentContext(source_actor=Actor(id=9, name="Resto", wow_class="shaman"), talent_ranks={29191: 3})
        assert tbc_shaman.talent_implications(ctx) == [29191]
        assert tbc_shaman.talent_implications(TalentContext(source_actor=ctx.source_actor)) == []
