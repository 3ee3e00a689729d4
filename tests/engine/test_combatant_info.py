"""Tests for CombatantInfo parsing into aura seeds, gear and talents."""

from tekii.configs.anniversary import ANNIVERSARY_CONFIG
from tekii.configs.classic.warrior import WARRIOR
from tekii.engine.combatant_info import (
    build_talent_context,
    parse_aura_ids,
    parse_gear,
    parse_talent_points,
    parse_talent_ranks,
    synthetic_auras,
)
from tekii.engine.types import Actor

WARRIOR_ACTOR = Actor(id=1, name="Tankwar", wow_class="warrior")


def _make_combatant_event(**kwargs) -> dict:
    event = {"type": "combatantinfo", "timestamp": 0, "sourceID": 1}
    event.update(kwargs)
    return event


class TestParseAuraIds:
    def test_reads_known_keys_and_dedupes(self):
        event = _make_combatant_event(auras=[
            {"ability": 25289},
            {"abilityGameID": 71},
            {"ability": 25289},
        ])
        assert parse_aura_ids(event) == [25289, 71]

    def test_skips_malformed(self):
        event = _make_combatant_event(auras=[None, "x", {"name": "no id"}, {"ability": 5}])
        assert parse_aura_ids(event) == [5]

    def test_missing_auras(self):
        assert parse_aura_ids(_make_combatant_event()) == []


class TestParseGear:
    def test_empty_slots_skipped(self):
        event = _make_combatant_event(gear=[{"id": 0}, {"id": 28350, "setID": 654}, "junk"])
        assert parse_gear(event) == [{"id": 28350, "setID": 654}]


class TestParseTalentPoints:
    def test_talent_rows(self):
        assert parse_talent_points(_make_combatant_event(talentRows=[5, 15, 41])) == (5, 15, 41)

    def test_classic_id_encoding(self):
        event = _make_combatant_event(talents=[{"id": 14}, {"id": 5}, {"id": 42}])
        assert parse_talent_points(event) == (14, 5, 42)

    def test_ranked_entries_are_not_a_split(self):
        event = _make_combatant_event(talents=[
            {"id": 12305, "rank": 5}, {"id": 1}, {"id": 2},
        ])
        assert parse_talent_points(event) == ()

    def test_out_of_range_rejected(self):
        event = _make_combatant_event(talents=[{"id": 70}, {"id": 0}, {"id": 0}])
        assert parse_talent_points(event) == ()

    def test_wrong_length(self):
        assert parse_talent_points(_make_combatant_event(talents=[{"id": 1}])) == ()


class TestParseTalentRanks:
    def test_nested_ranks_keep_highest(self):
        event = _make_combatant_event(talentTree=[
            {"talents": [{"spellID": 12303, "rank": 3}]},
            {"talents": [{"spellID": 12303, "rank": 2}, {"spellID": 12305, "rank": 0}]},
        ])
        assert parse_talent_ranks(event) == {12303: 3}

    def test_build_talent_context(self):
        event = _make_combatant_event(
            talents=[{"id": 5}, {"id": 15}, {"id": 41}],
        )
        ctx = build_talent_context(event, WARRIOR_ACTOR)
        assert ctx.talent_points == (5, 15, 41)
        assert ctx.talent_ranks == {}


class TestSyntheticAuras:
    def test_gear_enchant_and_talent_inference(self):
        event = _make_combatant_event(
            talents=[{"id": 5}, {"id": 15}, {"id": 41}],
            gear=[{"id": 30000 + i, "setID": 209} for i in range(7)]
            + [{"id": 30010, "setID": 209, "permanentEnchant": 2613}],
        )
        result = synthetic_auras(event, WARRIOR_ACTOR, ANNIVERSARY_CONFIG, WARRIOR)
        # Global gear first, then class gear, then class talents
        assert result == [2613, 23561, 12305]

    def test_nothing_inferred_without_data(self):
        assert synthetic_auras(_make_combatant_event(), WARRIOR_ACTOR, ANNIVERSARY_CONFIG, WARRIOR) == []

    def test_unknown_class(self):
        event = _make_combatant_event(gear=[{"id": 1, "permanentEnchant": 2621}])
        assert synthetic_auras(event, Actor(id=9, name="?"), ANNIVERSARY_CONFIG, None) == [2621]
