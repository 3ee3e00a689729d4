"""Tests for combat event accessors."""

from tekii.wcl.events import (
    ability_id,
    hit_type_name,
    number,
    sort_events,
    source_instance,
    target_instance,
)


class TestHitTypeName:
    def test_numeric_code(self):
        assert hit_type_name({"hitType": 1}) == "hit"
        assert hit_type_name({"hitType": 7}) == "dodge"
        assert hit_type_name({"hitType": 8}) == "parry"

    def test_string_normalized(self):
        assert hit_type_name({"hitType": "MISS"}) == "miss"

    def test_missing_or_malformed(self):
        assert hit_type_name({}) is None
        assert hit_type_name({"hitType": True}) is None
        assert hit_type_name({"hitType": 99}) is None
        assert hit_type_name({"hitType": [1]}) is None


class TestAccessors:
    def test_ability_id(self):
        assert ability_id({"abilityGameID": 355}) == 355
        assert ability_id({"abilityGameID": "355"}) is None
        assert ability_id({"abilityGameID": True}) is None
        assert ability_id({}) is None

    def test_instances_default_to_zero(self):
        assert source_instance({}) == 0
        assert target_instance({"targetInstance": None}) == 0
        assert target_instance({"targetInstance": 2}) == 2

    def test_number_treats_garbage_as_zero(self):
        assert number({"amount": 120}, "amount") == 120
        assert number({"amount": 1.5}, "amount") == 1.5
        assert number({"amount": "120"}, "amount") == 0
        assert number({"amount": False}, "amount") == 0
        assert number({}, "amount") == 0


class TestSortEvents:
    def test_stable_on_ties(self):
        events = [
            {"timestamp": 20, "seq": "a"},
            {"timestamp": 10, "seq": "b"},
            {"timestamp": 20, "seq": "c"},
            {"timestamp": 10, "seq": "d"},
        ]
        assert [e["seq"] for e in sort_events(events)] == ["b", "d", "a", "c"]
