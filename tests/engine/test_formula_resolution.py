"""Tests for event amounts and formula selection."""

from unittest.mock import MagicMock

import pytest

from tekii.configs.anniversary import ANNIVERSARY_CONFIG
from tekii.engine.prepared import prepare_config
from tekii.engine.resolver import event_amount, resolve_formula
from tekii.engine.types import Actor, ThreatContext

PREPARED = prepare_config(ANNIVERSARY_CONFIG)


def _make_ctx(event: dict, wow_class: str | None = "warrior") -> ThreatContext:
    return ThreatContext(
        event=event,
        amount=event_amount(event),
        source_actor=Actor(id=1, name="Source", wow_class=wow_class),
        target_actor=Actor(id=100, name="Boss"),
        source_auras=frozenset(),
        target_auras=frozenset(),
        view=MagicMock(),
    )


class TestEventAmount:
    def test_damage(self):
        assert event_amount({"type": "damage", "amount": 1200}) == 1200

    def test_heal_subtracts_overheal(self):
        assert event_amount({"type": "heal", "amount": 1500, "overheal": 500}) == 1000

    def test_effective_heal(self):
        assert event_amount({"type": "heal", "amount": 1000, "overheal": 500}) == 500
        assert event_amount({"type": "energize", "resourceChange": 20, "waste": 5}) == 15

    def test_full_overheal_is_zero(self):
        assert event_amount({"type": "heal", "amount": 500, "overheal": 700}) == 0

    def test_energize_subtracts_waste(self):
        assert event_amount({"type": "energize", "resourceChange": 5, "waste": 2}) == 3
        assert event_amount({"type": "resourcechange", "resourceChange": 40}) == 40

    @pytest.mark.parametrize("event", [
        {"type": "cast", "amount": 100},
        {"type": "damage"},
        {"type": "damage", "amount": "lots"},
        {},
    ])
    def test_degrades_to_zero(self, event):
        assert event_amount(event) == 0


class TestResolveFormula:
    def test_class_ability(self):
        event = {"type": "damage", "abilityGameID": 23922, "amount": 2500}
        result = resolve_formula(_make_ctx(event), PREPARED)
        assert result.value == 5150

    def test_other_class_ability_not_used(self):
        # Shield Slam is a warrior ability; a mage using the id gets base damage
        event = {"type": "damage", "abilityGameID": 23922, "amount": 2500}
        result = resolve_formula(_make_ctx(event, wow_class="mage"), PREPARED)
        assert result.formula == "amt"
        assert result.value == 2500

    def test_global_ability_for_any_class(self):
        event = {"type": "damage", "abilityGameID": 30486, "amount": 2000}
        assert resolve_formula(_make_ctx(event, wow_class=None), PREPARED).value == 2000
        assert resolve_formula(_make_ctx(event, wow_class="rogue"), PREPARED).value == 2000

    def test_gated_ability_returns_none(self):
        event = {"type": "damage", "abilityGameID": 25225, "amount": 0}
        assert resolve_formula(_make_ctx(event), PREPARED) is None

    def test_base_heal(self):
        event = {"type": "heal", "abilityGameID": 27136, "amount": 1500, "overheal": 500}
        result = resolve_formula(_make_ctx(event, wow_class="paladin"), PREPARED)
        assert result.formula == "effectiveHeal * 0.5"
        assert result.value == 500
        assert result.split_among_enemies is True

    def test_base_energize_rage(self):
        event = {"type": "energize", "resourceChangeType": 1, "resourceChange": 5, "waste": 2}
        result = resolve_formula(_make_ctx(event), PREPARED)
        assert result.formula == "rage * 5"
        assert result.value == 15
        assert result.apply_player_multipliers is False

    def test_base_energize_mana(self):
        event = {"type": "energize", "resourceChangeType": 0, "resourceChange": 40, "waste": 10}
        assert resolve_formula(_make_ctx(event), PREPARED).value == 15

    def test_energy_is_free(self):
        event = {"type": "energize", "resourceChangeType": 3, "resourceChange": 20}
        result = resolve_formula(_make_ctx(event, wow_class="rogue"), PREPARED)
        assert result.value == 0

    def test_unhandled_event_type(self):
        result = resolve_formula(_make_ctx({"type": "begincast"}), PREPARED)
        assert result.value == 0
        assert result.formula == "0"
