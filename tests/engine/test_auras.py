"""Tests for per-actor aura tracking."""

from tekii.engine.auras import AuraTracker

DEFENSIVE_STANCE = 71
BATTLE_STANCE = 2457
BERSERKER_STANCE = 2458
STANCES = frozenset({DEFENSIVE_STANCE, BATTLE_STANCE, BERSERKER_STANCE})


class TestAuraTracker:
    def test_apply_and_remove(self):
        tracker = AuraTracker()
        tracker.apply(1, 25289)
        assert tracker.is_active(1, 25289)
        tracker.remove(1, 25289)
        assert not tracker.is_active(1, 25289)

    def test_remove_unknown_is_noop(self):
        tracker = AuraTracker()
        tracker.remove(1, 25289)
        assert tracker.active_set(1) == frozenset()

    def test_exclusive_group_displaces_members(self):
        tracker = AuraTracker([STANCES])
        tracker.apply(1, DEFENSIVE_STANCE)
        tracker.apply(1, 25289)
        tracker.apply(1, BERSERKER_STANCE)
        assert tracker.active_set(1) == frozenset({BERSERKER_STANCE, 25289})

    def test_exclusivity_is_per_actor(self):
        tracker = AuraTracker([STANCES])
        tracker.apply(1, DEFENSIVE_STANCE)
        tracker.apply(2, BATTLE_STANCE)
        assert tracker.is_active(1, DEFENSIVE_STANCE)
        assert tracker.is_active(2, BATTLE_STANCE)

    def test_active_set_is_a_copy(self):
        tracker = AuraTracker()
        tracker.apply(1, 10)
        active = tracker.active_set(1)
        tracker.apply(1, 11)
        assert active == frozenset({10})

    def test_snapshot_sorted_and_omits_empty(self):
        tracker = AuraTracker()
        tracker.seed(2, [30, 10, 20])
        tracker.apply(1, 5)
        tracker.remove(1, 5)
        assert tracker.snapshot() == {2: [10, 20, 30]}

    def test_from_snapshot_accepts_string_keys(self):
        tracker = AuraTracker.from_snapshot({"1": [71, 2458]}, [STANCES])
        # Seeding is applied in ascending id order, so the later stance wins
        assert tracker.active_set(1) == frozenset({BERSERKER_STANCE})

    def test_from_empty_snapshot(self):
        assert AuraTracker.from_snapshot(None).snapshot() == {}
