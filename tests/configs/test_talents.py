"""Tests for talent rank inference."""

from tekii.configs.classic import druid, mage, priest, warrior
from tekii.configs.talents import clamp_rank, infer_talent, tree_points
from tekii.engine.types import Actor, TalentContext

RANKS = (101, 102, 103, 104, 105)


def _make_ctx(points=(), ranks=None, wow_class: str = "warrior") -> TalentContext:
    return TalentContext(
        source_actor=Actor(id=1, name="Player", wow_class=wow_class),
        talent_points=tuple(points),
        talent_ranks=ranks or {},
    )


class TestInferTalent:
    def test_explicit_rank_wins(self):
        ctx = _make_ctx(points=(0, 0, 61), ranks={101: 3})
        assert infer_talent(ctx, RANKS, lambda p: 5) == [103]

    def test_rank_clamped(self):
        assert infer_talent(_make_ctx(ranks={101: 9}), RANKS) == [105]

    def test_rank_one_entries_pick_highest_known(self):
        ctx = _make_ctx(ranks={101: 1, 102: 1, 103: 1})
        assert infer_talent(ctx, RANKS) == [103]

    def test_tree_predicate(self):
        assert infer_talent(_make_ctx(points=(0, 0, 31)), RANKS, lambda p: 5 if p[2] >= 31 else 0) == [105]
        assert infer_talent(_make_ctx(points=(0, 0, 30)), RANKS, lambda p: 5 if p[2] >= 31 else 0) == []

    def test_nothing_known(self):
        assert infer_talent(_make_ctx(), RANKS, lambda p: 5) == []
        assert infer_talent(_make_ctx(points=(0, 0, 61)), RANKS) == []


class TestHelpers:
    def test_clamp_rank(self):
        assert clamp_rank(-1, 5) == 0
        assert clamp_rank(7, 5) == 5

    def test_tree_points_out_of_range(self):
        assert tree_points((1, 2), 2) == 0


class TestClassTalentImplications:
    def test_warrior_defiance(self):
        assert warrior.talent_implications(_make_ctx(points=(5, 15, 41))) == [12305]
        assert warrior.talent_implications(_make_ctx(points=(31, 30, 0))) == []

    def test_druid_feral_and_restoration(self):
        feral = _make_ctx(points=(0, 41, 20), wow_class="druid")
        assert druid.talent_implications(feral) == [16951, 17122]
        resto = _make_ctx(points=(10, 0, 41), wow_class="druid")
        assert druid.talent_implications(resto) == [17122]

    def test_priest_silent_resolve_needs_explicit_rank(self):
        holy = _make_ctx(points=(21, 30, 0), wow_class="priest")
        assert priest.talent_implications(holy) == []
        explicit = _make_ctx(ranks={14523: 5}, wow_class="priest")
        assert priest.talent_implications(explicit) == [14787]

    def test_mage_burning_soul(self):
        fire = _make_ctx(points=(10, 40, 11), wow_class="mage")
        assert mage.talent_implications(fire) == [12351]
