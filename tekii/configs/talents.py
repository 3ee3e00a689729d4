"""Helpers for turning combatant talent data into synthetic aura ids."""

from collections.abc import Callable, Sequence

from tekii.engine.types import TalentContext


def clamp_rank(rank: int, max_rank: int) -> int:
    return max(0, min(rank, max_rank))


def infer_talent(
    ctx: TalentContext,
    rank_spell_ids: Sequence[int],
    tree_predicate: Callable[[tuple[int, ...]], int] | None = None,
) -> list[int]:
    """Return the synthetic aura for the highest rank of a talent, if known.

    `rank_spell_ids` lists the aura id of each rank, rank 1 first. Explicit
    ranks from the payload win; otherwise `tree_predicate` may infer a rank
    from the per-tree point split.
    """
    explicit = [ctx.talent_ranks.get(spell_id, 0) for spell_id in rank_spell_ids]
    highest_rank = max(explicit, default=0)
    if highest_rank > 1:
        rank = clamp_rank(highest_rank, len(rank_spell_ids))
        return [rank_spell_ids[rank - 1]]
    if highest_rank == 1:
        # Some payloads report each known rank id with rank 1.
        known = [s for s, r in zip(rank_spell_ids, explicit, strict=True) if r > 0]
        return [known[-1]]

    if tree_predicate is None or not ctx.talent_points:
        return []
    rank = clamp_rank(tree_predicate(ctx.talent_points), len(rank_spell_ids))
    return [rank_spell_ids[rank - 1]] if rank > 0 else []


def tree_points(points: tuple[int, ...], tree_index: int) -> int:
    return points[tree_index] if tree_index < len(points) else 0
