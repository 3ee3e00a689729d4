"""Per-actor active aura sets with mutually exclusive groups."""

import logging
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)


class AuraTracker:
    """Tracks which aura spell ids are active on each actor.

    Applying a member of an exclusive group (stances, forms, blessings)
    removes every other member of that group from the same actor as part
    of the same call.
    """

    def __init__(self, exclusive_groups: Iterable[frozenset[int]] = ()):
        self._auras: dict[int, set[int]] = {}
        self._groups_by_spell: dict[int, list[frozenset[int]]] = {}
        for group in exclusive_groups:
            for spell_id in group:
                self._groups_by_spell.setdefault(spell_id, []).append(group)

    def apply(self, actor_id: int, spell_id: int) -> None:
        auras = self._auras.setdefault(actor_id, set())
        for group in self._groups_by_spell.get(spell_id, ()):
            displaced = (auras & group) - {spell_id}
            if displaced:
                logger.debug(
                    "Actor %d: %d displaces exclusive auras %s",
                    actor_id, spell_id, sorted(displaced),
                )
                auras -= displaced
        auras.add(spell_id)

    def remove(self, actor_id: int, spell_id: int) -> None:
        auras = self._auras.get(actor_id)
        if auras is not None:
            auras.discard(spell_id)

    def seed(self, actor_id: int, spell_ids: Iterable[int]) -> None:
        for spell_id in spell_ids:
            self.apply(actor_id, spell_id)

    def is_active(self, actor_id: int, spell_id: int) -> bool:
        return spell_id in self._auras.get(actor_id, ())

    def active_set(self, actor_id: int) -> frozenset[int]:
        return frozenset(self._auras.get(actor_id, ()))

    def snapshot(self) -> dict[int, list[int]]:
        """Sorted aura ids per actor, omitting actors with no active auras."""
        return {
            actor_id: sorted(auras)
            for actor_id, auras in sorted(self._auras.items())
            if auras
        }

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Mapping[int | str, Iterable[int]] | None,
        exclusive_groups: Iterable[frozenset[int]] = (),
    ) -> "AuraTracker":
        tracker = cls(exclusive_groups)
        for actor_id, spell_ids in sorted(
            (snapshot or {}).items(), key=lambda item: int(item[0]),
        ):
            tracker.seed(int(actor_id), sorted(set(spell_ids)))
        return tracker
