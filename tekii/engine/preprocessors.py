"""Fight preprocessors: whole-fight inference that runs around the main pass.

A processor may look at every event before the main pass (``visit`` then
``finalize``) to seed auras the log never shows being applied, and may
emit aura mutations just before fight state sees an event
(``before_state``). Processors share a single ProcessorContext.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property

from tekii.engine.combatant_info import parse_aura_ids
from tekii.engine.input import EngineInput
from tekii.engine.types import AuraMutation, FightView
from tekii.wcl.events import ability_id, number, source_instance

logger = logging.getLogger(__name__)

BLESSING_OF_SALVATION = 1038
GREATER_BLESSING_OF_SALVATION = 25895
SALVATION_IDS = frozenset({BLESSING_OF_SALVATION, GREATER_BLESSING_OF_SALVATION})
SALVATION_EVENT_TYPES = frozenset({"applybuff", "refreshbuff", "removebuff"})

LONG_TERM_BLESSING_IDS = frozenset({
    *SALVATION_IDS,
    # Era
    20217, 25291, 25290, 20914, 19979, 25894, 25896, 25918, 25899, 25890,
    # TBC ranks
    25782, 27140, 27141, 27142, 27143, 27144, 27145, 27168, 27169,
})

MAX_PARTY_SIZE = 5
BUFF_SIGNAL_TYPES = frozenset({"applybuff", "refreshbuff", "applybuffstack"})
HEAL_SIGNAL_TYPES = frozenset({"heal"})

# Spells that only ever land on the caster's party.
PARTY_SIGNALS: dict[int, frozenset[str]] = {
    **dict.fromkeys((596, 996, 10960, 10961, 25316), HEAL_SIGNAL_TYPES),  # Prayer of Healing
    **dict.fromkeys((34861, 34863, 34864, 34865, 34866), HEAL_SIGNAL_TYPES),  # Circle of Healing
    **dict.fromkeys((27801, 25331), HEAL_SIGNAL_TYPES),  # Holy Nova
    **dict.fromkeys(
        (1243, 1244, 1245, 2791, 10937, 10938, 21562, 21564, 25392), BUFF_SIGNAL_TYPES,
    ),  # Prayer of Fortitude
    **dict.fromkeys((19746,), BUFF_SIGNAL_TYPES),  # Concentration Aura
    **dict.fromkeys((465, 643, 1032, 10290, 10291, 10292, 10293), BUFF_SIGNAL_TYPES),  # Devotion Aura
    **dict.fromkeys((7294, 10298, 10299, 10300, 10301), BUFF_SIGNAL_TYPES),  # Retribution Aura
    **dict.fromkeys(
        (19876, 19895, 19896, 19888, 19897, 19898, 19891, 19899, 19900), BUFF_SIGNAL_TYPES,
    ),  # resistance auras
    **dict.fromkeys((20218,), BUFF_SIGNAL_TYPES),  # Sanctity Aura
    **dict.fromkeys((24858, 24907), BUFF_SIGNAL_TYPES),  # Moonkin Aura
    **dict.fromkeys((19506, 20905, 20906, 27066), BUFF_SIGNAL_TYPES),  # Trueshot Aura
    **dict.fromkeys((17007, 24932), BUFF_SIGNAL_TYPES),  # Leader of the Pack
    **dict.fromkeys((33891,), BUFF_SIGNAL_TYPES),  # Tree of Life
    **dict.fromkeys((30807,), BUFF_SIGNAL_TYPES),  # Unleashed Rage
    **dict.fromkeys((2825, 32182), BUFF_SIGNAL_TYPES),  # Bloodlust / Heroism
    **dict.fromkeys((27045, 13159), BUFF_SIGNAL_TYPES),  # Aspect of the Wild / Pack
    **dict.fromkeys((6673, 5242, 6192, 11549, 11550, 11551, 25289, 2048), BUFF_SIGNAL_TYPES),
    **dict.fromkeys((469,), BUFF_SIGNAL_TYPES),  # Commanding Shout
}

TRANQUIL_AIR_TOTEM = 25908
TRANQUIL_AIR_BUFF = 25909
POSITION_UNITS_PER_YARD = 200
TRANQUIL_AIR_RANGE = POSITION_UNITS_PER_YARD * 30
CAST_POSITION_MAX_AGE_MS = 2000


@dataclass
class PartyAssignments:
    group_by_actor: dict[int, int] = field(default_factory=dict)
    members_by_group: dict[int, set[int]] = field(default_factory=dict)

    def members_of(self, actor_id: int) -> set[int]:
        group = self.group_by_actor.get(actor_id)
        if group is None:
            return set()
        return set(self.members_by_group.get(group, ()))


@dataclass
class ProcessorContext:
    """Inputs and shared outputs for one fight's processors."""

    engine_input: EngineInput
    initial_auras: dict[int, frozenset[int]] = field(default_factory=dict)
    tank_actor_ids: frozenset[int] = frozenset()
    infer_threat_reduction: bool = False
    aura_additions: dict[int, set[int]] = field(default_factory=dict)
    party: PartyAssignments | None = None

    def add_initial_aura(self, actor_id: int, spell_id: int) -> None:
        self.aura_additions.setdefault(actor_id, set()).add(spell_id)

    @cached_property
    def friendly_players(self) -> frozenset[int]:
        actor_map = self.engine_input.actor_map
        return frozenset(
            actor_id for actor_id in self.engine_input.friendly_actor_ids
            if actor_id in actor_map and not actor_map[actor_id].is_pet
        )

    def owned_pets(self, owner_ids: Iterable[int]) -> set[int]:
        owners = set(owner_ids)
        return {
            actor.id for actor in self.engine_input.actor_map.values()
            if actor.is_pet
            and actor.owner_id in owners
            and actor.id in self.engine_input.friendly_actor_ids
        }

    def merged_initial_auras(self) -> dict[int, list[int]]:
        merged = {actor_id: set(auras) for actor_id, auras in self.initial_auras.items()}
        for actor_id, auras in self.aura_additions.items():
            merged.setdefault(actor_id, set()).update(auras)
        return {actor_id: sorted(auras) for actor_id, auras in sorted(merged.items())}


class FightProcessor:
    """Base processor; subclasses override the hooks they need."""

    name = ""

    def visit(self, event: dict, ctx: ProcessorContext) -> None:
        pass

    def finalize(self, ctx: ProcessorContext) -> None:
        pass

    def before_state(
        self, event: dict, ctx: ProcessorContext, view: FightView,
    ) -> list[AuraMutation]:
        return []


class InferInitialSalvation(FightProcessor):
    """Seed Salvation on players whose first Salvation event is a refresh or removal."""

    name = "infer-initial-salvation"

    def __init__(self):
        self._first_seen: dict[tuple[int, int], str] = {}

    def visit(self, event: dict, ctx: ProcessorContext) -> None:
        event_type = event.get("type")
        spell_id = ability_id(event)
        target_id = event.get("targetID")
        if (
            event_type not in SALVATION_EVENT_TYPES
            or spell_id not in SALVATION_IDS
            or target_id not in ctx.friendly_players
        ):
            return
        self._first_seen.setdefault((target_id, spell_id), event_type)

    def finalize(self, ctx: ProcessorContext) -> None:
        for (actor_id, spell_id), first_type in sorted(self._first_seen.items()):
            if first_type != "applybuff":
                logger.debug("Inferred initial Salvation %d on actor %d", spell_id, actor_id)
                ctx.add_initial_aura(actor_id, spell_id)


class MinmaxSalvation(FightProcessor):
    """Assume every non-tank gets Greater Salvation when a paladin has a blessing to spare.

    A player counts as covered when they already carry Salvation, or when
    they hold at least one long-term blessing per paladin in the raid.
    """

    name = "minmax-salvation"

    def __init__(self):
        self._combatant_auras: dict[int, set[int]] = {}

    def visit(self, event: dict, ctx: ProcessorContext) -> None:
        if event.get("type") != "combatantinfo":
            return
        actor_id = event.get("sourceID")
        if actor_id is not None:
            self._combatant_auras.setdefault(actor_id, set()).update(parse_aura_ids(event))

    def finalize(self, ctx: ProcessorContext) -> None:
        players = sorted(ctx.friendly_players)
        actor_map = ctx.engine_input.actor_map
        paladins = sum(1 for actor_id in players if actor_map[actor_id].wow_class == "paladin")
        if paladins == 0:
            return

        for actor_id in players:
            if actor_id in ctx.tank_actor_ids:
                continue
            auras = {
                *ctx.initial_auras.get(actor_id, ()),
                *ctx.aura_additions.get(actor_id, ()),
                *self._combatant_auras.get(actor_id, ()),
            }
            if auras & SALVATION_IDS:
                continue
            if len(auras & LONG_TERM_BLESSING_IDS) >= paladins:
                continue
            ctx.add_initial_aura(actor_id, GREATER_BLESSING_OF_SALVATION)


class _DisjointSet:
    def __init__(self, actor_ids: Iterable[int]):
        self._parent = {actor_id: actor_id for actor_id in actor_ids}
        self._size = dict.fromkeys(self._parent, 1)

    def find(self, actor_id: int) -> int:
        parent = self._parent.setdefault(actor_id, actor_id)
        if parent == actor_id:
            return actor_id
        root = self.find(parent)
        self._parent[actor_id] = root
        return root

    def can_merge(self, actor_ids: Iterable[int]) -> bool:
        roots = {self.find(actor_id) for actor_id in actor_ids}
        return sum(self._size.get(root, 1) for root in roots) <= MAX_PARTY_SIZE

    def union(self, left: int, right: int) -> None:
        left_root, right_root = self.find(left), self.find(right)
        if left_root == right_root:
            return
        if self._size.get(left_root, 1) < self._size.get(right_root, 1):
            left_root, right_root = right_root, left_root
        self._parent[right_root] = left_root
        self._size[left_root] = self._size.get(left_root, 1) + self._size.pop(right_root, 1)


class PartyDetection(FightProcessor):
    """Infer party groups from spells that only hit the caster's party."""

    name = "party-detection"

    def __init__(self):
        self._observations: dict[tuple, set[int]] = {}

    def visit(self, event: dict, ctx: ProcessorContext) -> None:
        spell_id = ability_id(event)
        event_types = PARTY_SIGNALS.get(spell_id) if spell_id is not None else None
        if event_types is None or event.get("type") not in event_types:
            return
        target_id = event.get("targetID")
        if target_id not in ctx.engine_input.friendly_actor_ids:
            return
        key = (event.get("sourceID"), source_instance(event), spell_id, number(event, "timestamp"))
        self._observations.setdefault(key, set()).add(target_id)

    def finalize(self, ctx: ProcessorContext) -> None:
        players = sorted(ctx.friendly_players)
        if not players:
            return
        base = set(players)
        groups = _DisjointSet(players)
        for targets in self._observations.values():
            members = sorted(targets & base)
            if not 2 <= len(members) <= MAX_PARTY_SIZE or not groups.can_merge(members):
                continue
            first, *rest = members
            for actor_id in rest:
                groups.union(first, actor_id)

        by_root: dict[int, set[int]] = {}
        for actor_id in players:
            by_root.setdefault(groups.find(actor_id), set()).add(actor_id)

        party = PartyAssignments()
        for group_id, members in enumerate(sorted(by_root.values(), key=min), start=1):
            party.members_by_group[group_id] = members
            for actor_id in members:
                party.group_by_actor[actor_id] = group_id

        for pet_id in sorted(ctx.owned_pets(players)):
            owner_group = party.group_by_actor.get(ctx.engine_input.actor_map[pet_id].owner_id)
            if owner_group is not None:
                party.group_by_actor[pet_id] = owner_group
                party.members_by_group[owner_group].add(pet_id)

        next_group = len(party.members_by_group) + 1
        for actor_id in sorted(ctx.engine_input.friendly_actor_ids - set(party.group_by_actor)):
            party.group_by_actor[actor_id] = next_group
            party.members_by_group[next_group] = {actor_id}
            next_group += 1

        logger.debug("Detected %d party groups", len(party.members_by_group))
        ctx.party = party


def _distance(left: tuple[float, float], right: tuple[float, float]) -> float:
    return math.hypot(right[0] - left[0], right[1] - left[1])


class TranquilAirEmulation(FightProcessor):
    """Apply Tranquil Air to party members in range when the totem is summoned.

    The log never shows the buff, so each summon recomputes the shaman's
    recipients. An actor covered by two shamans keeps the buff until both
    stop covering it.
    """

    name = "tranquil-air-emulation"

    def __init__(self):
        self._recipients: dict[int, set[int]] = {}
        self._source_counts: dict[int, int] = {}
        self._cast_positions: dict[tuple[int, int], tuple[float, tuple[float, float]]] = {}

    def before_state(
        self, event: dict, ctx: ProcessorContext, view: FightView,
    ) -> list[AuraMutation]:
        if ability_id(event) != TRANQUIL_AIR_TOTEM:
            return []
        source_id = event.get("sourceID")
        if source_id not in ctx.engine_input.friendly_actor_ids:
            return []
        key = (source_id, source_instance(event))

        if event.get("type") == "cast":
            if isinstance(event.get("x"), (int, float)) and isinstance(event.get("y"), (int, float)):
                self._cast_positions[key] = (number(event, "timestamp"), (event["x"], event["y"]))
            return []
        if event.get("type") != "summon":
            return []

        previous = self._recipients.get(source_id, set())
        recorded = self._cast_positions.pop(key, None)
        if recorded is not None and number(event, "timestamp") - recorded[0] <= CAST_POSITION_MAX_AGE_MS:
            origin = recorded[1]
        else:
            origin = view.position(source_id, key[1])

        if origin is None:
            recipients = previous | {source_id} | ctx.owned_pets([source_id])
        else:
            recipients = {
                actor_id for actor_id in self._candidates(source_id, ctx)
                if actor_id == source_id or self._in_range(actor_id, origin, ctx, view)
            }

        added = sorted(self._add(recipients - previous))
        removed = sorted(self._remove(previous - recipients))
        self._recipients[source_id] = recipients

        mutations = []
        if removed:
            mutations.append(AuraMutation("remove", TRANQUIL_AIR_BUFF, tuple(removed)))
        if added:
            mutations.append(AuraMutation("apply", TRANQUIL_AIR_BUFF, tuple(added)))
        return mutations

    def _candidates(self, source_id: int, ctx: ProcessorContext) -> set[int]:
        candidates = ctx.party.members_of(source_id) if ctx.party is not None else set()
        candidates.add(source_id)
        candidates |= ctx.owned_pets(candidates)
        return candidates & ctx.engine_input.friendly_actor_ids

    @staticmethod
    def _in_range(
        actor_id: int, origin: tuple[float, float], ctx: ProcessorContext, view: FightView,
    ) -> bool:
        position = view.position(actor_id)
        if position is None:
            owner = ctx.engine_input.actor_map.get(actor_id)
            if owner is None or owner.owner_id is None:
                return False
            position = view.position(owner.owner_id)
            if position is None:
                return False
        return _distance(origin, position) <= TRANQUIL_AIR_RANGE

    def _add(self, actor_ids: set[int]) -> list[int]:
        added = []
        for actor_id in actor_ids:
            count = self._source_counts.get(actor_id, 0)
            self._source_counts[actor_id] = count + 1
            if count == 0:
                added.append(actor_id)
        return added

    def _remove(self, actor_ids: set[int]) -> list[int]:
        removed = []
        for actor_id in actor_ids:
            count = self._source_counts.get(actor_id, 0)
            if count <= 1:
                self._source_counts.pop(actor_id, None)
                removed.append(actor_id)
            else:
                self._source_counts[actor_id] = count - 1
        return removed


def build_processors(infer_threat_reduction: bool = False) -> list[FightProcessor]:
    """The built-in processors, in run order."""
    processors: list[FightProcessor] = [InferInitialSalvation()]
    if infer_threat_reduction:
        processors += [MinmaxSalvation(), PartyDetection(), TranquilAirEmulation()]
    return processors


def run_prepass(
    events: list[dict], processors: list[FightProcessor], ctx: ProcessorContext,
) -> dict[int, list[int]]:
    """Visit every event once, finalize, and return the merged initial auras."""
    for event in events:
        for processor in processors:
            processor.visit(event, ctx)
    for processor in processors:
        processor.finalize(ctx)
    if ctx.aura_additions:
        logger.info(
            "Preprocessors seeded %d initial auras across %d actors",
            sum(len(auras) for auras in ctx.aura_additions.values()), len(ctx.aura_additions),
        )
    return ctx.merged_initial_auras()


def normalize_initial_auras(
    initial_auras: Mapping[int | str, Iterable[int]] | None,
) -> dict[int, frozenset[int]]:
    return {int(actor_id): frozenset(auras) for actor_id, auras in (initial_auras or {}).items()}
