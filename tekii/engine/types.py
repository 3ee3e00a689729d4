"""Value types shared by the threat engine and the rule tables."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, Protocol

ThreatOperator = Literal["add", "set"]
ThreatStateKind = Literal["fixate", "aggroLoss", "invulnerable"]
ThreatStatePhase = Literal["start", "end"]


class SpellSchool:
    PHYSICAL = 1
    HOLY = 2
    FIRE = 4
    NATURE = 8
    FROST = 16
    SHADOW = 32
    ARCANE = 64


@dataclass(frozen=True)
class Actor:
    id: int
    name: str
    wow_class: str | None = None
    is_pet: bool = False
    owner_id: int | None = None


@dataclass(frozen=True)
class Enemy:
    id: int
    name: str
    instance: int = 0
    game_id: int = 0


@dataclass(frozen=True)
class ThreatModifier:
    source: str  # "class", "talent", "buff", "debuff", "gear", "stance", "aura"
    name: str
    value: float
    spell_ids: frozenset[int] | None = None
    schools: frozenset[int] | None = None

    def to_dict(self) -> dict:
        return {"source": self.source, "name": self.name, "value": self.value}


@dataclass(frozen=True)
class ThreatChange:
    source_id: int
    target_id: int
    target_instance: int
    operator: ThreatOperator
    amount: float
    total: float

    def to_dict(self) -> dict:
        return {
            "sourceId": self.source_id,
            "targetId": self.target_id,
            "targetInstance": self.target_instance,
            "operator": self.operator,
            "amount": self.amount,
            "total": self.total,
        }


@dataclass(frozen=True)
class ThreatChangeRequest:
    source_id: int
    target_id: int
    target_instance: int
    operator: ThreatOperator
    amount: float

    def to_dict(self) -> dict:
        return {
            "sourceId": self.source_id,
            "targetId": self.target_id,
            "targetInstance": self.target_instance,
            "operator": self.operator,
            "amount": self.amount,
        }


# ---------------------------------------------------------------------------
# Specials
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Taunt:
    """Fixate: raise the source to the top of the target enemy's table plus a bonus."""

    type: ClassVar[str] = "taunt"
    bonus: float = 0

    def to_dict(self) -> dict:
        return {"type": self.type, "bonus": self.bonus}


@dataclass(frozen=True)
class ModifyThreat:
    type: ClassVar[str] = "modifyThreat"
    multiplier: float
    target: Literal["target", "all"] = "target"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "multiplier": self.multiplier,
            "target": self.target,
        }


@dataclass(frozen=True)
class CustomThreat:
    type: ClassVar[str] = "customThreat"
    changes: tuple[ThreatChangeRequest, ...] = ()

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "changes": [c.to_dict() for c in self.changes],
        }


@dataclass(frozen=True)
class InstallInterceptor:
    type: ClassVar[str] = "installInterceptor"
    interceptor: Any  # an interceptors.InterceptorRecord

    def to_dict(self) -> dict:
        return {"type": self.type, "kind": self.interceptor.kind}


@dataclass(frozen=True)
class ThreatState:
    type: ClassVar[str] = "state"
    kind: ThreatStateKind
    phase: ThreatStatePhase
    spell_id: int
    actor_id: int
    target_id: int | None = None
    target_instance: int | None = None
    name: str | None = None

    def to_dict(self) -> dict:
        state = {
            "kind": self.kind,
            "phase": self.phase,
            "spellId": self.spell_id,
            "actorId": self.actor_id,
        }
        if self.target_id is not None:
            state["targetId"] = self.target_id
            state["targetInstance"] = self.target_instance or 0
        if self.name is not None:
            state["name"] = self.name
        return {"type": self.type, "state": state}


@dataclass(frozen=True)
class EventMarker:
    """A chart annotation with no threat effect."""

    type: ClassVar[str] = "eventMarker"
    marker: str

    def to_dict(self) -> dict:
        return {"type": self.type, "marker": self.marker}


@dataclass(frozen=True)
class AuraMutation:
    """An inferred aura change the engine applies before the event is scored."""

    type: ClassVar[str] = "auraMutation"
    action: Literal["apply", "remove"]
    spell_id: int
    actor_ids: tuple[int, ...]

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "action": self.action,
            "spellId": self.spell_id,
            "actorIds": list(self.actor_ids),
        }


ThreatSpecial = (
    Taunt | ModifyThreat | CustomThreat | InstallInterceptor | ThreatState | EventMarker | AuraMutation
)


@dataclass(frozen=True)
class ThreatFormulaResult:
    formula: str
    value: float
    split_among_enemies: bool = False
    specials: tuple[ThreatSpecial, ...] = ()
    # None = default (on for everything except resource events)
    apply_player_multipliers: bool | None = None
    note: str | None = None


ZERO_RESULT = ThreatFormulaResult(formula="0", value=0)


class FightView(Protocol):
    """Read-only fight state that formulas and interceptors may consult."""

    def get_threat(self, actor_id: int, enemy_id: int, enemy_instance: int = 0) -> float: ...

    def top_actors_by_threat(
        self, enemy_id: int, enemy_instance: int = 0, count: int = 1,
    ) -> list[tuple[int, float]]: ...

    def threat_on_enemy(self, enemy_id: int, enemy_instance: int = 0) -> dict[int, float]: ...

    def current_target(self, enemy_id: int, enemy_instance: int = 0) -> int | None: ...

    def is_alive(self, actor_id: int, instance: int = 0) -> bool: ...

    def position(self, actor_id: int, instance: int = 0) -> tuple[float, float] | None: ...


@dataclass(frozen=True)
class ThreatContext:
    event: dict
    amount: float
    source_actor: Actor
    target_actor: Actor
    source_auras: frozenset[int]
    target_auras: frozenset[int]
    view: FightView
    spell_school: int = 0
    encounter_id: int | None = None

    @property
    def event_type(self) -> str:
        return self.event.get("type", "")

    @property
    def ability_id(self) -> int | None:
        value = self.event.get("abilityGameID")
        return value if isinstance(value, int) else None


ThreatFormula = Callable[[ThreatContext], ThreatFormulaResult | None]
AuraModifier = ThreatModifier | Callable[[ThreatContext], ThreatModifier]
# Built once per run for the fight's encounter; may keep state across events.
EncounterHook = Callable[[ThreatContext], tuple[ThreatSpecial, ...]]
EncounterPreprocessor = Callable[[int, tuple[Enemy, ...]], EncounterHook]


@dataclass(frozen=True)
class TalentContext:
    source_actor: Actor
    talent_points: tuple[int, ...] = ()
    talent_ranks: Mapping[int, int] = field(default_factory=dict)


GearImplication = Callable[[list[dict]], list[int]]
TalentImplication = Callable[[TalentContext], list[int]]


@dataclass(frozen=True)
class BaseThreatConfig:
    damage: ThreatFormula
    heal: ThreatFormula
    energize: ThreatFormula


@dataclass(frozen=True)
class ClassThreatConfig:
    abilities: Mapping[int, ThreatFormula] = field(default_factory=dict)
    aura_modifiers: Mapping[int, AuraModifier] = field(default_factory=dict)
    exclusive_auras: tuple[frozenset[int], ...] = ()
    base_threat_factor: float = 1.0
    fixate_buffs: frozenset[int] = frozenset()
    aggro_loss_buffs: frozenset[int] = frozenset()
    invulnerability_buffs: frozenset[int] = frozenset()
    # aura id -> abilities that can only be cast while it is active
    aura_implications: Mapping[int, frozenset[int]] = field(default_factory=dict)
    gear_implications: GearImplication | None = None
    talent_implications: TalentImplication | None = None


@dataclass(frozen=True)
class ConfigResolutionInput:
    game_version: int
    report_start_time: int = 0
    zone_partitions: tuple[str, ...] = ()
    season_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ThreatConfig:
    key: str
    display_name: str
    version: str
    resolve: Callable[[ConfigResolutionInput], bool]
    base_threat: BaseThreatConfig
    classes: Mapping[str, ClassThreatConfig] = field(default_factory=dict)
    abilities: Mapping[int, ThreatFormula] = field(default_factory=dict)
    aura_modifiers: Mapping[int, AuraModifier] = field(default_factory=dict)
    exclusive_auras: tuple[frozenset[int], ...] = ()
    fixate_buffs: frozenset[int] = frozenset()
    aggro_loss_buffs: frozenset[int] = frozenset()
    invulnerability_buffs: frozenset[int] = frozenset()
    gear_implications: GearImplication | None = None
    untauntable_enemies: frozenset[int] = frozenset()
    encounters: Mapping[int, EncounterPreprocessor] = field(default_factory=dict)


@dataclass
class ThreatCalculation:
    formula: str
    amount: float
    base_threat: float
    modified_threat: float
    is_split: bool
    modifiers: list[ThreatModifier] = field(default_factory=list)
    specials: list[ThreatSpecial] = field(default_factory=list)
    note: str | None = None

    def to_dict(self) -> dict:
        calculation = {
            "formula": self.formula,
            "amount": self.amount,
            "baseThreat": self.base_threat,
            "modifiedThreat": self.modified_threat,
            "isSplit": self.is_split,
            "modifiers": [m.to_dict() for m in self.modifiers],
        }
        if self.specials:
            calculation["specials"] = [s.to_dict() for s in self.specials]
        if self.note is not None:
            calculation["note"] = self.note
        return calculation
