"""Threat formula descriptors used by the rule tables.

Each descriptor is an immutable dataclass; calling it with a ThreatContext
returns a ThreatFormulaResult, or None when the event type is gated out
(the event then generates no threat from that ability).
"""

from dataclasses import dataclass

from tekii.engine.interceptors import (
    EXPLOSIVE_TRAP_EFFECT_IDS,
    DelayedThreatWipeInterceptor,
    MisdirectionInterceptor,
)
from tekii.engine.types import (
    CustomThreat,
    EventMarker,
    InstallInterceptor,
    ModifyThreat,
    Taunt,
    ThreatChangeRequest,
    ThreatContext,
    ThreatFormulaResult,
)
from tekii.wcl.events import BUFF_APPLY_TYPES, DEBUFF_APPLY_TYPES, hit_type_name

TAUNT_EVENT_TYPES = BUFF_APPLY_TYPES + DEBUFF_APPLY_TYPES
MISSED_HIT_TYPES = frozenset({"miss", "dodge", "parry", "immune", "resist"})
LANDED_HIT_TYPES = frozenset({
    "hit", "crit", "block", "crit_block", "glancing", "crushing", "immune", "resist",
})


def fmt(value: float) -> str:
    """Render a number the way formula strings show it (301, 0.5, -150)."""
    return f"{value:g}"


def event_type_allowed(ctx: ThreatContext, event_types: tuple[str, ...] | None) -> bool:
    return not event_types or ctx.event_type in event_types


def is_missed(ctx: ThreatContext) -> bool:
    return hit_type_name(ctx.event) in MISSED_HIT_TYPES


@dataclass(frozen=True)
class CalculateThreat:
    """(amount * modifier) + bonus."""

    modifier: float = 1
    bonus: float = 0
    split: bool = False
    event_types: tuple[str, ...] | None = None
    apply_player_multipliers: bool | None = None

    def describe(self) -> str:
        if self.modifier == 0:
            return fmt(self.bonus)
        if self.modifier == 1:
            return "amt" if self.bonus == 0 else f"amt + {fmt(self.bonus)}"
        if self.bonus == 0:
            return f"amt * {fmt(self.modifier)}"
        return f"(amt * {fmt(self.modifier)}) + {fmt(self.bonus)}"

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if not event_type_allowed(ctx, self.event_types):
            return None
        return ThreatFormulaResult(
            formula=self.describe(),
            value=ctx.amount * self.modifier + self.bonus,
            split_among_enemies=self.split,
            apply_player_multipliers=self.apply_player_multipliers,
        )


def threat_on_buff(value: float, split: bool = True) -> CalculateThreat:
    return CalculateThreat(modifier=0, bonus=value, split=split, event_types=BUFF_APPLY_TYPES)


def threat_on_debuff(value: float) -> CalculateThreat:
    return CalculateThreat(modifier=0, bonus=value, event_types=DEBUFF_APPLY_TYPES)


@dataclass(frozen=True)
class NoThreat:
    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult:
        return ThreatFormulaResult(formula="0", value=0)


@dataclass(frozen=True)
class TauntTarget:
    """Raise the source to top threat + ((amount * modifier) + bonus) on the target."""

    bonus: float = 0
    modifier: float = 0
    event_types: tuple[str, ...] = TAUNT_EVENT_TYPES

    def describe(self) -> str:
        if self.modifier == 0:
            return f"topThreat + {fmt(self.bonus)}"
        amount = "amt" if self.modifier == 1 else f"(amt * {fmt(self.modifier)})"
        if self.bonus == 0:
            return f"topThreat + {amount}"
        return f"topThreat + {amount} + {fmt(self.bonus)}"

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if not event_type_allowed(ctx, self.event_types):
            return None
        return ThreatFormulaResult(
            formula=self.describe(),
            value=0,
            specials=(Taunt(bonus=ctx.amount * self.modifier + self.bonus),),
        )


@dataclass(frozen=True)
class ModifyThreatFormula:
    """Multiply existing threat: 0 wipes it (Vanish, Feign Death)."""

    multiplier: float
    target: str = "target"
    event_types: tuple[str, ...] | None = None

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if not event_type_allowed(ctx, self.event_types):
            return None
        formula = "threatWipe" if self.multiplier == 0 else f"threat * {fmt(self.multiplier)}"
        return ThreatFormulaResult(
            formula=formula,
            value=0,
            specials=(ModifyThreat(multiplier=self.multiplier, target=self.target),),
        )


@dataclass(frozen=True)
class ModifyThreatOnHit:
    """Knock-away style drops: only damage events that landed modify threat."""

    multiplier: float

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if ctx.event_type != "damage" or not _landed(ctx):
            return None
        return ModifyThreatFormula(self.multiplier)(ctx)


@dataclass(frozen=True)
class ThreatOnCastRollbackOnMiss:
    """Flat threat on cast, reverted when the follow-up damage event misses."""

    value: float
    apply_player_multipliers: bool | None = None

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if ctx.event_type == "cast":
            value, formula = self.value, f"{fmt(self.value)} (cast)"
        elif ctx.event_type == "damage" and is_missed(ctx):
            value, formula = -self.value, f"{fmt(-self.value)} (miss rollback)"
        else:
            return None
        return ThreatFormulaResult(
            formula=formula,
            value=value,
            apply_player_multipliers=self.apply_player_multipliers,
        )


@dataclass(frozen=True)
class ThreatOnSuccessfulHit:
    modifier: float = 1
    bonus: float = 0

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if ctx.event_type != "damage" or is_missed(ctx):
            return None
        return CalculateThreat(modifier=self.modifier, bonus=self.bonus)(ctx)


def _landed(ctx: ThreatContext) -> bool:
    hit_type = ctx.event.get("hitType")
    if isinstance(hit_type, int) and not isinstance(hit_type, bool):
        return 0 < hit_type <= 6
    name = hit_type_name(ctx.event)
    if name is not None:
        return name in LANDED_HIT_TYPES
    return ctx.amount > 0


@dataclass(frozen=True)
class HatefulStrike:
    """Fixed threat to the boss's current tank and to the struck target.

    The current tank is the enemy's last melee target, falling back to the
    top of its threat table.
    """

    main_tank_threat: float
    off_tank_threat: float

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if ctx.event_type != "damage" or not _landed(ctx):
            return None

        enemy_id = ctx.event.get("sourceID")
        enemy_instance = ctx.event.get("sourceInstance") or 0
        if enemy_id is None:
            return None

        main_tank = ctx.view.current_target(enemy_id, enemy_instance)
        if main_tank is None:
            top = ctx.view.top_actors_by_threat(enemy_id, enemy_instance, 1)
            main_tank = top[0][0] if top else None

        changes = []
        if main_tank is not None and main_tank > 0 and self.main_tank_threat:
            changes.append(ThreatChangeRequest(
                main_tank, enemy_id, enemy_instance, "add", self.main_tank_threat,
            ))
        off_tank = ctx.event.get("targetID") or 0
        if off_tank > 0 and self.off_tank_threat:
            changes.append(ThreatChangeRequest(
                off_tank, enemy_id, enemy_instance, "add", self.off_tank_threat,
            ))
        if not changes:
            return None

        return ThreatFormulaResult(
            formula=f"hatefulStrike(main={fmt(self.main_tank_threat)}, off={fmt(self.off_tank_threat)})",
            value=0,
            specials=(CustomThreat(changes=tuple(changes)),),
        )


@dataclass(frozen=True)
class InstallMisdirection:
    """Misdirection cast: the next damage charges credit the cast target."""

    charges: int = 3
    window_ms: int = 30000
    overflow_spell_ids: tuple[int, ...] = EXPLOSIVE_TRAP_EFFECT_IDS

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        target_id = ctx.event.get("targetID")
        if ctx.event_type != "cast" or target_id is None:
            return None
        record = MisdirectionInterceptor(
            source_id=ctx.source_actor.id,
            target_id=target_id,
            charges=self.charges,
            window_ms=self.window_ms,
            overflow_spell_ids=self.overflow_spell_ids,
        )
        return ThreatFormulaResult(
            formula="0",
            value=0,
            specials=(InstallInterceptor(interceptor=record),),
        )


@dataclass(frozen=True)
class NightbaneRainOfBones:
    """Immediate table wipe on cast, then a second wipe once Nightbane lands."""

    delay_ms: int = 43000

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        enemy_id = ctx.event.get("sourceID")
        if ctx.event_type != "cast" or enemy_id is None:
            return None
        record = DelayedThreatWipeInterceptor(
            enemy_id=enemy_id,
            enemy_instance=ctx.event.get("sourceInstance") or 0,
            delay_ms=self.delay_ms,
        )
        return ThreatFormulaResult(
            formula=f"threatWipe + delayedLandingWipe({self.delay_ms // 1000}s)",
            value=0,
            specials=(
                ModifyThreat(multiplier=0, target="all"),
                InstallInterceptor(interceptor=record),
            ),
        )


@dataclass(frozen=True)
class MarkEvent:
    """No threat; tags the event with a chart marker."""

    marker: str
    event_types: tuple[str, ...] = ("summon",)

    def __call__(self, ctx: ThreatContext) -> ThreatFormulaResult | None:
        if not event_type_allowed(ctx, self.event_types):
            return None
        return ThreatFormulaResult(
            formula="0",
            value=0,
            specials=(EventMarker(marker=self.marker),),
            note=f"{self.marker}(marker)",
        )
