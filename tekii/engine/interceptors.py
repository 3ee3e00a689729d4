"""Effect interceptors: installed, stateful hooks that rewrite later events.

Interceptors are plain value records. A fixed dispatcher keyed on `kind`
evaluates them, so the registry can be snapshotted to dicts and restored.
A handler returns its result plus the updated record, or None when the
record should be uninstalled.
"""

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar, Literal

from pydantic.alias_generators import to_camel, to_snake

from tekii.engine.types import CustomThreat, FightView, ThreatChangeRequest, ThreatSpecial
from tekii.wcl.events import number, target_instance

logger = logging.getLogger(__name__)

InterceptorAction = Literal["passthrough", "skip", "augment"]

# Explosive Trap effect ranks. A final Misdirection charge spent on one of
# these still redirects every other hit landing at the same timestamp.
EXPLOSIVE_TRAP_EFFECT_IDS: tuple[int, ...] = (13812, 14314, 14315, 27025)


@dataclass(frozen=True, kw_only=True)
class InterceptorRecord:
    kind: ClassVar[str] = ""
    installed_at: float = 0
    interceptor_id: str = ""

    def to_dict(self) -> dict:
        data = {
            to_camel(k): list(v) if isinstance(v, tuple) else v
            for k, v in dataclasses.asdict(self).items()
        }
        return {"kind": self.kind, **data}


@dataclass(frozen=True, kw_only=True)
class MisdirectionInterceptor(InterceptorRecord):
    """Redirects the hunter's next damage threat to an ally."""

    kind: ClassVar[str] = "misdirection"
    source_id: int
    target_id: int
    charges: int = 3
    window_ms: int = 30000
    overflow_spell_ids: tuple[int, ...] = EXPLOSIVE_TRAP_EFFECT_IDS
    overflow_ability_id: int | None = None
    overflow_timestamp: float | None = None


@dataclass(frozen=True, kw_only=True)
class DelayedThreatWipeInterceptor(InterceptorRecord):
    """Wipes an enemy's table on the first friendly action after a delay."""

    kind: ClassVar[str] = "delayedThreatWipe"
    enemy_id: int
    enemy_instance: int = 0
    delay_ms: int


@dataclass(frozen=True)
class InterceptorResult:
    action: InterceptorAction
    threat_recipient_override: int | None = None
    specials: tuple[ThreatSpecial, ...] = ()


PASSTHROUGH = InterceptorResult(action="passthrough")

Handler = Callable[
    [InterceptorRecord, dict, FightView],
    tuple[InterceptorResult, InterceptorRecord | None],
]


def _is_hunter_hit(record: MisdirectionInterceptor, event: dict) -> bool:
    return (
        event.get("type") == "damage"
        and event.get("sourceID") == record.source_id
        and not event.get("tick")
    )


def _redirect(record: MisdirectionInterceptor, view: FightView) -> InterceptorResult:
    # A dead target still burns the charge.
    if not view.is_alive(record.target_id):
        return PASSTHROUGH
    return InterceptorResult(action="augment", threat_recipient_override=record.target_id)


def _evaluate_misdirection(
    record: MisdirectionInterceptor, event: dict, view: FightView,
) -> tuple[InterceptorResult, InterceptorRecord | None]:
    timestamp = number(event, "timestamp")
    if timestamp - record.installed_at > record.window_ms:
        return PASSTHROUGH, None

    if record.overflow_timestamp is not None:
        if timestamp > record.overflow_timestamp:
            return PASSTHROUGH, None
        if (
            _is_hunter_hit(record, event)
            and event.get("abilityGameID") == record.overflow_ability_id
            and timestamp == record.overflow_timestamp
        ):
            return _redirect(record, view), record
        return PASSTHROUGH, record

    if not _is_hunter_hit(record, event):
        return PASSTHROUGH, record

    remaining = record.charges - 1
    if remaining > 0:
        updated = dataclasses.replace(record, charges=remaining)
    elif event.get("abilityGameID") in record.overflow_spell_ids:
        updated = dataclasses.replace(
            record,
            charges=0,
            overflow_ability_id=event.get("abilityGameID"),
            overflow_timestamp=timestamp,
        )
    else:
        updated = None

    return _redirect(record, view), updated


def _evaluate_delayed_wipe(
    record: DelayedThreatWipeInterceptor, event: dict, view: FightView,
) -> tuple[InterceptorResult, InterceptorRecord | None]:
    if number(event, "timestamp") - record.installed_at < record.delay_ms:
        return PASSTHROUGH, record

    if not event.get("sourceIsFriendly"):
        return PASSTHROUGH, record
    if event.get("targetID") != record.enemy_id or target_instance(event) != record.enemy_instance:
        return PASSTHROUGH, record

    table = view.threat_on_enemy(record.enemy_id, record.enemy_instance)
    if not table:
        return PASSTHROUGH, None

    changes = tuple(
        ThreatChangeRequest(actor_id, record.enemy_id, record.enemy_instance, "set", 0)
        for actor_id in table
    )
    return InterceptorResult(action="augment", specials=(CustomThreat(changes=changes),)), None


_HANDLERS: dict[str, Handler] = {
    MisdirectionInterceptor.kind: _evaluate_misdirection,
    DelayedThreatWipeInterceptor.kind: _evaluate_delayed_wipe,
}
_RECORD_TYPES: dict[str, type[InterceptorRecord]] = {
    MisdirectionInterceptor.kind: MisdirectionInterceptor,
    DelayedThreatWipeInterceptor.kind: DelayedThreatWipeInterceptor,
}


def interceptor_from_dict(data: dict) -> InterceptorRecord:
    kind = data.get("kind")
    record_type = _RECORD_TYPES.get(kind)
    if record_type is None:
        raise ValueError(f"Unknown interceptor kind: {kind!r}")
    fields = {f.name for f in dataclasses.fields(record_type)}
    kwargs = {
        to_snake(key): tuple(value) if isinstance(value, list) else value
        for key, value in data.items()
        if key != "kind" and to_snake(key) in fields
    }
    return record_type(**kwargs)


class InterceptorRegistry:
    """Installed interceptors, evaluated in install order."""

    def __init__(self):
        self._records: dict[str, InterceptorRecord] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[InterceptorRecord]:
        return list(self._records.values())

    def install(self, record: InterceptorRecord, timestamp: float) -> str:
        interceptor_id = f"interceptor-{self._next_id}"
        self._next_id += 1
        self._records[interceptor_id] = dataclasses.replace(
            record, installed_at=timestamp, interceptor_id=interceptor_id,
        )
        logger.debug("Installed %s interceptor %s at %s", record.kind, interceptor_id, timestamp)
        return interceptor_id

    def uninstall(self, interceptor_id: str) -> None:
        if self._records.pop(interceptor_id, None) is not None:
            logger.debug("Uninstalled interceptor %s", interceptor_id)

    def evaluate(self, event: dict, view: FightView) -> list[InterceptorResult]:
        results = []
        for interceptor_id, record in list(self._records.items()):
            handler = _HANDLERS[record.kind]
            result, updated = handler(record, event, view)
            if updated is None:
                self.uninstall(interceptor_id)
            else:
                self._records[interceptor_id] = updated
            results.append(result)
        return results

    def snapshot(self) -> list[dict]:
        return [record.to_dict() for record in self._records.values()]

    @classmethod
    def from_snapshot(cls, snapshot: list[dict] | None) -> "InterceptorRegistry":
        registry = cls()
        for data in snapshot or []:
            record = interceptor_from_dict(data)
            if not record.interceptor_id:
                record = dataclasses.replace(
                    record, interceptor_id=f"interceptor-{registry._next_id}",
                )
            registry._records[record.interceptor_id] = record
            _, _, suffix = record.interceptor_id.rpartition("-")
            if suffix.isdigit():
                registry._next_id = max(registry._next_id, int(suffix) + 1)
            else:
                registry._next_id += 1
        return registry
