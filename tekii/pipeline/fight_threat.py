"""Collect a fight's event pages and run the threat engine off the event loop."""

import asyncio
import logging
from collections.abc import AsyncIterable, Iterable, Mapping
from functools import partial

from tekii.config import Settings, get_settings
from tekii.configs.resolver import (
    ThreatConfigNotFoundError,
    build_resolution_input,
    resolve_config_or_none,
)
from tekii.engine.input import build_engine_input
from tekii.engine.processor import ProcessEventsResult, process_events
from tekii.engine.types import ThreatConfig
from tekii.wcl.events import sort_events
from tekii.wcl.models import EventPage, Report

logger = logging.getLogger(__name__)


class ComputationCancelledError(Exception):
    """Raised when a threat computation is cancelled before it completes."""


def _check_cancelled(cancel_event: asyncio.Event | None, report_code: str, fight_id: int) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ComputationCancelledError(
            f"Threat computation for {report_code or '<unknown>'} fight {fight_id} was cancelled"
        )


async def collect_events(
    pages: AsyncIterable[EventPage],
    *,
    max_pages: int,
    cancel_event: asyncio.Event | None = None,
    report_code: str = "",
    fight_id: int = 0,
) -> list[dict]:
    """Concatenate event pages, honouring cancellation between pages.

    Raises:
        ComputationCancelledError: If cancel_event is set before a page is read.
    """
    events: list[dict] = []
    page_count = 0
    iterator = aiter(pages)
    while True:
        _check_cancelled(cancel_event, report_code, fight_id)
        try:
            page = await anext(iterator)
        except StopAsyncIteration:
            break
        events.extend(page.data)
        page_count += 1
        if page_count >= max_pages:
            logger.warning(
                "Max pages (%d) reached for %s fight %d, stopping with %d events",
                max_pages, report_code, fight_id, len(events),
            )
            break

    logger.debug(
        "Collected %d events for %s fight %d in %d pages",
        len(events), report_code, fight_id, page_count,
    )
    return sort_events(events)


async def compute_fight_threat(
    report: Report,
    fight_id: int,
    pages: AsyncIterable[EventPage],
    *,
    config: ThreatConfig | None = None,
    settings: Settings | None = None,
    cancel_event: asyncio.Event | None = None,
    initial_auras: Mapping[int | str, Iterable[int]] | None = None,
    tank_actor_ids: Iterable[int] | None = None,
) -> ProcessEventsResult:
    """Compute threat for one fight.

    The engine runs in a worker thread bounded by
    settings.engine.worker_timeout_seconds. A timeout or worker failure falls
    back to running the same computation in-process.

    Args:
        report: Report metadata (fights, masterData, zone, game version).
        fight_id: Fight to compute.
        pages: Async iterator of event pages in timestamp order.
        config: Rule tables to use; resolved from report metadata when None.
        settings: Engine settings; defaults to get_settings().
        cancel_event: Checked before each page and before dispatch.
        initial_auras: Aura snapshot to seed ({actor id: [spell ids]}).
        tank_actor_ids: Tanks, excluded from inferred threat reduction.

    Raises:
        FightNotFoundError: If fight_id is not in the report.
        ThreatConfigNotFoundError: If no config resolves for the report.
        ComputationCancelledError: If cancel_event is set before dispatch.
    """
    settings = settings or get_settings()
    engine_input = build_engine_input(report, fight_id)

    if config is None:
        config = resolve_config_or_none(build_resolution_input(report))
        if config is None:
            raise ThreatConfigNotFoundError(
                f"No threat config for report {report.code or '<unknown>'} "
                f"(gameVersion {report.game_version})"
            )

    events = await collect_events(
        pages,
        max_pages=settings.engine.max_pages,
        cancel_event=cancel_event,
        report_code=report.code,
        fight_id=fight_id,
    )
    _check_cancelled(cancel_event, report.code, fight_id)

    run = partial(
        process_events, events, engine_input, config,
        initial_auras=initial_auras, tank_actor_ids=tank_actor_ids,
        infer_threat_reduction=settings.engine.infer_threat_reduction,
    )
    if not settings.engine.use_background_worker:
        logger.info(
            "Background worker disabled, computing %s fight %d in-process (%d events)",
            report.code, fight_id, len(events),
        )
        return run()

    try:
        return await asyncio.wait_for(
            asyncio.to_thread(run), settings.engine.worker_timeout_seconds,
        )
    except TimeoutError:
        logger.warning(
            "Threat worker timed out after %.0fs for %s fight %d, "
            "falling back to in-process computation",
            settings.engine.worker_timeout_seconds, report.code, fight_id,
        )
    except Exception:
        logger.exception(
            "Threat worker failed for %s fight %d, falling back to in-process computation",
            report.code, fight_id,
        )
    return run()
