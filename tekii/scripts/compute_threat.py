import argparse
import asyncio
import json
import logging
import sys
from collections.abc import AsyncIterator
from pathlib import Path

from tekii.config import Settings, get_settings
from tekii.configs.resolver import ThreatConfigNotFoundError, get_config
from tekii.engine.input import FightNotFoundError
from tekii.pipeline.fight_threat import compute_fight_threat
from tekii.wcl.models import EventPage, Report

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute threat for one fight from a local JSON fixture")
    parser.add_argument("--input", required=True, type=Path, help="Fixture with report and events")
    parser.add_argument("--fight-id", required=True, type=int, help="Fight id within the report")
    parser.add_argument("--output", type=Path, help="Write JSON here instead of stdout")
    parser.add_argument(
        "--config-key",
        help="Use this threat config (era, anniversary) instead of resolving from the report",
    )
    parser.add_argument(
        "--no-worker", action="store_true",
        help="Run the engine in-process instead of a worker thread",
    )
    parser.add_argument(
        "--infer-threat-reduction", action="store_true",
        help="Assume Salvation for non-tanks and emulate Tranquil Air",
    )
    return parser.parse_args(argv)


async def _single_page(events: list[dict]) -> AsyncIterator[EventPage]:
    yield EventPage(data=events)


async def run(
    input_path: Path,
    fight_id: int,
    *,
    output_path: Path | None = None,
    config_key: str | None = None,
    settings: Settings | None = None,
) -> dict:
    settings = settings or get_settings()
    fixture = json.loads(input_path.read_text())
    report = Report.model_validate(fixture["report"])

    key = config_key or settings.default_config_key
    config = get_config(key) if key else None

    result = await compute_fight_threat(
        report,
        fight_id,
        _single_page(fixture.get("events", [])),
        config=config,
        settings=settings,
        initial_auras=fixture.get("initialAuras"),
        tank_actor_ids=fixture.get("tankActorIds"),
    )
    payload = result.to_dict()
    rendered = json.dumps(payload, indent=2)
    if output_path is not None:
        output_path.write_text(rendered + "\n")
        logger.info(
            "Wrote %d augmented events for fight %d to %s",
            len(payload["augmentedEvents"]), fight_id, output_path,
        )
    else:
        print(rendered)
    return payload


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()
    engine_updates = {}
    if args.no_worker:
        engine_updates["use_background_worker"] = False
    if args.infer_threat_reduction:
        engine_updates["infer_threat_reduction"] = True
    if engine_updates:
        settings = settings.model_copy(update={
            "engine": settings.engine.model_copy(update=engine_updates),
        })
    logging.basicConfig(level=settings.log_level)
    try:
        asyncio.run(run(
            args.input, args.fight_id,
            output_path=args.output, config_key=args.config_key, settings=settings,
        ))
    except (FightNotFoundError, ThreatConfigNotFoundError) as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
