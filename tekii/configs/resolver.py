"""Select the rule tables that match a report's game version and season."""

import logging
from collections.abc import Sequence

from tekii.configs import ALL_CONFIGS
from tekii.engine.types import ConfigResolutionInput, ThreatConfig
from tekii.wcl.models import Report

logger = logging.getLogger(__name__)


class ThreatConfigNotFoundError(Exception):
    """Raised when no single threat config matches the report metadata."""


def build_resolution_input(report: Report) -> ConfigResolutionInput:
    season_ids = sorted({
        fight.classic_season_id
        for fight in report.fights
        if fight.classic_season_id is not None
    })
    partitions = tuple(p.name for p in report.zone.partitions) if report.zone else ()
    return ConfigResolutionInput(
        game_version=report.game_version,
        report_start_time=report.start_time,
        zone_partitions=partitions,
        season_ids=tuple(season_ids),
    )


def resolve_config_or_none(
    metadata: ConfigResolutionInput,
    configs: Sequence[ThreatConfig] = ALL_CONFIGS,
) -> ThreatConfig | None:
    """Return the single matching config, or None on zero or ambiguous matches."""
    matches = [config for config in configs if config.resolve(metadata)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        logger.warning(
            "Ambiguous threat config for gameVersion %d: %s",
            metadata.game_version, [c.key for c in matches],
        )
    else:
        logger.warning(
            "No threat config for gameVersion %d (seasons=%s, partitions=%s)",
            metadata.game_version, list(metadata.season_ids), list(metadata.zone_partitions),
        )
    return None


def resolve_config(
    metadata: ConfigResolutionInput,
    configs: Sequence[ThreatConfig] = ALL_CONFIGS,
) -> ThreatConfig:
    config = resolve_config_or_none(metadata, configs)
    if config is None:
        raise ThreatConfigNotFoundError(
            f"No threat config for gameVersion {metadata.game_version} "
            "with the provided report metadata"
        )
    return config


def get_config(key: str, configs: Sequence[ThreatConfig] = ALL_CONFIGS) -> ThreatConfig:
    for config in configs:
        if config.key == key:
            return config
    raise ThreatConfigNotFoundError(
        f"Unknown threat config key {key!r}; expected one of {[c.key for c in configs]}"
    )
