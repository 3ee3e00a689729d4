"""Vanilla (Era) rule tables."""

from tekii.configs.classic.druid import DRUID
from tekii.configs.classic.general import (
    BASE_THREAT,
    GEAR_AURA_MODIFIERS,
    enchant_implications,
)
from tekii.configs.classic.hunter import HUNTER
from tekii.configs.classic.mage import MAGE
from tekii.configs.classic.paladin import PALADIN
from tekii.configs.classic.priest import PRIEST
from tekii.configs.classic.raids import (
    AQ40_AGGRO_LOSS_BUFFS,
    AQ40_AURA_MODIFIERS,
    BWL_AGGRO_LOSS_BUFFS,
    NAXXRAMAS_ABILITIES,
    ONYXIA_ABILITIES,
    ZG_ABILITIES,
    ZG_AGGRO_LOSS_BUFFS,
    ZG_ENCOUNTERS,
)
from tekii.configs.classic.rogue import ROGUE
from tekii.configs.classic.shaman import SHAMAN
from tekii.configs.classic.warlock import WARLOCK
from tekii.configs.classic.warrior import WARRIOR
from tekii.engine.types import ConfigResolutionInput, ThreatConfig

ERA_PARTITION_MARKERS = ("s0", "hardcore", "som")
TBC_PARTITION_MARKERS = ("phase", "pre-patch")
CLASSIC_GAME_VERSION = 2
SOD_SEASON_ID = 3
ANNIVERSARY_SEASON_ID = 5

# 2026-01-13 00:00 UTC. Fresh TBC realms launched on this date, so earlier
# anniversary-tagged logs still come from the Era client.
FRESH_TBC_CUTOVER_MS = 1_768_262_400_000


def _has_partition(partitions: tuple[str, ...], markers: tuple[str, ...]) -> bool:
    return any(
        marker in name.lower()
        for name in partitions
        for marker in markers
    )


def has_era_partition(partitions: tuple[str, ...]) -> bool:
    return _has_partition(partitions, ERA_PARTITION_MARKERS)


def has_tbc_partition(partitions: tuple[str, ...]) -> bool:
    return _has_partition(partitions, TBC_PARTITION_MARKERS)


def is_before_fresh_tbc(metadata: ConfigResolutionInput) -> bool:
    return metadata.report_start_time < FRESH_TBC_CUTOVER_MS


def resolve_era(metadata: ConfigResolutionInput) -> bool:
    if metadata.game_version != CLASSIC_GAME_VERSION:
        return False
    if metadata.season_ids:
        if SOD_SEASON_ID in metadata.season_ids:
            return False
        if all(season == ANNIVERSARY_SEASON_ID for season in metadata.season_ids):
            return is_before_fresh_tbc(metadata)
        return False
    if has_era_partition(metadata.zone_partitions):
        return True
    if has_tbc_partition(metadata.zone_partitions):
        return is_before_fresh_tbc(metadata)
    return False


ERA_CONFIG = ThreatConfig(
    key="era",
    display_name="Vanilla (Era)",
    version="0.1.0",
    resolve=resolve_era,
    base_threat=BASE_THREAT,
    classes={
        "warrior": WARRIOR,
        "paladin": PALADIN,
        "druid": DRUID,
        "priest": PRIEST,
        "rogue": ROGUE,
        "hunter": HUNTER,
        "shaman": SHAMAN,
        "mage": MAGE,
        "warlock": WARLOCK,
    },
    abilities={**ONYXIA_ABILITIES, **NAXXRAMAS_ABILITIES, **ZG_ABILITIES},
    aura_modifiers={**GEAR_AURA_MODIFIERS, **AQ40_AURA_MODIFIERS},
    aggro_loss_buffs=BWL_AGGRO_LOSS_BUFFS | AQ40_AGGRO_LOSS_BUFFS | ZG_AGGRO_LOSS_BUFFS,
    gear_implications=enchant_implications,
    encounters=ZG_ENCOUNTERS,
)
