"""TBC (Anniversary) rule tables: the classic class tables plus TBC deltas."""

from tekii.configs.classic.druid import DRUID
from tekii.configs.classic.general import (
    BASE_THREAT,
    GEAR_AURA_MODIFIERS,
    enchant_implications,
)
from tekii.configs.classic.mage import MAGE
from tekii.configs.classic.misc import MISC_ABILITIES
from tekii.configs.classic.paladin import PALADIN
from tekii.configs.classic.priest import PRIEST
from tekii.configs.classic.raids import (
    BLACK_TEMPLE_ABILITIES,
    BLACK_TEMPLE_AURA_MODIFIERS,
    BLACK_TEMPLE_FIXATE_BUFFS,
    COMMON_KNOCK_AWAYS,
    KARAZHAN_ABILITIES,
    ONYXIA_ABILITIES,
    SERPENTSHRINE_ABILITIES,
    TBC_NAXXRAMAS_ABILITIES,
    TEMPEST_KEEP_ABILITIES,
    ZG_ENCOUNTERS,
)
from tekii.configs.classic.rogue import ROGUE
from tekii.configs.classic.warlock import WARLOCK
from tekii.configs.era import (
    ANNIVERSARY_SEASON_ID,
    CLASSIC_GAME_VERSION,
    has_tbc_partition,
    is_before_fresh_tbc,
)
from tekii.configs.tbc.hunter import TBC_HUNTER
from tekii.configs.tbc.shaman import TBC_SHAMAN
from tekii.configs.tbc.warrior import TBC_WARRIOR
from tekii.engine.types import ConfigResolutionInput, ThreatConfig


def resolve_anniversary(metadata: ConfigResolutionInput) -> bool:
    if metadata.game_version != CLASSIC_GAME_VERSION:
        return False
    if is_before_fresh_tbc(metadata):
        return False
    if metadata.season_ids:
        return ANNIVERSARY_SEASON_ID in metadata.season_ids
    return has_tbc_partition(metadata.zone_partitions)


ANNIVERSARY_CONFIG = ThreatConfig(
    key="anniversary",
    display_name="TBC (Anniversary)",
    version="1.0.0",
    resolve=resolve_anniversary,
    base_threat=BASE_THREAT,
    classes={
        "warrior": TBC_WARRIOR,
        "paladin": PALADIN,
        "druid": DRUID,
        "priest": PRIEST,
        "rogue": ROGUE,
        "hunter": TBC_HUNTER,
        "shaman": TBC_SHAMAN,
        "mage": MAGE,
        "warlock": WARLOCK,
    },
    abilities={
        **MISC_ABILITIES,
        **COMMON_KNOCK_AWAYS,
        **ONYXIA_ABILITIES,
        **TBC_NAXXRAMAS_ABILITIES,
        **KARAZHAN_ABILITIES,
        **TEMPEST_KEEP_ABILITIES,
        **SERPENTSHRINE_ABILITIES,
        **BLACK_TEMPLE_ABILITIES,
    },
    aura_modifiers={**GEAR_AURA_MODIFIERS, **BLACK_TEMPLE_AURA_MODIFIERS},
    fixate_buffs=BLACK_TEMPLE_FIXATE_BUFFS,
    gear_implications=enchant_implications,
    encounters=ZG_ENCOUNTERS,
)
