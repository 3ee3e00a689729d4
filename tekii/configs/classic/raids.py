"""Boss mechanics that change threat, grouped by raid."""

from tekii.engine.formulas import (
    HatefulStrike,
    ModifyThreatFormula,
    ModifyThreatOnHit,
    NightbaneRainOfBones,
    NoThreat,
)
from tekii.engine.types import (
    Enemy,
    ModifyThreat,
    ThreatContext,
    ThreatFormula,
    ThreatModifier,
    ThreatSpecial,
)
from tekii.wcl.events import number

WIPE_ON_CAST = ModifyThreatFormula(multiplier=0, target="all", event_types=("cast",))
WIPE_ON_AURA = ModifyThreatFormula(
    multiplier=0, target="all", event_types=("applybuff", "removebuff"),
)


class Spells:
    KNOCK_AWAY = 19633
    HATEFUL_STRIKE = 28308
    NOTH_BLINK = 29210
    NOTH_BLINK_ALT = 29211
    RAIN_OF_BONES = 37098
    KARAZHAN_DISARM = 30013
    FETISH_OF_THE_SAND_REAVER = 26400
    INSIGNIFICANCE = 40618
    FEL_RAGE = 40604
    FORCE_PUNCH = 24189
    CAUSE_INSANITY = 24327


# ---------------------------------------------------------------------------
# Vanilla raids
# ---------------------------------------------------------------------------

ONYXIA_ABILITIES: dict[int, ThreatFormula] = {
    Spells.KNOCK_AWAY: ModifyThreatOnHit(0.75),
}

NAXXRAMAS_ABILITIES: dict[int, ThreatFormula] = {
    Spells.HATEFUL_STRIKE: HatefulStrike(main_tank_threat=500, off_tank_threat=500),
    Spells.NOTH_BLINK: ModifyThreatFormula(multiplier=0, target="all"),
    Spells.NOTH_BLINK_ALT: ModifyThreatFormula(multiplier=0, target="all"),
}

BWL_AGGRO_LOSS_BUFFS = frozenset({
    23023,  # Razorgore Conflagrate
    23310, 23311, 23312,  # Chromaggus Time Lapse
    22289,  # Brood Power: Green
    23603,  # Nefarian Wild Polymorph
})

AQ40_AGGRO_LOSS_BUFFS = frozenset({26580})  # Princess Yauj Fear

AQ40_AURA_MODIFIERS: dict[int, ThreatModifier] = {
    Spells.FETISH_OF_THE_SAND_REAVER: ThreatModifier(
        source="gear", name="Fetish of the Sand Reaver", value=0.3,
    ),
}

ARLOKK_GAME_ID = 14515
ARLOKK_ENCOUNTER_IDS = (791, 150791)  # fresh realms prefix the zone id
ARLOKK_DISAPPEAR_GAP_MS = 30_000


class ArlokkReappearanceWipe:
    """Wipe Arlokk's threat table on her first event after a 30 s vanish."""

    def __init__(self, encounter_id: int, enemies: tuple[Enemy, ...]):
        self._arlokk_ids = frozenset(e.id for e in enemies if e.game_id == ARLOKK_GAME_ID)
        self._last_seen: dict[int, float] = {}

    def __call__(self, ctx: ThreatContext) -> tuple[ThreatSpecial, ...]:
        source_id = ctx.event.get("sourceID")
        if source_id not in self._arlokk_ids:
            return ()
        timestamp = number(ctx.event, "timestamp")
        previous = self._last_seen.get(source_id)
        self._last_seen[source_id] = timestamp
        if previous is None or timestamp - previous <= ARLOKK_DISAPPEAR_GAP_MS:
            return ()
        return (ModifyThreat(multiplier=0, target="all"),)


ZG_ABILITIES: dict[int, ThreatFormula] = {
    Spells.FORCE_PUNCH: NoThreat(),
}

ZG_AGGRO_LOSS_BUFFS = frozenset({Spells.CAUSE_INSANITY})

ZG_ENCOUNTERS = dict.fromkeys(ARLOKK_ENCOUNTER_IDS, ArlokkReappearanceWipe)

# ---------------------------------------------------------------------------
# TBC raids
# ---------------------------------------------------------------------------

COMMON_KNOCK_AWAYS: dict[int, ThreatFormula] = {
    **{
        spell_id: ModifyThreatOnHit(0.5)
        for spell_id in (10101, 18813, 18945, 20686, 23382, 30121, 32077, 32959, 37597)
    },
    25778: ModifyThreatOnHit(0.75),
    31389: ModifyThreatOnHit(0.75),
}

TBC_NAXXRAMAS_ABILITIES: dict[int, ThreatFormula] = {
    **NAXXRAMAS_ABILITIES,
    Spells.HATEFUL_STRIKE: HatefulStrike(main_tank_threat=1000, off_tank_threat=2000),
}

KARAZHAN_ABILITIES: dict[int, ThreatFormula] = {
    Spells.KARAZHAN_DISARM: WIPE_ON_CAST,
    Spells.RAIN_OF_BONES: NightbaneRainOfBones(),
}

TEMPEST_KEEP_ABILITIES: dict[int, ThreatFormula] = {
    33237: WIPE_ON_CAST,  # Kiggler reset
    37102: ModifyThreatOnHit(0.75),  # Crystalcore Devastator
}

SERPENTSHRINE_ABILITIES: dict[int, ThreatFormula] = {
    25035: WIPE_ON_CAST,  # Hydross phase swap
    37640: WIPE_ON_AURA,  # Leotheras whirlwind
    38112: WIPE_ON_AURA,  # Vashj barrier
}

BLACK_TEMPLE_ABILITIES: dict[int, ThreatFormula] = {
    40486: ModifyThreatOnHit(0.75),  # Gurtogg Bloodboil
    40597: ModifyThreatOnHit(0.75),  # Gurtogg Eject
    Spells.INSIGNIFICANCE: NoThreat(),
    40647: WIPE_ON_CAST,  # Illidan Shadow Prison
    39635: WIPE_ON_CAST,  # Illidan phase transition
    39873: WIPE_ON_CAST,  # Illidan glaive return
    41476: WIPE_ON_CAST,  # Council vanish
    41470: NoThreat(),
}

BLACK_TEMPLE_AURA_MODIFIERS: dict[int, ThreatModifier] = {
    Spells.INSIGNIFICANCE: ThreatModifier(source="buff", name="Insignificance", value=0),
}

BLACK_TEMPLE_FIXATE_BUFFS = frozenset({Spells.FEL_RAGE})
