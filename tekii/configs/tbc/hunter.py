"""Hunter deltas for TBC: Misdirection and the top Distracting Shot rank."""

import dataclasses

from tekii.configs.classic.hunter import HUNTER
from tekii.configs.classic.hunter import Spells as EraSpells
from tekii.engine.formulas import CalculateThreat, InstallMisdirection
from tekii.engine.interceptors import EXPLOSIVE_TRAP_EFFECT_IDS


class Spells(EraSpells):
    DISTRACTING_SHOT_R7 = 27020
    EXPLOSIVE_TRAP_EFFECT_RANKS = EXPLOSIVE_TRAP_EFFECT_IDS


TBC_HUNTER = dataclasses.replace(
    HUNTER,
    abilities={
        **HUNTER.abilities,
        Spells.MISDIRECTION: InstallMisdirection(overflow_spell_ids=Spells.EXPLOSIVE_TRAP_EFFECT_RANKS),
        Spells.DISTRACTING_SHOT_R7: CalculateThreat(bonus=900, event_types=("cast",)),
    },
)
