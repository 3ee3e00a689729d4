"""Consumables, trinkets and engineering items with non-default threat."""

from tekii.engine.formulas import CalculateThreat, NoThreat
from tekii.engine.types import ThreatFormula

ZERO_THREAT_SPELLS = (
    35163,  # Blessing of the Silver Crescent
    34106,  # Armor penetration proc
    35166,  # Bloodlust Brooch
    28866,  # Kiss of the Spider
    26480,  # Badge of the Swarmguard
    26481,
    33649,  # Hourglass of the Unraveller
    51955,  # Dire Drunkard
    21165,  # Blacksmith mace proc
    28093,  # Mongoose
    28508,  # Destruction Potion
    28507,  # Haste Potion
    22838,
    29529,  # Drums of Battle
    35476,
    185848,  # Greater Drums of Battle
    32182,  # Heroism
    2825,  # Bloodlust
    28515,  # Ironshield Potion
    13455,  # Greater Stoneshield Potion
    4623,  # Lesser Stoneshield Potion
)

ENGINEERING_DAMAGE_SPELLS = (
    30486,  # Super Sapper Charge
    39965,  # Frost Grenade
    30217,  # Adamantite Grenade
    30461,  # The Bigger One
    19821,  # Arcane Bomb
    30216,  # Fel Iron Bomb
    46567,  # Rocket Launch
)

MISC_ABILITIES: dict[int, ThreatFormula] = {
    **{spell_id: CalculateThreat(event_types=("damage",)) for spell_id in ENGINEERING_DAMAGE_SPELLS},
    **{spell_id: NoThreat() for spell_id in ZERO_THREAT_SPELLS},
}
