"""Shared report fixtures for engine, pipeline and script tests."""

import pytest

from tekii.engine.input import build_engine_input
from tekii.wcl.models import Report

TANK_ID = 1
PALADIN_ID = 2
HUNTER_ID = 3
DRUID_ID = 4
PRIEST_ID = 5
ROGUE_ID = 6
MAGE_ID = 7
PET_ID = 8
BOSS_ID = 100
ADD_ID = 101

BOSS_GAME_ID = 15550
ADD_GAME_ID = 15551


def report_payload(
    *,
    game_version: int = 2,
    season_id: int | None = 5,
    partitions: tuple[str, ...] = ("Phase 1",),
) -> dict:
    """A small WCL report in the API's camelCase shape."""
    players = [
        (TANK_ID, "Tankwar", "Warrior"),
        (PALADIN_ID, "Healpal", "Paladin"),
        (HUNTER_ID, "Huntress", "Hunter"),
        (DRUID_ID, "Bearly", "Druid"),
        (PRIEST_ID, "Shadowmend", "Priest"),
        (ROGUE_ID, "Stabby", "Rogue"),
        (MAGE_ID, "Frosty", "Mage"),
    ]
    fight = {
        "id": 1,
        "name": "Attumen the Huntsman",
        "startTime": 0,
        "endTime": 120000,
        "kill": True,
        "encounterID": 652,
        "friendlyPlayers": [p[0] for p in players],
        "friendlyPets": [{"id": PET_ID, "petOwner": HUNTER_ID}],
        "enemyNPCs": [
            {"id": BOSS_ID, "gameID": BOSS_GAME_ID, "instanceCount": 1},
            {"id": ADD_ID, "gameID": ADD_GAME_ID, "instanceCount": 1},
        ],
    }
    if season_id is not None:
        fight["classicSeasonID"] = season_id
    return {
        "code": "aBcD1234",
        "title": "Kara clear",
        "startTime": 1_770_000_000_000,
        "endTime": 1_770_000_500_000,
        "gameVersion": game_version,
        "zone": {
            "id": 1007,
            "name": "Karazhan",
            "partitions": [
                {"id": i, "name": name} for i, name in enumerate(partitions, start=1)
            ],
        },
        "fights": [fight],
        "masterData": {
            "actors": [
                *[
                    {"id": pid, "name": name, "type": "Player", "subType": cls}
                    for pid, name, cls in players
                ],
                {"id": PET_ID, "name": "Cat", "type": "Pet", "subType": "Pet", "petOwner": HUNTER_ID},
                {"id": BOSS_ID, "name": "Attumen", "type": "NPC", "subType": "Boss", "gameID": BOSS_GAME_ID},
                {"id": ADD_ID, "name": "Midnight", "type": "NPC", "subType": "NPC", "gameID": ADD_GAME_ID},
            ],
            "abilities": [
                {"gameID": 10947, "name": "Mind Blast", "type": "32"},
                {"gameID": 10934, "name": "Smite", "type": "2"},
                {"gameID": 27136, "name": "Holy Light", "type": "2"},
                {"gameID": 27173, "name": "Consecration", "type": "2"},
                {"gameID": 1, "name": "Melee", "type": "1"},
            ],
        },
    }


@pytest.fixture
def report() -> Report:
    return Report.model_validate(report_payload())


@pytest.fixture
def engine_input(report):
    return build_engine_input(report, 1)


@pytest.fixture
def raw_report() -> dict:
    return report_payload()
