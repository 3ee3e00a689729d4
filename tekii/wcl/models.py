from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WCLBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Actor(WCLBaseModel):
    id: int
    name: str
    type: str
    sub_type: str | None = None
    server: str | None = None
    pet_owner: int | None = None
    game_id: int = Field(default=0, alias="gameID")


class ReportAbility(WCLBaseModel):
    """Ability metadata; WCL encodes the spell school mask as a string in `type`."""

    game_id: int = Field(alias="gameID")
    name: str = ""
    type: str | None = None


class MasterData(WCLBaseModel):
    actors: list[Actor] = []
    abilities: list[ReportAbility] = []


class FightEnemy(WCLBaseModel):
    id: int
    game_id: int = Field(default=0, alias="gameID")
    instance_count: int = 1
    group_count: int | None = None
    pet_owner: int | None = None


class FightPet(WCLBaseModel):
    id: int
    pet_owner: int | None = None


class Fight(WCLBaseModel):
    id: int
    name: str = ""
    start_time: int
    end_time: int
    kill: bool | None = None
    encounter_id: int = Field(default=0, alias="encounterID")
    difficulty: int | None = None
    classic_season_id: int | None = Field(default=None, alias="classicSeasonID")
    friendly_players: list[int] = []
    friendly_pets: list[FightPet] = []
    enemy_npcs: list[FightEnemy] = Field(default=[], alias="enemyNPCs")
    enemy_pets: list[FightEnemy] = []


class ZonePartition(WCLBaseModel):
    id: int
    name: str


class Zone(WCLBaseModel):
    id: int
    name: str = ""
    partitions: list[ZonePartition] = []


class Report(WCLBaseModel):
    code: str = ""
    title: str = ""
    start_time: int = 0
    end_time: int = 0
    game_version: int = 0
    zone: Zone | None = None
    fights: list[Fight] = []
    master_data: MasterData = MasterData()

    def get_fight(self, fight_id: int) -> Fight | None:
        for fight in self.fights:
            if fight.id == fight_id:
                return fight
        return None


class EventPage(WCLBaseModel):
    data: list[dict] = []
    next_page_timestamp: int | None = None
