"""Shared pytest fixtures for leaguestats tests."""

from datetime import datetime

import mongomock
import pytest

PUUID = "puuid-player"
ACCOUNT_ID = "acc-player"


def make_match(
    puuid: str = PUUID,
    *,
    result: str = "Win",
    gamemode: int = 420,
    champion_id: int = 1,
    roles: tuple[str, ...] = ("Fighter", "Tank"),
    role: str = "TOP",
    kills: float = 5,
    deaths: float = 3,
    assists: float = 7,
    minions: float = 180,
    gold: int = 11000,
    dmg_champ: int = 20000,
    dmg_taken: int = 18000,
    kp: float = 50.0,
    vision: float = 20,
    time: int = 1800,
    date: datetime | None = None,
    account_id: str = ACCOUNT_ID,
    ally_team: list[dict] | None = None,
) -> dict:
    """Build a match record document with sensible defaults."""
    return {
        "summoner_puuid": puuid,
        "result": result,
        "gamemode": gamemode,
        "champion": {"id": champion_id, "name": f"Champion {champion_id}", "roles": list(roles)},
        "role": role,
        "stats": {
            "kills": kills,
            "deaths": deaths,
            "assists": assists,
            "minions": minions,
            "gold": gold,
            "dmgChamp": dmg_champ,
            "dmgTaken": dmg_taken,
            "kp": kp,
            "vision": vision,
        },
        "time": time,
        "date": date or datetime(2024, 1, 1, 12, 0),
        "account_id": account_id,
        "allyTeam": ally_team if ally_team is not None else [],
    }


@pytest.fixture
def collection():
    """Create an in-memory match collection for testing."""
    client = mongomock.MongoClient()
    return client["leaguestats"]["matches"]


@pytest.fixture
def add_match(collection):
    """Insert a match record built by make_match."""

    def _add(**overrides) -> dict:
        doc = make_match(**overrides)
        collection.insert_one(doc)
        return doc

    return _add
