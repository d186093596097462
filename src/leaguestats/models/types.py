"""Pydantic models for grouped stats documents.

One model per query. Field names follow the stored documents (camelCase
where the match records use it). Fields the store returns but a model does
not declare are ignored.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GroupedResult(BaseModel):
    """Fields present on every grouped document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    group_id: Any = Field(default=None, alias="_id")
    count: int
    wins: int
    losses: int

    @property
    def win_rate(self) -> float:
        return self.wins / self.count if self.count else 0.0


class ChampionStats(GroupedResult):
    """Most played champion entry."""

    champion: dict
    kills: float
    deaths: float
    assists: float


class ChampionClassStats(GroupedResult):
    """Stats for a champion's primary class (group_id is the class tag)."""


class ChampionCompleteStats(GroupedResult):
    """Full per-champion breakdown."""

    time: float
    gameLength: float | None
    date: datetime | None
    champion: dict
    kills: float
    deaths: float
    assists: float
    minions: float | None
    gold: float | None
    dmgChamp: float | None
    dmgTaken: float | None
    kp: float | None


class GamemodeStats(GroupedResult):
    """Stats for one gamemode (group_id is the gamemode code)."""


class GlobalStats(GroupedResult):
    """Totals over all of a player's qualifying matches."""

    time: float
    kills: float
    deaths: float
    assists: float
    minions: float
    vision: float
    kp: float | None


class RoleStats(BaseModel):
    """Stats for one role, exposed under `role` instead of `_id`."""

    model_config = ConfigDict(extra="ignore")

    role: str
    count: int
    wins: int
    losses: int


class MateStats(GroupedResult):
    """A teammate the player played with at least twice."""

    account_id: str
    name: str
    mateId: str
    idEq: bool
