"""Tests for pydantic result models.

Tests validate:
1. Models build from raw grouped documents (`_id` alias)
2. Unknown document fields are ignored
3. Optional averages accept null
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from leaguestats.models.types import (
    ChampionCompleteStats,
    ChampionStats,
    GamemodeStats,
    GroupedResult,
    MateStats,
    RoleStats,
)


class TestGroupedResult:
    """Test fields shared by every grouped document."""

    def test_id_alias(self):
        result = GroupedResult.model_validate({"_id": 420, "count": 3, "wins": 2, "losses": 1})
        assert result.group_id == 420

    def test_populate_by_name(self):
        result = GroupedResult(group_id="Mage", count=1, wins=0, losses=1)
        assert result.group_id == "Mage"

    def test_win_rate(self):
        result = GroupedResult(group_id=None, count=4, wins=1, losses=3)
        assert result.win_rate == 0.25

    def test_win_rate_of_empty_group(self):
        result = GroupedResult(group_id=None, count=0, wins=0, losses=0)
        assert result.win_rate == 0.0

    def test_missing_count_rejected(self):
        with pytest.raises(ValidationError):
            GamemodeStats.model_validate({"_id": 420, "wins": 1, "losses": 0})

    def test_extra_fields_ignored(self):
        result = GamemodeStats.model_validate(
            {"_id": 420, "count": 1, "wins": 1, "losses": 0, "unexpected": True}
        )
        assert not hasattr(result, "unexpected")


class TestChampionModels:
    def test_champion_stats(self):
        stat = ChampionStats.model_validate(
            {
                "_id": 7,
                "count": 2,
                "wins": 1,
                "losses": 1,
                "champion": {"id": 7, "roles": ["Mage"]},
                "kills": 6,
                "deaths": 6,
                "assists": 9,
            }
        )
        assert stat.champion["roles"] == ["Mage"]

    def test_complete_stats_nullable_averages(self):
        stat = ChampionCompleteStats.model_validate(
            {
                "_id": 7,
                "count": 1,
                "wins": 1,
                "losses": 0,
                "time": 1800,
                "gameLength": 1800.0,
                "date": datetime(2024, 1, 1),
                "champion": {"id": 7},
                "kills": 1,
                "deaths": 0,
                "assists": 2,
                "minions": None,
                "gold": None,
                "dmgChamp": None,
                "dmgTaken": None,
                "kp": None,
            }
        )
        assert stat.kp is None
        assert stat.time == 1800.0


class TestRoleStats:
    def test_role_field_replaces_id(self):
        stat = RoleStats.model_validate({"role": "JUNGLE", "count": 2, "wins": 2, "losses": 0})
        assert stat.role == "JUNGLE"

    def test_role_required(self):
        with pytest.raises(ValidationError):
            RoleStats.model_validate({"count": 2, "wins": 2, "losses": 0})


class TestMateStats:
    def test_mate(self):
        mate = MateStats.model_validate(
            {
                "_id": "acc-a",
                "count": 3,
                "wins": 2,
                "losses": 1,
                "account_id": "acc-me",
                "name": "Summoner a",
                "mateId": "acc-a",
                "idEq": False,
            }
        )
        assert mate.group_id == mate.mateId
        assert mate.idEq is False
