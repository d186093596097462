"""Repository for match stats queries.

Every query is the generic pipeline from leaguestats.pipeline.composer
specialized with its own filter, group key, accumulators and final stages.
Returns pydantic models (not raw store documents) to external callers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from leaguestats.core.errors import InvalidArgumentError, QueryError
from leaguestats.models.types import (
    ChampionClassStats,
    ChampionCompleteStats,
    ChampionStats,
    GamemodeStats,
    GlobalStats,
    MateStats,
    RoleStats,
)
from leaguestats.pipeline.composer import build_pipeline
from leaguestats.pipeline.stages import (
    Accumulator,
    AddFields,
    And,
    ArrayElemAt,
    Comparison,
    Eq,
    Field,
    GroupKey,
    Limit,
    Match,
    Project,
    SingleBucket,
    Sort,
    Stage,
    Unwind,
    avg_of,
    first_of,
    max_of,
    render_pipeline,
    sum_of,
)

if TYPE_CHECKING:
    from pymongo.collection import Collection as MatchCollection
else:
    MatchCollection = Collection

# Re-export for external use
__all__ = ["MatchCollection"]

logger = logging.getLogger(__name__)

DEFAULT_CHAMPION_LIMIT = 5
MATES_LIMIT = 15
MATES_MIN_GAMES = 2

# count descending, ties broken on the group key so limits are stable
_BY_COUNT_DESC = Sort((("count", -1), ("_id", 1)))


# ============================================================================
# Argument validation
# ============================================================================


def _validate_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}")
    return limit


def _coerce_queue(queue: int | str | None) -> int | None:
    """Accept a gamemode code as int, whole float or numeric string."""
    if queue is None:
        return None
    if isinstance(queue, bool) or (isinstance(queue, float) and not queue.is_integer()):
        raise InvalidArgumentError(f"queue must be numeric, got {queue!r}")
    try:
        return int(queue)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"queue must be numeric, got {queue!r}") from e


# ============================================================================
# Generic execution
# ============================================================================


def _aggregate(
    collection: MatchCollection,
    operation: str,
    puuid: str,
    *,
    group_key: GroupKey,
    match: Sequence[Comparison] = (),
    intermediate: Sequence[Stage] = (),
    accumulators: dict[str, Accumulator] | None = None,
    final: Sequence[Stage] = (),
) -> list[dict]:
    """Build a stats pipeline and run it against the match collection.

    The cursor is drained inside the error guard, so a failure part way
    through never yields a partial result.

    Args:
        collection: Match-record collection.
        operation: Query name, reported in errors and logs.
        puuid: Player identifier.
        group_key: Grouping expression, or SingleBucket.
        match: Extra predicates on the raw records.
        intermediate: Stages between the match and the group.
        accumulators: Extra group output fields.
        final: Stages after the group.

    Returns:
        Grouped documents in store order.

    Raises:
        InvalidArgumentError: If the pipeline cannot be built.
        QueryError: If the store rejects or fails to run the pipeline.
    """
    stages = build_pipeline(
        puuid,
        group_key=group_key,
        match=match,
        intermediate=intermediate,
        accumulators=accumulators,
        final=final,
    )
    pipeline = render_pipeline(stages)
    logger.debug(f"Running {operation} with {len(pipeline)} stages")

    try:
        return list(collection.aggregate(pipeline))
    except PyMongoError as e:
        logger.warning(f"{operation} aggregation failed: {e}")
        raise QueryError(operation, str(e)) from e


# ============================================================================
# Stats queries
# ============================================================================


def champion_stats(
    collection: MatchCollection, puuid: str, limit: int = DEFAULT_CHAMPION_LIMIT
) -> list[ChampionStats]:
    """Get stats for a player's most played champions.

    Args:
        collection: Match-record collection.
        puuid: Player identifier.
        limit: Number of champions to return.

    Returns:
        Up to `limit` champions, most played first.
    """
    accumulators = {
        "champion": first_of("champion"),
        "kills": sum_of("stats.kills"),
        "deaths": sum_of("stats.deaths"),
        "assists": sum_of("stats.assists"),
    }
    final = [_BY_COUNT_DESC, Limit(_validate_limit(limit))]
    docs = _aggregate(
        collection,
        "champion_stats",
        puuid,
        group_key=Field("champion.id"),
        accumulators=accumulators,
        final=final,
    )
    return [ChampionStats.model_validate(d) for d in docs]


def champion_class_stats(collection: MatchCollection, puuid: str) -> list[ChampionClassStats]:
    """Get stats per champion class (first entry of the champion's roles)."""
    docs = _aggregate(
        collection,
        "champion_class_stats",
        puuid,
        group_key=ArrayElemAt(Field("champion.roles"), 0),
    )
    return [ChampionClassStats.model_validate(d) for d in docs]


def champion_complete_stats(
    collection: MatchCollection, puuid: str, queue: int | str | None = None
) -> list[ChampionCompleteStats]:
    """Get the complete breakdown for every champion a player played.

    Args:
        collection: Match-record collection.
        puuid: Player identifier.
        queue: Gamemode to restrict to, None for all allowed gamemodes.

    Returns:
        All champions, most played first.
    """
    gamemode = _coerce_queue(queue)
    match = [] if gamemode is None else [Comparison("gamemode", "$eq", gamemode)]
    accumulators = {
        "time": sum_of("time"),
        "gameLength": avg_of("time"),
        "date": max_of("date"),
        "champion": first_of("champion"),
        "kills": sum_of("stats.kills"),
        "deaths": sum_of("stats.deaths"),
        "assists": sum_of("stats.assists"),
        "minions": avg_of("stats.minions"),
        "gold": avg_of("stats.gold"),
        "dmgChamp": avg_of("stats.dmgChamp"),
        "dmgTaken": avg_of("stats.dmgTaken"),
        "kp": avg_of("stats.kp"),
    }
    docs = _aggregate(
        collection,
        "champion_complete_stats",
        puuid,
        group_key=Field("champion.id"),
        match=match,
        accumulators=accumulators,
        final=[_BY_COUNT_DESC],
    )
    return [ChampionCompleteStats.model_validate(d) for d in docs]


def gamemode_stats(collection: MatchCollection, puuid: str) -> list[GamemodeStats]:
    """Get stats per gamemode."""
    docs = _aggregate(collection, "gamemode_stats", puuid, group_key=Field("gamemode"))
    return [GamemodeStats.model_validate(d) for d in docs]


def global_stats(collection: MatchCollection, puuid: str) -> GlobalStats | None:
    """Get totals over all of a player's matches.

    Returns:
        Single totals row, or None if the player has no qualifying match.
    """
    accumulators = {
        "time": sum_of("time"),
        "kills": sum_of("stats.kills"),
        "deaths": sum_of("stats.deaths"),
        "assists": sum_of("stats.assists"),
        "minions": sum_of("stats.minions"),
        "vision": sum_of("stats.vision"),
        "kp": avg_of("stats.kp"),
    }
    docs = _aggregate(
        collection,
        "global_stats",
        puuid,
        group_key=SingleBucket(),
        accumulators=accumulators,
    )
    if not docs:
        return None
    return GlobalStats.model_validate(docs[0])


def role_stats(collection: MatchCollection, puuid: str) -> list[RoleStats]:
    """Get stats per role, ignoring matches without a role."""
    final = [
        Project(
            {
                "role": Field("_id"),
                "count": Field("count"),
                "wins": Field("wins"),
                "losses": Field("losses"),
            }
        )
    ]
    docs = _aggregate(
        collection,
        "role_stats",
        puuid,
        group_key=Field("role"),
        match=[Comparison("role", "$ne", "NONE")],
        final=final,
    )
    return [RoleStats.model_validate(d) for d in docs]


def mates(collection: MatchCollection, puuid: str) -> list[MateStats]:
    """Get the teammates a player played with most often.

    The player's own allyTeam entry is grouped like any other teammate and
    dropped by comparing the grouped id with the player's account id.

    Returns:
        Up to 15 teammates with at least 2 shared games, most frequent first.
    """
    accumulators = {
        "account_id": first_of("account_id"),
        "name": first_of("allyTeam.name"),
        "mateId": first_of("allyTeam.account_id"),
    }
    final = [
        AddFields({"idEq": Eq(Field("mateId"), Field("account_id"))}),
        Match(
            And(
                (
                    Comparison("idEq", "$eq", False),
                    Comparison("count", "$gte", MATES_MIN_GAMES),
                )
            )
        ),
        _BY_COUNT_DESC,
        Limit(MATES_LIMIT),
    ]
    docs = _aggregate(
        collection,
        "mates",
        puuid,
        group_key=Field("allyTeam.account_id"),
        intermediate=[Unwind(Field("allyTeam"))],
        accumulators=accumulators,
        final=final,
    )
    return [MateStats.model_validate(d) for d in docs]
