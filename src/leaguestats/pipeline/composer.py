"""Generic four-phase pipeline composition.

Every stats query has the same shape:

    Match(base AND caller predicates) -> intermediate stages
        -> Group(key, count/wins/losses + caller accumulators) -> final stages

Only the variable parts differ between queries, so they are passed in and
the fixed parts are baked in here.
"""

from __future__ import annotations

from typing import Sequence

from leaguestats.core.errors import InvalidArgumentError
from leaguestats.pipeline.stages import (
    Accumulator,
    And,
    Comparison,
    Group,
    GroupKey,
    Match,
    Stage,
    count_where,
)

# Arena and other non-standard queues never count towards statistics
EXCLUDED_GAMEMODES = (800, 810, 820, 830, 840, 850)
REMAKE_RESULT = "Remake"
WIN_RESULT = "Win"
LOSS_RESULT = "Fail"

OUTCOME_FIELDS = ("count", "wins", "losses")


def validate_puuid(puuid: str) -> str:
    """Check that a player identifier is a non-empty string."""
    if not isinstance(puuid, str) or not puuid.strip():
        raise InvalidArgumentError(f"puuid must be a non-empty string, got {puuid!r}")
    return puuid


def base_predicates(puuid: str) -> tuple[Comparison, ...]:
    """Predicates applied to every query for a player.

    Args:
        puuid: Player identifier.

    Returns:
        Player, non-remake and allowed-gamemode comparisons.
    """
    return (
        Comparison("summoner_puuid", "$eq", validate_puuid(puuid)),
        Comparison("result", "$ne", REMAKE_RESULT),
        Comparison("gamemode", "$nin", EXCLUDED_GAMEMODES),
    )


def outcome_accumulators() -> dict[str, Accumulator]:
    """count, wins and losses; other outcomes are neither a win nor a loss."""
    return {
        "count": Accumulator("$sum", 1),
        "wins": count_where("result", WIN_RESULT),
        "losses": count_where("result", LOSS_RESULT),
    }


def build_pipeline(
    puuid: str,
    *,
    group_key: GroupKey,
    match: Sequence[Comparison] = (),
    intermediate: Sequence[Stage] = (),
    accumulators: dict[str, Accumulator] | None = None,
    final: Sequence[Stage] = (),
) -> list[Stage]:
    """Compose the stages of a stats query.

    Caller predicates are ANDed with the base predicates rather than merged
    into one mapping, so they can only narrow the matched records.

    Args:
        puuid: Player identifier (required, non-empty).
        group_key: Grouping expression, or SingleBucket for one bucket.
        match: Extra predicates on the raw match records.
        intermediate: Reshaping stages run before grouping.
        accumulators: Extra output fields of the group stage.
        final: Stages run on the grouped documents.

    Returns:
        Ordered list of stages.

    Raises:
        InvalidArgumentError: If the puuid is empty, a Group stage is passed
            as an intermediate/final stage, or an accumulator redefines
            count, wins or losses.
    """
    predicates = base_predicates(puuid) + tuple(match)

    for stage in (*intermediate, *final):
        if isinstance(stage, Group):
            raise InvalidArgumentError("Pipeline must contain exactly one Group stage")

    group_fields = outcome_accumulators()
    for name, accumulator in (accumulators or {}).items():
        if name in OUTCOME_FIELDS or name == "_id":
            raise InvalidArgumentError(f"Accumulator {name!r} is reserved")
        group_fields[name] = accumulator

    return [
        Match(And(predicates)),
        *intermediate,
        Group(group_key, group_fields),
        *final,
    ]
