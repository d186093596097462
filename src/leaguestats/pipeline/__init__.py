"""Aggregation pipeline building blocks.

- stages: typed stage, expression, predicate and accumulator descriptors
- composer: the generic Match -> intermediate -> Group -> final template
"""

from leaguestats.pipeline.composer import (
    EXCLUDED_GAMEMODES,
    base_predicates,
    build_pipeline,
    outcome_accumulators,
    validate_puuid,
)
from leaguestats.pipeline.stages import (
    Accumulator,
    AddFields,
    And,
    ArrayElemAt,
    Comparison,
    Cond,
    Eq,
    Field,
    Group,
    Limit,
    Match,
    Project,
    SingleBucket,
    Sort,
    Unwind,
    render_pipeline,
)

__all__ = [
    "EXCLUDED_GAMEMODES",
    "Accumulator",
    "AddFields",
    "And",
    "ArrayElemAt",
    "Comparison",
    "Cond",
    "Eq",
    "Field",
    "Group",
    "Limit",
    "Match",
    "Project",
    "SingleBucket",
    "Sort",
    "Unwind",
    "base_predicates",
    "build_pipeline",
    "outcome_accumulators",
    "render_pipeline",
    "validate_puuid",
]
