"""Typed aggregation stage descriptors.

Stages are frozen dataclasses rendered to MongoDB pipeline documents with
to_document(). Expressions, predicates and accumulators are typed values
as well, so a malformed pipeline fails while it is being built instead of
inside the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

from leaguestats.core.errors import InvalidArgumentError

# ============================================================================
# Expressions
# ============================================================================


@dataclass(frozen=True)
class Field:
    """Reference to a document field by dotted path."""

    path: str

    def __post_init__(self):
        if not self.path or self.path.startswith("$"):
            raise InvalidArgumentError(f"Invalid field path: {self.path!r}")

    def to_expression(self) -> str:
        return f"${self.path}"


@dataclass(frozen=True)
class Eq:
    """Equality test between two expressions."""

    left: Expression
    right: Expression

    def to_expression(self) -> dict:
        return {"$eq": [render_expression(self.left), render_expression(self.right)]}


@dataclass(frozen=True)
class Cond:
    """Ternary expression: then_ if condition holds, else_ otherwise."""

    condition: Expression
    then_: Expression
    else_: Expression

    def to_expression(self) -> dict:
        return {
            "$cond": [
                render_expression(self.condition),
                render_expression(self.then_),
                render_expression(self.else_),
            ]
        }


@dataclass(frozen=True)
class ArrayElemAt:
    """Element of an array field at a fixed index."""

    array: Field
    index: int

    def to_expression(self) -> dict:
        return {"$arrayElemAt": [self.array.to_expression(), self.index]}


Scalar = Union[bool, int, float, str]
Expression = Union[Field, Eq, Cond, ArrayElemAt, Scalar]


def render_expression(expr: Expression) -> Any:
    """Render an expression to its pipeline form.

    Literal strings starting with '$' would be read as field paths by the
    store, so they are rejected.
    """
    if isinstance(expr, (Field, Eq, Cond, ArrayElemAt)):
        return expr.to_expression()
    if isinstance(expr, str) and expr.startswith("$"):
        raise InvalidArgumentError(f"Use Field() for field references, got literal {expr!r}")
    if isinstance(expr, (bool, int, float, str)):
        return expr
    raise InvalidArgumentError(f"Unsupported expression: {expr!r}")


# ============================================================================
# Query predicates (used by $match)
# ============================================================================

ComparisonOp = Literal["$eq", "$ne", "$in", "$nin", "$gte"]
_COMPARISON_OPS = ("$eq", "$ne", "$in", "$nin", "$gte")


@dataclass(frozen=True)
class Comparison:
    """Single-field comparison such as gamemode $nin [...]."""

    field: str
    op: ComparisonOp
    value: Any

    def __post_init__(self):
        if not self.field or self.field.startswith("$"):
            raise InvalidArgumentError(f"Invalid comparison field: {self.field!r}")
        if self.op not in _COMPARISON_OPS:
            raise InvalidArgumentError(f"Unsupported comparison operator: {self.op}")
        if self.op in ("$in", "$nin") and not isinstance(self.value, (list, tuple)):
            raise InvalidArgumentError(f"{self.op} on {self.field} needs a sequence value")

    def to_query(self) -> dict:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {self.field: {self.op: value}}


@dataclass(frozen=True)
class And:
    """Logical conjunction of predicates.

    Each operand renders to its own document, so two predicates on the same
    field never overwrite each other.
    """

    operands: tuple[Predicate, ...]

    def to_query(self) -> dict:
        return {"$and": [p.to_query() for p in self.operands]}


Predicate = Union[Comparison, And]


# ============================================================================
# Group keys and accumulators
# ============================================================================


@dataclass(frozen=True)
class SingleBucket:
    """Group key that puts every input document into one bucket."""

    def to_expression(self) -> None:
        return None


GroupKey = Union[Field, ArrayElemAt, SingleBucket]

AccumulatorOp = Literal["$sum", "$avg", "$max", "$first"]
_ACCUMULATOR_OPS = ("$sum", "$avg", "$max", "$first")


@dataclass(frozen=True)
class Accumulator:
    """Per-group aggregate over an expression."""

    op: AccumulatorOp
    expr: Expression

    def __post_init__(self):
        if self.op not in _ACCUMULATOR_OPS:
            raise InvalidArgumentError(f"Unsupported accumulator: {self.op}")

    def to_document(self) -> dict:
        return {self.op: render_expression(self.expr)}


def sum_of(path: str) -> Accumulator:
    return Accumulator("$sum", Field(path))


def avg_of(path: str) -> Accumulator:
    return Accumulator("$avg", Field(path))


def max_of(path: str) -> Accumulator:
    return Accumulator("$max", Field(path))


def first_of(path: str) -> Accumulator:
    return Accumulator("$first", Field(path))


def count_where(path: str, value: Scalar) -> Accumulator:
    """Count documents whose field equals value."""
    return Accumulator("$sum", Cond(Eq(Field(path), value), 1, 0))


# ============================================================================
# Stages
# ============================================================================


@dataclass(frozen=True)
class Match:
    predicate: Predicate

    def to_document(self) -> dict:
        return {"$match": self.predicate.to_query()}


@dataclass(frozen=True)
class Unwind:
    """Emit one document per element of an array field."""

    array: Field

    def to_document(self) -> dict:
        return {"$unwind": self.array.to_expression()}


@dataclass(frozen=True)
class Group:
    key: GroupKey
    accumulators: dict[str, Accumulator] = field(default_factory=dict)

    def to_document(self) -> dict:
        body: dict[str, Any] = {"_id": render_group_key(self.key)}
        for name, accumulator in self.accumulators.items():
            body[name] = accumulator.to_document()
        return {"$group": body}


@dataclass(frozen=True)
class Sort:
    """Sort on (field, direction) pairs, first pair most significant."""

    keys: tuple[tuple[str, int], ...]

    def __post_init__(self):
        if not self.keys:
            raise InvalidArgumentError("Sort needs at least one key")
        for name, direction in self.keys:
            if direction not in (1, -1):
                raise InvalidArgumentError(f"Sort direction for {name} must be 1 or -1")

    def to_document(self) -> dict:
        return {"$sort": dict(self.keys)}


@dataclass(frozen=True)
class Limit:
    count: int

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise InvalidArgumentError(f"Limit must be a positive integer, got {self.count!r}")

    def to_document(self) -> dict:
        return {"$limit": self.count}


@dataclass(frozen=True)
class Project:
    """Reshape documents to exactly the given computed fields."""

    fields: dict[str, Expression]
    include_id: bool = False

    def to_document(self) -> dict:
        body: dict[str, Any] = {} if self.include_id else {"_id": 0}
        for name, expr in self.fields.items():
            body[name] = render_expression(expr)
        return {"$project": body}


@dataclass(frozen=True)
class AddFields:
    fields: dict[str, Expression]

    def to_document(self) -> dict:
        return {"$addFields": {name: render_expression(e) for name, e in self.fields.items()}}


Stage = Union[Match, Unwind, Group, Sort, Limit, Project, AddFields]


def render_group_key(key: GroupKey) -> Any:
    if isinstance(key, (Field, ArrayElemAt, SingleBucket)):
        return key.to_expression()
    raise InvalidArgumentError(f"Unsupported group key: {key!r}")


def render_pipeline(stages: list[Stage]) -> list[dict]:
    """Render stages to the list of documents the store accepts."""
    return [stage.to_document() for stage in stages]
