"""Error taxonomy for stats queries.

- InvalidArgumentError: bad caller input or malformed pipeline, raised
  before the store is contacted
- QueryError: the store rejected or failed to execute a composed pipeline
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a query argument or pipeline descriptor is invalid."""


class QueryError(RuntimeError):
    """Raised when the store fails to run an aggregation pipeline.

    Attributes:
        operation: Name of the query operation that failed.
    """

    def __init__(self, operation: str, detail: str):
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail
