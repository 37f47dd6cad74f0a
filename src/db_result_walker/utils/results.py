"""Helpers for SQL type codes and collected results."""

from typing import Any, Collection, Optional, TypeVar

from db_result_walker.errors import DatabaseError

T = TypeVar("T")

# Indicates an unknown (or unspecified) SQL type
TYPE_UNKNOWN = -(2**31)

NUMERIC_TYPES = frozenset(
    {
        "BIT",
        "BIGINT",
        "DECIMAL",
        "DOUBLE",
        "FLOAT",
        "INTEGER",
        "NUMERIC",
        "REAL",
        "SMALLINT",
        "TINYINT",
    }
)


def is_numeric(sql_type: Optional[Any]) -> bool:
    """Check whether a declared SQL type name is numeric."""
    if not isinstance(sql_type, str):
        return False
    return sql_type.strip().upper() in NUMERIC_TYPES


def required_single_result(results: Optional[Collection[T]]) -> T:
    """
    Return the only element of a result collection.

    Raises:
        DatabaseError: If the collection is empty or has more than one element
    """
    size = len(results) if results is not None else 0
    if size == 0:
        raise DatabaseError("Empty result set, expected one row")
    if size > 1:
        raise DatabaseError("Result set larger than one row")
    return next(iter(results))
