"""Column lookup by database-normalized name."""

from typing import Callable, Optional

from db_result_walker.core.statement import ResultSet
from db_result_walker.models.result import ColumnDescriptor


def find_column(
    columns: list[ColumnDescriptor],
    name: str,
    normalize_identifier: Callable[[str], str],
) -> Optional[ColumnDescriptor]:
    """
    Find the first column whose label matches ``name``.

    The name is first corrected to the database's identifier format (e.g. an
    unquoted name is upper-cased for Oracle), then compared with the column
    labels case-insensitively.
    """
    corrected = normalize_identifier(name).casefold()
    for column in columns:
        if column.label.casefold() == corrected:
            return column
    return None


def resolve_column_value(
    result_set: ResultSet,
    name: str,
    normalize_identifier: Callable[[str], str],
) -> Optional[str]:
    """
    Get the string value of a named column on the current row.

    Args:
        result_set: Result set positioned on a row
        name: Column name as written by the caller
        normalize_identifier: Database identifier normalization, usually
            ``adapter.correct_object_name``

    Returns:
        The column's value as text, or None if no such column exists
    """
    column = find_column(result_set.columns, name, normalize_identifier)
    if column is None:
        return None
    return result_set.get_string(column.position)
