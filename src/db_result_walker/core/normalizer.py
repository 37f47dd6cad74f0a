"""Normalization of raw driver cell values into detached canonical values."""

import logging
from typing import Any, Callable, NoReturn

from db_result_walker.adapters.base import BaseAdapter
from db_result_walker.core.statement import ResultSet
from db_result_walker.errors import ValueReadError

logger = logging.getLogger(__name__)


class ValueNormalizer:
    """Read column values through a backend's ordered quirk table.

    The returned value is one of None, bool/int/float/Decimal, str, bytes,
    datetime or date, and never references the originating cursor: large
    objects are materialized and vendor wrapper types are re-read as
    standard timestamps or dates.
    """

    def __init__(self, adapter: BaseAdapter):
        """
        Initialize value normalizer.

        Args:
            adapter: Database-specific adapter supplying reads and quirks
        """
        self.adapter = adapter
        self.quirks = adapter.value_quirks()

    def normalize(self, result_set: ResultSet, index: int) -> Any:
        """
        Read column ``index`` (1-based) of the current row.

        Args:
            result_set: Result set positioned on a row
            index: Column position

        Returns:
            Detached, canonically typed value

        Raises:
            ValueReadError: If reading fails for a reason other than a known
                coercion quirk, including when the text retry itself fails
        """
        try:
            value = result_set.get_object(index)
        except Exception as e:
            if not self.adapter.is_coercion_quirk(e):
                self._raise_read_error(e, index)
            logger.debug("Column %d hit a coercion quirk, reading as text: %s", index, e)
            value = self._read(result_set.get_string, index)

        if value is None:
            return None

        column = result_set.columns[index - 1]
        for quirk in self.quirks:
            if quirk.applies(value, column):
                return self._read(
                    lambda i: quirk.read(result_set, i, column), index
                )
        return value

    def normalize_row(self, result_set: ResultSet) -> list[Any]:
        """Normalize every column of the current row."""
        return [
            self.normalize(result_set, column.position)
            for column in result_set.columns
        ]

    def _read(self, read: Callable[[int], Any], index: int) -> Any:
        try:
            return read(index)
        except Exception as e:
            self._raise_read_error(e, index)

    @staticmethod
    def _raise_read_error(error: Exception, index: int) -> NoReturn:
        if isinstance(error, ValueReadError):
            if error.column_index is None:
                error.column_index = index
            raise error
        raise ValueReadError(f"Failed to read column {index}: {error}", index) from error
