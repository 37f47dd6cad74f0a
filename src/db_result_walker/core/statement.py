"""Statement and result-set handles over DB-API 2.0 cursors."""

import datetime
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, TypeVar, runtime_checkable

from db_result_walker.adapters.base import BaseAdapter
from db_result_walker.errors import ResourceCloseError, ValueReadError
from db_result_walker.models.result import ColumnDescriptor, WarningRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class ResultSet(Protocol):
    """Row cursor over one result-set outcome; columns are 1-based."""

    columns: list[ColumnDescriptor]

    def next_row(self) -> bool: ...

    def get_object(self, index: int) -> Any: ...

    def get_string(self, index: int) -> Optional[str]: ...

    def get_bytes(self, index: int) -> Optional[bytes]: ...

    def get_timestamp(self, index: int) -> Optional[datetime.datetime]: ...

    def get_date(self, index: int) -> Optional[datetime.date]: ...

    def close(self) -> None: ...


@runtime_checkable
class Statement(Protocol):
    """Execution handle yielding a sequence of outcomes."""

    def execute(self, sql: str) -> bool: ...

    def get_result_set(self) -> Optional[ResultSet]: ...

    def get_update_count(self) -> int: ...

    def get_more_results(self) -> bool: ...

    def get_warnings(self) -> Optional[WarningRecord]: ...

    def clear_warnings(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class PreparedStatement(Statement, Protocol):
    """Statement carrying its own SQL and bound parameters."""

    def execute_prepared(self) -> bool: ...


def close_quietly(resource: Any) -> Optional[ResourceCloseError]:
    """
    Close a statement or result set, never raising.

    Returns:
        The captured close failure, or None if closing succeeded
    """
    if resource is None:
        return None
    try:
        resource.close()
    except Exception as e:
        # Drivers may raise anything from close(); it must not mask the real outcome
        logger.debug("Could not close %s: %s", type(resource).__name__, e)
        return ResourceCloseError(f"Failed to close {type(resource).__name__}: {e}")
    return None


def close(result_set: Any, statement: Any) -> None:
    """Close a result set and then its statement, ignoring close failures."""
    close_quietly(result_set)
    close_quietly(statement)


@contextmanager
def quietly_closing(resource: T) -> Iterator[T]:
    """Like contextlib.closing, but close failures are logged and dropped."""
    try:
        yield resource
    finally:
        close_quietly(resource)


class CursorResultSet:
    """The current result set of a DB-API cursor."""

    def __init__(self, cursor: Any, adapter: BaseAdapter):
        """
        Initialize from a cursor positioned on a result-set outcome.

        Args:
            cursor: DB-API cursor whose ``description`` is set
            adapter: Database-specific adapter
        """
        self._cursor = cursor
        self._adapter = adapter
        self.columns = [
            adapter.describe_column(position, entry)
            for position, entry in enumerate(cursor.description or (), start=1)
        ]
        self._row: Optional[tuple[Any, ...]] = None
        self._closed = False

    def next_row(self) -> bool:
        """Advance to the next row; False once the outcome is drained."""
        if self._closed:
            return False
        row = self._cursor.fetchone()
        self._row = tuple(row) if row is not None else None
        return self._row is not None

    def _raw(self, index: int) -> Any:
        if self._row is None:
            raise ValueReadError("Result set is not positioned on a row", index)
        if not 1 <= index <= len(self._row):
            raise ValueReadError(
                f"Column index {index} out of range (1..{len(self._row)})", index
            )
        return self._row[index - 1]

    def get_object(self, index: int) -> Any:
        return self._adapter.read_object(self._raw(index), self.columns[index - 1])

    def get_string(self, index: int) -> Optional[str]:
        return self._adapter.to_string(self._raw(index))

    def get_bytes(self, index: int) -> Optional[bytes]:
        return self._adapter.to_bytes(self._raw(index))

    def get_timestamp(self, index: int) -> Optional[datetime.datetime]:
        return self._adapter.to_timestamp(self._raw(index))

    def get_date(self, index: int) -> Optional[datetime.date]:
        return self._adapter.to_date(self._raw(index))

    def close(self) -> None:
        """Release the current row; the cursor itself belongs to the statement."""
        self._row = None
        self._closed = True


class CursorStatement:
    """Statement handle over a DB-API cursor.

    Outcomes follow the JDBC model: ``execute``/``get_more_results`` say
    whether the current outcome is a result set, ``get_update_count``
    returns -1 once the cursor has no further outcomes.
    """

    def __init__(self, cursor: Any, adapter: BaseAdapter, connection: Any = None):
        self.cursor = cursor
        self.adapter = adapter
        self.connection = (
            connection if connection is not None else getattr(cursor, "connection", None)
        )
        self._warnings: list[WarningRecord] = []
        self._exhausted = True

    def execute(self, sql: str, params: Any = None) -> bool:
        if params is None:
            self.cursor.execute(sql)
        else:
            self.cursor.execute(sql, params)
        self._exhausted = False
        self._collect_warnings()
        return self._on_result_set()

    def get_result_set(self) -> Optional[CursorResultSet]:
        if not self._on_result_set():
            return None
        return CursorResultSet(self.cursor, self.adapter)

    def get_update_count(self) -> int:
        if self._exhausted or self.cursor.description is not None:
            return -1
        rowcount = getattr(self.cursor, "rowcount", -1)
        # DDL and other count-less statements still are an outcome
        return rowcount if rowcount is not None and rowcount >= 0 else 0

    def get_more_results(self) -> bool:
        nextset = getattr(self.cursor, "nextset", None)
        more = False
        if (
            not self._exhausted
            and self.adapter.capabilities.multiple_results
            and callable(nextset)
        ):
            more = bool(nextset())
            # only a step the driver advanced to carries new notices
            if more:
                self._collect_warnings()
        if not more:
            self._exhausted = True
        return self._on_result_set()

    def get_warnings(self) -> Optional[WarningRecord]:
        return WarningRecord.chain(self._warnings)

    def clear_warnings(self) -> None:
        self._warnings.clear()

    def close(self) -> None:
        self._exhausted = True
        self.cursor.close()

    def _on_result_set(self) -> bool:
        return not self._exhausted and self.cursor.description is not None

    def _collect_warnings(self) -> None:
        if self.adapter.capabilities.warnings:
            self._warnings.extend(
                self.adapter.collect_warnings(self.cursor, self.connection)
            )

    def __enter__(self) -> "CursorStatement":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        close_quietly(self)


class PreparedCursorStatement(CursorStatement):
    """Cursor statement bound to one SQL text and its parameters."""

    def __init__(
        self,
        cursor: Any,
        adapter: BaseAdapter,
        sql: str,
        params: Any = None,
        connection: Any = None,
    ):
        super().__init__(cursor, adapter, connection)
        self.sql = sql
        self.params = params

    def execute_prepared(self) -> bool:
        return self.execute(self.sql, self.params)
