"""Exception hierarchy for statement execution and result walking."""

from typing import Optional


class WalkerError(Exception):
    """Base class for all errors raised by db_result_walker."""


class DatabaseError(WalkerError):
    """Generic database-level failure not tied to a single cell or step."""


class ExecutionError(WalkerError):
    """The initial execution of a statement failed."""

    def __init__(self, message: str, sql: Optional[str] = None):
        super().__init__(message)
        self.sql = sql


class ValueReadError(WalkerError):
    """Reading or normalizing a single column value failed."""

    def __init__(self, message: str, column_index: Optional[int] = None):
        super().__init__(message)
        self.column_index = column_index


class CoercionError(ValueReadError):
    """A driver value could not be converted to the column's declared type."""

    def __init__(
        self,
        message: str,
        source_type: str,
        target_type: str,
        column_index: Optional[int] = None,
    ):
        super().__init__(message, column_index)
        self.source_type = source_type
        self.target_type = target_type


class ResourceCloseError(WalkerError):
    """Closing a statement or result set failed.

    Never propagated out of the package; close_quietly() logs and drops it.
    """


class UnexpectedDriverError(WalkerError):
    """The driver reported a state that contradicts its own earlier answers."""
