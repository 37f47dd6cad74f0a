"""
db_result_walker - driver-agnostic execution outcomes for SQL statements

Executes SQL through DB-API 2.0 drivers and walks every result set, update
count and warning the driver produces, normalizing cell values so callers see
the same types whatever the backend.
"""

__version__ = "1.0.0"

from db_result_walker.adapters import BaseAdapter, create_adapter
from db_result_walker.core import (
    CursorStatement,
    DatabaseConnection,
    PreparedCursorStatement,
    ResultWalker,
    ValueNormalizer,
    WarningChainReporter,
    resolve_column_value,
)
from db_result_walker.errors import (
    CoercionError,
    DatabaseError,
    ExecutionError,
    ResourceCloseError,
    UnexpectedDriverError,
    ValueReadError,
    WalkerError,
)
from db_result_walker.models import (
    ClassifiedWarning,
    ColumnDescriptor,
    DatabaseConfig,
    RenderedOutcome,
    WalkResult,
    WarningRecord,
)

__all__ = [
    "BaseAdapter",
    "create_adapter",
    "CursorStatement",
    "PreparedCursorStatement",
    "DatabaseConnection",
    "ResultWalker",
    "ValueNormalizer",
    "WarningChainReporter",
    "resolve_column_value",
    "WalkerError",
    "DatabaseError",
    "ExecutionError",
    "ValueReadError",
    "CoercionError",
    "ResourceCloseError",
    "UnexpectedDriverError",
    "DatabaseConfig",
    "ColumnDescriptor",
    "WarningRecord",
    "ClassifiedWarning",
    "RenderedOutcome",
    "WalkResult",
]
