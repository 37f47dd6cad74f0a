"""Database connection management with SQLAlchemy."""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Union

from sqlalchemy import Connection, Engine, create_engine, text

from db_result_walker.adapters import create_adapter
from db_result_walker.adapters.base import BaseAdapter
from db_result_walker.core.statement import (
    CursorStatement,
    PreparedCursorStatement,
    quietly_closing,
)
from db_result_walker.core.walker import ResultWalker
from db_result_walker.errors import DatabaseError, ExecutionError
from db_result_walker.models.config import DatabaseConfig
from db_result_walker.models.result import WalkResult
from db_result_walker.utils.results import required_single_result

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Manages a synchronous SQLAlchemy engine and hands out statements."""

    def __init__(self, config: DatabaseConfig, adapter: Optional[BaseAdapter] = None):
        """
        Initialize database connection.

        Args:
            config: Database configuration with connection URL and pool settings
            adapter: Database-specific adapter (derived from the URL if omitted)
        """
        self.config = config
        self.adapter = adapter or create_adapter(config)
        self.engine: Optional[Engine] = None
        self._dialect = config.dialect

    def initialize(self) -> None:
        """Create the engine."""
        if self.engine is not None:
            return  # Already initialized

        engine_args: dict[str, Any] = {
            "pool_pre_ping": True,  # Verify connections before using
            "echo": self.config.echo_sql,
        }
        if self.config.autocommit:
            engine_args["isolation_level"] = "AUTOCOMMIT"

        # SQLite uses single-connection pools that reject sizing arguments
        if self._dialect != "sqlite":
            engine_args.update(
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
                pool_timeout=self.config.pool_timeout,
            )

        self.engine = create_engine(self.config.url, **engine_args)
        logger.debug(
            "Created %s engine (driver features: %s)",
            self._dialect,
            ", ".join(self.adapter.capabilities.get_supported_features()) or "none",
        )

    def dispose(self) -> None:
        """Dispose of the connection pool and cleanup resources."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    @contextmanager
    def get_connection(self) -> Iterator[Connection]:
        """
        Get a connection from the pool as a context manager.

        Raises:
            RuntimeError: If engine not initialized
        """
        if self.engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize() first."
            )

        with self.engine.connect() as conn:
            if self.config.statement_timeout:
                self._set_timeout(conn, self.config.statement_timeout)
            yield conn

    @contextmanager
    def statement(
        self, sql: Optional[str] = None, params: Any = None
    ) -> Iterator[Union[CursorStatement, PreparedCursorStatement]]:
        """
        Open a statement over a raw DB-API cursor.

        With ``sql`` the statement is prepared with that SQL and ``params``;
        without it the caller passes literal SQL to ``execute``. The cursor
        is closed on exit, and the work is committed when the engine is not
        in autocommit mode and the block finished without error.
        """
        with self.get_connection() as conn:
            dbapi_conn = conn.connection.driver_connection
            cursor = dbapi_conn.cursor()
            if sql is not None:
                stmt: CursorStatement = PreparedCursorStatement(
                    cursor, self.adapter, sql, params, dbapi_conn
                )
            else:
                stmt = CursorStatement(cursor, self.adapter, dbapi_conn)

            with quietly_closing(stmt):
                yield stmt

            if not self.config.autocommit:
                dbapi_conn.commit()

    def run(
        self,
        sql: str,
        params: Any = None,
        sink: Optional[Callable[[str], None]] = None,
    ) -> WalkResult:
        """
        Execute SQL and walk every outcome.

        Args:
            sql: SQL text
            params: Bound parameters; when given the statement is prepared
            sink: Output for rendered tables, counts and warnings

        Returns:
            Walk result with all outcomes in driver order

        Raises:
            ExecutionError: If parameters are given to a driver that can't bind them
        """
        walker = ResultWalker(self.adapter, sink)
        if params is None:
            with self.statement() as stmt:
                return walker.execute(stmt, sql)
        if not self.adapter.capabilities.prepared_statements:
            raise ExecutionError(
                f"{self._dialect} driver does not accept bound parameters", sql
            )
        with self.statement(sql, params) as stmt:
            return walker.execute(stmt)

    def scalar(self, sql: str, params: Any = None) -> Any:
        """
        Execute a query expected to return exactly one row and return its
        first column.

        Raises:
            DatabaseError: If no result set, no row or several rows come back
        """
        result = self.run(sql, params, sink=logger.debug)
        if not result.result_sets:
            raise DatabaseError("Statement returned no result set")
        row = required_single_result(result.result_sets[0].rows)
        return row[0]

    def _set_timeout(self, conn: Connection, timeout: int) -> None:
        """Set statement timeout based on database dialect."""
        timeout_ms = timeout * 1000

        if self._dialect == "postgresql":
            conn.execute(text(f"SET statement_timeout = {timeout_ms}"))
        elif self._dialect == "mysql":
            conn.execute(text(f"SET SESSION max_execution_time = {timeout_ms}"))

    @property
    def dialect(self) -> str:
        """Get database dialect name."""
        return self._dialect

    @property
    def is_initialized(self) -> bool:
        """Check if engine is initialized."""
        return self.engine is not None

    def __enter__(self) -> "DatabaseConnection":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
