"""Pytest configuration and shared fixtures for result walker tests"""

from typing import Any, Iterator, Optional

import pytest

from db_result_walker.adapters.base import BaseAdapter
from db_result_walker.core import DatabaseConnection
from db_result_walker.models.capabilities import WalkerCapabilities
from db_result_walker.models.config import DatabaseConfig

# ==================== Fake DB-API Driver ====================


class FakeLob:
    """Large object handle that stops being readable once its row is left."""

    def __init__(self, data: Any, type_name: str = "DB_TYPE_BLOB"):
        self._data = data
        self.type = type_name
        self.valid = True

    def read(self) -> Any:
        if not self.valid:
            raise RuntimeError("LOB handle used after cursor moved")
        return self._data

    def invalidate(self) -> None:
        self.valid = False


def describe(*columns: Any) -> list[tuple]:
    """Build a ``cursor.description``; columns are labels or full entries."""
    entries = []
    for column in columns:
        if isinstance(column, str):
            entries.append((column, None, None, None, None, None, True))
        else:
            entries.append(tuple(column) + (None,) * (7 - len(column)))
    return entries


class FakeCursor:
    """DB-API cursor replaying scripted outcomes.

    Each outcome is either an int (update count) or a dict with
    ``columns`` and ``rows`` (result set). ``messages`` holds one list of
    pyodbc-style (prefix, text) tuples per outcome.
    """

    def __init__(
        self,
        *outcomes: Any,
        messages: Optional[list[list[tuple[str, str]]]] = None,
        execute_error: Optional[Exception] = None,
        close_error: Optional[Exception] = None,
    ):
        self._outcomes = list(outcomes)
        self._messages = messages or []
        self.execute_error = execute_error
        self.close_error = close_error
        self.executed: list[tuple[str, Any]] = []
        self.description: Optional[list[tuple]] = None
        self.rowcount = -1
        self.messages: list[tuple[str, str]] = []
        self.closed = False
        self.connection = None
        self._index = 0
        self._rows: list[tuple] = []
        self._current: Optional[tuple] = None

    def execute(self, sql: str, params: Any = None) -> None:
        if self.execute_error is not None:
            raise self.execute_error
        self.executed.append((sql, params))
        self._index = 0
        self._load()

    def fetchone(self) -> Optional[tuple]:
        self._invalidate_current()
        self._current = self._rows.pop(0) if self._rows else None
        return self._current

    def nextset(self) -> Optional[bool]:
        self._invalidate_current()
        self._index += 1
        if self._index >= len(self._outcomes):
            self.description = None
            self.rowcount = -1
            self.messages = []
            return None
        self._load()
        return True

    def close(self) -> None:
        self._invalidate_current()
        self.closed = True
        if self.close_error is not None:
            raise self.close_error

    def _load(self) -> None:
        outcome = self._outcomes[self._index] if self._outcomes else 0
        if isinstance(outcome, dict):
            self.description = describe(*outcome["columns"])
            self._rows = list(outcome["rows"])
            self.rowcount = -1
        else:
            self.description = None
            self._rows = []
            self.rowcount = outcome
        self.messages = (
            self._messages[self._index] if self._index < len(self._messages) else []
        )

    def _invalidate_current(self) -> None:
        for value in self._current or ():
            if isinstance(value, FakeLob):
                value.invalidate()


class FakeAdapter(BaseAdapter):
    """Adapter for the fake driver with every capability switched on."""

    dialect = "fake"

    def __init__(
        self,
        multiple_results: bool = True,
        warnings: bool = True,
        prepared_statements: bool = True,
    ):
        self._capabilities = WalkerCapabilities(
            multiple_results=multiple_results,
            warnings=warnings,
            prepared_statements=prepared_statements,
        )

    @property
    def capabilities(self) -> WalkerCapabilities:
        return self._capabilities


@pytest.fixture
def fake_cursor() -> type[FakeCursor]:
    """Fake DB-API cursor class"""
    return FakeCursor


@pytest.fixture
def fake_lob() -> type[FakeLob]:
    """Fake cursor-bound large object class"""
    return FakeLob


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    """Adapter supporting multiple results and warnings"""
    return FakeAdapter()


@pytest.fixture
def fake_adapter_factory() -> type[FakeAdapter]:
    """Fake adapter class, for tests switching capabilities off"""
    return FakeAdapter


@pytest.fixture
def output_lines() -> list[str]:
    """Collects lines written to a walker sink"""
    return []


# ==================== SQLite Fixtures ====================


@pytest.fixture
def sqlite_config() -> DatabaseConfig:
    """In-memory SQLite configuration"""
    return DatabaseConfig(url="sqlite://")


@pytest.fixture
def sqlite_connection(sqlite_config: DatabaseConfig) -> Iterator[DatabaseConnection]:
    """SQLite database connection with proper cleanup"""
    connection = DatabaseConnection(sqlite_config)
    connection.initialize()
    try:
        yield connection
    finally:
        connection.dispose()


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "sqlite: SQLite end-to-end tests")
    config.addinivalue_line(
        "markers", "integration: Tests running real SQL through a driver"
    )
