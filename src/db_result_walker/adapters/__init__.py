"""Database adapters for specific driver behaviour."""

from typing import Union

from .base import BaseAdapter, ValueQuirk
from .mssql import SQLServerAdapter
from .mysql import MySQLAdapter
from .oracle import OracleAdapter
from .postgresql import PostgresAdapter
from .sqlite import SQLiteAdapter
from ..models.config import DatabaseConfig

__all__ = [
    "BaseAdapter",
    "ValueQuirk",
    "SQLiteAdapter",
    "PostgresAdapter",
    "MySQLAdapter",
    "SQLServerAdapter",
    "OracleAdapter",
    "create_adapter",
]

ADAPTERS: dict[str, type[BaseAdapter]] = {
    "sqlite": SQLiteAdapter,
    "postgresql": PostgresAdapter,
    "mysql": MySQLAdapter,
    "mssql": SQLServerAdapter,
    "oracle": OracleAdapter,
}


def create_adapter(config: Union[DatabaseConfig, str]) -> BaseAdapter:
    """
    Factory function to create appropriate database adapter.

    Args:
        config: Database configuration, or a bare dialect name

    Returns:
        Database adapter instance

    Raises:
        ValueError: If database type is not supported
    """
    dialect = config if isinstance(config, str) else config.dialect

    adapter_class = ADAPTERS.get(dialect)

    if adapter_class is None:
        raise ValueError(
            f"Unsupported database dialect: {dialect}. "
            f"Supported dialects: {', '.join(ADAPTERS.keys())}"
        )

    return adapter_class()
