"""SQLite adapter for the standard library sqlite3 driver."""

from db_result_walker.adapters.base import BaseAdapter
from db_result_walker.models.capabilities import WalkerCapabilities


class SQLiteAdapter(BaseAdapter):
    """SQLite adapter.

    sqlite3 runs one statement per execute(), reports no type codes and
    returns BLOBs as detached bytes, so no value quirks apply.
    """

    dialect = "sqlite"

    @property
    def capabilities(self) -> WalkerCapabilities:
        return WalkerCapabilities(
            multiple_results=False,
            warnings=False,
            prepared_statements=True,
        )
