"""SQL Server / Sybase adapter for pyodbc."""

import re
from typing import Any, Optional, Sequence

from db_result_walker.adapters.base import BaseAdapter
from db_result_walker.models.capabilities import WalkerCapabilities
from db_result_walker.models.result import WarningRecord

# pyodbc message prefix: "[01000] (50000)"
_MESSAGE_PREFIX_RE = re.compile(r"^\[(?P<state>[0-9A-Z]{5})\]\s*\((?P<code>-?\d+)\)")
# driver/server tags in front of message text: "[Microsoft][ODBC Driver 18 ...][SQL Server]"
_VENDOR_TAGS_RE = re.compile(r"^(\[[^\]]*\])+")

# Integer columns are all reported as ``int``; precision tells them apart
_INTEGER_PRECISION_NAMES = {3: "TINYINT", 5: "SMALLINT", 10: "INTEGER", 19: "BIGINT"}

# SQLSTATE ODBC attaches to PRINT and RAISERROR severity <= 10 output
_PRINT_SQL_STATE = "01000"


class SQLServerAdapter(BaseAdapter):
    """SQL Server adapter.

    Batches and stored procedures yield interleaved result sets and update
    counts; PRINT output arrives through ``cursor.messages``.
    """

    dialect = "mssql"

    type_coercions = {
        "TINYINT": int,
        "SMALLINT": int,
        "INTEGER": int,
        "BIGINT": int,
    }

    @property
    def capabilities(self) -> WalkerCapabilities:
        return WalkerCapabilities(
            multiple_results=True,
            warnings=True,
            prepared_statements=True,
        )

    def column_type_name(self, entry: Sequence[Any]) -> Optional[str]:
        """pyodbc entry: (name, type_code, display_size, internal_size, precision, scale, null_ok)."""
        type_code = entry[1] if len(entry) > 1 else None
        precision = entry[4] if len(entry) > 4 else None
        if type_code is int:
            return _INTEGER_PRECISION_NAMES.get(precision)
        return None

    def collect_warnings(self, cursor: Any, connection: Any) -> list[WarningRecord]:
        """pyodbc replaces ``cursor.messages`` on every execute()/nextset()."""
        records = []
        for prefix, text in getattr(cursor, "messages", None) or []:
            message = _VENDOR_TAGS_RE.sub("", str(text)).strip()
            match = _MESSAGE_PREFIX_RE.match(str(prefix))
            if match is None:
                records.append(WarningRecord(message=message))
                continue
            code = int(match.group("code"))
            state: Optional[str] = match.group("state")
            if code == 0 and state == _PRINT_SQL_STATE:
                state = None
            records.append(WarningRecord(error_code=code, sql_state=state, message=message))
        return records
