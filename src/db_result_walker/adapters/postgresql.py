"""PostgreSQL adapter for psycopg2."""

import re
from typing import Any

from db_result_walker.adapters.base import DATE_CLASS, TIMESTAMP_CLASS, BaseAdapter
from db_result_walker.models.capabilities import WalkerCapabilities
from db_result_walker.models.result import WarningRecord

# psycopg2 prefixes each notice with its severity: "NOTICE:  text\n"
_NOTICE_RE = re.compile(r"^\s*([A-Z]+):\s+(.*?)\s*$", re.DOTALL)

# Severities PostgreSQL uses for plain RAISE/print-style output
_INFO_SEVERITIES = {"NOTICE", "INFO", "LOG", "DEBUG"}


class PostgresAdapter(BaseAdapter):
    """PostgreSQL adapter.

    psycopg2 hands bytea back as ``memoryview`` (bound to the row buffer) and
    reports column types as OIDs.
    """

    dialect = "postgresql"

    type_code_classes = {
        16: "builtins.bool",
        17: "builtins.memoryview",
        20: "builtins.int",
        21: "builtins.int",
        23: "builtins.int",
        25: "builtins.str",
        700: "builtins.float",
        701: "builtins.float",
        1042: "builtins.str",
        1043: "builtins.str",
        1082: DATE_CLASS,
        1083: "datetime.time",
        1114: TIMESTAMP_CLASS,
        1184: TIMESTAMP_CLASS,
        1700: "decimal.Decimal",
    }

    @property
    def capabilities(self) -> WalkerCapabilities:
        """psycopg2 raises NotSupportedError from nextset()."""
        return WalkerCapabilities(
            multiple_results=False,
            warnings=True,
            prepared_statements=True,
        )

    def fold_case(self, name: str) -> str:
        """Unquoted identifiers fold to lower case."""
        return name.lower()

    def collect_warnings(self, cursor: Any, connection: Any) -> list[WarningRecord]:
        """Drain ``connection.notices``; psycopg2 keeps appending until cleared."""
        notices = getattr(connection, "notices", None)
        if not notices:
            return []

        records = []
        for notice in list(notices):
            match = _NOTICE_RE.match(str(notice))
            if match is None:
                records.append(WarningRecord(message=str(notice).strip()))
                continue
            severity, message = match.groups()
            if severity in _INFO_SEVERITIES:
                records.append(WarningRecord(message=message))
            else:
                records.append(WarningRecord(message=message, sql_state="01000"))
        del notices[:]
        return records
