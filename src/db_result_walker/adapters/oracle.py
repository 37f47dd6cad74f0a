"""Oracle adapter for python-oracledb, cx_Oracle and JDBC bridges."""

from typing import Any

from db_result_walker.adapters.base import (
    TIMESTAMP_CLASS,
    BaseAdapter,
    ValueQuirk,
    implementation_class_name,
)
from db_result_walker.models.capabilities import WalkerCapabilities
from db_result_walker.models.result import WarningRecord

ORACLE_TIMESTAMP_CLASS = "oracle.sql.TIMESTAMP"
ORACLE_DATE_CLASS = "oracle.sql.DATE"


class OracleAdapter(BaseAdapter):
    """Oracle adapter.

    LOB columns come back as ``LOB`` handles that are only readable while the
    cursor sits on their row. When Oracle is reached through a JDBC bridge
    (JayDeBeApi), TIMESTAMP and DATE columns surface as ``oracle.sql``
    wrapper objects instead of Python datetimes.
    """

    dialect = "oracle"

    timestamp_class_names = frozenset(
        {TIMESTAMP_CLASS, "java.sql.Timestamp", ORACLE_TIMESTAMP_CLASS}
    )

    type_code_classes = {
        # Oracle DATE carries a time of day
        "DB_TYPE_DATE": TIMESTAMP_CLASS,
        "DB_TYPE_TIMESTAMP": TIMESTAMP_CLASS,
        "DB_TYPE_TIMESTAMP_TZ": TIMESTAMP_CLASS,
        "DB_TYPE_TIMESTAMP_LTZ": TIMESTAMP_CLASS,
        "DB_TYPE_CHAR": "builtins.str",
        "DB_TYPE_NCHAR": "builtins.str",
        "DB_TYPE_VARCHAR": "builtins.str",
        "DB_TYPE_NVARCHAR": "builtins.str",
        "DB_TYPE_RAW": "builtins.bytes",
        "DB_TYPE_BLOB": "oracledb.LOB",
        "DB_TYPE_CLOB": "oracledb.LOB",
        "DB_TYPE_NCLOB": "oracledb.LOB",
    }

    @property
    def capabilities(self) -> WalkerCapabilities:
        """Implicit results are not exposed through nextset()."""
        return WalkerCapabilities(
            multiple_results=False,
            warnings=True,
            prepared_statements=True,
        )

    def fold_case(self, name: str) -> str:
        """Unquoted identifiers fold to upper case."""
        return name.upper()

    def vendor_value_quirks(self) -> list[ValueQuirk]:
        return [
            ValueQuirk(
                name="oracle-timestamp",
                applies=lambda value, column: implementation_class_name(
                    value
                ).startswith(ORACLE_TIMESTAMP_CLASS),
                read=lambda rs, index, column: rs.get_timestamp(index),
            ),
            ValueQuirk(
                name="oracle-date",
                applies=lambda value, column: implementation_class_name(
                    value
                ).startswith(ORACLE_DATE_CLASS),
                read=self._read_oracle_date,
            ),
        ]

    def _read_oracle_date(self, rs: Any, index: int, column: Any) -> Any:
        """DATE wrappers become timestamps when metadata says the column is one."""
        if self.is_timestamp_column(column):
            return rs.get_timestamp(index)
        return rs.get_date(index)

    def collect_warnings(self, cursor: Any, connection: Any) -> list[WarningRecord]:
        """python-oracledb sets ``cursor.warning`` e.g. for PL/SQL compiled with errors."""
        warning = getattr(cursor, "warning", None)
        if warning is None:
            return []
        return [
            WarningRecord(
                error_code=getattr(warning, "code", 0) or 0,
                sql_state=getattr(warning, "full_code", None),
                message=getattr(warning, "message", None) or str(warning),
            )
        ]
