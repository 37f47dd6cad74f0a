"""MySQL adapter for PyMySQL and mysqlclient."""

from typing import Any, Optional, Sequence

from db_result_walker.adapters.base import DATE_CLASS, TIMESTAMP_CLASS, BaseAdapter
from db_result_walker.models.capabilities import WalkerCapabilities

# MySQL protocol FIELD_TYPE codes -> declared type names
_FIELD_TYPE_NAMES = {
    0: "DECIMAL",
    1: "TINYINT",
    2: "SMALLINT",
    3: "INTEGER",
    4: "FLOAT",
    5: "DOUBLE",
    7: "TIMESTAMP",
    8: "BIGINT",
    9: "MEDIUMINT",
    10: "DATE",
    11: "TIME",
    12: "DATETIME",
    13: "YEAR",
    15: "VARCHAR",
    16: "BIT",
    245: "JSON",
    246: "DECIMAL",
    252: "BLOB",
    253: "VARCHAR",
    254: "CHAR",
}


class MySQLAdapter(BaseAdapter):
    """MySQL adapter.

    Multi-statement batches and CALLs yield several outcomes walked with
    ``nextset()`` (requires the MULTI_STATEMENTS client flag for batches).
    """

    dialect = "mysql"

    type_code_classes = {
        0: "decimal.Decimal",
        1: "builtins.int",
        2: "builtins.int",
        3: "builtins.int",
        4: "builtins.float",
        5: "builtins.float",
        7: TIMESTAMP_CLASS,
        8: "builtins.int",
        9: "builtins.int",
        10: DATE_CLASS,
        11: "datetime.timedelta",
        12: TIMESTAMP_CLASS,
        13: "builtins.int",
        15: "builtins.str",
        246: "decimal.Decimal",
        252: "builtins.bytes",
        253: "builtins.str",
        254: "builtins.str",
    }

    @property
    def capabilities(self) -> WalkerCapabilities:
        return WalkerCapabilities(
            multiple_results=True,
            warnings=False,
            prepared_statements=True,
        )

    def column_type_name(self, entry: Sequence[Any]) -> Optional[str]:
        type_code = entry[1] if len(entry) > 1 else None
        if isinstance(type_code, int):
            return _FIELD_TYPE_NAMES.get(type_code)
        return None
