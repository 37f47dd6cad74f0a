"""Base adapter abstract class for database-specific driver behaviour."""

import datetime
import decimal
import io
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from db_result_walker.errors import CoercionError
from db_result_walker.models.capabilities import WalkerCapabilities
from db_result_walker.models.result import ColumnDescriptor, WarningRecord
from db_result_walker.utils.serialization import dumps

if TYPE_CHECKING:
    from db_result_walker.core.statement import ResultSet

TIMESTAMP_CLASS = "datetime.datetime"
DATE_CLASS = "datetime.date"

# Message the Microsoft drivers attach to the char -> SMALLINT read defect
CHAR_TO_SMALLINT_MESSAGE = "The conversion from char to SMALLINT is unsupported."

_QUOTE_PAIRS = {'"': '"', "`": "`", "[": "]"}
_TIMESTAMP_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[ T](\d{2}:\d{2}:\d{2})(?:\.(\d+))?\s*(.*)$"
)

# Value kinds the normalizer hands out; datetime is a date subclass
CANONICAL_TYPES = (bool, int, float, decimal.Decimal, str, bytes, datetime.date)


@dataclass(frozen=True)
class ValueQuirk:
    """One entry of a backend's ordered value-correction table.

    ``applies`` inspects the value returned by the generic read together with
    the column metadata; ``read`` performs the corrective read against the
    current row of the result set.
    """

    name: str
    applies: Callable[[Any, ColumnDescriptor], bool]
    read: Callable[["ResultSet", int, ColumnDescriptor], Any]


def implementation_class_name(value: Any) -> str:
    """
    Qualified implementation class name of a driver value.

    Java objects bridged into Python (JayDeBeApi/JPype) report their Java
    class name, everything else reports ``module.QualName``.
    """
    get_class = getattr(value, "getClass", None)
    if callable(get_class):
        return str(get_class().getName())
    cls = type(value)
    return f"{cls.__module__}.{cls.__qualname__}"


def large_object_kind(value: Any) -> Optional[str]:
    """Return "binary" or "character" for cursor-bound large objects, else None."""
    if isinstance(value, (memoryview, bytearray)):
        return "binary"
    if not callable(getattr(value, "read", None)):
        return None
    lob_type = str(getattr(value, "type", None) or type(value).__name__).upper()
    if "CLOB" in lob_type or isinstance(value, io.TextIOBase):
        return "character"
    return "binary"


def parse_timestamp(text: str) -> datetime.datetime:
    """
    Parse a textual timestamp as rendered by JDBC/ODBC drivers.

    Fractions longer than microseconds (``.123456789``) are truncated.
    """
    match = _TIMESTAMP_RE.match(text.strip())
    if match is None:
        return datetime.datetime.fromisoformat(text.strip())
    day, clock, fraction, zone = match.groups()
    fraction = (fraction or "0")[:6].ljust(6, "0")
    return datetime.datetime.fromisoformat(f"{day} {clock}.{fraction}{zone}")


def _read_large_object(value: Any) -> Any:
    if isinstance(value, (memoryview, bytearray)):
        return bytes(value)
    return value.read()


class BaseAdapter(ABC):
    """Base adapter defining database-specific driver behaviour."""

    dialect: str = ""

    # Class names that mean "this column really holds a timestamp"
    timestamp_class_names: frozenset[str] = frozenset({TIMESTAMP_CLASS})

    # DB-API type_code (or its .name) -> implementation class name
    type_code_classes: dict[Any, str] = {}

    # Declared SQL type name -> converter applied by the generic read
    type_coercions: dict[str, Callable[[Any], Any]] = {}

    @property
    @abstractmethod
    def capabilities(self) -> WalkerCapabilities:
        """Get driver capabilities for this database type."""
        ...

    # ---- identifiers -------------------------------------------------------

    def correct_object_name(self, name: str) -> str:
        """
        Normalize an identifier the way the database stores it.

        Quoted identifiers are unquoted and kept verbatim; unquoted ones go
        through the backend's case folding.
        """
        name = name.strip()
        if len(name) > 1 and _QUOTE_PAIRS.get(name[0]) == name[-1]:
            return name[1:-1]
        return self.fold_case(name)

    def fold_case(self, name: str) -> str:
        return name

    # ---- column metadata ---------------------------------------------------

    def describe_column(self, position: int, entry: Sequence[Any]) -> ColumnDescriptor:
        """Build a column descriptor from one ``cursor.description`` entry."""
        type_code = entry[1] if len(entry) > 1 else None
        return ColumnDescriptor(
            position=position,
            label=str(entry[0]),
            class_name=self.column_class_name(type_code),
            type_name=self.column_type_name(entry),
            type_code=type_code,
        )

    def column_class_name(self, type_code: Any) -> Optional[str]:
        """Implementation class name for a DB-API type_code, if known."""
        if type_code is None:
            return None
        if isinstance(type_code, type):
            return f"{type_code.__module__}.{type_code.__qualname__}"
        key = getattr(type_code, "name", type_code)
        try:
            return self.type_code_classes.get(key)
        except TypeError:
            # unhashable type_code
            return None

    def column_type_name(self, entry: Sequence[Any]) -> Optional[str]:
        """Declared SQL type name for a description entry, if derivable."""
        return None

    def is_timestamp_column(self, column: ColumnDescriptor) -> bool:
        return column.class_name in self.timestamp_class_names

    # ---- value reads -------------------------------------------------------

    def read_object(self, raw: Any, column: ColumnDescriptor) -> Any:
        """
        Generic typed read of a raw cell.

        Applies the converter registered for the column's declared type.

        Raises:
            CoercionError: If the raw value cannot be held by the declared type
        """
        target = (column.type_name or "").upper()
        convert = self.type_coercions.get(target)
        if convert is None or raw is None:
            return raw
        try:
            return convert(raw)
        except (TypeError, ValueError) as e:
            source = "char" if isinstance(raw, str) else type(raw).__name__
            raise CoercionError(
                f"The conversion from {source} to {target} is unsupported.",
                source_type=source,
                target_type=target,
                column_index=column.position,
            ) from e

    def is_coercion_quirk(self, error: BaseException) -> bool:
        """Whether a failed generic read is the known char -> SMALLINT defect."""
        if isinstance(error, CoercionError):
            return (
                error.source_type == "char" and error.target_type.upper() == "SMALLINT"
            )
        return CHAR_TO_SMALLINT_MESSAGE in str(error)

    def to_string(self, raw: Any) -> Optional[str]:
        if raw is None or isinstance(raw, str):
            return raw
        if large_object_kind(raw) is not None:
            raw = _read_large_object(raw)
        if isinstance(raw, (bytes, bytearray)):
            return bytes(raw).decode("utf-8")
        if isinstance(raw, (dict, list)):
            # psycopg2 json/jsonb and array columns
            return dumps(raw)
        return str(raw)

    def to_bytes(self, raw: Any) -> Optional[bytes]:
        if raw is None or isinstance(raw, bytes):
            return raw
        if large_object_kind(raw) is not None:
            raw = _read_large_object(raw)
        if isinstance(raw, str):
            return raw.encode("utf-8")
        return bytes(raw)

    def to_timestamp(self, raw: Any) -> Optional[datetime.datetime]:
        if raw is None or isinstance(raw, datetime.datetime):
            return raw
        if isinstance(raw, datetime.date):
            return datetime.datetime.combine(raw, datetime.time())
        for accessor in ("timestampValue", "to_pydatetime"):
            read = getattr(raw, accessor, None)
            if callable(read):
                return self.to_timestamp(read())
        if isinstance(raw, bytes):
            raw = raw.decode("ascii")
        return parse_timestamp(str(raw))

    def to_date(self, raw: Any) -> Optional[datetime.date]:
        if raw is None:
            return None
        if isinstance(raw, datetime.datetime):
            return raw.date()
        if isinstance(raw, datetime.date):
            return raw
        read = getattr(raw, "dateValue", None)
        if callable(read):
            return self.to_date(read())
        text = str(raw).strip()
        if len(text) > 10:
            return parse_timestamp(text).date()
        return datetime.date.fromisoformat(text)

    # ---- quirk table -------------------------------------------------------

    def value_quirks(self) -> list[ValueQuirk]:
        """Ordered corrections applied after the generic read; first match wins."""
        return [
            ValueQuirk(
                name="binary-large-object",
                applies=lambda value, column: large_object_kind(value) == "binary",
                read=lambda rs, index, column: rs.get_bytes(index),
            ),
            ValueQuirk(
                name="character-large-object",
                applies=lambda value, column: large_object_kind(value) == "character",
                read=lambda rs, index, column: rs.get_string(index),
            ),
            *self.vendor_value_quirks(),
            ValueQuirk(
                name="date-in-timestamp-column",
                applies=lambda value, column: (
                    isinstance(value, datetime.date)
                    and not isinstance(value, datetime.datetime)
                    and self.is_timestamp_column(column)
                ),
                read=lambda rs, index, column: rs.get_timestamp(index),
            ),
            ValueQuirk(
                name="non-canonical-as-text",
                applies=lambda value, column: not isinstance(value, CANONICAL_TYPES),
                read=lambda rs, index, column: rs.get_string(index),
            ),
        ]

    def vendor_value_quirks(self) -> list[ValueQuirk]:
        """Backend-specific wrapper-type corrections."""
        return []

    # ---- warnings ----------------------------------------------------------

    def collect_warnings(self, cursor: Any, connection: Any) -> list[WarningRecord]:
        """
        Drain driver notices produced by the last execution step.

        Args:
            cursor: DB-API cursor that ran the step
            connection: DB-API connection owning the cursor (may be None)

        Returns:
            Warning records in the order the driver reported them
        """
        return []
