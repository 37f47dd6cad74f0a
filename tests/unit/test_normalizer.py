"""Unit Tests for ValueNormalizer

Validates:
- Pass-through of plain values
- Large object materialization
- Vendor timestamp/date wrapper correction
- Date widening for timestamp columns
- Char -> SMALLINT coercion quirk retry
- Non-canonical driver types read as text
"""

import datetime
import decimal
import uuid

import pytest

from db_result_walker.adapters import OracleAdapter, PostgresAdapter, SQLServerAdapter
from db_result_walker.core import CursorResultSet, ValueNormalizer
from db_result_walker.errors import CoercionError, ValueReadError


class TIMESTAMP:
    """Stand-in for an oracle.sql.TIMESTAMP bridged from JDBC."""

    def __init__(self, text: str):
        self._text = text

    def timestampValue(self) -> str:
        # java.sql.Timestamp.toString() form, nanosecond fraction
        return self._text


class DATE:
    """Stand-in for an oracle.sql.DATE bridged from JDBC."""

    def __init__(self, text: str):
        self._text = text

    def timestampValue(self) -> str:
        return self._text

    def dateValue(self) -> str:
        return self._text[:10]


TIMESTAMP.__module__ = "oracle.sql"
DATE.__module__ = "oracle.sql"


def _positioned(cursor, adapter) -> CursorResultSet:
    cursor.execute("select")
    result_set = CursorResultSet(cursor, adapter)
    assert result_set.next_row()
    return result_set


class TestPlainValues:
    """Values with no quirk come back unchanged."""

    def test_passthrough(self, fake_cursor, fake_adapter):
        row = (1, "x", 2.5, decimal.Decimal("1.10"), True, None, b"\x00")
        cursor = fake_cursor(
            {"columns": ["a", "b", "c", "d", "e", "f", "g"], "rows": [row]}
        )
        result_set = _positioned(cursor, fake_adapter)
        normalizer = ValueNormalizer(fake_adapter)

        assert normalizer.normalize_row(result_set) == list(row)

    def test_datetime_passthrough(self, fake_cursor, fake_adapter):
        value = datetime.datetime(2024, 1, 15, 10, 30, 0, 5)
        cursor = fake_cursor({"columns": ["ts"], "rows": [(value,)]})
        result_set = _positioned(cursor, fake_adapter)

        assert ValueNormalizer(fake_adapter).normalize(result_set, 1) == value

    def test_index_out_of_range_raises(self, fake_cursor, fake_adapter):
        cursor = fake_cursor({"columns": ["a"], "rows": [(1,)]})
        result_set = _positioned(cursor, fake_adapter)

        with pytest.raises(ValueReadError) as exc_info:
            ValueNormalizer(fake_adapter).normalize(result_set, 2)
        assert exc_info.value.column_index == 2


class TestLargeObjects:
    """Large objects are read eagerly into detached values."""

    def test_blob_becomes_bytes(self, fake_cursor, fake_lob, fake_adapter):
        lob = fake_lob(b"\x01\x02\x03", "DB_TYPE_BLOB")
        cursor = fake_cursor({"columns": ["data"], "rows": [(lob,), (None,)]})
        result_set = _positioned(cursor, fake_adapter)

        value = ValueNormalizer(fake_adapter).normalize(result_set, 1)
        assert value == b"\x01\x02\x03"
        assert isinstance(value, bytes)

        # the handle dies with the row, the normalized value does not
        result_set.next_row()
        cursor.close()
        assert lob.valid is False
        assert value == b"\x01\x02\x03"

    def test_clob_becomes_str(self, fake_cursor, fake_lob, fake_adapter):
        lob = fake_lob("long text", "DB_TYPE_CLOB")
        cursor = fake_cursor({"columns": ["body"], "rows": [(lob,)]})
        result_set = _positioned(cursor, fake_adapter)

        assert ValueNormalizer(fake_adapter).normalize(result_set, 1) == "long text"

    def test_memoryview_becomes_bytes(self, fake_cursor, fake_adapter):
        buffer = bytearray(b"bytea")
        cursor = fake_cursor({"columns": ["b"], "rows": [(memoryview(buffer),)]})
        result_set = _positioned(cursor, fake_adapter)

        value = ValueNormalizer(fake_adapter).normalize(result_set, 1)
        buffer[0] = ord("X")
        assert value == b"bytea"
        assert type(value) is bytes


class TestVendorTemporalTypes:
    """Oracle wrapper types surface as standard datetime/date values."""

    def test_oracle_timestamp_keeps_microseconds(self, fake_cursor):
        adapter = OracleAdapter()
        cursor = fake_cursor(
            {
                "columns": [("created", "DB_TYPE_TIMESTAMP")],
                "rows": [(TIMESTAMP("2024-01-15 10:30:00.123456789"),)],
            }
        )
        result_set = _positioned(cursor, adapter)

        value = ValueNormalizer(adapter).normalize(result_set, 1)
        assert value == datetime.datetime(2024, 1, 15, 10, 30, 0, 123456)
        assert type(value) is datetime.datetime

    def test_oracle_date_in_timestamp_column(self, fake_cursor):
        adapter = OracleAdapter()
        cursor = fake_cursor(
            {
                "columns": [("d", "DB_TYPE_DATE")],
                "rows": [(DATE("2024-01-15 08:00:00"),)],
            }
        )
        result_set = _positioned(cursor, adapter)

        value = ValueNormalizer(adapter).normalize(result_set, 1)
        assert value == datetime.datetime(2024, 1, 15, 8, 0, 0)

    def test_oracle_date_in_date_column(self, fake_cursor):
        adapter = OracleAdapter()
        cursor = fake_cursor(
            {"columns": ["d"], "rows": [(DATE("2024-01-15 08:00:00"),)]}
        )
        result_set = _positioned(cursor, adapter)

        value = ValueNormalizer(adapter).normalize(result_set, 1)
        assert value == datetime.date(2024, 1, 15)
        assert type(value) is datetime.date

    def test_date_widened_for_timestamp_column(self, fake_cursor, fake_adapter):
        cursor = fake_cursor(
            {
                "columns": [("ts", datetime.datetime)],
                "rows": [(datetime.date(2024, 1, 15),)],
            }
        )
        result_set = _positioned(cursor, fake_adapter)

        value = ValueNormalizer(fake_adapter).normalize(result_set, 1)
        assert value == datetime.datetime(2024, 1, 15, 0, 0)

    def test_date_kept_for_date_column(self, fake_cursor, fake_adapter):
        cursor = fake_cursor(
            {
                "columns": [("d", datetime.date)],
                "rows": [(datetime.date(2024, 1, 15),)],
            }
        )
        result_set = _positioned(cursor, fake_adapter)

        value = ValueNormalizer(fake_adapter).normalize(result_set, 1)
        assert type(value) is datetime.date


class TestCoercionQuirk:
    """char -> SMALLINT failures are retried as text, others propagate."""

    smallint = ("kind", int, None, None, 5, 0, True)
    integer = ("id", int, None, None, 10, 0, True)

    def test_char_in_smallint_read_as_text(self, fake_cursor):
        adapter = SQLServerAdapter()
        cursor = fake_cursor(
            {
                "columns": [self.integer, "name", self.smallint],
                "rows": [(1, "users", "U ")],
            }
        )
        result_set = _positioned(cursor, adapter)

        assert ValueNormalizer(adapter).normalize_row(result_set) == [1, "users", "U "]

    def test_numeric_text_in_smallint_is_coerced(self, fake_cursor):
        adapter = SQLServerAdapter()
        cursor = fake_cursor({"columns": [self.smallint], "rows": [("12",)]})
        result_set = _positioned(cursor, adapter)

        assert ValueNormalizer(adapter).normalize(result_set, 1) == 12

    def test_other_coercion_failures_propagate(self, fake_cursor):
        adapter = SQLServerAdapter()
        cursor = fake_cursor({"columns": [self.integer], "rows": [("abc",)]})
        result_set = _positioned(cursor, adapter)

        with pytest.raises(CoercionError) as exc_info:
            ValueNormalizer(adapter).normalize(result_set, 1)
        assert exc_info.value.target_type == "INTEGER"
        assert exc_info.value.column_index == 1

    def test_driver_message_recognized(self, fake_adapter):
        error = Exception(
            "[22018] [Microsoft][ODBC Driver]"
            "The conversion from char to SMALLINT is unsupported."
        )
        assert fake_adapter.is_coercion_quirk(error)
        assert not fake_adapter.is_coercion_quirk(Exception("deadlock"))

    def test_failing_text_retry_propagates(self, fake_cursor, fake_adapter):
        class QuirkyResultSet:
            columns = []

            def get_object(self, index):
                raise CoercionError("quirk", "char", "SMALLINT", index)

            def get_string(self, index):
                raise RuntimeError("connection reset")

        with pytest.raises(ValueReadError) as exc_info:
            ValueNormalizer(fake_adapter).normalize(QuirkyResultSet(), 3)
        assert exc_info.value.column_index == 3
        assert "connection reset" in str(exc_info.value)


class TestNonCanonicalValues:
    """Driver types outside the canonical kinds are read as text."""

    def test_postgres_time_interval_json(self, fake_cursor):
        adapter = PostgresAdapter()
        cursor = fake_cursor(
            {
                "columns": [("t", 1083), ("i", 1186), ("j", 114), ("a", 1007)],
                "rows": [
                    (
                        datetime.time(10, 30),
                        datetime.timedelta(days=1, hours=2),
                        {"a": 1, "b": [True, None]},
                        [1, 2],
                    )
                ],
            }
        )
        result_set = _positioned(cursor, adapter)

        assert ValueNormalizer(adapter).normalize_row(result_set) == [
            "10:30:00",
            "1 day, 2:00:00",
            '{"a":1,"b":[true,null]}',
            "[1,2]",
        ]

    def test_uuid_as_text(self, fake_cursor, fake_adapter):
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        cursor = fake_cursor({"columns": ["id"], "rows": [(value,)]})
        result_set = _positioned(cursor, fake_adapter)

        assert (
            ValueNormalizer(fake_adapter).normalize(result_set, 1)
            == "12345678-1234-5678-1234-567812345678"
        )
