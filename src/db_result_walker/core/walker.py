"""Execution of a statement and consumption of every outcome it yields."""

import datetime
import logging
from typing import Any, Callable, Optional

from db_result_walker.adapters.base import BaseAdapter
from db_result_walker.core.normalizer import ValueNormalizer
from db_result_walker.core.statement import PreparedStatement, Statement, quietly_closing
from db_result_walker.core.warning_chain import WarningChainReporter
from db_result_walker.errors import ExecutionError, UnexpectedDriverError
from db_result_walker.models.result import RenderedOutcome, WalkResult

logger = logging.getLogger(__name__)

NULL_TEXT = "NULL"


def render_value(value: Any) -> str:
    """Text of one normalized value inside a rendered table row."""
    if value is None:
        return NULL_TEXT
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


class ResultWalker:
    """Walk all result sets and update counts produced by one execution.

    Outcomes are consumed strictly in driver order. Every result set is
    drained, rendered as a tab-separated table and closed before the walker
    asks the driver for the next outcome.
    """

    def __init__(
        self,
        adapter: BaseAdapter,
        sink: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize result walker.

        Args:
            adapter: Database-specific adapter
            sink: Line-oriented output for tables, counts and warnings;
                defaults to this module's logger at INFO
        """
        self.adapter = adapter
        self.sink = sink or logger.info
        self.normalizer = ValueNormalizer(adapter)
        self.reporter = WarningChainReporter(self.sink)

    def execute(self, statement: Statement, sql: Optional[str] = None) -> WalkResult:
        """
        Execute a statement and consume every outcome.

        Args:
            statement: Open statement handle; prepared statements run their
                bound SQL and parameters
            sql: Literal SQL for non-prepared statements

        Returns:
            Rendered outcomes in driver order plus the classified warnings

        Raises:
            ExecutionError: If the initial execution fails
            ValueReadError: If a cell cannot be normalized
        """
        prepared = isinstance(statement, PreparedStatement)
        if not prepared and sql is None:
            raise ExecutionError("No SQL given for a non-prepared statement")

        try:
            if prepared:
                is_result_set = statement.execute_prepared()
            else:
                is_result_set = statement.execute(sql)
        except Exception as e:
            raise ExecutionError(f"Statement execution failed: {e}", sql) from e

        result = WalkResult(sql=sql)
        result.warnings.extend(self.reporter.report(statement))

        while True:
            if is_result_set:
                outcome = self._consume_result_set(statement)
            else:
                count = statement.get_update_count()
                if count == -1:
                    break
                outcome = RenderedOutcome(
                    kind="update_count",
                    text=f"{count} row(s) affected",
                    row_count=count,
                )
                self.sink(outcome.text)
            result.outcomes.append(outcome)

            is_result_set = statement.get_more_results()
            result.warnings.extend(self.reporter.report(statement))

        logger.debug("Walked %d outcome(s)", len(result.outcomes))
        return result

    def _consume_result_set(self, statement: Statement) -> RenderedOutcome:
        result_set = statement.get_result_set()
        if result_set is None:
            raise UnexpectedDriverError(
                "Driver reported a result set outcome but returned no result set"
            )

        with quietly_closing(result_set):
            columns = [column.label for column in result_set.columns]
            lines = ["\t".join(columns)]
            rows = []
            while result_set.next_row():
                row = self.normalizer.normalize_row(result_set)
                rows.append(row)
                lines.append("\t".join(render_value(value) for value in row))

        outcome = RenderedOutcome(
            kind="result_set",
            text="\n".join(lines),
            row_count=len(rows),
            columns=columns,
            rows=rows,
        )
        self.sink(outcome.text)
        self.sink(outcome.summary)
        return outcome
