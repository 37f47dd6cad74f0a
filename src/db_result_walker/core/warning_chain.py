"""Reporting of driver warning chains."""

import logging
from typing import Callable, Iterator, Optional

from db_result_walker.core.statement import Statement
from db_result_walker.models.result import ClassifiedWarning, WarningRecord

logger = logging.getLogger(__name__)


def iter_warning_chain(head: Optional[WarningRecord]) -> Iterator[WarningRecord]:
    """Yield every record of a warning chain, head first."""
    record = head
    while record is not None:
        yield record
        record = record.next_warning


def classify_warning(record: WarningRecord) -> ClassifiedWarning:
    """Plain output has neither an error code nor a SQLSTATE."""
    if record.error_code == 0 and record.sql_state is None:
        return ClassifiedWarning(kind="info", message=record.message)
    return ClassifiedWarning(
        kind="diagnostic",
        message=record.message,
        error_code=record.error_code,
        sql_state=record.sql_state,
    )


class WarningChainReporter:
    """Classify warning chains and write them to an output sink."""

    def __init__(self, sink: Optional[Callable[[str], None]] = None):
        """
        Initialize warning reporter.

        Args:
            sink: Line-oriented output; defaults to this module's logger
        """
        self.sink = sink or logger.info

    def report_chain(self, head: Optional[WarningRecord]) -> list[ClassifiedWarning]:
        """Classify and emit every record of a chain."""
        classified = [classify_warning(record) for record in iter_warning_chain(head)]
        for warning in classified:
            self._emit(warning.render())
        return classified

    def report(self, statement: Statement) -> list[ClassifiedWarning]:
        """
        Report the statement's pending warnings, then clear them.

        Never raises: a driver failing to hand out or clear its warnings is
        logged and treated as an empty chain.
        """
        try:
            head = statement.get_warnings()
        except Exception as e:
            logger.debug("Could not read statement warnings: %s", e)
            return []
        classified = self.report_chain(head)
        try:
            statement.clear_warnings()
        except Exception as e:
            logger.debug("Could not clear statement warnings: %s", e)
        return classified

    def _emit(self, line: str) -> None:
        try:
            self.sink(line)
        except Exception as e:
            logger.debug("Warning sink failed: %s", e)
