"""Execution outcome, column metadata and warning models."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class ColumnDescriptor(BaseModel):
    """Metadata for one column of a single result set."""

    position: int = Field(..., ge=1, description="1-based column position")
    label: str = Field(..., description="Declared column label")
    class_name: Optional[str] = Field(
        None,
        description="Implementation class the driver reports for this column",
    )
    type_name: Optional[str] = Field(
        None, description="Declared SQL type name, when the driver exposes it"
    )
    type_code: Any = Field(None, description="Raw DB-API type_code")


class WarningRecord(BaseModel):
    """One link of a driver warning chain attached to an execution step."""

    error_code: int = Field(default=0, description="Vendor error code, 0 if absent")
    sql_state: Optional[str] = Field(None, description="SQLSTATE, if reported")
    message: str = Field(..., description="Warning text")
    next_warning: Optional["WarningRecord"] = Field(
        None, description="Next record in the chain"
    )

    @classmethod
    def chain(cls, records: list["WarningRecord"]) -> Optional["WarningRecord"]:
        """Link a flat list of records into a chain and return its head."""
        head: Optional[WarningRecord] = None
        for record in reversed(records):
            head = record.model_copy(update={"next_warning": head})
        return head


WarningRecord.model_rebuild()


class ClassifiedWarning(BaseModel):
    """A warning record classified as plain output or a structured diagnostic."""

    kind: Literal["info", "diagnostic"]
    message: str
    error_code: int = 0
    sql_state: Optional[str] = None

    @property
    def is_info(self) -> bool:
        return self.kind == "info"

    def render(self) -> str:
        """Format the warning the way it is written to the output sink."""
        if self.is_info:
            return f"SQLOUT: {self.message}"
        return (
            "***** Database Message *****\n"
            f"Code:   {self.error_code}\n"
            f"Message:  {self.message}\n"
            f"SQLState: {self.sql_state}"
        )


class RenderedOutcome(BaseModel):
    """One consumed execution outcome: a rendered result set or an update count."""

    kind: Literal["result_set", "update_count"]
    text: str = Field(..., description="Rendered table or update count line")
    row_count: int = Field(..., ge=0, description="Rows rendered or affected")
    columns: list[str] = Field(default_factory=list, description="Column labels")
    rows: list[list[Any]] = Field(
        default_factory=list, description="Normalized row values"
    )

    @property
    def summary(self) -> str:
        return f"{self.row_count} row(s) affected"

    @property
    def is_result_set(self) -> bool:
        return self.kind == "result_set"


class WalkResult(BaseModel):
    """Every outcome of one statement execution, in driver order."""

    sql: Optional[str] = Field(None, description="Executed SQL, if literal")
    outcomes: list[RenderedOutcome] = Field(default_factory=list)
    warnings: list[ClassifiedWarning] = Field(default_factory=list)

    @property
    def result_sets(self) -> list[RenderedOutcome]:
        return [o for o in self.outcomes if o.is_result_set]

    @property
    def update_counts(self) -> list[int]:
        return [o.row_count for o in self.outcomes if not o.is_result_set]

    @property
    def lines(self) -> list[str]:
        """Outcome output as written to the sink, without warnings."""
        lines: list[str] = []
        for outcome in self.outcomes:
            if outcome.is_result_set:
                lines.append(outcome.text)
            lines.append(outcome.summary)
        return lines

    def to_json(self) -> str:
        from db_result_walker.utils.serialization import dumps

        return dumps(self.model_dump())
