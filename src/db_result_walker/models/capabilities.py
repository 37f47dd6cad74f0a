"""Driver capabilities model."""

from pydantic import BaseModel, Field


class WalkerCapabilities(BaseModel):
    """Flags describing what a backend's DB-API driver can report."""

    multiple_results: bool = Field(
        default=False,
        description="Cursor supports nextset() to advance between outcomes",
    )
    warnings: bool = Field(
        default=False,
        description="Driver exposes server notices/messages after execution",
    )
    prepared_statements: bool = Field(
        default=True,
        description="Driver accepts bound parameters on execute()",
    )

    def get_supported_features(self) -> list[str]:
        """Get list of supported feature names."""
        return [
            field_name
            for field_name, value in self.model_dump().items()
            if value is True
        ]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "multiple_results": True,
                    "warnings": True,
                    "prepared_statements": True,
                }
            ]
        }
    }
