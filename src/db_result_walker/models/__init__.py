"""Pydantic models for configuration, metadata and execution outcomes."""

from .capabilities import WalkerCapabilities
from .config import DatabaseConfig
from .result import (
    ClassifiedWarning,
    ColumnDescriptor,
    RenderedOutcome,
    WalkResult,
    WarningRecord,
)

__all__ = [
    "WalkerCapabilities",
    "DatabaseConfig",
    "ColumnDescriptor",
    "WarningRecord",
    "ClassifiedWarning",
    "RenderedOutcome",
    "WalkResult",
]
