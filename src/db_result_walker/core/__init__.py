"""Core statement execution and result walking layer."""

from .connection import DatabaseConnection
from .normalizer import ValueNormalizer
from .resolver import find_column, resolve_column_value
from .statement import (
    CursorResultSet,
    CursorStatement,
    PreparedCursorStatement,
    PreparedStatement,
    ResultSet,
    Statement,
    close,
    close_quietly,
    quietly_closing,
)
from .walker import ResultWalker, render_value
from .warning_chain import WarningChainReporter, classify_warning, iter_warning_chain

__all__ = [
    "DatabaseConnection",
    "ValueNormalizer",
    "find_column",
    "resolve_column_value",
    "ResultSet",
    "Statement",
    "PreparedStatement",
    "CursorResultSet",
    "CursorStatement",
    "PreparedCursorStatement",
    "close",
    "close_quietly",
    "quietly_closing",
    "ResultWalker",
    "render_value",
    "WarningChainReporter",
    "classify_warning",
    "iter_warning_chain",
]
