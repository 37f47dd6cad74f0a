"""Utility modules for result walking."""

from db_result_walker.utils.serialization import dumps

__all__ = ["dumps"]
