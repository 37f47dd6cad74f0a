"""Command-line entry point: run SQL and print every outcome.

Usage:
    DATABASE_URL=sqlite:///app.db python -m db_result_walker "select 1 as a"
    echo "update t set x = 1" | db-result-walker --json
"""

import argparse
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from db_result_walker.core import DatabaseConnection
from db_result_walker.errors import WalkerError
from db_result_walker.models.config import DatabaseConfig

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """Run the CLI and return its exit status."""
    # Load environment variables
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="db-result-walker",
        description="Execute SQL and print every result set, update count and warning.",
    )
    parser.add_argument("sql", nargs="?", help="SQL to execute (default: read stdin)")
    parser.add_argument(
        "--url",
        default=os.getenv("DATABASE_URL"),
        help="Database URL (default: $DATABASE_URL)",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the walk result as JSON"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    if not args.url:
        parser.error("DATABASE_URL environment variable or --url must be set")

    sql = args.sql if args.sql is not None else sys.stdin.read()
    if not sql.strip():
        parser.error("no SQL given")

    try:
        config = DatabaseConfig(url=args.url)
    except ValueError as e:
        parser.error(str(e))
    sink = logger.debug if args.json else print

    try:
        with DatabaseConnection(config) as connection:
            result = connection.run(sql, sink=sink)
    except WalkerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except Exception as e:
        # connection failures and errors from later statements of a batch
        logger.error(f"Database error: {e}", exc_info=True)
        return 1

    if args.json:
        print(result.to_json())
    return 0


def cli_entry() -> None:
    """Synchronous entry point for the console script."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
