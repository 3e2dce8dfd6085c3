"""
SQLite store access: opening the connection and running bound queries.
"""

import logging
import sqlite3
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Tuple

from errors import QueryError, StoreConnectionError


logger = logging.getLogger(__name__)


@dataclass
class TableResult:
    """Column labels and rows of one query, rows in column order."""

    columns: List[str] = field(default_factory=list)
    rows: List[Tuple] = field(default_factory=list)

    def __len__(self):
        return len(self.rows)

    @property
    def empty(self) -> bool:
        return not self.rows


def connect(database) -> sqlite3.Connection:
    """Open an existing database file. A missing file is a StoreConnectionError, not a new empty DB."""
    try:
        uri = Path(database).resolve().as_uri() + "?mode=rw"
        return sqlite3.connect(uri, uri=True)
    except sqlite3.Error as e:
        raise StoreConnectionError(f"Could not open database {database}: {e}") from e


class SqliteExecutor:
    """Runs a template with its ordered parameters over one connection."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def execute(self, template: str, params=()) -> TableResult:
        params = list(params)
        logger.debug("Executing SQL: %s | params=%r", " ".join(template.split()), params)
        try:
            cursor = self.conn.cursor()
            cursor.execute(template, params)
            columns = [desc[0] for desc in cursor.description] if cursor.description else []
            rows = cursor.fetchall()
        except sqlite3.ProgrammingError as e:
            if "closed" in str(e).lower():
                raise StoreConnectionError(f"Database connection lost: {e}") from e
            raise QueryError(str(e)) from e
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e
        except OverflowError as e:
            raise QueryError(f"Value out of range: {e}") from e

        logger.debug("Query returned %d rows", len(rows))
        return TableResult(columns, rows)

    def close(self):
        self.conn.close()
