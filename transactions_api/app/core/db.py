"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations on application start
(``init_db``).  Each request opens its own short-lived connection.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from pathlib import Path


logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: transaction records.  ``sale_year``/``sale_month`` are
    # derived from ``date_of_sale`` at load time so month filters compare
    # integers instead of matching the serialized date.
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            price REAL NOT NULL,
            date_of_sale TEXT NOT NULL,
            sale_year INTEGER NOT NULL,
            sale_month INTEGER NOT NULL,
            sold INTEGER NOT NULL,
            category TEXT,
            image TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    # Migration 2: indexes for the monthly aggregations.
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_transactions_sale_month
            ON transactions (sale_month, sold);
        CREATE INDEX IF NOT EXISTS idx_transactions_title
            ON transactions (title);
        """,
    ),
]


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``database_url`` is an absolute path (or the special
    ``:memory:`` name), use it directly.  Otherwise resolve it relative
    to the project root.
    """
    if database_url == ":memory:" or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent  # project root
    return str((base_dir / database_url).resolve())


def get_connection(database_url: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name.  Dates
    are kept as the ISO strings they were stored as; no type detection
    is enabled.
    """
    conn = sqlite3.connect(get_database_path(database_url))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(database_url: str) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.
    """
    conn = get_connection(database_url)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS migrations (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        current = cursor.execute("SELECT COALESCE(MAX(version), 0) FROM migrations").fetchone()[0]
        for version, script in MIGRATIONS:
            if version <= current:
                continue
            logger.info("Applying migration %s", version)
            cursor.executescript(script)
            cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            conn.commit()
    finally:
        conn.close()
