# Area: Registry
"""
fhe_battleship._registry.database — Feed storage
================================================

Opens the SQLite file behind the game-created feed. Each unit of work
gets its own short-lived connection that commits on success and rolls
back on error, so one feed file can be shared by several threads.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger("fhe_battleship.registry")

SCHEMA_PATH = Path(__file__).parent / "schema.sql"
DEFAULT_DB_PATH = "battleship_games.db"
BUSY_TIMEOUT_SECONDS = 5.0


@contextmanager
def open_feed(db_path: str = DEFAULT_DB_PATH) -> Iterator[sqlite3.Connection]:
    """Yield a connection whose work is committed together or not at all."""
    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_SECONDS)
    conn.row_factory = sqlite3.Row
    try:
        with conn:
            yield conn
    finally:
        conn.close()


def init_database(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the feed tables if the file does not have them yet."""
    with open_feed(db_path) as conn:
        conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
    logger.debug(f"Feed schema ready at {db_path}")
