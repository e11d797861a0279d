# Area: Registry
"""
fhe_battleship._registry.repo_games — Created-games Repository
==============================================================

Repository for the created_games table. Rows are only ever inserted;
a game's record never changes after creation.
"""

import logging
from typing import Any, Dict, List, Optional

from .database import DEFAULT_DB_PATH, init_database, open_feed
from ..types import GameCreated

logger = logging.getLogger("fhe_battleship.registry")

_INSERT = """
    INSERT OR IGNORE INTO created_games
    (game_address, creator, board_size, ship_count, sequence)
    VALUES (?, ?, ?, ?,
            (SELECT COALESCE(MAX(sequence), -1) + 1 FROM created_games))
"""


class GameRecordRepository:
    """
    Repository for created_games.

    The schema is created on construction. Instances are callable so
    they can be subscribed to a factory:

        factory.subscribe(GameRecordRepository(db_path))
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        init_database(db_path)

    def __call__(self, event: GameCreated) -> None:
        self.record(event)

    def record(self, event: GameCreated) -> Optional[int]:
        """
        Append a creation record.

        Args:
            event: The factory's GameCreated record

        Returns:
            The feed position assigned to the game, or None if the game
            was already recorded
        """
        params = (event.game_address, event.creator, event.board_size, event.ship_count)
        with open_feed(self.db_path) as conn:
            cursor = conn.execute(_INSERT, params)
            if cursor.rowcount == 0:
                logger.debug(f"Game {event.game_address} already in feed")
                return None
            row = conn.execute(
                "SELECT sequence FROM created_games WHERE rowid = ?", (cursor.lastrowid,)
            ).fetchone()
        return row["sequence"]

    def get_game(self, game_address: str) -> Optional[Dict[str, Any]]:
        """
        Get a creation record by game address.

        Returns:
            Record dict or None if not found
        """
        rows = self._select(
            "SELECT * FROM created_games WHERE game_address = ?", (game_address.lower(),)
        )
        return rows[0] if rows else None

    def get_all_games(self) -> List[Dict[str, Any]]:
        """All creation records, newest first."""
        return self._select("SELECT * FROM created_games ORDER BY sequence DESC")

    def get_games_by_creator(self, creator: str) -> List[Dict[str, Any]]:
        """Creation records of one creator, newest first."""
        return self._select(
            "SELECT * FROM created_games WHERE creator = ? ORDER BY sequence DESC",
            (creator.lower(),),
        )

    def count(self) -> int:
        return self._select("SELECT COUNT(*) AS n FROM created_games")[0]["n"]

    def _select(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        with open_feed(self.db_path) as conn:
            return [dict(row) for row in conn.execute(query, params).fetchall()]
