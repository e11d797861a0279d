# Area: Registry
"""
fhe_battleship._registry — Persistent feed of created games
===========================================================

Stores the factory's GameCreated records in SQLite so a lobby can list
open matches after a restart.
"""

from .database import init_database, open_feed
from .repo_games import GameRecordRepository

__all__ = ["init_database", "open_feed", "GameRecordRepository"]
