# Area: Game
"""
fhe_battleship._game.enums — Game State Machine Enums
=====================================================

Defines the states and events of a single match.
"""

from enum import Enum, IntEnum


class GameState(IntEnum):
    """
    States of a match. Values are ordered; a game never moves to a lower one.

    State transitions:
    WAITING_FOR_OPPONENT -> WAITING_FOR_PLACEMENTS (on OPPONENT_JOINED)
    WAITING_FOR_PLACEMENTS -> IN_PROGRESS (on PLACEMENTS_COMPLETE)
    IN_PROGRESS -> FINISHED (on GAME_FINISHED)
    """
    WAITING_FOR_OPPONENT = 0
    WAITING_FOR_PLACEMENTS = 1
    IN_PROGRESS = 2
    FINISHED = 3


class GameEvent(Enum):
    """
    Events that trigger state transitions.

    Events are triggered by:
    - OPPONENT_JOINED: join_game accepted
    - PLACEMENTS_COMPLETE: second participant's place_ships accepted
    - GAME_FINISHED: finish_game accepted
    """
    OPPONENT_JOINED = "OPPONENT_JOINED"
    PLACEMENTS_COMPLETE = "PLACEMENTS_COMPLETE"
    GAME_FINISHED = "GAME_FINISHED"
