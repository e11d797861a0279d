# Area: Game
"""
fhe_battleship._game — Game state machine internals
===================================================

Exports the state enum, the transition table and the per-participant
record used by ``fhe_battleship.game.BattleshipGame``.
"""

from .enums import GameState, GameEvent
from .player_record import PlayerRecord
from .parameters import GameParameters, validate_parameters
from .state_machine import GameStateMachine, TRANSITIONS

__all__ = [
    "GameState",
    "GameEvent",
    "PlayerRecord",
    "GameStateMachine",
    "TRANSITIONS",
    "GameParameters",
    "validate_parameters",
]
