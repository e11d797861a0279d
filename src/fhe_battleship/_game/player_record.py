# Area: Game
"""
fhe_battleship._game.player_record — Per-participant confidential record
========================================================================
"""

from dataclasses import dataclass

from ..types import ZERO_HANDLE


@dataclass
class PlayerRecord:
    """
    Confidential data held for one participant of a match.

    Attributes:
        ship_placement: Handle of the participant's ship bitmask (set once)
        has_placed_ships: True after the first accepted placement
        move_mask: Handle of the cells the opponent has targeted
        hits_mask: Handle of the targeted cells that held a ship
    """

    ship_placement: str = ZERO_HANDLE
    has_placed_ships: bool = False
    move_mask: str = ZERO_HANDLE
    hits_mask: str = ZERO_HANDLE
