# Area: Game
"""
fhe_battleship._game.parameters — Game creation parameters
==========================================================

Validates board size and ship count with pydantic and converts
validation failures into ``InvalidParameters``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..board import MAX_BOARD_SIZE, MIN_BOARD_SIZE, MIN_SHIP_COUNT, cell_count
from ..errors import InvalidParameters


class GameParameters(BaseModel):
    """Board size and ship count of a match."""

    model_config = ConfigDict(frozen=True, strict=True)

    board_size: int = Field(ge=MIN_BOARD_SIZE, le=MAX_BOARD_SIZE)
    ship_count: int = Field(ge=MIN_SHIP_COUNT)

    @model_validator(mode="after")
    def _ships_fit_on_board(self) -> "GameParameters":
        cells = cell_count(self.board_size)
        if self.ship_count > cells:
            raise ValueError(
                f"ship_count must not exceed the {cells} cells of the board"
            )
        return self


def validate_parameters(board_size: Any, ship_count: Any) -> GameParameters:
    """
    Validate creation parameters.

    Raises:
        InvalidParameters: If either value is out of range
    """
    try:
        return GameParameters(board_size=board_size, ship_count=ship_count)
    except ValidationError as e:
        reasons = []
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            reasons.append(f"{location}: {error['msg']}" if location else error["msg"])
        raise InvalidParameters(board_size, ship_count, "; ".join(reasons)) from None
