# Area: Game Tests
"""Tests for game creation parameter validation."""

import pytest
from fhe_battleship._game.parameters import GameParameters, validate_parameters
from fhe_battleship.errors import InvalidParameters


class TestValidateParameters:
    """Tests for validate_parameters()."""

    @pytest.mark.parametrize("board_size,ship_count", [(3, 2), (3, 9), (5, 5), (10, 100)])
    def test_accepts_legal_values(self, board_size, ship_count):
        """Test legal combinations are accepted."""
        params = validate_parameters(board_size, ship_count)
        assert isinstance(params, GameParameters)
        assert params.board_size == board_size
        assert params.ship_count == ship_count

    @pytest.mark.parametrize("board_size", [2, 11, 0, -3])
    def test_rejects_board_size_out_of_range(self, board_size):
        """Test board sizes outside 3..10 are rejected."""
        with pytest.raises(InvalidParameters) as exc_info:
            validate_parameters(board_size, 2)
        assert "board_size" in exc_info.value.reason

    @pytest.mark.parametrize("ship_count", [1, 0, -1])
    def test_rejects_too_few_ships(self, ship_count):
        """Test fewer than two ships is rejected."""
        with pytest.raises(InvalidParameters):
            validate_parameters(5, ship_count)

    def test_rejects_more_ships_than_cells(self):
        """Test ship_count above board_size**2 is rejected."""
        with pytest.raises(InvalidParameters) as exc_info:
            validate_parameters(3, 10)
        assert "9 cells" in exc_info.value.reason

    @pytest.mark.parametrize("board_size,ship_count", [("5", 5), (5.0, 5), (True, 2), (5, None)])
    def test_rejects_non_integers(self, board_size, ship_count):
        """Test values that are not plain ints are rejected."""
        with pytest.raises(InvalidParameters):
            validate_parameters(board_size, ship_count)

    def test_error_carries_context(self):
        """Test the error records the offending values."""
        with pytest.raises(InvalidParameters) as exc_info:
            validate_parameters(11, 2)
        assert exc_info.value.board_size == 11
        assert exc_info.value.ship_count == 2
        assert exc_info.value.context == {"board_size": 11, "ship_count": 2}
