# Area: Game
"""
fhe_battleship.board — Board geometry and bitmask helpers
=========================================================

A board of side ``n`` has ``n * n`` cells numbered row-major from 0.
Bit ``i`` of a bitmask encodes the state of cell ``i``. Ciphertexts are
128 bits wide, which covers every legal board (at most 10x10).
"""

from typing import Iterable, List

from .errors import InvalidCell, InvalidParameters

CIPHERTEXT_BITS = 128
CIPHERTEXT_MASK = (1 << CIPHERTEXT_BITS) - 1

MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 10
MIN_SHIP_COUNT = 2


def cell_count(board_size: int) -> int:
    """Number of cells on a board of the given side length."""
    return board_size * board_size


def cell_index(row: int, col: int, board_size: int) -> int:
    """
    Convert a (row, col) coordinate to a cell index.

    Raises:
        InvalidCell: If the coordinate lies outside the board
    """
    if not (0 <= row < board_size and 0 <= col < board_size):
        raise InvalidCell((row, col), cell_count(board_size))
    return row * board_size + col


def validate_cell(cell: int, board_size: int) -> int:
    """
    Check that a target cell lies on the board.

    Returns:
        The cell index

    Raises:
        InvalidCell: If the index is not an int in [0, board_size**2)
    """
    count = cell_count(board_size)
    # bool is an int subclass but never a cell
    if isinstance(cell, bool) or not isinstance(cell, int):
        raise InvalidCell(cell, count)
    if not 0 <= cell < count:
        raise InvalidCell(cell, count)
    return cell


def cell_bit(cell: int) -> int:
    """Singleton bitmask for one cell."""
    if not 0 <= cell < CIPHERTEXT_BITS:
        raise ValueError(f"Cell {cell} does not fit in {CIPHERTEXT_BITS} bits")
    return 1 << cell


def bitmask_from_cells(cells: Iterable[int]) -> int:
    """OR together the bits of the given cells."""
    mask = 0
    for cell in cells:
        mask |= cell_bit(cell)
    return mask


def ship_bitmask(cells: Iterable[int], board_size: int, ship_count: int) -> int:
    """
    Build a placement bitmask from exactly ``ship_count`` distinct cells.

    The game cannot count the bits of an encrypted placement, so clients
    check the layout here before encrypting it.

    Raises:
        InvalidCell: If a cell lies outside the board
        InvalidParameters: If a cell repeats or the count is not ship_count
    """
    chosen = [validate_cell(cell, board_size) for cell in cells]
    if len(set(chosen)) != len(chosen):
        raise InvalidParameters(board_size, ship_count, "ship cells must be distinct")
    if len(chosen) != ship_count:
        raise InvalidParameters(
            board_size, ship_count, f"expected {ship_count} ship cells, got {len(chosen)}"
        )
    return bitmask_from_cells(chosen)


def cells_from_bitmask(mask: int) -> List[int]:
    """List the cells whose bits are set, ascending."""
    cells = []
    index = 0
    while mask:
        if mask & 1:
            cells.append(index)
        mask >>= 1
        index += 1
    return cells


def popcount(mask: int) -> int:
    """Number of set bits."""
    return bin(mask).count("1")


def render_bitmask(mask: int, board_size: int, mark: str = "X", empty: str = ".") -> str:
    """Render a bitmask as a grid of rows, one line per row."""
    lines = []
    for row in range(board_size):
        cells = []
        for col in range(board_size):
            bit = 1 << (row * board_size + col)
            cells.append(mark if mask & bit else empty)
        lines.append(" ".join(cells))
    return "\n".join(lines)
