"""
fhe_battleship.types — Identities, handles and public records
=============================================================

Identities are EVM-style addresses (``0x`` + 40 hex digits, lower case).
Ciphertext handles are opaque 32-byte references (``0x`` + 64 hex digits).
Neither carries plaintext: a handle only names a value held by the
confidential computation capability.

All types are exported from the main package:

    from fhe_battleship import GameCreated, CipherType, ZERO_HANDLE
"""

import re
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict


ZERO_ADDRESS = "0x" + "0" * 40
ZERO_HANDLE = "0x" + "0" * 64

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HANDLE_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


class CipherType(Enum):
    """Ciphertext types stored by a game."""
    EUINT128 = "euint128"   # board bitmasks
    EBOOL = "ebool"         # comparison results
    EADDRESS = "eaddress"   # winner


def normalize_address(value: str) -> str:
    """
    Validate an address and return its lower-case form.

    Raises:
        ValueError: If the value is not a 20-byte hex address
    """
    if not isinstance(value, str) or not _ADDRESS_RE.match(value):
        raise ValueError(f"Not an address: {value!r}")
    return value.lower()


def is_handle(value: Any) -> bool:
    """Check whether a value looks like a ciphertext handle."""
    return isinstance(value, str) and bool(_HANDLE_RE.match(value))


def is_zero_handle(handle: str) -> bool:
    """Check whether a handle is unset."""
    return handle == ZERO_HANDLE


@dataclass(frozen=True)
class GameCreated:
    """
    Creation record emitted by the factory for every new game.

    This is the only event external listeners (such as a lobby) consume.

    Attributes:
        game_address: Address of the new game
        creator: Identity that created the game (player1)
        board_size: Side length of the board
        ship_count: Number of ship cells per participant
    """

    game_address: str
    creator: str
    board_size: int
    ship_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
