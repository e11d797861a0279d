# Area: Game
"""
fhe_battleship.factory — Game creation and registry
===================================================

Creates matches, keeps them in an append-only registry and emits a
``GameCreated`` record for each one. Matches share nothing but this
registry, so a single lock around it is the only cross-game
synchronisation.

Usage:
    factory = GameFactory(PlaintextCompute())
    factory.subscribe(lambda event: print(event.game_address))
    address = factory.create_game(alice, board_size=5, ship_count=5)
    game = factory.get_game(address)
"""

import hashlib
import logging
import secrets
import threading
from typing import Callable, Dict, List, Optional

from ._game import validate_parameters
from .compute import ConfidentialCompute
from .game import BattleshipGame
from .types import GameCreated, ZERO_ADDRESS, normalize_address

logger = logging.getLogger("fhe_battleship.factory")

GameCreatedListener = Callable[[GameCreated], None]


def derive_game_address(factory_address: str, nonce: int) -> str:
    """
    Derive a game address from the factory address and a creation nonce.

    Distinct nonces give distinct addresses for the same factory.
    """
    factory_bytes = bytes.fromhex(normalize_address(factory_address)[2:])
    digest = hashlib.sha3_256(factory_bytes + nonce.to_bytes(32, "big")).digest()
    return "0x" + digest[-20:].hex()


class GameFactory:
    """
    Factory and append-only registry of matches.

    Attributes:
        address: Identity of the factory, the root of game addresses
    """

    def __init__(self, compute: ConfidentialCompute, address: Optional[str] = None):
        """
        Initialize the factory.

        Args:
            compute: Capability shared by every game this factory creates
            address: Factory address. Random if omitted.
        """
        self.address = normalize_address(address) if address else "0x" + secrets.token_hex(20)
        self._compute = compute
        self._games: List[BattleshipGame] = []
        self._by_address: Dict[str, BattleshipGame] = {}
        self._listeners: List[GameCreatedListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: GameCreatedListener) -> None:
        """Register a callable to receive every future GameCreated record."""
        with self._lock:
            self._listeners.append(listener)

    def create_game(self, caller: str, board_size: int, ship_count: int) -> str:
        """
        Create a match with the caller as player1.

        Args:
            caller: Identity creating the match
            board_size: Side length, 3..10
            ship_count: Ship cells per participant, 2..board_size**2

        Returns:
            The new game's address

        Raises:
            InvalidParameters: If board_size or ship_count is out of range
            ValueError: If caller is not a usable address
        """
        params = validate_parameters(board_size, ship_count)
        creator = normalize_address(caller)
        if creator == ZERO_ADDRESS:
            raise ValueError("The zero address cannot create a game")

        with self._lock:
            address = derive_game_address(self.address, len(self._games))
            game = BattleshipGame(
                address=address,
                compute=self._compute,
                creator=creator,
                board_size=params.board_size,
                ship_count=params.ship_count,
            )
            self._games.append(game)
            self._by_address[address] = game
            listeners = list(self._listeners)

        event = GameCreated(
            game_address=address,
            creator=creator,
            board_size=params.board_size,
            ship_count=params.ship_count,
        )
        logger.info(
            f"Game created: {address} by {creator} "
            f"({params.board_size}x{params.board_size}, {params.ship_count} ships)"
        )
        self._emit(event, listeners)
        return address

    def _emit(self, event: GameCreated, listeners: List[GameCreatedListener]) -> None:
        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                # The game exists regardless of what a listener does
                logger.error(f"GameCreated listener failed for {event.game_address}: {e}")

    def get_game_count(self) -> int:
        with self._lock:
            return len(self._games)

    def games(self, index: int) -> str:
        """
        Address of the game at a registry position.

        Raises:
            IndexError: If the index is outside the registry
        """
        with self._lock:
            if not 0 <= index < len(self._games):
                raise IndexError(f"No game at index {index}")
            return self._games[index].address

    def get_game(self, address: str) -> BattleshipGame:
        """
        Look up a game by address.

        Raises:
            KeyError: If this factory did not create the game
        """
        with self._lock:
            try:
                return self._by_address[normalize_address(address)]
            except KeyError:
                raise KeyError(f"Unknown game: {address}") from None

    def all_games(self) -> List[BattleshipGame]:
        """Games in creation order."""
        with self._lock:
            return list(self._games)
