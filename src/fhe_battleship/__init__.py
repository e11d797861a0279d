"""
fhe_battleship — Confidential two-player Battleship engine
==========================================================

Every game-critical value (ship positions, attack history, hits and the
winner) is held as an opaque ciphertext handle and computed on through
an injected confidential computation capability. The engine enforces
turn order and state transitions and decides, per handle, who may later
decrypt it.

Quick Start (plaintext mock):
    from fhe_battleship import GameFactory, PlaintextCompute
    from fhe_battleship.board import ship_bitmask

    compute = PlaintextCompute()
    factory = GameFactory(compute)
    address = factory.create_game(alice, board_size=5, ship_count=5)
    game = factory.get_game(address)
    game.join_game(bob)

    ships = ship_bitmask([2, 7, 12, 17, 22], board_size=5, ship_count=5)
    handle, proof = compute.encrypt_input(address, alice, ships)
    game.place_ships(alice, handle, proof)
    ...
    game.make_move(alice, 0)
    game.finish_game(alice)

Custom capability:
    from fhe_battleship import ConfidentialCompute
    class MyBackend(ConfidentialCompute): ...  # Implement every abstract method
"""

from ._game import GameState, PlayerRecord
from .acl import AccessControlList
from .compute import ConfidentialCompute
from .factory import GameFactory
from .game import BattleshipGame
from .gateway import DecryptionAuthorization, DecryptionClient, DecryptionGateway, Wallet
from .mock import PlaintextCompute
from .errors import (
    BattleshipError,
    InvalidParameters,
    NotJoinable,
    NotAPlayer,
    PlacementClosed,
    AlreadyPlaced,
    ProofVerificationFailed,
    GameNotInProgress,
    OutOfTurn,
    InvalidCell,
    AclGrantError,
    DecryptionDenied,
    AuthorizationError,
)
from .types import CipherType, GameCreated, ZERO_ADDRESS, ZERO_HANDLE

__all__ = [
    # Main classes
    "GameFactory",
    "BattleshipGame",
    "GameState",
    "PlayerRecord",
    # Capability
    "ConfidentialCompute",
    "PlaintextCompute",
    "AccessControlList",
    # Gateway
    "DecryptionAuthorization",
    "DecryptionClient",
    "DecryptionGateway",
    "Wallet",
    # Errors
    "BattleshipError",
    "InvalidParameters",
    "NotJoinable",
    "NotAPlayer",
    "PlacementClosed",
    "AlreadyPlaced",
    "ProofVerificationFailed",
    "GameNotInProgress",
    "OutOfTurn",
    "InvalidCell",
    "AclGrantError",
    "DecryptionDenied",
    "AuthorizationError",
    # Types
    "CipherType",
    "GameCreated",
    "ZERO_ADDRESS",
    "ZERO_HANDLE",
]
__version__ = "1.0.0"
