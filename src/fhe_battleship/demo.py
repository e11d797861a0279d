# Area: Shared
"""
fhe_battleship.demo — Scripted reference match
==============================================

Plays a complete 5x5 match on the plaintext mock and decrypts the
results through the gateway, the way each participant's client would.

Board layout (cell indices):
     0  1  2  3  4
     5  6  7  8  9
    10 11 12 13 14
    15 16 17 18 19
    20 21 22 23 24

Alice (player1) hides her ships in column 2, Bob his in column 0.
Alice sinks Bob's five ships in her first five shots, then both keep
firing until Alice has fired 11 times, and Alice finishes the match.

Usage:
    from fhe_battleship.demo import play_reference_match
    result = play_reference_match()
    assert result.winner == result.alice
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ._game import GameState
from .board import ship_bitmask
from .factory import GameFactory
from .gateway import DecryptionClient, DecryptionGateway, Wallet
from .mock import PlaintextCompute

logger = logging.getLogger("fhe_battleship.demo")

BOARD_SIZE = 5
SHIP_COUNT = 5

ALICE_SHIPS = [2, 7, 12, 17, 22]
BOB_SHIPS = [0, 5, 10, 15, 20]

ALICE_SHOTS = [0, 5, 10, 15, 20, 1, 3, 4, 6, 8, 9]
BOB_SHOTS = [1, 3, 4, 6, 8, 9, 11, 13, 14, 16]


@dataclass
class ReferenceMatchResult:
    """
    Outcome of the reference match, as seen by the participants.

    Attributes:
        game_address: Address of the match
        alice: Player1's address
        bob: Player2's address
        state: Final game state
        bob_move_mask: Decrypted cells Alice targeted
        bob_hits_mask: Decrypted cells Alice hit
        bob_ship_mask: Bob's ship bitmask
        alice_move_mask: Decrypted cells Bob targeted
        alice_hits_mask: Decrypted cells Bob hit
        winner: Decrypted winner address
        turns: Number of accepted moves
    """

    game_address: str
    alice: str
    bob: str
    state: GameState
    bob_move_mask: int
    bob_hits_mask: int
    bob_ship_mask: int
    alice_move_mask: int
    alice_hits_mask: int
    winner: str
    turns: int


def play_reference_match(
    factory: Optional[GameFactory] = None,
    compute: Optional[PlaintextCompute] = None,
    signature_duration_days: int = 1,
) -> ReferenceMatchResult:
    """
    Play the reference match end to end.

    Args:
        factory: Factory to create the match on. A fresh one over
            ``compute`` if omitted.
        compute: Plaintext capability. Required if ``factory`` is given.
        signature_duration_days: Validity of the decryption authorizations
    """
    if factory is None:
        compute = compute or PlaintextCompute()
        factory = GameFactory(compute)
    elif compute is None:
        raise ValueError("compute is required when a factory is supplied")

    gateway = DecryptionGateway(compute)
    alice_wallet, bob_wallet = Wallet.create(), Wallet.create()
    for wallet in (alice_wallet, bob_wallet):
        gateway.register_wallet(wallet)
    alice_client = DecryptionClient(alice_wallet, gateway, duration_days=signature_duration_days)
    bob_client = DecryptionClient(bob_wallet, gateway, duration_days=signature_duration_days)
    alice, bob = alice_wallet.address, bob_wallet.address

    address = factory.create_game(alice, BOARD_SIZE, SHIP_COUNT)
    game = factory.get_game(address)
    game.join_game(bob)

    for player, ships in ((alice, ALICE_SHIPS), (bob, BOB_SHIPS)):
        handle, proof = compute.encrypt_input(
            address, player, ship_bitmask(ships, BOARD_SIZE, SHIP_COUNT)
        )
        game.place_ships(player, handle, proof)

    turns = _alternate(game, alice, bob, ALICE_SHOTS, BOB_SHOTS)
    game.finish_game(alice)

    alice_view = alice_client.decrypt([
        (game.get_move_mask(bob), address),
        (game.get_hits_mask(bob), address),
        (game.winner, address),
    ])
    bob_view = bob_client.decrypt([
        (game.get_move_mask(alice), address),
        (game.get_hits_mask(alice), address),
        (game.get_ship_placement(bob), address),
    ])

    result = ReferenceMatchResult(
        game_address=address,
        alice=alice,
        bob=bob,
        state=game.game_state,
        bob_move_mask=alice_view[game.get_move_mask(bob)],
        bob_hits_mask=alice_view[game.get_hits_mask(bob)],
        bob_ship_mask=bob_view[game.get_ship_placement(bob)],
        alice_move_mask=bob_view[game.get_move_mask(alice)],
        alice_hits_mask=bob_view[game.get_hits_mask(alice)],
        winner=alice_view[game.winner],
        turns=turns,
    )
    logger.info(f"Reference match {address} finished after {turns} moves")
    return result


def _alternate(game, first: str, second: str, first_shots: List[int], second_shots: List[int]) -> int:
    turns = 0
    for index, shot in enumerate(first_shots):
        game.make_move(first, shot)
        turns += 1
        if index < len(second_shots):
            game.make_move(second, second_shots[index])
            turns += 1
    return turns
