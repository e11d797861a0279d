"""Identities, ship layouts and helpers shared by match tests."""

from fhe_battleship.board import bitmask_from_cells

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
CAROL = "0x" + "c4" * 20

ALICE_SHIPS = bitmask_from_cells([2, 7, 12, 17, 22])
BOB_SHIPS = bitmask_from_cells([0, 5, 10, 15, 20])


def place(compute, game, player, mask):
    """Encrypt a bitmask for a player and submit it."""
    handle, proof = compute.encrypt_input(game.address, player, mask)
    game.place_ships(player, handle, proof)


def decrypt(compute, game, handle, user):
    """Decrypt a game handle as a user."""
    return compute.user_decrypt(handle, game.address, user)
