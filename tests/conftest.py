"""Shared fixtures for match tests."""

import pytest

from fhe_battleship.factory import GameFactory
from fhe_battleship.mock import PlaintextCompute
from match_helpers import ALICE, ALICE_SHIPS, BOB, BOB_SHIPS, place


@pytest.fixture
def compute():
    return PlaintextCompute()


@pytest.fixture
def factory(compute):
    return GameFactory(compute, address="0x" + "fa" * 20)


@pytest.fixture
def new_game(factory):
    """A 5x5, 5-ship game created by Alice."""
    return factory.get_game(factory.create_game(ALICE, 5, 5))


@pytest.fixture
def joined_game(new_game):
    new_game.join_game(BOB)
    return new_game


@pytest.fixture
def started_game(compute, joined_game):
    place(compute, joined_game, ALICE, ALICE_SHIPS)
    place(compute, joined_game, BOB, BOB_SHIPS)
    return joined_game
