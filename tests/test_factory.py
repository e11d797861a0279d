# Area: Factory Tests
"""Tests for GameFactory creation and registry."""

import threading

import pytest

from match_helpers import ALICE, BOB
from fhe_battleship._game import GameState
from fhe_battleship.errors import InvalidParameters
from fhe_battleship.factory import GameFactory, derive_game_address
from fhe_battleship.types import GameCreated, ZERO_ADDRESS


class TestCreateGame:
    """Tests for create_game()."""

    def test_creates_waiting_game(self, factory):
        """Test a new game waits for an opponent with the creator as player1."""
        address = factory.create_game(ALICE, 5, 5)
        game = factory.get_game(address)
        assert game.address == address
        assert game.player1 == ALICE
        assert game.game_state == GameState.WAITING_FOR_OPPONENT
        assert (game.board_size, game.ship_count) == (5, 5)

    @pytest.mark.parametrize("board_size,ship_count", [(2, 2), (11, 2), (5, 1), (3, 10)])
    def test_invalid_parameters(self, factory, board_size, ship_count):
        """Test invalid parameters fail without registering a game."""
        with pytest.raises(InvalidParameters):
            factory.create_game(ALICE, board_size, ship_count)
        assert factory.get_game_count() == 0

    def test_boundaries_accepted(self, factory):
        """Test the extreme legal values are accepted."""
        factory.create_game(ALICE, 3, 2)
        factory.create_game(ALICE, 3, 9)
        factory.create_game(ALICE, 10, 100)
        assert factory.get_game_count() == 3

    def test_zero_address_creator(self, factory):
        """Test the zero address cannot create a game."""
        with pytest.raises(ValueError):
            factory.create_game(ZERO_ADDRESS, 5, 5)

    def test_addresses_unique(self, factory):
        """Test each game gets its own address."""
        addresses = {factory.create_game(ALICE, 5, 5) for _ in range(20)}
        assert len(addresses) == 20

    def test_address_derivation_is_deterministic(self):
        """Test the same factory and nonce give the same address."""
        root = "0x" + "fa" * 20
        assert derive_game_address(root, 3) == derive_game_address(root, 3)
        assert derive_game_address(root, 3) != derive_game_address(root, 4)


class TestRegistry:
    """Tests for registry accessors."""

    def test_games_in_creation_order(self, factory):
        """Test games(i) follows creation order."""
        first = factory.create_game(ALICE, 5, 5)
        second = factory.create_game(BOB, 4, 3)
        assert factory.get_game_count() == 2
        assert factory.games(0) == first
        assert factory.games(1) == second
        assert [g.address for g in factory.all_games()] == [first, second]

    def test_games_out_of_range(self, factory):
        """Test indexing past the registry raises IndexError."""
        with pytest.raises(IndexError):
            factory.games(0)
        with pytest.raises(IndexError):
            factory.games(-1)

    def test_get_unknown_game(self, factory):
        """Test looking up an unknown address raises KeyError."""
        with pytest.raises(KeyError):
            factory.get_game("0x" + "99" * 20)


class TestCreationRecords:
    """Tests for GameCreated emission."""

    def test_listener_receives_record(self, factory):
        """Test subscribers receive (address, creator, size, ships)."""
        events = []
        factory.subscribe(events.append)
        address = factory.create_game(ALICE, 6, 4)
        assert events == [GameCreated(address, ALICE, 6, 4)]
        assert events[0].to_dict() == {
            "game_address": address,
            "creator": ALICE,
            "board_size": 6,
            "ship_count": 4,
        }

    def test_failed_creation_emits_nothing(self, factory):
        """Test rejected creations produce no record."""
        events = []
        factory.subscribe(events.append)
        with pytest.raises(InvalidParameters):
            factory.create_game(ALICE, 1, 1)
        assert events == []

    def test_listener_failure_does_not_undo_creation(self, factory):
        """Test a crashing listener does not affect the game or other listeners."""
        events = []

        def broken(event):
            raise RuntimeError("lobby offline")

        factory.subscribe(broken)
        factory.subscribe(events.append)
        address = factory.create_game(ALICE, 5, 5)
        assert factory.get_game(address) is not None
        assert len(events) == 1


class TestConcurrency:
    """Tests for concurrent use of one factory."""

    def test_concurrent_creation(self, factory):
        """Test many threads creating games keep the registry consistent."""
        created = []
        lock = threading.Lock()

        def worker(n):
            creator = "0x" + format(n + 1, "040x")
            for _ in range(10):
                address = factory.create_game(creator, 5, 5)
                with lock:
                    created.append(address)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert factory.get_game_count() == 80
        assert len(set(created)) == 80
        assert {factory.games(i) for i in range(80)} == set(created)

    def test_concurrent_matches_are_independent(self, compute, factory):
        """Test matches played in parallel threads do not interfere."""
        from match_helpers import ALICE_SHIPS, BOB_SHIPS, decrypt, place

        errors = []

        def play_match():
            try:
                game = factory.get_game(factory.create_game(ALICE, 5, 5))
                game.join_game(BOB)
                place(compute, game, ALICE, ALICE_SHIPS)
                place(compute, game, BOB, BOB_SHIPS)
                for cell in (0, 5, 10, 15, 20):
                    game.make_move(ALICE, cell)
                    game.make_move(BOB, cell + 1)
                game.finish_game(BOB)
                assert decrypt(compute, game, game.winner, ALICE) == ALICE
                assert decrypt(compute, game, game.get_hits_mask(BOB), BOB) == BOB_SHIPS
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=play_match) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert factory.get_game_count() == 6
