# Area: Game Tests
"""The 5x5 reference match, played move by move and through the demo."""

from match_helpers import ALICE, BOB, BOB_SHIPS, decrypt
from fhe_battleship._game import GameState
from fhe_battleship.board import bitmask_from_cells
from fhe_battleship.demo import play_reference_match
from fhe_battleship.types import ZERO_HANDLE

ALICE_SHOTS = [0, 5, 10, 15, 20, 1, 3, 4, 6, 8, 9]
BOB_SHOTS = [1, 3, 4, 6, 8, 9, 11, 13, 14, 16]

# OR of the 11 targeted bits
EXPECTED_MOVE_MASK = 1083259
EXPECTED_HITS_MASK = 1082401


class TestReferenceMatch:
    """Alice sinks Bob in 11 shots while Bob misses 10 times."""

    def test_expected_constants(self):
        """Test the expected masks are the OR of the targeted and ship cells."""
        assert bitmask_from_cells(ALICE_SHOTS) == EXPECTED_MOVE_MASK
        assert bitmask_from_cells([0, 5, 10, 15, 20]) == EXPECTED_HITS_MASK == BOB_SHIPS

    def test_full_match(self, compute, started_game):
        """Test masks, hits and winner after 21 alternating moves."""
        game = started_game
        turns = 0
        for i, shot in enumerate(ALICE_SHOTS):
            assert game.current_turn == ALICE
            game.make_move(ALICE, shot)
            turns += 1
            if i < len(BOB_SHOTS):
                assert game.current_turn == BOB
                game.make_move(BOB, BOB_SHOTS[i])
                turns += 1
        assert turns == 21

        move_mask = decrypt(compute, game, game.get_move_mask(BOB), ALICE)
        hits_mask = decrypt(compute, game, game.get_hits_mask(BOB), ALICE)
        assert move_mask == EXPECTED_MOVE_MASK
        assert hits_mask == EXPECTED_HITS_MASK
        assert hits_mask & BOB_SHIPS == BOB_SHIPS

        # Bob never hit Alice
        assert decrypt(compute, game, game.get_hits_mask(ALICE), BOB) == 0
        assert decrypt(compute, game, game.get_move_mask(ALICE), ALICE) == bitmask_from_cells(BOB_SHOTS)

        game.finish_game(ALICE)
        assert game.game_state == GameState.FINISHED
        assert game.winner != ZERO_HANDLE
        assert decrypt(compute, game, game.winner, BOB) == ALICE

    def test_match_continues_after_sinking(self, compute, started_game):
        """Test reaching the threshold does not stop play or skip turns."""
        for i, shot in enumerate(ALICE_SHOTS[:5]):
            started_game.make_move(ALICE, shot)
            started_game.make_move(BOB, BOB_SHOTS[i])
        assert started_game.game_state == GameState.IN_PROGRESS
        assert started_game.current_turn == ALICE
        started_game.make_move(ALICE, 1)
        assert started_game.current_turn == BOB


class TestDemo:
    """Tests for the scripted demo."""

    def test_play_reference_match(self):
        """Test the demo decrypts the expected values through the gateway."""
        result = play_reference_match()
        assert result.state == GameState.FINISHED
        assert result.turns == 21
        assert result.bob_move_mask == EXPECTED_MOVE_MASK
        assert result.bob_hits_mask == EXPECTED_HITS_MASK
        assert result.bob_ship_mask == EXPECTED_HITS_MASK
        assert result.alice_hits_mask == 0
        assert result.alice_move_mask == bitmask_from_cells(BOB_SHOTS)
        assert result.winner == result.alice

    def test_demo_on_supplied_factory(self, compute, factory):
        """Test the demo registers its game on a supplied factory."""
        result = play_reference_match(factory=factory, compute=compute)
        assert factory.get_game_count() == 1
        assert factory.games(0) == result.game_address
