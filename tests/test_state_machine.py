# Area: Game Tests
"""Tests for the match state machine."""

import pytest
from fhe_battleship._game.state_machine import GameStateMachine, TRANSITIONS
from fhe_battleship._game.enums import GameState, GameEvent


class TestGameStateMachineBase:
    """Tests for basic state machine functionality."""

    def test_initial_state_is_waiting_for_opponent(self):
        """Test that state machine starts in WAITING_FOR_OPPONENT."""
        sm = GameStateMachine()
        assert sm.current_state == GameState.WAITING_FOR_OPPONENT

    def test_can_transition_returns_true_for_valid(self):
        """Test can_transition returns True for valid transitions."""
        sm = GameStateMachine()
        assert sm.can_transition(GameEvent.OPPONENT_JOINED) is True

    def test_can_transition_returns_false_for_invalid(self):
        """Test can_transition returns False for invalid transitions."""
        sm = GameStateMachine()
        assert sm.can_transition(GameEvent.GAME_FINISHED) is False

    def test_transition_raises_on_invalid(self):
        """Test that invalid transition raises ValueError and keeps state."""
        sm = GameStateMachine()
        with pytest.raises(ValueError):
            sm.transition(GameEvent.PLACEMENTS_COMPLETE)
        assert sm.current_state == GameState.WAITING_FOR_OPPONENT


class TestGameStateMachineTransitions:
    """Tests for specific state transitions."""

    def test_full_happy_path(self):
        """Test complete path through states."""
        sm = GameStateMachine()

        sm.transition(GameEvent.OPPONENT_JOINED)
        assert sm.current_state == GameState.WAITING_FOR_PLACEMENTS

        sm.transition(GameEvent.PLACEMENTS_COMPLETE)
        assert sm.current_state == GameState.IN_PROGRESS

        sm.transition(GameEvent.GAME_FINISHED)
        assert sm.current_state == GameState.FINISHED

    def test_finished_is_terminal(self):
        """Test that no event leaves FINISHED."""
        sm = GameStateMachine(GameState.FINISHED)
        for event in GameEvent:
            assert sm.can_transition(event) is False

    def test_transitions_only_move_forward(self):
        """Test every transition in the table increases the state value."""
        for state, transitions in TRANSITIONS.items():
            for next_state in transitions.values():
                assert next_state > state

    def test_states_are_ordered(self):
        """Test state values match the lifecycle order."""
        assert (
            GameState.WAITING_FOR_OPPONENT
            < GameState.WAITING_FOR_PLACEMENTS
            < GameState.IN_PROGRESS
            < GameState.FINISHED
        )
        assert int(GameState.IN_PROGRESS) == 2
        assert int(GameState.FINISHED) == 3
