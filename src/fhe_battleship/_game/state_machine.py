# Area: Game
"""
fhe_battleship._game.state_machine — Match State Machine
========================================================

Tracks the lifecycle of one match. Transitions only move forward;
there is no pause, resume or reset.
"""

from .enums import GameState, GameEvent


# Valid state transitions: {current_state: {event: next_state}}
TRANSITIONS = {
    GameState.WAITING_FOR_OPPONENT: {
        GameEvent.OPPONENT_JOINED: GameState.WAITING_FOR_PLACEMENTS,
    },
    GameState.WAITING_FOR_PLACEMENTS: {
        GameEvent.PLACEMENTS_COMPLETE: GameState.IN_PROGRESS,
    },
    GameState.IN_PROGRESS: {
        GameEvent.GAME_FINISHED: GameState.FINISHED,
    },
    GameState.FINISHED: {},
}


class GameStateMachine:
    """
    State machine for a single match.

    Attributes:
        current_state: The current state of the match
    """

    def __init__(self, initial: GameState = GameState.WAITING_FOR_OPPONENT):
        self.current_state = initial

    def can_transition(self, event: GameEvent) -> bool:
        """
        Check if a transition is valid from current state.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        return event in TRANSITIONS.get(self.current_state, {})

    def transition(self, event: GameEvent) -> GameState:
        """
        Execute a state transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new state after transition

        Raises:
            ValueError: If the transition is not valid
        """
        if not self.can_transition(event):
            raise ValueError(
                f"Invalid transition: {event.value} from {self.current_state.name}"
            )
        self.current_state = TRANSITIONS[self.current_state][event]
        return self.current_state

    def is_at(self, state: GameState) -> bool:
        return self.current_state == state
