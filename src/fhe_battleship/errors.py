"""
fhe_battleship.errors — Custom exception classes
================================================

Defines the exception hierarchy for rejected game operations.
Each exception stores the context needed for structured logging.
Every error is raised before any state is committed, so a caller can
fix its input (or refresh its view of the game) and resubmit.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json


class BattleshipError(Exception):
    """Base exception for all fhe_battleship errors."""

    error_type = "BATTLESHIP_ERROR"

    def __init__(self, message: str, **context: Any):
        self.context: Dict[str, Any] = context
        super().__init__(message)

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context,
        )


class InvalidParameters(BattleshipError):
    """Raised when a game is created with an illegal board size or ship count."""

    error_type = "INVALID_PARAMETERS"

    def __init__(self, board_size: Any, ship_count: Any, reason: str):
        self.board_size = board_size
        self.ship_count = ship_count
        self.reason = reason
        super().__init__(
            f"Invalid game parameters (board_size={board_size}, "
            f"ship_count={ship_count}): {reason}",
            board_size=board_size,
            ship_count=ship_count,
        )


class NotJoinable(BattleshipError):
    """Raised when a join is attempted in the wrong state or by the creator."""

    error_type = "NOT_JOINABLE"

    def __init__(self, game: str, caller: str, reason: str):
        self.game = game
        self.caller = caller
        super().__init__(
            f"Game {game} cannot be joined by {caller}: {reason}",
            game=game,
            caller=caller,
        )


class NotAPlayer(BattleshipError):
    """Raised when an identity outside the match calls a participant operation."""

    error_type = "NOT_A_PLAYER"

    def __init__(self, game: str, caller: str):
        self.game = game
        self.caller = caller
        super().__init__(
            f"{caller} is not a participant of game {game}",
            game=game,
            caller=caller,
        )


class PlacementClosed(BattleshipError):
    """Raised when ships are placed outside the placement phase."""

    error_type = "PLACEMENT_CLOSED"

    def __init__(self, game: str, state: str):
        self.game = game
        self.state = state
        super().__init__(
            f"Game {game} does not accept placements in state {state}",
            game=game,
            state=state,
        )


class AlreadyPlaced(BattleshipError):
    """Raised when a participant submits a second ship placement."""

    error_type = "ALREADY_PLACED"

    def __init__(self, game: str, caller: str):
        self.game = game
        self.caller = caller
        super().__init__(
            f"{caller} has already placed ships in game {game}",
            game=game,
            caller=caller,
        )


class ProofVerificationFailed(BattleshipError):
    """Raised when a client-submitted ciphertext fails input-proof verification."""

    error_type = "PROOF_VERIFICATION_FAILED"

    def __init__(self, handle: str, reason: str):
        self.handle = handle
        self.reason = reason
        super().__init__(
            f"Input proof rejected for handle {handle}: {reason}",
            handle=handle,
        )


class GameNotInProgress(BattleshipError):
    """Raised when a move or finish is attempted outside InProgress."""

    error_type = "GAME_NOT_IN_PROGRESS"

    def __init__(self, game: str, state: str):
        self.game = game
        self.state = state
        super().__init__(
            f"Game {game} is not in progress (state={state})",
            game=game,
            state=state,
        )


class OutOfTurn(BattleshipError):
    """Raised when the participant who does not hold the turn tries to move."""

    error_type = "OUT_OF_TURN"

    def __init__(self, game: str, caller: str, current_turn: str):
        self.game = game
        self.caller = caller
        self.current_turn = current_turn
        super().__init__(
            f"{caller} moved out of turn in game {game} (turn: {current_turn})",
            game=game,
            caller=caller,
            current_turn=current_turn,
        )


class InvalidCell(BattleshipError):
    """Raised when a target cell lies outside the board."""

    error_type = "INVALID_CELL"

    def __init__(self, cell: Any, cell_count: int):
        self.cell = cell
        self.cell_count = cell_count
        super().__init__(
            f"Cell {cell!r} is outside the board (0..{cell_count - 1})",
            cell=cell,
            cell_count=cell_count,
        )


class AclGrantError(BattleshipError):
    """Raised when a decrypt permission cannot be recorded.

    A ciphertext committed without its grant would be unreadable forever,
    so this aborts the whole operation.
    """

    error_type = "ACL_GRANT_FAILED"

    def __init__(self, handle: str, identity: str, reason: str):
        self.handle = handle
        self.identity = identity
        super().__init__(
            f"Could not grant {identity} access to {handle}: {reason}",
            handle=handle,
            identity=identity,
        )


class DecryptionDenied(BattleshipError):
    """Raised when an identity asks for the plaintext of a handle it holds no grant on."""

    error_type = "DECRYPTION_DENIED"

    def __init__(self, handle: str, identity: str, contract: Optional[str] = None):
        self.handle = handle
        self.identity = identity
        self.contract = contract
        super().__init__(
            f"{identity} is not allowed to decrypt {handle}",
            handle=handle,
            identity=identity,
            contract=contract,
        )


class AuthorizationError(BattleshipError):
    """Raised when a decryption authorization is forged, expired or out of scope."""

    error_type = "AUTHORIZATION_ERROR"

    def __init__(self, user: str, reason: str):
        self.user = user
        self.reason = reason
        super().__init__(
            f"Decryption authorization for {user} rejected: {reason}",
            user=user,
        )


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
) -> str:
    """Format a structured error block for logs."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " OPERATION REJECTED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
