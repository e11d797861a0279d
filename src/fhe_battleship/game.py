# Area: Game
"""
fhe_battleship.game — The confidential match state machine
==========================================================

One ``BattleshipGame`` per match. Ship positions, attack history, hit
results and the winner exist only as ciphertext handles; the game
computes on them through the injected ``ConfidentialCompute`` and
decides, through ACL grants, who may later decrypt each one.

Lifecycle:
    WAITING_FOR_OPPONENT  --join_game-->          WAITING_FOR_PLACEMENTS
    WAITING_FOR_PLACEMENTS --2nd place_ships-->   IN_PROGRESS (player1 moves)
    IN_PROGRESS           --finish_game-->        FINISHED

Every public write is one atomic operation: it runs under the game's
lock and inside a capability transaction, and any error restores the
game's fields and discards the ciphertexts and grants it created.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, Tuple

from ._game import GameEvent, GameState, GameStateMachine, PlayerRecord, validate_parameters
from .board import cell_bit, cell_count, validate_cell
from .compute import ConfidentialCompute
from .errors import (
    AclGrantError,
    AlreadyPlaced,
    BattleshipError,
    GameNotInProgress,
    NotAPlayer,
    NotJoinable,
    OutOfTurn,
    PlacementClosed,
)
from .types import CipherType, ZERO_ADDRESS, ZERO_HANDLE, normalize_address

logger = logging.getLogger("fhe_battleship.game")


class BattleshipGame:
    """
    A two-player match whose game-critical state is encrypted.

    Attributes:
        address: Unique identifier of the match
        board_size: Side length of the board (3..10)
        ship_count: Ship cells each participant must lose to be sunk
        player1: Creator of the match
        player2: Opponent, ZERO_ADDRESS until someone joins
        current_turn: Participant allowed to move, ZERO_ADDRESS outside play
        winner: eaddress handle, ZERO_HANDLE until the match is finished
    """

    def __init__(
        self,
        address: str,
        compute: ConfidentialCompute,
        creator: str,
        board_size: int,
        ship_count: int,
    ):
        params = validate_parameters(board_size, ship_count)
        self.address = normalize_address(address)
        self.board_size = params.board_size
        self.ship_count = params.ship_count
        self.player1 = normalize_address(creator)
        self.player2 = ZERO_ADDRESS
        self.current_turn = ZERO_ADDRESS
        self.winner = ZERO_HANDLE

        self._compute = compute
        self._machine = GameStateMachine()
        self._players: Dict[str, PlayerRecord] = {}
        # Game-private: who first hit ship_count cells, and whether anyone has
        self._first_to_sink = ZERO_HANDLE
        self._sunk = ZERO_HANDLE
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return (
            f"BattleshipGame(address={self.address}, state={self.game_state.name}, "
            f"board={self.board_size}x{self.board_size}, ships={self.ship_count})"
        )

    # ──────────────────────────────────────────────────────────────
    # Read surface
    # ──────────────────────────────────────────────────────────────
    @property
    def game_state(self) -> GameState:
        return self._machine.current_state

    @property
    def cell_count(self) -> int:
        return cell_count(self.board_size)

    def is_participant(self, identity: str) -> bool:
        identity = identity.lower()
        return identity != ZERO_ADDRESS and identity in (self.player1, self.player2)

    def opponent_of(self, identity: str) -> str:
        """The other participant. Raises NotAPlayer for outsiders."""
        identity = identity.lower()
        if identity == self.player1 and self.player2 != ZERO_ADDRESS:
            return self.player2
        if identity == self.player2 and identity != ZERO_ADDRESS:
            return self.player1
        raise NotAPlayer(self.address, identity)

    def players(self, identity: str) -> PlayerRecord:
        """Snapshot of a participant's record; empty for anyone else."""
        with self._lock:
            record = self._players.get(identity.lower())
            return replace(record) if record else PlayerRecord()

    def get_ship_placement(self, identity: str) -> str:
        return self.players(identity).ship_placement

    def get_move_mask(self, identity: str) -> str:
        return self.players(identity).move_mask

    def get_hits_mask(self, identity: str) -> str:
        return self.players(identity).hits_mask

    # ──────────────────────────────────────────────────────────────
    # Write surface
    # ──────────────────────────────────────────────────────────────
    def join_game(self, caller: str) -> None:
        """
        Bind the caller as player2.

        Raises:
            NotJoinable: If the match is not waiting for an opponent, the
                caller created it, or someone already joined
        """
        caller = normalize_address(caller)
        with self._atomic("join_game", caller):
            if not self._machine.is_at(GameState.WAITING_FOR_OPPONENT):
                raise NotJoinable(self.address, caller, f"state is {self.game_state.name}")
            if caller == ZERO_ADDRESS:
                raise NotJoinable(self.address, caller, "zero address cannot play")
            if caller == self.player1:
                raise NotJoinable(self.address, caller, "creator cannot join own game")
            if self.player2 != ZERO_ADDRESS:
                raise NotJoinable(self.address, caller, "opponent already joined")

            self.player2 = caller
            self._machine.transition(GameEvent.OPPONENT_JOINED)
        logger.info(f"Game {self.address}: {caller} joined")

    def place_ships(self, caller: str, handle: str, proof: bytes) -> None:
        """
        Store the caller's encrypted ship bitmask.

        The bitmask is readable by the caller only. Once both participants
        have placed, the match starts with player1 to move.

        The number of set bits is not checked: the capability offers no
        confidential cardinality test at input time, so clients are trusted
        to submit exactly ship_count ships. Build placements with
        ``board.ship_bitmask`` to check this before encrypting.

        Raises:
            NotAPlayer: If the caller is not a participant
            AlreadyPlaced: If the caller already placed
            PlacementClosed: If the match is not in the placement phase
            ProofVerificationFailed: If the ciphertext is not well-formed
        """
        caller = normalize_address(caller)
        started = False
        with self._atomic("place_ships", caller):
            if not self.is_participant(caller):
                raise NotAPlayer(self.address, caller)
            if self._players.get(caller, PlayerRecord()).has_placed_ships:
                raise AlreadyPlaced(self.address, caller)
            if not self._machine.is_at(GameState.WAITING_FOR_PLACEMENTS):
                raise PlacementClosed(self.address, self.game_state.name)

            compute = self._compute
            placement = compute.verify_input(
                handle, proof, self.address, caller, CipherType.EUINT128
            )
            record = PlayerRecord(
                ship_placement=placement,
                has_placed_ships=True,
                move_mask=compute.as_euint128(0),
                hits_mask=compute.as_euint128(0),
            )
            self._grant(placement, self.address, caller)
            self._grant(record.move_mask, self.address, self.player1, self.player2)
            self._grant(record.hits_mask, self.address, self.player1, self.player2)
            self._players[caller] = record

            if all(self._players.get(p, PlayerRecord()).has_placed_ships
                   for p in (self.player1, self.player2)):
                self._start()
                started = True
        logger.info(f"Game {self.address}: {caller} placed ships")
        if started:
            logger.info(f"Game {self.address}: started, {self.current_turn} to move")

    def make_move(self, caller: str, target_cell: int) -> None:
        """
        Fire at one cell of the opponent's board.

        The defender's move and hits masks accumulate the shot without
        revealing whether it hit. Both participants may decrypt the
        updated masks. The turn passes to the defender unconditionally;
        reaching the win threshold does not end the match.

        Raises:
            GameNotInProgress: If the match is not in progress
            OutOfTurn: If the caller does not hold the turn
            InvalidCell: If the cell is outside the board
        """
        caller = normalize_address(caller)
        with self._atomic("make_move", caller):
            if not self._machine.is_at(GameState.IN_PROGRESS):
                raise GameNotInProgress(self.address, self.game_state.name)
            if caller != self.current_turn:
                raise OutOfTurn(self.address, caller, self.current_turn)
            cell = validate_cell(target_cell, self.board_size)

            defender = self.opponent_of(caller)
            record = self._players[defender]
            compute = self._compute

            bit = compute.as_euint128(cell_bit(cell))
            hit = compute.and_(bit, record.ship_placement)
            move_mask = compute.or_(record.move_mask, bit)
            hits_mask = compute.or_(record.hits_mask, hit)
            self._grant(move_mask, self.address, caller, defender)
            self._grant(hits_mask, self.address, caller, defender)

            self._track_first_to_sink(caller, hits_mask)

            record.move_mask = move_mask
            record.hits_mask = hits_mask
            self.current_turn = defender
        logger.info(f"Game {self.address}: {caller} fired at cell {cell}")

    def finish_game(self, caller: str) -> None:
        """
        End the match and bind the encrypted winner.

        Both participants' win conditions are evaluated, so the result does
        not depend on who calls. The winner is the participant who hit at
        least ship_count of the other's cells; if both did, whoever got
        there first; if neither did, the zero address. Which case applied
        stays encrypted. Both participants may decrypt the winner.

        Raises:
            GameNotInProgress: If the match is not in progress
            NotAPlayer: If the caller is not a participant
        """
        caller = normalize_address(caller)
        with self._atomic("finish_game", caller):
            if not self._machine.is_at(GameState.IN_PROGRESS):
                raise GameNotInProgress(self.address, self.game_state.name)
            if not self.is_participant(caller):
                raise NotAPlayer(self.address, caller)

            opponent = self.opponent_of(caller)
            compute = self._compute

            caller_wins = compute.popcount_ge(self._players[opponent].hits_mask, self.ship_count)
            opponent_wins = compute.popcount_ge(self._players[caller].hits_mask, self.ship_count)
            both_win = compute.and_(caller_wins, opponent_wins)

            nobody = compute.as_eaddress(ZERO_ADDRESS)
            single = compute.select(
                caller_wins,
                compute.as_eaddress(caller),
                compute.select(opponent_wins, compute.as_eaddress(opponent), nobody),
            )
            winner = compute.select(both_win, self._first_to_sink, single)
            self._grant(winner, self.address, self.player1, self.player2)

            self._machine.transition(GameEvent.GAME_FINISHED)
            self.winner = winner
            self.current_turn = ZERO_ADDRESS
        logger.info(f"Game {self.address}: finished by {caller}")

    # ──────────────────────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────────────────────
    def _start(self) -> None:
        compute = self._compute
        self._first_to_sink = compute.as_eaddress(ZERO_ADDRESS)
        self._sunk = compute.as_ebool(False)
        self._grant(self._first_to_sink, self.address)
        self._grant(self._sunk, self.address)
        self._machine.transition(GameEvent.PLACEMENTS_COMPLETE)
        self.current_turn = self.player1

    def _track_first_to_sink(self, attacker: str, defender_hits: str) -> None:
        compute = self._compute
        reached = compute.popcount_ge(defender_hits, self.ship_count)
        candidate = compute.select(
            reached, compute.as_eaddress(attacker), compute.as_eaddress(ZERO_ADDRESS)
        )
        first = compute.select(self._sunk, self._first_to_sink, candidate)
        sunk = compute.or_(self._sunk, reached)
        self._grant(first, self.address)
        self._grant(sunk, self.address)
        self._first_to_sink = first
        self._sunk = sunk

    def _grant(self, handle: str, *identities: str) -> None:
        for identity in identities:
            self._compute.allow(handle, identity)

    def _snapshot(self) -> Tuple:
        return (
            self._machine.current_state,
            self.player2,
            self.current_turn,
            self.winner,
            self._first_to_sink,
            self._sunk,
            {k: replace(v) for k, v in self._players.items()},
        )

    def _restore(self, snapshot: Tuple) -> None:
        (
            self._machine.current_state,
            self.player2,
            self.current_turn,
            self.winner,
            self._first_to_sink,
            self._sunk,
            self._players,
        ) = snapshot

    @contextmanager
    def _atomic(self, operation: str, caller: str) -> Iterator[None]:
        with self._lock:
            snapshot = self._snapshot()
            try:
                with self._compute.transaction():
                    yield
            except AclGrantError as e:
                self._restore(snapshot)
                logger.error(f"Game {self.address}: {operation} by {caller} aborted: {e}")
                raise
            except BattleshipError as e:
                self._restore(snapshot)
                logger.warning(
                    f"Game {self.address}: {operation} by {caller} rejected "
                    f"({e.__class__.__name__}): {e}"
                )
                raise
            except Exception:
                self._restore(snapshot)
                logger.error(f"Game {self.address}: {operation} by {caller} failed")
                raise
