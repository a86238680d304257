"""GameSession — one two-player game relayed between remote participants.

Holds the authoritative board for a pairing, tracks whose turn it is and
emits events via simple callbacks so a transport / UI can rebroadcast.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from chesslink.core.board import Board
from chesslink.core.codec import PlainState, decode_board, encode_board
from chesslink.core.enums import Color, GameResult
from chesslink.core.move_generator import MoveGenerator
from chesslink.core.rules import Rules
from chesslink.core.types import Square, is_valid_square, square_name
from chesslink.game.config import SessionConfig
from chesslink.game.errors import (
    GameAlreadyOverError,
    NotAParticipantError,
    NotYourTurnError,
    SessionFullError,
    WaitingForOpponentError,
)
from chesslink.game.interfaces import GameEndReason, GamePhase

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

StateCallback = Callable[[str, PlainState, Color], None]  # id, board, to move
SeatCallback = Callable[[str, Color], None]  # id, color of the participant
GameOverCallback = Callable[[str, GameResult, GameEndReason], None]
LobbyCallback = Callable[[list[str]], None]  # ids of open sessions


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_state: list[StateCallback] = field(default_factory=list)
    on_opponent_joined: list[SeatCallback] = field(default_factory=list)
    on_opponent_left: list[SeatCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_lobby_changed: list[LobbyCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession:
    """A game between at most two participants.

    The first participant plays White, the second Black. Moves arrive
    either as a board the client already moved on (:meth:`relay_board`,
    trusted as is) or as a square pair checked by the engine
    (:meth:`submit_move`).

    Not thread-safe: the transport must serialise calls per session.
    """

    __slots__ = (
        "session_id",
        "_board",
        "_side_to_move",
        "_participants",
        "_phase",
        "_result",
        "_end_reason",
        "_config",
        "_clock",
        "last_activity",
        "events",
    )

    def __init__(
        self,
        session_id: str,
        board: Board | PlainState | None = None,
        *,
        side_to_move: Color = Color.WHITE,
        config: SessionConfig | None = None,
        events: GameEvents | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session_id = session_id
        if board is None:
            board = Board.initial()
        elif not isinstance(board, Board):
            board = decode_board(board)
        self._board = board
        self._side_to_move = side_to_move
        self._participants: dict[str, Color] = {}
        self._phase = GamePhase.WAITING_FOR_OPPONENT
        self._result = GameResult.IN_PROGRESS
        self._end_reason: GameEndReason | None = None
        self._config = config if config is not None else SessionConfig()
        self._clock = clock
        self.last_activity = clock()
        self.events = events if events is not None else GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self._board

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def end_reason(self) -> GameEndReason | None:
        return self._end_reason

    @property
    def is_game_over(self) -> bool:
        return self._phase == GamePhase.GAME_OVER

    @property
    def is_full(self) -> bool:
        return len(self._participants) >= 2

    @property
    def is_empty(self) -> bool:
        return not self._participants

    @property
    def participants(self) -> dict[str, Color]:
        return dict(self._participants)

    def color_of(self, participant_id: str) -> Color:
        try:
            return self._participants[participant_id]
        except KeyError:
            raise NotAParticipantError(self.session_id, participant_id) from None

    def idle_seconds(self, now: float | None = None) -> float:
        return (self._clock() if now is None else now) - self.last_activity

    # ── Seating ──────────────────────────────────────────────────────────

    def join(self, participant_id: str) -> Color:
        """Seat *participant_id* and return the color assigned."""
        if participant_id in self._participants:
            return self._participants[participant_id]
        if self.is_full:
            raise SessionFullError(self.session_id)
        if self.is_game_over:
            raise GameAlreadyOverError(f"Session {self.session_id} has ended")

        taken = set(self._participants.values())
        color = Color.WHITE if Color.WHITE not in taken else Color.BLACK
        self._participants[participant_id] = color
        self._touch()
        _LOGGER.info(
            "Participant %s joined session %s as %s",
            participant_id,
            self.session_id,
            color,
        )

        if self.is_full:
            self._phase = GamePhase.IN_PROGRESS
            for cb in self.events.on_opponent_joined:
                cb(self.session_id, color)
            self._emit_state()
        return color

    def leave(self, participant_id: str) -> None:
        """Free *participant_id*'s slot.

        Leaving a running game forfeits it to the remaining participant.
        """
        color = self._participants.pop(participant_id, None)
        if color is None:
            return
        self._touch()
        _LOGGER.info(
            "Participant %s left session %s", participant_id, self.session_id
        )

        if self._phase == GamePhase.IN_PROGRESS:
            for cb in self.events.on_opponent_left:
                cb(self.session_id, color)
            self._finish(GameResult.win_for(color.opposite), GameEndReason.ABANDONED)

    def abandon(self) -> None:
        """End a running game whose side to move stopped playing.

        The opponent of the side to move wins. Sessions that are waiting or
        already over are left as they are.
        """
        if self._phase != GamePhase.IN_PROGRESS:
            return
        _LOGGER.info(
            "Session %s abandoned by %s", self.session_id, self._side_to_move
        )
        self._finish(
            GameResult.win_for(self._side_to_move.opposite), GameEndReason.ABANDONED
        )

    # ── Moves ────────────────────────────────────────────────────────────

    def legal_moves_from(self, sq: Square) -> set[Square]:
        """Squares to highlight for the piece on *sq*."""
        return MoveGenerator(self._board).legal_moves_from(sq)

    def relay_board(self, participant_id: str, state: PlainState) -> GameResult:
        """Accept a board the sender already moved on, and rebroadcast it.

        The move itself is not re-validated; only the game result for the
        side now to move is evaluated.
        """
        color = self._require_turn(participant_id)
        self._board = decode_board(state)
        self._side_to_move = color.opposite
        self._touch()
        _LOGGER.debug("Session %s: %s relayed a board", self.session_id, color)

        self._emit_state()
        self._update_result()
        return self._result

    def submit_move(self, participant_id: str, from_sq: Square, to_sq: Square) -> bool:
        """Apply a move checked by the engine. Returns True if legal and applied."""
        color = self._require_turn(participant_id)
        if not (is_valid_square(from_sq) and is_valid_square(to_sq)):
            return False
        piece = self._board[from_sq]
        if piece is None or piece.color != color:
            return False
        if to_sq not in MoveGenerator(self._board).legal_moves_from(from_sq):
            _LOGGER.debug(
                "Session %s: illegal move %s-%s",
                self.session_id,
                square_name(from_sq),
                square_name(to_sq),
            )
            return False

        self._board.move_piece(from_sq, to_sq)
        self._side_to_move = color.opposite
        self._touch()

        self._emit_state()
        self._update_result()
        return True

    def snapshot(self) -> tuple[PlainState, Color]:
        """Encoded board plus the color to move next."""
        return encode_board(self._board), self._side_to_move

    def describe(self) -> dict[str, Any]:
        """Plain summary for lobby listings and logs."""
        return {
            "id": self.session_id,
            "phase": self._phase.name.lower(),
            "players": len(self._participants),
            "sideToMove": str(self._side_to_move),
        }

    # ── Internal helpers ─────────────────────────────────────────────────

    def _require_turn(self, participant_id: str) -> Color:
        color = self.color_of(participant_id)
        if self.is_game_over:
            raise GameAlreadyOverError(f"Session {self.session_id} has ended")
        if self._phase == GamePhase.WAITING_FOR_OPPONENT:
            raise WaitingForOpponentError(
                f"Session {self.session_id} is waiting for an opponent"
            )
        if self._config.enforce_turn_order and color != self._side_to_move:
            _LOGGER.warning(
                "Session %s: %s moved out of turn", self.session_id, participant_id
            )
            raise NotYourTurnError(f"It is {self._side_to_move}'s turn")
        return color

    def _update_result(self) -> None:
        result = Rules.game_result(self._board, self._side_to_move)
        if result == GameResult.IN_PROGRESS:
            return
        if result == GameResult.DRAW:
            self._finish(result, GameEndReason.STALEMATE)
        else:
            self._finish(result, GameEndReason.CHECKMATE)

    def _finish(self, result: GameResult, reason: GameEndReason) -> None:
        self._phase = GamePhase.GAME_OVER
        self._result = result
        self._end_reason = reason
        _LOGGER.info(
            "Session %s over: %s (%s)",
            self.session_id,
            result.name,
            reason.name.lower(),
        )
        for cb in self.events.on_game_over:
            cb(self.session_id, result, reason)

    def _emit_state(self) -> None:
        state, side = self.snapshot()
        for cb in self.events.on_state:
            cb(self.session_id, state, side)

    def _touch(self) -> None:
        self.last_activity = self._clock()
