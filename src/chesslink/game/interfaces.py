"""Abstract interfaces and state enums for the session layer.

Request handlers depend on :class:`ISessionStore`, not on the concrete
in-memory registry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chesslink.core.enums import Color

if TYPE_CHECKING:
    from chesslink.core.board import Board
    from chesslink.core.codec import PlainState
    from chesslink.game.session import GameSession


# ── Session FSM states ───────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a game session."""

    WAITING_FOR_OPPONENT = auto()
    IN_PROGRESS = auto()
    GAME_OVER = auto()


class GameEndReason(IntEnum):
    """Why a game ended."""

    CHECKMATE = auto()
    STALEMATE = auto()
    ABANDONED = auto()


# ── Abstract interfaces ─────────────────────────────────────────────────────


class ISessionStore(ABC):
    """Interface for the registry that pairs two participants per game."""

    @abstractmethod
    def create(
        self,
        participant_id: str,
        board: Board | PlainState | None = None,
        *,
        side_to_move: Color = Color.WHITE,
    ) -> GameSession:
        """Open a new session with *participant_id* in the first slot.

        *board* may be a live board or its encoded plain state.
        """

    @abstractmethod
    def join(self, session_id: str, participant_id: str) -> GameSession:
        """Seat *participant_id* in the free slot of *session_id*."""

    @abstractmethod
    def leave(self, session_id: str, participant_id: str) -> None:
        """Remove *participant_id*; empty sessions are discarded."""

    @abstractmethod
    def get(self, session_id: str) -> GameSession:
        """Look up a live session."""

    @abstractmethod
    def open_sessions(self) -> list[str]:
        """Ids of sessions still waiting for a second participant."""

    @abstractmethod
    def expire(self, now: float | None = None) -> list[str]:
        """Drop idle sessions and return their ids.

        A game still running is ended as abandoned before it is dropped.
        """
