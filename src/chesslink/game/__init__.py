"""Session layer — pairs two participants to a board and relays moves.

Quick start::

    from chesslink.core.types import E2, E4
    from chesslink.game import SessionStore

    store = SessionStore()
    store.events.on_state.append(lambda sid, board, side: print(sid, side))
    session = store.create("alice")          # alice plays White
    store.join(session.session_id, "bob")    # bob plays Black
    session.submit_move("alice", E2, E4)

The PyQt6 adapter lives in :mod:`chesslink.game.qt_bridge` and is not
imported here.
"""

from chesslink.game.config import SessionConfig
from chesslink.game.errors import (
    GameAlreadyOverError,
    NotAParticipantError,
    NotYourTurnError,
    SessionError,
    SessionFullError,
    SessionNotFoundError,
    WaitingForOpponentError,
)
from chesslink.game.interfaces import GameEndReason, GamePhase, ISessionStore
from chesslink.game.session import GameEvents, GameSession
from chesslink.game.store import SessionStore

__all__ = [
    # Interfaces
    "GameEndReason",
    "GamePhase",
    "ISessionStore",
    # Concrete
    "GameEvents",
    "GameSession",
    "SessionConfig",
    "SessionStore",
    # Errors
    "GameAlreadyOverError",
    "NotAParticipantError",
    "NotYourTurnError",
    "SessionError",
    "SessionFullError",
    "SessionNotFoundError",
    "WaitingForOpponentError",
]
