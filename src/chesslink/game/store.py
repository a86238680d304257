"""SessionStore — explicit in-memory registry of game sessions."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable

from chesslink.core.board import Board
from chesslink.core.codec import PlainState
from chesslink.core.enums import Color
from chesslink.game.config import SessionConfig
from chesslink.game.errors import SessionNotFoundError
from chesslink.game.interfaces import ISessionStore
from chesslink.game.session import GameEvents, GameSession

_LOGGER = logging.getLogger(__name__)


class SessionStore(ISessionStore):
    """Pairs participants into sessions of at most two.

    The store is plain state handed to request handlers; its lifetime is
    whatever the caller gives it. All sessions share one :class:`GameEvents`.
    """

    __slots__ = ("_sessions", "_config", "_clock", "events")

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        events: GameEvents | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._config = config if config is not None else SessionConfig()
        self._clock = clock
        self.events = events if events is not None else GameEvents()

    # ── ISessionStore impl ───────────────────────────────────────────────

    def create(
        self,
        participant_id: str,
        board: Board | PlainState | None = None,
        *,
        side_to_move: Color = Color.WHITE,
    ) -> GameSession:
        session = GameSession(
            uuid.uuid4().hex,
            board,
            side_to_move=side_to_move,
            config=self._config,
            events=self.events,
            clock=self._clock,
        )
        self._sessions[session.session_id] = session
        _LOGGER.info("Created session %s", session.session_id)
        session.join(participant_id)
        self._emit_lobby()
        return session

    def join(self, session_id: str, participant_id: str) -> GameSession:
        session = self.get(session_id)
        session.join(participant_id)
        self._emit_lobby()
        return session

    def leave(self, session_id: str, participant_id: str) -> None:
        session = self._sessions.get(session_id)
        if session is None:
            return
        session.leave(participant_id)
        if session.is_empty:
            del self._sessions[session_id]
            _LOGGER.info("Discarded empty session %s", session_id)
        self._emit_lobby()

    def get(self, session_id: str) -> GameSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def open_sessions(self) -> list[str]:
        return [
            sid
            for sid, session in self._sessions.items()
            if not session.is_full and not session.is_game_over
        ]

    def expire(self, now: float | None = None) -> list[str]:
        if now is None:
            now = self._clock()
        limit = self._config.max_idle_seconds
        expired = [
            sid
            for sid, session in self._sessions.items()
            if session.idle_seconds(now) > limit
        ]
        for sid in expired:
            self._sessions.pop(sid).abandon()
            _LOGGER.info("Expired idle session %s", sid)
        if expired:
            self._emit_lobby()
        return expired

    # ── Extra helpers ────────────────────────────────────────────────────

    def disconnect(self, participant_id: str) -> None:
        """Remove *participant_id* from every session it is seated in."""
        for sid in [
            sid
            for sid, session in self._sessions.items()
            if participant_id in session.participants
        ]:
            self.leave(sid, participant_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def _emit_lobby(self) -> None:
        open_ids = self.open_sessions()
        for cb in self.events.on_lobby_changed:
            cb(open_ids)
