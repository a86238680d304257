"""Qt bridge that re-emits session events as signals."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal

from chesslink.core.codec import PlainState
from chesslink.core.enums import Color, GameResult
from chesslink.game.interfaces import GameEndReason
from chesslink.game.session import GameEvents


class SessionBridge(QObject):
    """Connects a :class:`GameEvents` hub to Qt slots in a rendering client."""

    state_changed = pyqtSignal(str, object, object)  # id, plain board, to move
    opponent_joined = pyqtSignal(str, object)
    opponent_left = pyqtSignal(str, object)
    game_over = pyqtSignal(str, object, object)  # id, result, reason
    lobby_changed = pyqtSignal(list)

    __slots__ = ("_events",)

    def __init__(self, events: GameEvents, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._events: GameEvents | None = events
        events.on_state.append(self._relay_state)
        events.on_opponent_joined.append(self._relay_joined)
        events.on_opponent_left.append(self._relay_left)
        events.on_game_over.append(self._relay_game_over)
        events.on_lobby_changed.append(self._relay_lobby)

    def detach(self) -> None:
        """Stop listening; safe to call more than once."""
        events = self._events
        if events is None:
            return
        events.on_state.remove(self._relay_state)
        events.on_opponent_joined.remove(self._relay_joined)
        events.on_opponent_left.remove(self._relay_left)
        events.on_game_over.remove(self._relay_game_over)
        events.on_lobby_changed.remove(self._relay_lobby)
        self._events = None

    def _relay_state(self, session_id: str, state: PlainState, side: Color) -> None:
        self.state_changed.emit(session_id, state, side)

    def _relay_joined(self, session_id: str, color: Color) -> None:
        self.opponent_joined.emit(session_id, color)

    def _relay_left(self, session_id: str, color: Color) -> None:
        self.opponent_left.emit(session_id, color)

    def _relay_game_over(
        self, session_id: str, result: GameResult, reason: GameEndReason
    ) -> None:
        self.game_over.emit(session_id, result, reason)

    def _relay_lobby(self, open_ids: list[str]) -> None:
        self.lobby_changed.emit(open_ids)
