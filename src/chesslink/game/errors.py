"""Errors raised by the session layer.

Illegal chess moves are not errors (they come back as ``False``); these
cover misuse of a session: unknown ids, full rooms, out-of-turn relays.
"""

from __future__ import annotations


class SessionError(Exception):
    """Base class for session-layer failures."""


class SessionNotFoundError(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class SessionFullError(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session is full: {session_id}")
        self.session_id = session_id


class NotAParticipantError(SessionError):
    def __init__(self, session_id: str, participant_id: str) -> None:
        super().__init__(f"{participant_id} is not seated in session {session_id}")
        self.session_id = session_id
        self.participant_id = participant_id


class WaitingForOpponentError(SessionError):
    """The session has only one participant so far."""


class NotYourTurnError(SessionError):
    """A participant tried to move while the other side is to move."""


class GameAlreadyOverError(SessionError):
    """The session's game has already ended."""
