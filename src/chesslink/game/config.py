"""Session configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionConfig:
    """All tunable session-layer settings."""

    # Sessions without activity for this long are dropped by ``expire``.
    max_idle_seconds: float = 1800.0

    # Reject relays and moves from the participant who is not to move.
    enforce_turn_order: bool = True

    def __post_init__(self) -> None:
        if self.max_idle_seconds <= 0:
            raise ValueError(
                f"max_idle_seconds must be positive, got {self.max_idle_seconds!r}"
            )
