"""chesslink — two-player chess rules engine with a session relay layer."""

__version__ = "0.1.0"
