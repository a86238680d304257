"""High-level chess rules: check, checkmate, stalemate and game result."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesslink.core.enums import Color, GameResult
from chesslink.core.move_generator import MoveGenerator
from chesslink.core.types import Square

if TYPE_CHECKING:
    from chesslink.core.board import Board


class Rules:
    """Static rule-checker that operates on a :class:`Board`."""

    # Product policy:
    # - Checkmate ends the game; the side that delivered it wins.
    # - Stalemate (no legal move, not in check) ends the game as a draw.
    # - No other draw rules are applied.

    @staticmethod
    def is_in_check(board: Board, color: Color) -> bool:
        return MoveGenerator(board).is_in_check(color)

    @staticmethod
    def legal_moves_from(board: Board, sq: Square) -> set[Square]:
        return MoveGenerator(board).legal_moves_from(sq)

    @staticmethod
    def available_squares(board: Board, sq: Square) -> frozenset[Square]:
        """Squares to highlight for the piece selected on *sq*."""
        return frozenset(MoveGenerator(board).legal_moves_from(sq))

    @staticmethod
    def is_checkmate(board: Board, color: Color) -> bool:
        gen = MoveGenerator(board)
        if not gen.is_in_check(color):
            return False
        return not gen.has_legal_move(color)

    @staticmethod
    def is_stalemate(board: Board, color: Color) -> bool:
        gen = MoveGenerator(board)
        if gen.is_in_check(color):
            return False
        return not gen.has_legal_move(color)

    @staticmethod
    def game_result(board: Board, side_to_move: Color) -> GameResult:
        """Determine the result with *side_to_move* about to play."""
        gen = MoveGenerator(board)
        if gen.has_legal_move(side_to_move):
            return GameResult.IN_PROGRESS
        if gen.is_in_check(side_to_move):
            return GameResult.win_for(side_to_move.opposite)
        return GameResult.DRAW  # stalemate
