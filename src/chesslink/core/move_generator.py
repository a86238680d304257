"""Pseudo-legal move predicates, legal-move filtering and attack detection."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from chesslink.core.enums import Color, PieceKind
from chesslink.core.piece import Piece
from chesslink.core.types import Square, is_valid_square, make_square, x_of, y_of

if TYPE_CHECKING:
    from chesslink.core.board import Board

_LOGGER = logging.getLogger(__name__)

# Row a pawn starts on, and the row it must stand on to capture en passant.
_PAWN_START_ROW: tuple[int, int] = (6, 1)
_EN_PASSANT_ROW: tuple[int, int] = (3, 4)
_PAWN_DIRECTION: tuple[int, int] = (-1, 1)


class MoveGenerator:
    """Answers movement questions about a :class:`Board`.

    ``can_move`` is the pseudo-legal predicate (geometry and occupancy
    only). Legality is decided by simulating the move on a board copy and
    testing the mover's own king, so the board itself is never mutated.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    @property
    def board(self) -> Board:
        return self._board

    # -- Pseudo-legal predicate --------------------------------------------

    def can_move(self, from_sq: Square, to_sq: Square) -> bool:
        """Whether the piece on *from_sq* may geometrically reach *to_sq*.

        Does not check whether the mover's king is left in check.
        """
        if from_sq == to_sq or not (is_valid_square(from_sq) and is_valid_square(to_sq)):
            return False
        piece = self._board[from_sq]
        if piece is None:
            return False
        target = self._board[to_sq]
        if target is not None and target.color == piece.color:
            return False
        return _GEOMETRY[piece.kind](self, piece, from_sq, to_sq)

    def is_en_passant(self, from_sq: Square, to_sq: Square) -> bool:
        """Whether a pawn on *from_sq* may capture en passant onto *to_sq*."""
        board = self._board
        last = board.last_move
        if last is None:
            return False

        pawn = board[from_sq]
        passed = board[last.to_sq]
        if pawn is None or pawn.kind != PieceKind.PAWN:
            return False
        if passed is None or passed.kind != PieceKind.PAWN or passed.color == pawn.color:
            return False
        if abs(y_of(last.to_sq) - y_of(last.from_sq)) != 2:
            return False
        if y_of(from_sq) != _EN_PASSANT_ROW[int(pawn.color)]:
            return False
        return x_of(to_sq) == x_of(last.to_sq)

    def can_castle(self, king_sq: Square, to_sq: Square) -> bool:
        """Whether the king on *king_sq* may castle two files to *to_sq*."""
        board = self._board
        king = board[king_sq]
        if king is None or king.kind != PieceKind.KING or king.moved:
            return False
        # Emptiness first: the check test below re-enters can_move for the
        # enemy king, whose castling target is never an occupied square.
        if not board.is_empty(to_sq):
            return False

        dx = x_of(to_sq) - x_of(king_sq)
        y = y_of(king_sq)
        rook_sq = make_square(7 if dx > 0 else 0, y)
        rook = board[rook_sq]
        if (
            rook is None
            or rook.kind != PieceKind.ROOK
            or rook.color != king.color
            or rook.moved
        ):
            return False
        if not board.is_clear_horizontal(king_sq, rook_sq):
            return False

        if self.is_in_check(king.color):
            return False
        passing_sq = make_square(x_of(king_sq) + (1 if dx > 0 else -1), y)
        for sq in (passing_sq, to_sq):
            if self._king_attacked_on(king_sq, sq):
                _LOGGER.debug("Castling blocked: king would be attacked")
                return False
        return True

    # -- Attack detection ---------------------------------------------------

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* reachable by any piece of *by_color*?

        Pawns only attack occupied squares here, which is enough for kings.
        """
        return any(
            self.can_move(from_sq, sq) for from_sq in self._board.pieces(by_color)
        )

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?

        A board without a king of *color* counts as not in check.
        """
        king_sq = self._board.king_square(color)
        if king_sq is None:
            _LOGGER.warning("No %s king on board; treating as not in check", color)
            return False
        return self.is_square_attacked(king_sq, color.opposite)

    # -- Legal moves --------------------------------------------------------

    def legal_moves_from(self, sq: Square) -> set[Square]:
        """Targets of the piece on *sq* that do not leave its king in check."""
        piece = self._board[sq]
        if piece is None:
            return set()

        legal: set[Square] = set()
        for to_sq in range(64):
            if not self.can_move(sq, to_sq):
                continue
            trial = self._board.copy()
            trial.move_piece(sq, to_sq)
            if not MoveGenerator(trial).is_in_check(piece.color):
                legal.add(to_sq)
        return legal

    def has_legal_move(self, color: Color) -> bool:
        return any(self.legal_moves_from(sq) for sq in self._board.pieces(color))

    # -- Internal helpers ---------------------------------------------------

    def _king_attacked_on(self, king_sq: Square, sq: Square) -> bool:
        trial = self._board.copy()
        trial[sq] = trial[king_sq]
        trial[king_sq] = None
        king = trial[sq]
        assert king is not None
        return MoveGenerator(trial).is_in_check(king.color)


# -- Per-kind geometry -----------------------------------------------------
#
# Each rule runs after the shared checks in ``can_move`` (distinct squares,
# non-empty origin, target not held by the mover's own color).


def _pawn(gen: MoveGenerator, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    board = gen.board
    direction = _PAWN_DIRECTION[int(piece.color)]
    fx, fy = x_of(from_sq), y_of(from_sq)
    tx, ty = x_of(to_sq), y_of(to_sq)

    if tx == fx:
        if ty == fy + direction:
            return board.is_empty(to_sq)
        if (
            ty == fy + 2 * direction
            and piece.is_first_step
            and fy == _PAWN_START_ROW[int(piece.color)]
        ):
            return board.is_empty(make_square(fx, fy + direction)) and board.is_empty(
                to_sq
            )
        return False

    if abs(tx - fx) == 1 and ty == fy + direction:
        if not board.is_empty(to_sq):
            return True
        return gen.is_en_passant(from_sq, to_sq)
    return False


def _knight(gen: MoveGenerator, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    dx = abs(x_of(to_sq) - x_of(from_sq))
    dy = abs(y_of(to_sq) - y_of(from_sq))
    return (dx, dy) in ((1, 2), (2, 1))


def _bishop(gen: MoveGenerator, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    return gen.board.is_clear_diagonal(from_sq, to_sq)


def _rook(gen: MoveGenerator, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    board = gen.board
    return board.is_clear_vertical(from_sq, to_sq) or board.is_clear_horizontal(
        from_sq, to_sq
    )


def _queen(gen: MoveGenerator, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    return _bishop(gen, piece, from_sq, to_sq) or _rook(gen, piece, from_sq, to_sq)


def _king(gen: MoveGenerator, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    dx = x_of(to_sq) - x_of(from_sq)
    dy = y_of(to_sq) - y_of(from_sq)
    if max(abs(dx), abs(dy)) == 1:
        return True
    if abs(dx) == 2 and dy == 0:
        return gen.can_castle(from_sq, to_sq)
    return False


_GEOMETRY: dict[PieceKind, Callable[[MoveGenerator, Piece, Square, Square], bool]] = {
    PieceKind.PAWN: _pawn,
    PieceKind.KNIGHT: _knight,
    PieceKind.BISHOP: _bishop,
    PieceKind.ROOK: _rook,
    PieceKind.QUEEN: _queen,
    PieceKind.KING: _king,
}
