"""Board - piece placement on an 8x8 board plus capture and last-move memory."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chesslink.core.enums import Color, PieceKind
from chesslink.core.move_generator import MoveGenerator
from chesslink.core.piece import Piece
from chesslink.core.types import Square, make_square, square_name, x_of, y_of

_LOGGER = logging.getLogger(__name__)

_BACK_RANK: tuple[PieceKind, ...] = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


@dataclass(frozen=True, slots=True)
class LastMove:
    """The immediately preceding half-move (needed for en passant)."""

    from_sq: Square
    to_sq: Square

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"


class Board:
    """Mutable 64-square board.

    The board owns every piece standing on it. Captured pieces move to
    ``captured_by_white`` / ``captured_by_black`` in capture order, so
    ``captured_by_white`` holds Black pieces.
    """

    __slots__ = ("_squares", "captured_by_white", "captured_by_black", "last_move")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        self.captured_by_white: list[Piece] = []
        self.captured_by_black: list[Piece] = []
        self.last_move: LastMove | None = None

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._squares[sq] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [
            sq
            for sq, piece in enumerate(self._squares)
            if piece is not None and piece.color == color
        ]

    def king_square(self, color: Color) -> Square | None:
        """Square of *color*'s king, or None if it is missing."""
        for sq, piece in enumerate(self._squares):
            if piece is not None and piece.kind == PieceKind.KING and piece.color == color:
                return sq
        return None

    def captured_by(self, color: Color) -> list[Piece]:
        """Pieces captured by *color*, oldest first."""
        if color == Color.WHITE:
            return self.captured_by_white
        return self.captured_by_black

    # -- Line of sight ------------------------------------------------------

    def is_clear_vertical(self, a: Square, b: Square) -> bool:
        """Same file and nothing strictly between *a* and *b*."""
        if x_of(a) != x_of(b):
            return False
        x = x_of(a)
        low, high = sorted((y_of(a), y_of(b)))
        return all(self._squares[make_square(x, y)] is None for y in range(low + 1, high))

    def is_clear_horizontal(self, a: Square, b: Square) -> bool:
        """Same row and nothing strictly between *a* and *b*."""
        if y_of(a) != y_of(b):
            return False
        y = y_of(a)
        low, high = sorted((x_of(a), x_of(b)))
        return all(self._squares[make_square(x, y)] is None for x in range(low + 1, high))

    def is_clear_diagonal(self, a: Square, b: Square) -> bool:
        """Same diagonal and nothing strictly between *a* and *b*."""
        dx = x_of(b) - x_of(a)
        dy = y_of(b) - y_of(a)
        if abs(dx) != abs(dy):
            return False
        step_x = 1 if dx > 0 else -1
        step_y = 1 if dy > 0 else -1
        for i in range(1, abs(dx)):
            sq = make_square(x_of(a) + step_x * i, y_of(a) + step_y * i)
            if self._squares[sq] is not None:
                return False
        return True

    # -- Mutation / copying -------------------------------------------------

    def move_piece(self, from_sq: Square, to_sq: Square) -> bool:
        """Relocate the piece on *from_sq* to *to_sq*.

        The move is re-checked with :meth:`MoveGenerator.can_move` first; an
        illegal request is a no-op and returns False. Handles en passant
        removal, the castling rook and normal captures.
        """
        if not MoveGenerator(self).can_move(from_sq, to_sq):
            _LOGGER.debug(
                "Ignoring move %s-%s", square_name(from_sq), square_name(to_sq)
            )
            return False

        piece = self._squares[from_sq]
        assert piece is not None
        self.last_move = LastMove(from_sq, to_sq)
        dx = x_of(to_sq) - x_of(from_sq)

        if piece.kind == PieceKind.PAWN and dx != 0 and self._squares[to_sq] is None:
            # The passed pawn stands beside the capturer, on the capturer's row.
            passed_sq = make_square(x_of(to_sq), y_of(from_sq))
            passed = self._squares[passed_sq]
            if passed is not None:
                self._squares[passed_sq] = None
                self.captured_by(piece.color).append(passed)
                _LOGGER.debug("En passant capture on %s", square_name(passed_sq))

        elif piece.kind == PieceKind.KING and abs(dx) == 2:
            y = y_of(from_sq)
            rook_from = make_square(7 if dx > 0 else 0, y)
            rook_to = make_square(x_of(from_sq) + dx // 2, y)
            rook = self._squares[rook_from]
            assert rook is not None
            self._squares[rook_from] = None
            self._squares[rook_to] = rook
            rook.moved = True
            _LOGGER.debug(
                "%s castles %s", piece.color, "king side" if dx > 0 else "queen side"
            )

        captured = self._squares[to_sq]
        if captured is not None:
            self.captured_by(piece.color).append(captured)

        self._squares[from_sq] = None
        self._squares[to_sq] = piece
        piece.moved = True
        _LOGGER.debug("Moved %s %s", piece.symbol, self.last_move)
        return True

    def copy(self) -> Board:
        """Deep value copy; mutating the copy never touches this board."""
        b = Board()
        b._squares = [p.copy() if p is not None else None for p in self._squares]
        b.captured_by_white = [p.copy() for p in self.captured_by_white]
        b.captured_by_black = [p.copy() for p in self.captured_by_black]
        b.last_move = self.last_move
        return b

    def clear(self) -> None:
        self._squares = [None] * 64
        self.captured_by_white = []
        self.captured_by_black = []
        self.last_move = None

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position (Black on rows 0-1, White on rows 6-7)."""
        b = cls()
        for x in range(8):
            b[make_square(x, 1)] = Piece(Color.BLACK, PieceKind.PAWN)
            b[make_square(x, 6)] = Piece(Color.WHITE, PieceKind.PAWN)

        for x, kind in enumerate(_BACK_RANK):
            b[make_square(x, 0)] = Piece(Color.BLACK, kind)
            b[make_square(x, 7)] = Piece(Color.WHITE, kind)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._squares == other._squares
            and self.captured_by_white == other.captured_by_white
            and self.captured_by_black == other.captured_by_black
            and self.last_move == other.last_move
        )

    def __repr__(self) -> str:
        rows: list[str] = []
        for y in range(8):
            row = []
            for x in range(8):
                p = self[make_square(x, y)]
                row.append(str(p) if p else ".")
            rows.append(f"{8 - y} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
