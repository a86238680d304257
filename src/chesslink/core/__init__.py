"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from chesslink.core import Board, Rules, parse_square

    board = Board.initial()
    e2 = parse_square("e2")
    print(sorted(Rules.legal_moves_from(board, e2)))
    board.move_piece(e2, parse_square("e4"))
"""

from chesslink.core.board import Board, LastMove
from chesslink.core.codec import (
    PlainState,
    PositionFormatError,
    decode_board,
    dumps,
    encode_board,
    loads,
)
from chesslink.core.enums import Color, GameResult, PieceKind
from chesslink.core.move_generator import MoveGenerator
from chesslink.core.piece import Piece
from chesslink.core.rules import Rules
from chesslink.core.types import (
    Square,
    make_square,
    parse_square,
    square_name,
    tint_of,
    x_of,
    y_of,
)

__all__ = [
    # Enums
    "Color",
    "GameResult",
    "PieceKind",
    # Types / helpers
    "Square",
    "make_square",
    "parse_square",
    "square_name",
    "tint_of",
    "x_of",
    "y_of",
    # Domain objects
    "Board",
    "LastMove",
    "MoveGenerator",
    "Piece",
    "Rules",
    # Codec
    "PlainState",
    "PositionFormatError",
    "decode_board",
    "dumps",
    "encode_board",
    "loads",
]
