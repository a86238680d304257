"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable

import pytest

from chesslink.core.board import Board
from chesslink.core.enums import Color, PieceKind
from chesslink.core.piece import Piece
from chesslink.core.types import make_square

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"

_LETTERS: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}


def _board_from_diagram(diagram: str) -> Board:
    """Build a board from 8 lines of 8 tokens, rank 8 first.

    Uppercase letters are White, lowercase Black, ``.`` is empty. Every
    piece starts with ``moved=False``.
    """
    rows = [line.split() for line in diagram.strip().splitlines()]
    assert len(rows) == 8 and all(len(row) == 8 for row in rows), diagram
    board = Board()
    for y, row in enumerate(rows):
        for x, token in enumerate(row):
            if token == ".":
                continue
            color = Color.WHITE if token.isupper() else Color.BLACK
            board[make_square(x, y)] = Piece(color, _LETTERS[token.lower()])
    return board


@pytest.fixture
def make_board() -> Callable[[str], Board]:
    """Factory fixture turning an ASCII diagram into a :class:`Board`."""
    return _board_from_diagram
