"""Plain-data codec for handing a :class:`Board` across a transport.

Wire shape (all values JSON-safe)::

    {
      "cells": [[{"x": 0, "y": 0, "color": "white",
                  "figure": {"type": "Rook", "color": "black", "moved": false}},
                 ...], ...],                      # cells[y][x]
      "capturedByWhite": [{"type": "Pawn", "color": "black"}, ...],
      "capturedByBlack": [...],
      "lastMove": {"from": {"x": 4, "y": 1}, "to": {"x": 4, "y": 3}} | null
    }

Pawns carry ``isFirstStep``; kings and rooks carry ``moved`` so castling
rights survive a round trip. Capture-list entries keep only kind and color.
"""

from __future__ import annotations

import json
from typing import Any

from chesslink.core.board import Board, LastMove
from chesslink.core.enums import Color, PieceKind
from chesslink.core.piece import Piece
from chesslink.core.types import Square, is_on_board, make_square, tint_of, x_of, y_of

PlainState = dict[str, Any]

_KINDS: dict[str, PieceKind] = {kind.title: kind for kind in PieceKind}
_COLORS: dict[str, Color] = {str(color): color for color in Color}
_CASTLING_KINDS = (PieceKind.KING, PieceKind.ROOK)


class PositionFormatError(ValueError):
    """Raised when plain state cannot be decoded into a board."""


# ── Encoding ─────────────────────────────────────────────────────────────────


def _encode_piece(piece: Piece) -> dict[str, Any]:
    data: dict[str, Any] = {"type": piece.kind.title, "color": str(piece.color)}
    if piece.kind == PieceKind.PAWN:
        data["isFirstStep"] = piece.is_first_step
    elif piece.kind in _CASTLING_KINDS:
        data["moved"] = piece.moved
    return data


def _encode_coords(sq: Square) -> dict[str, int]:
    return {"x": x_of(sq), "y": y_of(sq)}


def encode_board(board: Board) -> PlainState:
    """Serialise *board* to plain data."""
    cells: list[list[dict[str, Any]]] = []
    for y in range(8):
        row: list[dict[str, Any]] = []
        for x in range(8):
            sq = make_square(x, y)
            piece = board[sq]
            row.append(
                {
                    "x": x,
                    "y": y,
                    "color": str(tint_of(sq)),
                    "figure": _encode_piece(piece) if piece is not None else None,
                }
            )
        cells.append(row)

    last = board.last_move
    return {
        "cells": cells,
        "capturedByWhite": [
            {"type": p.kind.title, "color": str(p.color)} for p in board.captured_by_white
        ],
        "capturedByBlack": [
            {"type": p.kind.title, "color": str(p.color)} for p in board.captured_by_black
        ],
        "lastMove": (
            {"from": _encode_coords(last.from_sq), "to": _encode_coords(last.to_sq)}
            if last is not None
            else None
        ),
    }


def dumps(board: Board) -> str:
    """Serialise *board* to a JSON string."""
    return json.dumps(encode_board(board), sort_keys=True, separators=(",", ":"))


# ── Decoding ─────────────────────────────────────────────────────────────────


def _decode_color(value: Any) -> Color:
    try:
        return _COLORS[value]
    except (KeyError, TypeError):
        raise PositionFormatError(f"Invalid color: {value!r}") from None


def _decode_piece(data: Any) -> Piece:
    if not isinstance(data, dict):
        raise PositionFormatError(f"Invalid figure: {data!r}")
    try:
        kind = _KINDS[data.get("type")]
    except (KeyError, TypeError):
        raise PositionFormatError(f"Invalid figure type: {data.get('type')!r}") from None
    piece = Piece(_decode_color(data.get("color")), kind)
    if kind == PieceKind.PAWN:
        piece.moved = not data.get("isFirstStep", True)
    elif kind in _CASTLING_KINDS:
        piece.moved = bool(data.get("moved", False))
    return piece


def _decode_coords(data: Any) -> Square:
    try:
        x, y = data["x"], data["y"]
    except (KeyError, TypeError):
        raise PositionFormatError(f"Invalid coordinates: {data!r}") from None
    if not (isinstance(x, int) and isinstance(y, int) and is_on_board(x, y)):
        raise PositionFormatError(f"Coordinates off the board: {data!r}")
    return make_square(x, y)


def _decode_captures(data: PlainState, key: str) -> list[Piece]:
    # Captured pieces are free-standing: they belong to no square.
    entries = data.get(key, [])
    if not isinstance(entries, list):
        raise PositionFormatError(f"{key} must be a list")
    return [_decode_piece(p) for p in entries]


def decode_board(data: PlainState) -> Board:
    """Rebuild a :class:`Board` from plain data produced by :func:`encode_board`."""
    if not isinstance(data, dict):
        raise PositionFormatError("Board state must be a mapping")
    cells = data.get("cells")
    if not isinstance(cells, list) or len(cells) != 8:
        raise PositionFormatError("Board state must contain 8 rows of cells")

    board = Board()
    for y, row in enumerate(cells):
        if not isinstance(row, list) or len(row) != 8:
            raise PositionFormatError(f"Row {y} must contain 8 cells")
        for x, cell in enumerate(row):
            sq = _decode_coords(cell)
            if sq != make_square(x, y):
                raise PositionFormatError(f"Cell at row {y}, column {x} is misplaced")
            if "color" in cell and _decode_color(cell["color"]) != tint_of(sq):
                raise PositionFormatError(f"Wrong tint for cell {cell!r}")
            figure = cell.get("figure")
            if figure is not None:
                board[sq] = _decode_piece(figure)

    board.captured_by_white = _decode_captures(data, "capturedByWhite")
    board.captured_by_black = _decode_captures(data, "capturedByBlack")

    last = data.get("lastMove")
    if last is not None:
        if not isinstance(last, dict):
            raise PositionFormatError(f"Invalid last move: {last!r}")
        board.last_move = LastMove(
            _decode_coords(last.get("from")), _decode_coords(last.get("to"))
        )
    return board


def loads(text: str) -> Board:
    """Parse a JSON string produced by :func:`dumps`."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PositionFormatError(f"Invalid JSON board state: {exc}") from exc
    return decode_board(data)
