"""Tests for MoveGenerator: piece geometry, special moves and legality."""

from collections.abc import Callable

import pytest

from chesslink.core.board import Board
from chesslink.core.enums import Color, PieceKind
from chesslink.core.move_generator import MoveGenerator
from chesslink.core.piece import Piece
from chesslink.core.types import (
    A1, B1, C1, D1, E1, F1, G1, H1,
    B5, D3, D4, D5, D6, E2, E3, E4, E5, E6, E7, E8, F3, F6, H5,
    make_square,
)

BoardFactory = Callable[[str], Board]


def perft(board: Board, color: Color, depth: int) -> int:
    """Count leaf nodes at *depth* by copying the board for every move."""
    if depth == 0:
        return 1
    gen = MoveGenerator(board)
    nodes = 0
    for sq in board.pieces(color):
        for to_sq in gen.legal_moves_from(sq):
            child = board.copy()
            child.move_piece(sq, to_sq)
            nodes += perft(child, color.opposite, depth - 1)
    return nodes


# ── Basic geometry ───────────────────────────────────────────────────────────


class TestBasicRules:
    def test_empty_origin_cannot_move(self) -> None:
        assert not MoveGenerator(Board.initial()).can_move(E4, E5)

    def test_cannot_land_on_own_piece(self) -> None:
        assert not MoveGenerator(Board.initial()).can_move(D1, E1)

    def test_null_move_rejected(self) -> None:
        assert not MoveGenerator(Board.initial()).can_move(E2, E2)

    def test_knight_jumps(self) -> None:
        board = Board()
        board[D4] = Piece(Color.WHITE, PieceKind.KNIGHT)
        gen = MoveGenerator(board)
        targets = {sq for sq in range(64) if gen.can_move(D4, sq)}
        assert len(targets) == 8
        assert F3 in targets and B5 in targets
        assert not gen.can_move(D4, D6)

    def test_knight_ignores_blockers(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.can_move(G1, F3)

    def test_bishop_stops_at_blocker(self) -> None:
        board = Board()
        board[D4] = Piece(Color.WHITE, PieceKind.BISHOP)
        board[F6] = Piece(Color.BLACK, PieceKind.PAWN)
        gen = MoveGenerator(board)
        assert gen.can_move(D4, F6)  # capture
        assert not gen.can_move(D4, make_square(6, 1))  # g7, behind the pawn
        assert not gen.can_move(D4, D5)

    def test_rook_lines(self) -> None:
        board = Board()
        board[D4] = Piece(Color.WHITE, PieceKind.ROOK)
        gen = MoveGenerator(board)
        assert gen.can_move(D4, D1)
        assert gen.can_move(D4, make_square(7, 4))  # h4
        assert not gen.can_move(D4, E5)

    def test_queen_is_rook_plus_bishop(self) -> None:
        board = Board()
        board[D4] = Piece(Color.WHITE, PieceKind.QUEEN)
        gen = MoveGenerator(board)
        targets = {sq for sq in range(64) if gen.can_move(D4, sq)}
        assert len(targets) == 27

    def test_king_single_steps(self) -> None:
        board = Board()
        board[D4] = Piece(Color.WHITE, PieceKind.KING, moved=True)
        gen = MoveGenerator(board)
        targets = {sq for sq in range(64) if gen.can_move(D4, sq)}
        assert len(targets) == 8


# ── Pawns ────────────────────────────────────────────────────────────────────


class TestPawn:
    def test_single_and_double_step(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.can_move(E2, E3)
        assert gen.can_move(E2, E4)
        assert not gen.can_move(E2, make_square(4, 3))  # e5: three squares

    def test_double_step_needs_both_squares_empty(self) -> None:
        board = Board.initial()
        board[E3] = Piece(Color.BLACK, PieceKind.KNIGHT)
        assert not MoveGenerator(board).can_move(E2, E4)

        board = Board.initial()
        board[E4] = Piece(Color.BLACK, PieceKind.KNIGHT)
        gen = MoveGenerator(board)
        assert gen.can_move(E2, E3)
        assert not gen.can_move(E2, E4)

    def test_first_step_flag_clears(self) -> None:
        board = Board.initial()
        assert board[E2] is not None and board[E2].is_first_step
        assert board.move_piece(E2, E4)
        pawn = board[E4]
        assert pawn is not None and not pawn.is_first_step
        assert not MoveGenerator(board).can_move(E4, E6)

    def test_moved_pawn_cannot_double_step_from_start_row(self) -> None:
        board = Board()
        board[E2] = Piece(Color.WHITE, PieceKind.PAWN, moved=True)
        assert not MoveGenerator(board).can_move(E2, E4)

    def test_pawn_cannot_capture_forward(self) -> None:
        board = Board.initial()
        board[E3] = Piece(Color.BLACK, PieceKind.PAWN)
        assert not MoveGenerator(board).can_move(E2, E3)

    def test_pawn_never_moves_backward(self) -> None:
        board = Board()
        board[E4] = Piece(Color.WHITE, PieceKind.PAWN, moved=True)
        assert not MoveGenerator(board).can_move(E4, make_square(4, 5))

    def test_diagonal_capture(self) -> None:
        board = Board.initial()
        board[D3] = Piece(Color.BLACK, PieceKind.KNIGHT)
        gen = MoveGenerator(board)
        assert gen.can_move(E2, D3)
        assert not gen.can_move(E2, F3)  # empty, no en passant

    def test_black_pawns_move_down_the_board(self) -> None:
        gen = MoveGenerator(Board.initial())
        assert gen.can_move(E7, E5)
        assert gen.can_move(E7, E6)
        assert not gen.can_move(E7, E8)


# ── En passant ───────────────────────────────────────────────────────────────


class TestEnPassant:
    DIAGRAM = """
        . . . . k . . .
        . . . . p . . .
        . . . . . . . .
        . . . P . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . K . . .
    """

    def test_capture_after_double_step(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        assert board.move_piece(E7, E5)

        gen = MoveGenerator(board)
        assert gen.can_move(D5, E6)
        assert E6 in gen.legal_moves_from(D5)

        assert board.move_piece(D5, E6)
        assert board[E5] is None
        assert board[E6] == Piece(Color.WHITE, PieceKind.PAWN, moved=True)
        assert board.captured_by_white == [
            Piece(Color.BLACK, PieceKind.PAWN, moved=True)
        ]

    def test_only_immediately_after(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        assert board.move_piece(E7, E5)
        assert board.move_piece(E1, D1)
        assert board.move_piece(E8, make_square(3, 0))
        assert not MoveGenerator(board).can_move(D5, E6)

    def test_not_after_single_steps(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        board[E7] = None
        board[E6] = Piece(Color.BLACK, PieceKind.PAWN, moved=True)
        assert board.move_piece(E6, E5)
        assert not MoveGenerator(board).can_move(D5, E6)

    def test_wrong_column(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        assert board.move_piece(E7, E5)
        assert not MoveGenerator(board).can_move(D5, make_square(2, 2))  # c6

    def test_black_captures_en_passant(self, make_board: BoardFactory) -> None:
        board = make_board(
            """
            . . . . k . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . p . . . .
            . . . . . . . .
            . . . . P . . .
            . . . . K . . .
            """
        )
        assert board.move_piece(E2, E4)
        assert board.move_piece(D4, E3)
        assert board[E4] is None
        assert [p.kind for p in board.captured_by_black] == [PieceKind.PAWN]


# ── Castling ─────────────────────────────────────────────────────────────────


class TestCastling:
    DIAGRAM = """
        r . . . k . . r
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        . . . . . . . .
        R . . . K . . R
    """

    def test_king_side(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        gen = MoveGenerator(board)
        assert gen.can_move(E1, G1)
        assert G1 in gen.legal_moves_from(E1)

        assert board.move_piece(E1, G1)
        assert board[G1] == Piece(Color.WHITE, PieceKind.KING, moved=True)
        assert board[F1] == Piece(Color.WHITE, PieceKind.ROOK, moved=True)
        assert board[H1] is None
        assert board[E1] is None

    def test_queen_side(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        assert board.move_piece(E1, C1)
        assert board[C1] is not None and board[C1].kind == PieceKind.KING
        assert board[D1] is not None and board[D1].kind == PieceKind.ROOK
        assert board[A1] is None

    def test_black_castles(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        g8, f8 = make_square(6, 0), make_square(5, 0)
        assert board.move_piece(E8, g8)
        assert board[f8] is not None and board[f8].kind == PieceKind.ROOK

    def test_passing_square_attacked(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        board[make_square(5, 3)] = Piece(Color.BLACK, PieceKind.ROOK)  # f5 hits f1
        gen = MoveGenerator(board)
        assert not gen.can_move(E1, G1)
        assert gen.can_move(E1, C1)

    def test_destination_attacked(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        board[make_square(6, 3)] = Piece(Color.BLACK, PieceKind.ROOK)  # g5 hits g1
        assert not MoveGenerator(board).can_move(E1, G1)

    def test_attacked_b_file_does_not_block_queen_side(
        self, make_board: BoardFactory
    ) -> None:
        board = make_board(self.DIAGRAM)
        board[make_square(1, 3)] = Piece(Color.BLACK, PieceKind.ROOK)  # b5 hits b1
        assert MoveGenerator(board).can_move(E1, C1)

    def test_not_out_of_check(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        board[make_square(4, 3)] = Piece(Color.BLACK, PieceKind.ROOK)  # e5 checks
        gen = MoveGenerator(board)
        assert not gen.can_move(E1, G1)
        assert not gen.can_move(E1, C1)

    def test_blocked_path(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        board[B1] = Piece(Color.WHITE, PieceKind.KNIGHT)
        gen = MoveGenerator(board)
        assert not gen.can_move(E1, C1)
        assert gen.can_move(E1, G1)

    def test_moved_king_loses_rights(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        assert board.move_piece(E1, E2)
        assert board.move_piece(E8, make_square(4, 1))
        assert board.move_piece(E2, E1)
        assert not MoveGenerator(board).can_move(E1, G1)

    def test_moved_rook_loses_rights(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        rook = board[H1]
        assert rook is not None
        rook.moved = True
        gen = MoveGenerator(board)
        assert not gen.can_move(E1, G1)
        assert gen.can_move(E1, C1)

    def test_missing_rook(self, make_board: BoardFactory) -> None:
        board = make_board(self.DIAGRAM)
        board[H1] = None
        assert not MoveGenerator(board).can_move(E1, G1)


# ── Legality filtering ───────────────────────────────────────────────────────


class TestLegalMoves:
    def test_pinned_piece_has_no_legal_move(self, make_board: BoardFactory) -> None:
        board = make_board(
            """
            k . . . r . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . B . . .
            . . . . K . . .
            """
        )
        gen = MoveGenerator(board)
        assert gen.can_move(E2, D3)
        assert gen.legal_moves_from(E2) == set()

    def test_pinned_rook_slides_along_pin(self, make_board: BoardFactory) -> None:
        board = make_board(
            """
            k . . . r . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . R . . .
            . . . . K . . .
            """
        )
        legal = MoveGenerator(board).legal_moves_from(E2)
        assert legal == {make_square(4, y) for y in range(0, 6)}

    def test_king_cannot_step_into_check(self, make_board: BoardFactory) -> None:
        board = make_board(
            """
            k . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . r . . K .
            """
        )
        legal = MoveGenerator(board).legal_moves_from(G1)
        assert legal == {make_square(x, 6) for x in (5, 6, 7)}

    def test_empty_square_has_no_moves(self) -> None:
        assert MoveGenerator(Board.initial()).legal_moves_from(E4) == set()

    def test_legal_query_does_not_mutate(self) -> None:
        board = Board.initial()
        before = board.copy()
        MoveGenerator(board).legal_moves_from(E2)
        assert board == before

    def test_move_piece_rejects_illegal_request(self) -> None:
        board = Board.initial()
        before = board.copy()
        assert not board.move_piece(E2, E5)
        assert board == before
        assert board.last_move is None

    def test_capture_is_recorded(self, make_board: BoardFactory) -> None:
        board = make_board(
            """
            k . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . . . . q
            . . . . . . . .
            . . . . . . . .
            . . . . . . . .
            . . . . K . . R
            """
        )
        assert board.move_piece(H1, H5)
        assert board.captured_by_white == [Piece(Color.BLACK, PieceKind.QUEEN)]
        assert board.captured_by_black == []

    def test_has_legal_move(self) -> None:
        assert MoveGenerator(Board.initial()).has_legal_move(Color.WHITE)


# ── Move counts ──────────────────────────────────────────────────────────────


KIWIPETE = """
    r . . . k . . r
    p . p p q p b .
    b n . . p n p .
    . . . P N . . .
    . p . . P . . .
    . . N . . Q . p
    P P P B B P P P
    R . . . K . . R
"""


class TestMoveCounts:
    def test_starting_depth_1(self) -> None:
        assert perft(Board.initial(), Color.WHITE, 1) == 20

    def test_starting_depth_2(self) -> None:
        assert perft(Board.initial(), Color.WHITE, 2) == 400

    @pytest.mark.slow
    def test_starting_depth_3(self) -> None:
        assert perft(Board.initial(), Color.WHITE, 3) == 8_902

    def test_kiwipete_depth_1(self, make_board: BoardFactory) -> None:
        assert perft(make_board(KIWIPETE), Color.WHITE, 1) == 48

