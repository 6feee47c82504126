import pytest

from qwirkle.board import ORIGIN, Axis, Board
from qwirkle.errors import Reason, RuleViolation
from qwirkle.tiles import deserialize_tile as T


def row_board():
    return Board(
        {
            (0, 0): T("red_circle"),
            (1, 0): T("red_square"),
            (2, 0): T("red_star"),
        }
    )


def test_empty_board_only_offers_origin():
    board = Board()
    assert board.is_empty()
    assert board.possible_positions() == {ORIGIN}
    assert board.bounds() is None


def test_line_excludes_position_and_keeps_order():
    board = row_board()
    assert board.line((3, 0), Axis.HORIZONTAL) == (T("red_circle"), T("red_square"), T("red_star"))
    assert board.line((1, 0), Axis.HORIZONTAL) == (T("red_circle"), T("red_star"))
    assert board.line((-1, 0), Axis.HORIZONTAL) == (T("red_circle"), T("red_square"), T("red_star"))
    assert board.line((1, 1), Axis.VERTICAL) == (T("red_square"),)
    assert board.line((5, 5), Axis.VERTICAL) == ()


def test_possible_positions_surround_layout():
    board = Board({ORIGIN: T("blue_cross")})
    assert board.possible_positions() == {(-1, 0), (1, 0), (0, -1), (0, 1)}

    positions = row_board().possible_positions()
    assert (3, 0) in positions and (-1, 0) in positions
    assert (1, 1) in positions and (1, -1) in positions
    assert all(pos not in row_board() for pos in positions)


def test_place_rejects_occupied_cell():
    board = row_board()
    with pytest.raises(RuleViolation) as excinfo:
        board.place((1, 0), T("blue_square"))
    assert excinfo.value.reason is Reason.CELL_OCCUPIED


def test_scratch_overlay_leaves_original_untouched():
    board = row_board()
    scratch = board.with_tiles([((3, 0), T("red_cross"))])
    assert scratch.tile_at((3, 0)) == T("red_cross")
    assert scratch.tile_at((0, 0)) == T("red_circle")
    assert (3, 0) not in board
    assert len(board) == 3
    assert len(scratch) == 4


def test_tiles_are_listed_row_by_row_and_rendered():
    board = Board({(1, 1): T("green_star"), (0, 0): T("red_circle"), (1, 0): T("red_square")})
    assert [pos for pos, _ in board.tiles()] == [(0, 0), (1, 0), (1, 1)]
    assert board.render() == "Ro Rs\n.. G*"
    assert Board().render() == "(empty board)"
