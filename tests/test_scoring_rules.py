from qwirkle.board import ORIGIN, Axis, Board
from qwirkle.scoring import line_points, score_placement
from qwirkle.tiles import deserialize_tile as T


def test_line_points():
    assert line_points(1) == 0
    assert line_points(2) == 2
    assert line_points(5) == 5
    assert line_points(6) == 12


def test_isolated_tile_scores_one():
    result = score_placement(Board(), [(ORIGIN, T("red_circle"))])
    assert result.points == 1
    assert result.qwirkles == 0


def test_opening_sequence():
    board = Board()
    assert score_placement(board, [(ORIGIN, T("red_circle"))]).points == 1
    board.place(ORIGIN, T("red_circle"))

    assert score_placement(board, [((1, 0), T("red_square"))]).points == 2
    board.place((1, 0), T("red_square"))

    assert score_placement(board, [((0, 1), T("blue_circle"))]).points == 2


def test_completing_a_line_scores_twelve():
    shapes = ["circle", "square", "star", "diamond", "cross"]
    board = Board({(x, 0): T(f"red_{shape}") for x, shape in enumerate(shapes)})
    result = score_placement(board, [((5, 0), T("red_clover"))])
    assert result.points == 12
    assert result.qwirkles == 1


def test_tile_joining_two_lines_scores_both():
    board = Board({ORIGIN: T("red_circle"), (1, 0): T("red_square"), (0, 1): T("blue_circle")})
    result = score_placement(board, [((1, 1), T("blue_square"))])
    assert result.points == 4
    assert result.affected_lines[Axis.HORIZONTAL] == (T("blue_circle"),)
    assert result.affected_lines[Axis.VERTICAL] == (T("red_square"),)


def test_shared_line_is_counted_for_every_placed_tile():
    board = Board({ORIGIN: T("red_circle")})
    result = score_placement(board, [((1, 0), T("red_square")), ((2, 0), T("red_star"))])
    assert result.points == 6


def test_scoring_does_not_mutate_board():
    board = Board({ORIGIN: T("red_circle")})
    score_placement(board, [((1, 0), T("red_square"))])
    assert len(board) == 1
