import itertools

import pytest

from four_game_3d.backend.game_logic import (
    CELLS,
    LINE_COUNTS,
    LINES,
    LINES_THROUGH,
    Cell,
    InvariantError,
    Status,
    all_lines,
    check_outcome,
    create_board,
    format_board,
    opponent_of,
    parse_board,
    status_after,
    to_coords,
    to_index,
    validate_lines,
)

from .conftest import DRAW_BOARD, board_with


def test_index_coords_bijection():
    for i in range(CELLS):
        assert to_index(*to_coords(i)) == i
    for x, y, z in itertools.product(range(4), repeat=3):
        assert to_coords(to_index(x, y, z)) == (x, y, z)


def test_index_layout():
    assert to_index(0, 0, 0) == 0
    assert to_index(3, 0, 0) == 3
    assert to_index(0, 1, 0) == 4
    assert to_index(0, 0, 1) == 16
    assert to_index(3, 3, 3) == 63


@pytest.mark.parametrize("coords", [(-1, 0, 0), (4, 0, 0), (0, 4, 0), (0, 0, -1)])
def test_to_index_out_of_range_fails_fast(coords):
    with pytest.raises(InvariantError):
        to_index(*coords)


@pytest.mark.parametrize("index", [-1, 64, 100])
def test_to_coords_out_of_range_fails_fast(index):
    with pytest.raises(InvariantError):
        to_coords(index)


def test_catalog_has_76_distinct_lines():
    assert len(LINES) == 76
    assert all_lines() is LINES
    assert all(len(set(line)) == 4 for line in LINES)
    assert len(set(frozenset(line) for line in LINES)) == 76


def test_every_cell_is_on_a_line():
    covered = set(i for line in LINES for i in line)
    assert covered == set(range(CELLS))


def test_catalog_order_by_category():
    axis, planar, space = LINES[:48], LINES[48:72], LINES[72:]

    def varying_axes(line):
        coords = [to_coords(i) for i in line]
        return sum(1 for a in range(3) if len(set(c[a] for c in coords)) > 1)

    assert all(varying_axes(line) == 1 for line in axis)
    assert all(varying_axes(line) == 2 for line in planar)
    assert all(varying_axes(line) == 3 for line in space)
    assert LINES[0] == (0, 1, 2, 3)
    assert space[0] == (0, 21, 42, 63)


def test_axis_lines_order():
    # x, y 方向は z が外側のループ
    assert LINES[:16] == tuple(
        tuple(to_index(i, y, z) for i in range(4)) for z in range(4) for y in range(4)
    )
    assert LINES[16:32] == tuple(
        tuple(to_index(x, i, z) for i in range(4)) for z in range(4) for x in range(4)
    )
    # z 方向は x が外側のループ
    assert LINES[32:48] == tuple(
        tuple(to_index(x, y, i) for i in range(4)) for x in range(4) for y in range(4)
    )


def test_simultaneous_z_lines_highlight_lower_x_first():
    # z方向 (1,0,*) と (0,1,*) が同時に揃う。x の小さい (0,1,*) が先
    board = board_with(x=[1, 17, 33, 49, 4, 20, 36, 52])
    assert check_outcome(board) == (Status.PLAYER_WIN, [4, 20, 36, 52])


def test_line_counts_per_cell():
    assert sum(LINE_COUNTS) == 76 * 4
    assert LINE_COUNTS[to_index(0, 0, 0)] == 7  # 角
    assert LINE_COUNTS[to_index(1, 1, 1)] == 7  # 内部
    assert LINE_COUNTS[to_index(1, 0, 0)] == 4  # 辺
    assert LINE_COUNTS[to_index(1, 1, 0)] == 4  # 面の中央
    assert min(LINE_COUNTS) == 4
    assert all(i in line for i in range(CELLS) for line in LINES_THROUGH[i])


def test_validate_lines_rejects_broken_catalogs():
    lines = list(LINES)
    with pytest.raises(InvariantError):
        validate_lines(lines[:-1])
    with pytest.raises(InvariantError):
        validate_lines(lines[:-1] + [lines[0]])
    with pytest.raises(InvariantError):
        validate_lines(lines[:-1] + [(0, 0, 1, 2)])


def test_empty_board_is_in_progress():
    assert check_outcome(create_board()) == (Status.PLAYING, [])


@pytest.mark.parametrize("mark, expected", [(Cell.PLAYER, Status.PLAYER_WIN), (Cell.OPPONENT, Status.OPPONENT_WIN)])
def test_any_single_line_is_detected(mark, expected):
    for line in LINES:
        board = create_board()
        for i in line:
            board[i] = mark
        assert check_outcome(board) == (expected, list(line))


def test_simultaneous_lines_highlight_first_in_catalog():
    # x方向 (0,1,2,3) と y方向 (0,4,8,12) が同時に揃う
    board = board_with(x=[0, 1, 2, 3, 4, 8, 12])
    assert check_outcome(board) == (Status.PLAYER_WIN, [0, 1, 2, 3])


def test_full_board_without_line_is_draw(draw_board):
    assert check_outcome(draw_board) == (Status.DRAW, [])


def test_three_in_a_row_is_not_a_win():
    board = board_with(o=[0, 1, 2], x=[16, 17, 18])
    assert check_outcome(board) == (Status.PLAYING, [])


def test_check_outcome_rejects_wrong_board_size():
    with pytest.raises(InvariantError):
        check_outcome([Cell.EMPTY] * 63)


def test_status_after_only_looks_at_last_move(draw_board):
    board = list(draw_board)
    assert status_after(board, 0) == Status.DRAW
    board = board_with(o=[0, 1, 2, 3])
    assert status_after(board, 3) == Status.OPPONENT_WIN
    assert status_after(board_with(x=[5]), 5) == Status.PLAYING


def test_opponent_of():
    assert opponent_of(Cell.PLAYER) == Cell.OPPONENT
    assert opponent_of(Cell.OPPONENT) == Cell.PLAYER
    with pytest.raises(InvariantError):
        opponent_of(Cell.EMPTY)


def test_format_and_parse_board(draw_board):
    text = format_board(draw_board)
    assert text.splitlines()[0] == DRAW_BOARD[:4]
    assert parse_board(text) == draw_board
    with pytest.raises(ValueError):
        parse_board("XO")
    with pytest.raises(ValueError):
        parse_board("?" * 64)
