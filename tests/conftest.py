import pytest

from four_game_3d.ai import HeuristicAI
from four_game_3d.backend.game_logic import Cell, create_board, parse_board

# どのラインも X と O が混ざっている満杯の盤面（インデックス順）
DRAW_BOARD = (
    "XOOOXXOXXXOXOOXO"
    "XOXOOXOOXOOOXXOX"
    "XOXXXXOOXXOXOOOX"
    "OXOXXOXOOOXOXXXO"
)

# DRAW_BOARD を少し崩したもの。O の即勝ちは (3, 0, 0) だけ、X の即勝ちは (2, 2, 1) だけ
SEARCH_BOARD = (
    "OOO.XXOXX.OXOOXO"
    "XOXOOXOOXO.OXXOX"
    "XOXXXX.OX.OXOOOX"
    "OXOXXOXOOOXOXXXO"
)


def board_with(**marks):
    """board_with(x=[...], o=[...]) で指定インデックスに石を置いた盤面"""
    board = create_board()
    for i in marks.get("x", []):
        board[i] = Cell.PLAYER
    for i in marks.get("o", []):
        board[i] = Cell.OPPONENT
    return board


@pytest.fixture
def draw_board():
    return parse_board(DRAW_BOARD)


@pytest.fixture
def search_board():
    return parse_board(SEARCH_BOARD)


@pytest.fixture
def ai():
    return HeuristicAI(seed=1234)
