"""視点の切り替え（軸の付け替え）

3つの置換は厳密な回転群ではないが、この式のまま使う。
"""
from enum import Enum
from typing import Dict, List, Tuple

from .game_logic import CELLS, Board, Coords, create_board, to_coords, to_index


class Axis(str, Enum):
    X = "x"
    Y = "y"
    Z = "z"


# 新しい (x, y, z) に入る元の座標の位置
_SOURCE_ORDER: Dict[Axis, Tuple[int, int, int]] = {
    Axis.X: (2, 1, 0),  # (x, y, z) -> (z, y, x)
    Axis.Y: (0, 2, 1),  # (x, y, z) -> (x, z, y)
    Axis.Z: (2, 0, 1),  # (x, y, z) -> (z, x, y)
}


def permute(axis: Axis, x: int, y: int, z: int) -> Coords:
    src = (x, y, z)
    a, b, c = _SOURCE_ORDER[Axis(axis)]
    return (src[a], src[b], src[c])


def reorient_index(axis: Axis, index: int) -> int:
    return to_index(*permute(axis, *to_coords(index)))


def reorient_board(board: Board, axis: Axis) -> Board:
    """新しい盤面に写してから返す（元の盤面は書き換えない）"""
    new_board = create_board()
    for index in range(CELLS):
        new_board[reorient_index(axis, index)] = board[index]
    return new_board


def reorient_positions(positions: List[int], axis: Axis) -> List[int]:
    return [reorient_index(axis, i) for i in positions]
