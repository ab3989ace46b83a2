from abc import ABC, abstractmethod
from typing import Tuple

from .backend.game_logic import Board


class Alg3D(ABC):
    """
    3D四目（4x4x4）の思考ルーチンの親クラス
    コンピュータ側のプレイヤーはこのクラスを継承して get_move を実装する
    """

    @abstractmethod
    def get_move(self, board: Board) -> Tuple[int, int, int]:
        """
        次の手を返すメソッド
        board[16*z + 4*y + x] 形式で石の配置が入る (0=空, 1=X, 2=O)
        戻り値は空きマスの (x, y, z) のタプル
        """
        pass
