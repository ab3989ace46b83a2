import logging
from typing import List, Optional

from .game_logic import (
    Board,
    Cell,
    Coords,
    Status,
    check_outcome,
    create_board,
    in_range,
    opponent_of,
    to_index,
)
from .reorient import Axis, permute, reorient_board, reorient_positions

logger = logging.getLogger(__name__)


# ========== ゲーム箱 ==========
class GameSession:
    """
    1プロセス（または1 game_id）につき1つ。盤面・手番・カーソル・勝敗と通算成績を持つ。
    ラウンドを跨いで残るのは通算成績だけ。
    """

    def __init__(self):
        self.human_score = 0
        self.computer_score = 0
        self.draws = 0
        self.games_played = 0
        self._clear_round()

    def _clear_round(self):
        self.board: Board = create_board()
        self.current_player = Cell.PLAYER
        self.cursor: Coords = (0, 0, 0)
        self.status = Status.PLAYING
        self.winning_positions: List[int] = []
        self.move_count = 0
        self.last_move: Optional[Coords] = None

    # ---- 読み出し ----
    def cell(self, x: int, y: int, z: int) -> Cell:
        return self.board[to_index(x, y, z)]

    @property
    def is_human_turn(self) -> bool:
        return self.current_player == Cell.PLAYER

    @property
    def game_over(self) -> bool:
        return self.status != Status.PLAYING

    # ---- 状態遷移 ----
    def reset_round(self):
        self._clear_round()
        self.games_played += 1
        logger.info(f"new round (games played: {self.games_played})")

    def apply_move(self, x: int, y: int, z: int) -> bool:
        if self.game_over:
            return False
        if not in_range(x, y, z):
            logger.debug(f"rejected move out of range: ({x}, {y}, {z})")
            return False
        pos = to_index(x, y, z)
        if self.board[pos] != Cell.EMPTY:
            logger.debug(f"rejected move on occupied cell: ({x}, {y}, {z})")
            return False

        mover = self.current_player
        self.board[pos] = mover
        self.move_count += 1
        self.last_move = (x, y, z)

        self.status, self.winning_positions = check_outcome(self.board)

        if self.status == Status.PLAYER_WIN:
            self.human_score += 1
        elif self.status == Status.OPPONENT_WIN:
            self.computer_score += 1
        elif self.status == Status.DRAW:
            self.draws += 1

        if self.status == Status.PLAYING:
            self.current_player = opponent_of(mover)
        else:
            logger.info(
                f"round finished: {self.status.value} after {self.move_count} moves, "
                f"winning_positions={self.winning_positions}"
            )
        return True

    def reorient(self, axis: Axis):
        """盤面・カーソル・勝ちラインの座標をまとめて付け替える。手番と勝敗はそのまま"""
        self.board = reorient_board(self.board, axis)
        self.cursor = permute(axis, *self.cursor)
        self.winning_positions = reorient_positions(self.winning_positions, axis)
        if self.last_move is not None:
            self.last_move = permute(axis, *self.last_move)
        logger.debug(f"reoriented along {Axis(axis).value}, cursor={self.cursor}")


# ========== 関数インターフェース ==========
def new_session() -> GameSession:
    return GameSession()


def reset_round(session: GameSession) -> None:
    session.reset_round()


def apply_move(session: GameSession, x: int, y: int, z: int) -> bool:
    return session.apply_move(x, y, z)


def reorient(session: GameSession, axis: Axis) -> None:
    session.reorient(axis)
