"""コンピュータ側の思考ルーチン

優先順位の高いものから順に試し、最初に手が決まった段階で返す。

  1. 即勝ち        自分が置けばラインが揃うマス
  2. 即負け防止    相手が置けばラインが揃うマス
  3. フォーク      置くと即勝ちのマスが 2 つ以上できるマス
  4. フォーク阻止  相手にとっての 3.
  5. 好所          strategic_min_lines 本以上のラインが通るマスからランダム
  6. 探索          空きマスが search_max_empty 以下なら深さ制限付きミニマックス
  7. 重み付き乱択  通るライン数を重みにしたランダム

4x4x4 ではどのマスにも 4 本以上のラインが通るので、既定値のままだと 5. で必ず決まる。
"""
import logging
import random
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .alg import Alg3D
from .backend.game import GameSession
from .backend.game_logic import (
    CELLS,
    LINE_COUNTS,
    LINES,
    LINES_THROUGH,
    SIZE,
    Board,
    Cell,
    Coords,
    InvariantError,
    Line,
    Status,
    check_outcome,
    opponent_of,
    status_after,
    to_coords,
    to_index,
)
from .config import settings

logger = logging.getLogger(__name__)

WIN_SCORE = 10
_INF = 1000


class NoLegalMoveError(InvariantError):
    """空きマスがないのに手を求められた"""

    pass


# 候補手の走査順: x が外側、次に y、z が内側
SCAN_ORDER: Tuple[int, ...] = tuple(
    to_index(x, y, z) for x in range(SIZE) for y in range(SIZE) for z in range(SIZE)
)


def empty_cells(board: Board) -> List[int]:
    return [i for i in SCAN_ORDER if board[i] == Cell.EMPTY]


def winning_cells(board: Board, mark: Cell, lines: Sequence[Line] = LINES) -> Set[int]:
    """mark を置けばその場でラインが揃う空きマス"""
    cells = set()
    for line in lines:
        values = [board[i] for i in line]
        if values.count(mark) == 3 and values.count(Cell.EMPTY) == 1:
            cells.add(line[values.index(Cell.EMPTY)])
    return cells


def minimax(
    board: Board,
    depth: int,
    maximizing: bool,
    me: Cell = Cell.OPPONENT,
    max_depth: int = 4,
    alpha: int = -_INF,
    beta: int = _INF,
    last: Optional[int] = None,
) -> int:
    """
    深さ制限付きミニマックス（αβ枝刈り付き）
      me の勝ち: 10 - depth / 相手の勝ち: depth - 10 / 引き分け・深さ打ち切り: 0
    last は直前に置いたマス。渡されたときはそのマスを通るラインだけで勝敗を見る。
    board は途中で書き換えるが、戻るときには元に戻っている。
    """
    state = check_outcome(board)[0] if last is None else status_after(board, last)
    if state == Status.DRAW:
        return 0
    if state != Status.PLAYING:
        winner = Cell.PLAYER if state == Status.PLAYER_WIN else Cell.OPPONENT
        return WIN_SCORE - depth if winner == me else depth - WIN_SCORE
    if depth >= max_depth:
        return 0

    mark = me if maximizing else opponent_of(me)
    best = -_INF if maximizing else _INF
    for i in range(CELLS):
        if board[i] != Cell.EMPTY:
            continue
        board[i] = mark
        score = minimax(board, depth + 1, not maximizing, me, max_depth, alpha, beta, last=i)
        board[i] = Cell.EMPTY
        if maximizing:
            best = max(best, score)
            alpha = max(alpha, best)
        else:
            best = min(best, score)
            beta = min(beta, best)
        if alpha >= beta:
            break
    return best


class HeuristicAI(Alg3D):
    def __init__(
        self,
        mark: Cell = Cell.OPPONENT,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        search_depth: Optional[int] = None,
        search_max_empty: Optional[int] = None,
        strategic_min_lines: Optional[int] = None,
    ):
        self.mark = Cell(mark)
        self.rng = rng or random.Random(seed)
        self.search_depth = settings.search_depth if search_depth is None else search_depth
        self.search_max_empty = (
            settings.search_max_empty if search_max_empty is None else search_max_empty
        )
        self.strategic_min_lines = (
            settings.strategic_min_lines if strategic_min_lines is None else strategic_min_lines
        )
        self.last_tier: Optional[str] = None

    def seed(self, value: Optional[int]) -> None:
        self.rng.seed(value)

    def get_move(self, board: Board) -> Tuple[int, int, int]:
        board = list(board)
        moves = empty_cells(board)
        if not moves:
            raise NoLegalMoveError("no empty cell left")

        tiers: List[Tuple[str, Callable[[Board, List[int]], Optional[int]]]] = [
            ("win", self._immediate_win),
            ("block", self._immediate_block),
            ("fork", self._fork),
            ("block_fork", self._block_fork),
            ("strategic", self._strategic),
            ("search", self._search),
            ("weighted", self._weighted),
        ]
        for name, pick in tiers:
            pos = pick(board, moves)
            if pos is not None:
                self.last_tier = name
                logger.debug(f"[{name}] mark={self.mark.name} -> {to_coords(pos)}")
                return to_coords(pos)
        raise InvariantError("no tier produced a move")

    # ---- 1, 2 ----
    def _immediate_win(self, board: Board, moves: List[int]) -> Optional[int]:
        wins = winning_cells(board, self.mark)
        return next((m for m in moves if m in wins), None)

    def _immediate_block(self, board: Board, moves: List[int]) -> Optional[int]:
        threats = winning_cells(board, opponent_of(self.mark))
        return next((m for m in moves if m in threats), None)

    # ---- 3, 4 ----
    def _fork_for(self, board: Board, moves: List[int], mark: Cell) -> Optional[int]:
        # ここに来る時点で mark の即勝ちマスは残っていないので、
        # 新しくできる即勝ちマスは置いたマスを通るライン上にしかない
        for m in moves:
            board[m] = mark
            created = winning_cells(board, mark, LINES_THROUGH[m])
            board[m] = Cell.EMPTY
            if len(created) >= 2:
                return m
        return None

    def _fork(self, board: Board, moves: List[int]) -> Optional[int]:
        return self._fork_for(board, moves, self.mark)

    def _block_fork(self, board: Board, moves: List[int]) -> Optional[int]:
        return self._fork_for(board, moves, opponent_of(self.mark))

    # ---- 5 ----
    def _strategic(self, board: Board, moves: List[int]) -> Optional[int]:
        candidates = [m for m in moves if LINE_COUNTS[m] >= self.strategic_min_lines]
        if not candidates:
            return None
        return self.rng.choice(candidates)

    # ---- 6 ----
    def _search(self, board: Board, moves: List[int]) -> Optional[int]:
        if len(moves) > self.search_max_empty:
            return None
        return self.search_move(board)

    def search_move(self, board: Board) -> int:
        """ミニマックスで最善のマスを返す。同点なら走査順で先のもの"""
        board = list(board)
        moves = empty_cells(board)
        if not moves:
            raise NoLegalMoveError("no empty cell left")
        best_score = -_INF
        best_move = moves[0]
        for m in moves:
            board[m] = self.mark
            score = minimax(
                board, 0, False, self.mark, self.search_depth, alpha=best_score, last=m
            )
            board[m] = Cell.EMPTY
            if score > best_score:
                best_score = score
                best_move = m
        logger.debug(f"search picked {to_coords(best_move)} score={best_score}")
        return best_move

    # ---- 7 ----
    def _weighted(self, board: Board, moves: List[int]) -> Optional[int]:
        return self.weighted_choice(moves, [LINE_COUNTS[m] for m in moves])

    def weighted_choice(self, moves: List[int], weights: List[int]) -> int:
        if sum(weights) > 0:
            return self.rng.choices(moves, weights=weights)[0]
        return self.rng.choice(moves)


# ========== セッションから手を選ぶ ==========
_default_ai: Optional[HeuristicAI] = None


def default_ai() -> HeuristicAI:
    global _default_ai
    if _default_ai is None:
        _default_ai = HeuristicAI(seed=settings.ai_seed)
    return _default_ai


def choose_move(session: GameSession, ai: Optional[Alg3D] = None) -> Coords:
    """コンピュータの手番で呼ぶ。盤面のコピーを渡すので session は変わらない"""
    if session.status != Status.PLAYING:
        raise InvariantError(f"round is already finished: {session.status.value}")
    if session.is_human_turn:
        raise InvariantError("choose_move called on the human's turn")
    if Cell.EMPTY not in session.board:
        raise NoLegalMoveError("no empty cell left")

    ai = ai or default_ai()
    x, y, z = ai.get_move(list(session.board))
    if session.cell(x, y, z) != Cell.EMPTY:
        raise InvariantError(f"AI picked an occupied cell: ({x}, {y}, {z})")
    return (x, y, z)
