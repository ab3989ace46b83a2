import logging
from enum import Enum, IntEnum
from typing import List, Tuple

logger = logging.getLogger(__name__)

SIZE = 4
CELLS = SIZE * SIZE * SIZE  # 64

AXIS_LINES = 48
PLANE_DIAGONALS = 24
SPACE_DIAGONAL_COUNT = 4
LINE_COUNT = AXIS_LINES + PLANE_DIAGONALS + SPACE_DIAGONAL_COUNT  # 76


class Cell(IntEnum):
    EMPTY = 0
    PLAYER = 1  # 人間 (X)
    OPPONENT = 2  # コンピュータ (O)


class Status(str, Enum):
    PLAYING = "playing"
    PLAYER_WIN = "player_win"
    OPPONENT_WIN = "opponent_win"
    DRAW = "draw"


class InvariantError(RuntimeError):
    """座標写像・勝ちライン表の破損など、回復できないプログラム上の誤り"""

    pass


Coords = Tuple[int, int, int]
Line = Tuple[int, int, int, int]
Board = List[Cell]  # board[index], index = 16*z + 4*y + x


# ========== 座標 <-> インデックス ==========
def in_range(x: int, y: int, z: int) -> bool:
    return 0 <= x < SIZE and 0 <= y < SIZE and 0 <= z < SIZE


def to_index(x: int, y: int, z: int) -> int:
    """(x, y, z) を 0..63 のインデックスへ。z が層（外側）、x が最も速く変化する"""
    if not in_range(x, y, z):
        raise InvariantError(f"coords out of range: ({x}, {y}, {z})")
    return z * 16 + y * 4 + x


def to_coords(index: int) -> Coords:
    if not 0 <= index < CELLS:
        raise InvariantError(f"index out of range: {index}")
    return (index % 4, (index % 16) // 4, index // 16)


def create_board() -> Board:
    return [Cell.EMPTY] * CELLS


def opponent_of(cell: Cell) -> Cell:
    if cell == Cell.EMPTY:
        raise InvariantError("EMPTY has no opponent")
    return Cell(3 - cell)


# ========== 勝ちライン（76本） ==========
def _axis_line(varying: int, a: int, b: int) -> Line:
    """varying 軸を 0..3 と動かし、残り2軸を (a, b) に固定した直線"""
    cells = []
    for i in range(SIZE):
        coords = [a, b]
        coords.insert(varying, i)
        cells.append(to_index(*coords))
    return tuple(cells)


def _plane_diagonal(fixed_axis: int, value: int, anti: bool) -> Line:
    """fixed_axis を value に固定した平面内の対角線。
    anti=True なら一方の座標が減少し、もう一方が増加する
    """
    cells = []
    for i in range(SIZE):
        coords = [SIZE - 1 - i if anti else i, i]
        coords.insert(fixed_axis, value)
        cells.append(to_index(*coords))
    return tuple(cells)


# 立体対角線は生成せず、角と対角の角を結ぶ4本を明示する
SPACE_DIAGONALS: Tuple[Tuple[Coords, ...], ...] = (
    ((0, 0, 0), (1, 1, 1), (2, 2, 2), (3, 3, 3)),
    ((3, 0, 0), (2, 1, 1), (1, 2, 2), (0, 3, 3)),
    ((0, 3, 0), (1, 2, 1), (2, 1, 2), (3, 0, 3)),
    ((0, 0, 3), (1, 1, 2), (2, 2, 1), (3, 3, 0)),
)


def generate_lines() -> Tuple[Line, ...]:
    lines: List[Line] = []

    # 軸方向: x, y, z の順に各16本
    # x, y 方向は z が外側、z 方向は x が外側
    for varying in range(2):
        for b in range(SIZE):
            for a in range(SIZE):
                lines.append(_axis_line(varying, a, b))
    for a in range(SIZE):
        for b in range(SIZE):
            lines.append(_axis_line(2, a, b))

    # 平面対角線: XY (z固定), XZ (y固定), YZ (x固定) の順に、層ごとの主対角・反対角
    for fixed_axis in (2, 1, 0):
        for value in range(SIZE):
            lines.append(_plane_diagonal(fixed_axis, value, anti=False))
            lines.append(_plane_diagonal(fixed_axis, value, anti=True))

    for diag in SPACE_DIAGONALS:
        lines.append(tuple(to_index(x, y, z) for (x, y, z) in diag))

    validate_lines(lines)
    logger.debug(f"generated {len(lines)} winning lines")
    return tuple(lines)


def validate_lines(lines) -> None:
    """ライン表が壊れていたら InvariantError"""
    if len(lines) != LINE_COUNT:
        raise InvariantError(f"expected {LINE_COUNT} lines, got {len(lines)}")
    seen = set()
    for line in lines:
        if len(line) != SIZE or len(set(line)) != SIZE:
            raise InvariantError(f"degenerate line: {line}")
        if any(not 0 <= i < CELLS for i in line):
            raise InvariantError(f"line leaves the cube: {line}")
        key = frozenset(line)
        if key in seen:
            raise InvariantError(f"duplicate line: {line}")
        seen.add(key)
    covered = set(i for line in lines for i in line)
    if len(covered) != CELLS:
        raise InvariantError(f"{CELLS - len(covered)} cells are not on any line")


LINES: Tuple[Line, ...] = generate_lines()

# 各マスを通るライン（探索の差分判定用）
LINES_THROUGH: Tuple[Tuple[Line, ...], ...] = tuple(
    tuple(line for line in LINES if i in line) for i in range(CELLS)
)
LINE_COUNTS: Tuple[int, ...] = tuple(len(ls) for ls in LINES_THROUGH)


def all_lines() -> Tuple[Line, ...]:
    return LINES


# ========== 勝敗判定 ==========
def _winner_status(cell: Cell) -> Status:
    return Status.PLAYER_WIN if cell == Cell.PLAYER else Status.OPPONENT_WIN


def check_outcome(board: Board) -> Tuple[Status, List[int]]:
    """
    ライン表の順に走査し、最初に揃ったラインの持ち主を勝者として返す。
    同時に複数揃った場合もそのラインだけを返す。
    揃っていなければ空きマスの有無で playing / draw。
    """
    if len(board) != CELLS:
        raise InvariantError(f"board must have {CELLS} cells, got {len(board)}")
    for line in LINES:
        first = board[line[0]]
        if (
            first != Cell.EMPTY
            and first == board[line[1]]
            and first == board[line[2]]
            and first == board[line[3]]
        ):
            return _winner_status(first), list(line)

    if Cell.EMPTY in board:
        return Status.PLAYING, []
    return Status.DRAW, []


def status_after(board: Board, index: int) -> Status:
    """index に置いた直後の状態。置く前に勝者がいない盤面が前提"""
    mark = board[index]
    for line in LINES_THROUGH[index]:
        if all(board[i] == mark for i in line):
            return _winner_status(mark)
    if Cell.EMPTY in board:
        return Status.PLAYING
    return Status.DRAW


# ========== テキスト表現（ログ・テスト用） ==========
_SYMBOLS = {Cell.EMPTY: ".", Cell.PLAYER: "X", Cell.OPPONENT: "O"}
_CELLS_BY_SYMBOL = {v: k for k, v in _SYMBOLS.items()}


def format_board(board: Board) -> str:
    """層ごとに 'X' / 'O' / '.' の 4行ブロックを並べた文字列"""
    layers = []
    for z in range(SIZE):
        rows = []
        for y in range(SIZE):
            rows.append("".join(_SYMBOLS[Cell(board[to_index(x, y, z)])] for x in range(SIZE)))
        layers.append("\n".join(rows))
    return "\n\n".join(layers)


def parse_board(text: str) -> Board:
    """format_board の逆。空白・改行は無視し、インデックス順に 64 文字を読む"""
    symbols = [ch for ch in text if not ch.isspace()]
    if len(symbols) != CELLS:
        raise ValueError(f"expected {CELLS} cells, got {len(symbols)}")
    try:
        return [_CELLS_BY_SYMBOL[ch] for ch in symbols]
    except KeyError as e:
        raise ValueError(f"unknown cell symbol: {e}") from None
