import logging
from typing import Optional, Tuple

from pydantic import BaseModel

from .ai import choose_move
from .alg import Alg3D
from .backend.game import GameSession, new_session
from .backend.game_logic import SIZE, Cell, InvariantError, Status

logger = logging.getLogger(__name__)


class InvalidMoveError(ValueError):
    """無効な手（範囲外・既に石がある・対局終了後など）"""

    pass


class TurnResult(BaseModel):
    result: str  # 'ok' | 'win' | 'draw' | 'reset'
    human_move: Optional[Tuple[int, int, int]] = None
    computer_move: Optional[Tuple[int, int, int]] = None


def _result_of(session: GameSession) -> str:
    if session.status in (Status.PLAYER_WIN, Status.OPPONENT_WIN):
        return "win"
    if session.status == Status.DRAW:
        return "draw"
    return "ok"


def _can_steer(session: GameSession) -> bool:
    return session.status == Status.PLAYING and session.is_human_turn


# ========== カーソル ==========
def move_cursor(session: GameSession, dx: int = 0, dy: int = 0, dz: int = 0) -> bool:
    """各軸とも 4 で折り返す。人間の手番で対局中のときだけ動く"""
    if not _can_steer(session):
        return False
    x, y, z = session.cursor
    session.cursor = ((x + dx) % SIZE, (y + dy) % SIZE, (z + dz) % SIZE)
    return True


def next_layer(session: GameSession) -> bool:
    return move_cursor(session, dz=1)


# ========== 1 ターン（人間 → コンピュータ） ==========
def play_turn(
    session: GameSession, x: int, y: int, z: int, ai: Optional[Alg3D] = None
) -> TurnResult:
    if session.status != Status.PLAYING:
        raise InvalidMoveError(f"round is finished: {session.status.value}")
    if not session.is_human_turn:
        raise InvalidMoveError("not the human's turn")
    if not session.apply_move(x, y, z):
        raise InvalidMoveError(f"invalid move: ({x}, {y}, {z})")

    out = TurnResult(result=_result_of(session), human_move=(x, y, z))
    if session.status != Status.PLAYING:
        return out

    cx, cy, cz = choose_move(session, ai)
    if not session.apply_move(cx, cy, cz):
        raise InvariantError(f"computer move rejected: ({cx}, {cy}, {cz})")
    out.computer_move = (cx, cy, cz)
    out.result = _result_of(session)
    return out


def place_at_cursor(session: GameSession, ai: Optional[Alg3D] = None) -> TurnResult:
    """カーソル位置に置く。対局が終わっていれば次のラウンドを始める"""
    if session.status != Status.PLAYING:
        session.reset_round()
        return TurnResult(result="reset")
    return play_turn(session, *session.cursor, ai=ai)


# ========== AI 同士の対局 ==========
def run_match(
    first: Alg3D, second: Alg3D, session: Optional[GameSession] = None
) -> GameSession:
    """first が X（先手）、second が O として 1 ラウンド打ち切る"""
    session = session or new_session()
    players = {Cell.PLAYER: first, Cell.OPPONENT: second}
    while session.status == Status.PLAYING:
        cp = session.current_player
        x, y, z = players[cp].get_move(list(session.board))
        if not session.apply_move(x, y, z):
            raise InvalidMoveError(f"{type(players[cp]).__name__} returned an invalid move: ({x}, {y}, {z})")
        logger.debug(f"Player {cp.name} -> ({x}, {y}, {z})")
    logger.info(f"match finished: {session.status.value} after {session.move_count} moves")
    return session
