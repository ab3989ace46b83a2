# main.py (FastAPI) — 人間 vs コンピュータ の 3D四目 API
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from .ai import HeuristicAI
from .backend.game import GameSession, new_session
from .backend.game_logic import LINES, to_coords
from .backend.models import CursorIn, MoveIn, MoveOut, NewGameOut, ReorientIn, SessionState
from .config import settings
from .match import InvalidMoveError, TurnResult, move_cursor, next_layer, place_at_cursor, play_turn

# ========== ログ ==========
logger = logging.getLogger(__name__)
logging.basicConfig(level=settings.log_level)

# ========== FastAPI ==========
app = FastAPI(title="3D four game")

# CORS（フロントは別オリジンから叩く）
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ========== ゲームレジストリ ==========
# def エンドポイントはスレッドプールで動くので、同じゲームへの操作はゲームごとのロックで直列化する
games: Dict[str, GameSession] = {}
ais: Dict[str, HeuristicAI] = {}
locks: Dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()


def _get_game(game_id: str) -> GameSession:
    game = games.get(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Invalid game_id")
    return game


@contextmanager
def _locked(game_id: str) -> Iterator[GameSession]:
    with _registry_lock:
        lock = locks.get(game_id)
    if lock is None:
        raise HTTPException(status_code=404, detail="Invalid game_id")
    with lock:
        yield _get_game(game_id)


def _move_out(turn: TurnResult, game: GameSession) -> MoveOut:
    return MoveOut(
        result=turn.result,
        human_move=turn.human_move,
        computer_move=turn.computer_move,
        state=SessionState.from_session(game),
    )


def _play(game_id: str, game: GameSession, x: int, y: int, z: int) -> MoveOut:
    # 手番・終局のエラーは 409、座標のエラーは 400
    if game.game_over:
        raise HTTPException(status_code=409, detail=f"round is finished: {game.status.value}")
    if not game.is_human_turn:
        raise HTTPException(status_code=409, detail="not the human's turn")
    try:
        turn = play_turn(game, x, y, z, ai=ais[game_id])
    except InvalidMoveError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _move_out(turn, game)


# ========== エンドポイント ==========
@app.post("/games", response_model=NewGameOut)
def create_game():
    game_id = str(uuid.uuid4())
    with _registry_lock:
        games[game_id] = new_session()
        # ゲームごとに乱数を持たせ、FOUR3D_AI_SEED 指定時は他のゲームの進行に左右されない
        ais[game_id] = HeuristicAI(seed=settings.ai_seed)
        locks[game_id] = threading.Lock()
    logger.info(f"created game {game_id}")
    return NewGameOut(game_id=game_id, state=SessionState.from_session(games[game_id]))


@app.get("/games/{game_id}", response_model=SessionState)
def get_state(game_id: str):
    with _locked(game_id) as game:
        return SessionState.from_session(game)


@app.post("/games/{game_id}/move", response_model=MoveOut)
def move(game_id: str, payload: MoveIn):
    with _locked(game_id) as game:
        return _play(game_id, game, payload.x, payload.y, payload.z)


@app.post("/games/{game_id}/place", response_model=MoveOut)
def place(game_id: str):
    """カーソル位置に置く（終局後なら次のラウンドへ）"""
    with _locked(game_id) as game:
        if game.game_over:
            return _move_out(place_at_cursor(game), game)
        return _play(game_id, game, *game.cursor)


@app.post("/games/{game_id}/cursor", response_model=SessionState)
def cursor(game_id: str, payload: CursorIn):
    with _locked(game_id) as game:
        move_cursor(game, payload.dx, payload.dy, payload.dz)
        return SessionState.from_session(game)


@app.post("/games/{game_id}/layer", response_model=SessionState)
def layer(game_id: str):
    with _locked(game_id) as game:
        next_layer(game)
        return SessionState.from_session(game)


@app.post("/games/{game_id}/reorient", response_model=SessionState)
def reorient_view(game_id: str, payload: ReorientIn):
    with _locked(game_id) as game:
        game.reorient(payload.axis)
        return SessionState.from_session(game)


@app.post("/games/{game_id}/reset", response_model=SessionState)
def reset_game(game_id: str):
    with _locked(game_id) as game:
        game.reset_round()
        return SessionState.from_session(game)


@app.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(game_id: str):
    with _locked(game_id):
        with _registry_lock:
            del games[game_id]
            del ais[game_id]
            del locks[game_id]


@app.get("/lines", response_model=List[List[Tuple[int, int, int]]])
def list_lines():
    return [[to_coords(i) for i in line] for line in LINES]
