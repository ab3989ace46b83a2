from pydantic import BaseModel
from typing import List, Optional, Tuple

from .game import GameSession
from .game_logic import SIZE, Status, to_coords, to_index
from .reorient import Axis


class MoveIn(BaseModel):
    x: int
    y: int
    z: int


class CursorIn(BaseModel):
    dx: int = 0
    dy: int = 0
    dz: int = 0


class ReorientIn(BaseModel):
    axis: Axis


class Scores(BaseModel):
    human: int
    computer: int
    draws: int
    games_played: int


class SessionState(BaseModel):
    board: List[List[List[int]]]  # board[z][y][x]（0=空, 1=X, 2=O）
    current_player: int
    cursor: Tuple[int, int, int]
    status: Status
    game_over: bool
    winning_positions: List[int]
    winning_coords: List[Tuple[int, int, int]]
    scores: Scores
    move_count: int
    last_move: Optional[Tuple[int, int, int]] = None

    @classmethod
    def from_session(cls, session: GameSession) -> "SessionState":
        board = [
            [[int(session.board[to_index(x, y, z)]) for x in range(SIZE)] for y in range(SIZE)]
            for z in range(SIZE)
        ]
        return cls(
            board=board,
            current_player=int(session.current_player),
            cursor=session.cursor,
            status=session.status,
            game_over=session.game_over,
            winning_positions=list(session.winning_positions),
            winning_coords=[to_coords(i) for i in session.winning_positions],
            scores=Scores(
                human=session.human_score,
                computer=session.computer_score,
                draws=session.draws,
                games_played=session.games_played,
            ),
            move_count=session.move_count,
            last_move=session.last_move,
        )


class NewGameOut(BaseModel):
    game_id: str
    state: SessionState


class MoveOut(BaseModel):
    result: str
    human_move: Optional[Tuple[int, int, int]] = None
    computer_move: Optional[Tuple[int, int, int]] = None
    state: SessionState
