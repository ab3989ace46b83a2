"""3D四目（4x4x4）— 盤面・勝敗判定・視点切り替え・コンピュータの思考"""
from .ai import HeuristicAI, NoLegalMoveError, choose_move
from .backend.game import GameSession, apply_move, new_session, reorient, reset_round
from .backend.game_logic import Cell, InvariantError, Status, all_lines, check_outcome, to_coords, to_index
from .backend.reorient import Axis

__all__ = [
    "Axis",
    "Cell",
    "GameSession",
    "HeuristicAI",
    "InvariantError",
    "NoLegalMoveError",
    "Status",
    "all_lines",
    "apply_move",
    "check_outcome",
    "choose_move",
    "new_session",
    "reorient",
    "reset_round",
    "to_coords",
    "to_index",
]
