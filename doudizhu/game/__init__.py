# 游戏流程控制模块
from .player import Player
from .game_state import GameState, GamePhase, GameEvent, ActionError, ActionResult
from .controller import DouDiZhuGame
