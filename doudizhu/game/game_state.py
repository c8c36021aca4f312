"""游戏状态 - 斗地主一局游戏的阶段、状态、事件与动作结果"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Any

from doudizhu.engine.card import Card
from doudizhu.engine.hand_type import PlayedHand
from doudizhu.game.player import Player


class GamePhase(str, Enum):
    """游戏阶段"""
    WAITING = "waiting"         # 等待开始
    CALLING = "calling"         # 叫地主
    PLAYING = "playing"         # 出牌中
    FINISHED = "finished"       # 已结束


class ActionError(str, Enum):
    """动作被拒绝的原因，被拒绝的动作不改变任何状态"""
    PHASE_VIOLATION = "phase_violation"                 # 阶段不对
    TURN_VIOLATION = "turn_violation"                   # 不是该座位的回合
    INVALID_BID = "invalid_bid"                         # 叫分必须大于0
    INVALID_SHAPE = "invalid_shape"                     # 不是合法牌型
    ILLEGAL_BEAT = "illegal_beat"                       # 压不过上家
    OPENING_PASS_VIOLATION = "opening_pass_violation"   # 首出不能过
    CARDS_NOT_IN_HAND = "cards_not_in_hand"             # 出了手里没有的牌


@dataclass
class ActionResult:
    """一次动作的结果，成功时为真值"""
    success: bool
    error: Optional[ActionError] = None
    game_over: bool = False
    winner: Optional[int] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, game_over: bool = False, winner: Optional[int] = None) -> "ActionResult":
        return cls(success=True, game_over=game_over, winner=winner)

    @classmethod
    def fail(cls, error: ActionError) -> "ActionResult":
        return cls(success=False, error=error)


@dataclass
class GameEvent:
    """游戏事件记录"""
    phase: GamePhase
    player_id: Optional[int]
    action: str                  # "deal", "bid", "landlord", "play", "pass", "trick_cleared", "game_over"
    data: Any = None             # 叫分值 / PlayedHand / None


@dataclass
class GameState:
    """一局游戏的完整状态"""
    players: List[Player]
    phase: GamePhase = GamePhase.WAITING
    landlord_cards: List[Card] = field(default_factory=list)   # 底牌

    # 叫地主相关
    current_caller: int = 0
    bid_scores: List[int] = field(default_factory=lambda: [0, 0, 0])
    landlord: Optional[int] = None

    # 出牌相关
    current_player: int = 0
    last_play: Optional[PlayedHand] = None
    last_player: Optional[int] = None
    pass_count: int = 0              # 连续不出次数
    discarded: List[Card] = field(default_factory=list)

    # 结算相关
    winner: Optional[int] = None

    @property
    def hand_counts(self) -> List[int]:
        return [p.hand_size for p in self.players]

    @property
    def total_cards(self) -> int:
        """三家手牌 + 底牌 + 已出牌（发牌后恒为54）"""
        in_reserve = len(self.landlord_cards) if self.landlord is None else 0
        return sum(self.hand_counts) + in_reserve + len(self.discarded)
