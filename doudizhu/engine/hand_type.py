"""牌型定义 - 斗地主8种合法牌型（不含带牌）"""

from enum import Enum
from dataclasses import dataclass
from typing import List

from .card import Card


class HandType(str, Enum):
    """牌型枚举"""
    SINGLE = "single"                        # 单张
    PAIR = "pair"                            # 对子
    ROCKET = "rocket"                        # 火箭(王炸)
    TRIPLE = "triple"                        # 三张
    BOMB = "bomb"                            # 炸弹
    STRAIGHT = "straight"                    # 顺子 (≥5张)
    CONSECUTIVE_PAIRS = "consecutivePairs"   # 连对 (≥3对)
    AIRPLANE = "airplane"                    # 飞机不带 (≥2个三张)


# 火箭的比较权重，高于任何点数
ROCKET_WEIGHT = 999


@dataclass
class PlayedHand:
    """一手出牌的结构化表示"""
    type: HandType
    cards: List[Card]     # 按权重从大到小
    weight: int           # 比较键

    @property
    def size(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        cards_str = " ".join(c.display for c in self.cards)
        return f"[{self.type.value}] {cards_str}"
