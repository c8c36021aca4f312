"""座位模型 - 斗地主三个座位各自持有的手牌"""

from dataclasses import dataclass, field
from typing import List

from doudizhu.engine.card import Card, sort_cards


@dataclass
class Player:
    """一个座位"""
    id: int                          # 座位号 0/1/2
    hand: List[Card] = field(default_factory=list)

    @property
    def hand_size(self) -> int:
        return len(self.hand)

    def sort_hand(self) -> None:
        """手牌按权重从大到小排序"""
        self.hand = sort_cards(self.hand)

    def add_cards(self, cards: List[Card]) -> None:
        """收入若干张牌（如底牌）并重新排序"""
        self.hand.extend(cards)
        self.sort_hand()

    def remove_cards(self, cards: List[Card]) -> None:
        """按 (点数, 花色) 从手牌中移除指定的牌"""
        for card in cards:
            self.hand.remove(card)

    def has_cards(self, cards: List[Card]) -> bool:
        """检查手牌中是否包含指定的牌（重复的牌需要手里有同样多张）"""
        hand_copy = list(self.hand)
        for card in cards:
            if card in hand_copy:
                hand_copy.remove(card)
            else:
                return False
        return True
