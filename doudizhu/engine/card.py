"""牌的定义 - 斗地主54张扑克牌的数据模型、洗牌与发牌"""

import random
from enum import IntEnum, Enum
from dataclasses import dataclass
from typing import List, Optional, Tuple


class Rank(IntEnum):
    """点数枚举，数值即权重（A=1, 2=2 低于 3）"""
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    SMALL_JOKER = 14
    BIG_JOKER = 15


class Suit(str, Enum):
    """花色枚举，大小王花色为空"""
    SPADE = "♠"
    HEART = "♥"
    CLUB = "♣"
    DIAMOND = "♦"
    JOKER = ""


# 点数显示映射
RANK_DISPLAY = {
    Rank.THREE: "3", Rank.FOUR: "4", Rank.FIVE: "5",
    Rank.SIX: "6", Rank.SEVEN: "7", Rank.EIGHT: "8",
    Rank.NINE: "9", Rank.TEN: "10", Rank.JACK: "J",
    Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A",
    Rank.TWO: "2", Rank.SMALL_JOKER: "小王", Rank.BIG_JOKER: "大王",
}

# 发牌顺序下的点数：3..K, A, 2
NORMAL_RANKS = [
    Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX, Rank.SEVEN, Rank.EIGHT,
    Rank.NINE, Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE, Rank.TWO,
]
NORMAL_SUITS = [Suit.SPADE, Suit.HEART, Suit.CLUB, Suit.DIAMOND]

# 同权重时的稳定排序次序
_SUIT_ORDER = {Suit.SPADE: 4, Suit.HEART: 3, Suit.CLUB: 2, Suit.DIAMOND: 1, Suit.JOKER: 0}

DECK_SIZE = 54
RESERVE_SIZE = 3
NUM_SEATS = 3


@dataclass(frozen=True)
class Card:
    """一张扑克牌，身份为 (点数, 花色)，大小只看权重"""
    rank: Rank
    suit: Suit

    @property
    def weight(self) -> int:
        return int(self.rank)

    @property
    def is_joker(self) -> bool:
        return self.rank in (Rank.SMALL_JOKER, Rank.BIG_JOKER)

    @property
    def display(self) -> str:
        if self.is_joker:
            return RANK_DISPLAY[self.rank]
        return f"{self.suit.value}{RANK_DISPLAY[self.rank]}"

    def __repr__(self) -> str:
        return self.display

    def __lt__(self, other: "Card") -> bool:
        return self.weight < other.weight

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank == other.rank and self.suit == other.suit

    def __hash__(self) -> int:
        return hash((self.rank, self.suit))


def create_deck() -> List[Card]:
    """创建一副54张标准扑克牌（确定性，无随机）"""
    deck: List[Card] = []
    for suit in NORMAL_SUITS:
        for rank in NORMAL_RANKS:
            deck.append(Card(rank=rank, suit=suit))

    deck.append(Card(rank=Rank.SMALL_JOKER, suit=Suit.JOKER))
    deck.append(Card(rank=Rank.BIG_JOKER, suit=Suit.JOKER))

    assert len(deck) == DECK_SIZE, f"牌数错误: {len(deck)}"
    return deck


def shuffle(cards: List[Card], rng: Optional[random.Random] = None) -> None:
    """Fisher-Yates 原地洗牌"""
    rng = rng or random
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randrange(i + 1)
        cards[i], cards[j] = cards[j], cards[i]


def shuffle_and_deal(
    deck: List[Card], rng: Optional[random.Random] = None
) -> Tuple[List[List[Card]], List[Card]]:
    """
    洗牌并发牌。
    前51张按 index % 3 轮流发给三个座位，最后3张留作底牌。
    返回 (三家手牌, 底牌)，手牌按权重从大到小排列。
    """
    shuffled = deck.copy()
    shuffle(shuffled, rng)

    hands: List[List[Card]] = [[] for _ in range(NUM_SEATS)]
    dealt = DECK_SIZE - RESERVE_SIZE
    for i in range(dealt):
        hands[i % NUM_SEATS].append(shuffled[i])

    reserve = shuffled[dealt:]
    return [sort_cards(h) for h in hands], reserve


def sort_cards(cards: List[Card]) -> List[Card]:
    """按权重从大到小排序（同权重按花色固定次序）"""
    return sorted(cards, key=lambda c: (c.weight, _SUIT_ORDER[c.suit]), reverse=True)
