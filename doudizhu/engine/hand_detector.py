"""牌型检测器 - 识别一组牌的牌型并构建 PlayedHand"""

from typing import List, Optional

from .card import Card, Rank, sort_cards
from .hand_type import HandType, PlayedHand, ROCKET_WEIGHT


def detect_hand(cards: List[Card]) -> Optional[PlayedHand]:
    """
    识别一组牌的牌型。
    返回 PlayedHand 或 None（非法牌型）。
    顺子/连对/飞机只按权重做算术判断，不排除 2 和大小王。
    """
    if not cards:
        return None

    ordered = sort_cards(cards)
    n = len(ordered)

    # 按检测优先级依次尝试，先命中者为准
    result = (
        _detect_single(ordered, n)
        or _detect_pair(ordered, n)
        or _detect_rocket(ordered, n)
        or _detect_triple(ordered, n)
        or _detect_bomb(ordered, n)
        or _detect_straight(ordered, n)
        or _detect_consecutive_pairs(ordered, n)
        or _detect_airplane(ordered, n)
    )
    return result


# ============================================================
#  辅助函数
# ============================================================

def _all_same_weight(cards: List[Card]) -> bool:
    """所有牌权重相同"""
    return all(c.weight == cards[0].weight for c in cards)


def _is_descending_run(weights: List[int]) -> bool:
    """每个权重恰好比前一个小 1"""
    for i in range(1, len(weights)):
        if weights[i] != weights[i - 1] - 1:
            return False
    return True


def _group_weights(cards: List[Card], size: int) -> Optional[List[int]]:
    """
    把已排序的牌按 size 张一组切分，要求每组内权重相同。
    返回各组权重，任一组不齐则返回 None。
    """
    weights = []
    for i in range(0, len(cards), size):
        group = cards[i:i + size]
        if not _all_same_weight(group):
            return None
        weights.append(group[0].weight)
    return weights


# ============================================================
#  基础牌型检测
# ============================================================

def _detect_single(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """单张"""
    if n == 1:
        return PlayedHand(HandType.SINGLE, cards, cards[0].weight)
    return None


def _detect_pair(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """对子：两张相同权重"""
    if n == 2 and cards[0].weight == cards[1].weight:
        return PlayedHand(HandType.PAIR, cards, cards[0].weight)
    return None


def _detect_rocket(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """火箭：大王 + 小王"""
    if n == 2 and cards[0].rank == Rank.BIG_JOKER and cards[1].rank == Rank.SMALL_JOKER:
        return PlayedHand(HandType.ROCKET, cards, ROCKET_WEIGHT)
    return None


def _detect_triple(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """三张：三张相同权重"""
    if n == 3 and _all_same_weight(cards):
        return PlayedHand(HandType.TRIPLE, cards, cards[0].weight)
    return None


def _detect_bomb(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """炸弹：四张相同权重"""
    if n == 4 and _all_same_weight(cards):
        return PlayedHand(HandType.BOMB, cards, cards[0].weight)
    return None


# ============================================================
#  顺子类检测
# ============================================================

def _detect_straight(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """顺子：≥5张权重逐一递减"""
    if n < 5:
        return None
    if _is_descending_run([c.weight for c in cards]):
        return PlayedHand(HandType.STRAIGHT, cards, cards[0].weight)
    return None


def _detect_consecutive_pairs(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """连对：≥3对，对子权重逐一递减"""
    if n < 6 or n % 2 != 0:
        return None
    weights = _group_weights(cards, 2)
    if weights and _is_descending_run(weights):
        return PlayedHand(HandType.CONSECUTIVE_PAIRS, cards, weights[0])
    return None


def _detect_airplane(cards: List[Card], n: int) -> Optional[PlayedHand]:
    """飞机不带：≥2个三张，三张权重逐一递减"""
    if n < 6 or n % 3 != 0:
        return None
    weights = _group_weights(cards, 3)
    if weights and _is_descending_run(weights):
        return PlayedHand(HandType.AIRPLANE, cards, weights[0])
    return None


# ============================================================
#  牌型比较
# ============================================================

def can_beat(current: PlayedHand, previous: PlayedHand) -> bool:
    """
    判断 current 能否压过 previous。
    规则：
    1. 火箭压一切
    2. 炸弹压非炸弹/非火箭
    3. 同类型同张数，比权重
    """
    # 火箭压一切
    if current.type == HandType.ROCKET:
        return True
    if previous.type == HandType.ROCKET:
        return False

    # 炸弹逻辑
    if current.type == HandType.BOMB and previous.type != HandType.BOMB:
        return True
    if previous.type == HandType.BOMB and current.type != HandType.BOMB:
        return False

    # 同类型同张数比较
    if current.type != previous.type:
        return False
    if current.size != previous.size:
        return False
    return current.weight > previous.weight
