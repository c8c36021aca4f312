"""牌型检测器单元测试 - 覆盖8种合法牌型 + 比较逻辑"""

import random

import pytest
from doudizhu.engine.card import Card, Rank, Suit
from doudizhu.engine.hand_type import HandType, PlayedHand, ROCKET_WEIGHT
from doudizhu.engine.hand_detector import detect_hand, can_beat


# ============================================================
#  辅助：快速构造牌
# ============================================================

def c(rank: Rank, suit: Suit = Suit.SPADE) -> Card:
    """快捷构造一张牌"""
    return Card(rank=rank, suit=suit)


def cards_of_rank(rank: Rank, count: int) -> list:
    """构造同点数的多张牌（自动分配不同花色）"""
    suits = [Suit.SPADE, Suit.HEART, Suit.DIAMOND, Suit.CLUB]
    return [Card(rank=rank, suit=suits[i]) for i in range(count)]


SMALL_JOKER = Card(Rank.SMALL_JOKER, Suit.JOKER)
BIG_JOKER = Card(Rank.BIG_JOKER, Suit.JOKER)


# ============================================================
#  基础牌型测试
# ============================================================

class TestBasicTypes:
    """单张、对子、三张、炸弹、火箭"""

    def test_single(self):
        hand = detect_hand([c(Rank.KING)])
        assert hand is not None
        assert hand.type == HandType.SINGLE
        assert hand.weight == 13

    def test_single_ace_weight_is_one(self):
        hand = detect_hand([c(Rank.ACE)])
        assert hand.type == HandType.SINGLE
        assert hand.weight == 1

    def test_single_joker(self):
        hand = detect_hand([BIG_JOKER])
        assert hand.type == HandType.SINGLE
        assert hand.weight == 15

    def test_pair(self):
        hand = detect_hand(cards_of_rank(Rank.KING, 2))
        assert hand.type == HandType.PAIR
        assert hand.weight == 13

    def test_two_different_ranks_invalid(self):
        assert detect_hand([c(Rank.KING), c(Rank.QUEEN)]) is None

    def test_triple(self):
        hand = detect_hand(cards_of_rank(Rank.SEVEN, 3))
        assert hand.type == HandType.TRIPLE
        assert hand.weight == 7

    def test_bomb(self):
        hand = detect_hand(cards_of_rank(Rank.ACE, 4))
        assert hand.type == HandType.BOMB
        assert hand.weight == 1

    def test_rocket(self):
        hand = detect_hand([SMALL_JOKER, BIG_JOKER])
        assert hand.type == HandType.ROCKET
        assert hand.weight == ROCKET_WEIGHT == 999
        assert hand.cards == [BIG_JOKER, SMALL_JOKER]

    def test_joker_with_normal_card_invalid(self):
        assert detect_hand([BIG_JOKER, c(Rank.TWO)]) is None

    def test_empty_returns_none(self):
        assert detect_hand([]) is None


# ============================================================
#  不支持带牌
# ============================================================

class TestNoKickers:
    """三带一、三带对、飞机带翅膀都不是合法牌型"""

    def test_triple_with_single_invalid(self):
        cards = cards_of_rank(Rank.EIGHT, 3) + [c(Rank.THREE)]
        assert detect_hand(cards) is None

    def test_triple_with_pair_invalid(self):
        cards = cards_of_rank(Rank.JACK, 3) + cards_of_rank(Rank.FIVE, 2)
        assert detect_hand(cards) is None

    def test_airplane_with_singles_invalid(self):
        cards = (cards_of_rank(Rank.THREE, 3)
                 + cards_of_rank(Rank.FOUR, 3)
                 + [c(Rank.NINE), c(Rank.JACK)])
        assert detect_hand(cards) is None


# ============================================================
#  顺子类测试
# ============================================================

class TestStraights:
    """顺子、连对"""

    def test_straight_5(self):
        """5张顺子: 3-4-5-6-7，权重取最大的7"""
        cards = [c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE),
                 c(Rank.SIX), c(Rank.SEVEN)]
        hand = detect_hand(cards)
        assert hand.type == HandType.STRAIGHT
        assert hand.weight == 7
        assert hand.size == 5

    def test_straight_with_two(self):
        """2 的权重是2，所以 2-3-4-5-6 是顺子"""
        cards = [c(Rank.TWO), c(Rank.THREE), c(Rank.FOUR),
                 c(Rank.FIVE), c(Rank.SIX)]
        hand = detect_hand(cards)
        assert hand.type == HandType.STRAIGHT
        assert hand.weight == 6

    def test_straight_ace_low(self):
        """A 的权重是1，A-2-3-4-5 是顺子"""
        cards = [c(Rank.ACE), c(Rank.TWO), c(Rank.THREE),
                 c(Rank.FOUR), c(Rank.FIVE)]
        hand = detect_hand(cards)
        assert hand.type == HandType.STRAIGHT
        assert hand.weight == 5

    def test_ten_to_ace_not_straight(self):
        cards = [c(Rank.TEN), c(Rank.JACK), c(Rank.QUEEN),
                 c(Rank.KING), c(Rank.ACE)]
        assert detect_hand(cards) is None

    def test_straight_through_jokers(self):
        """大小王不被排除：J-Q-K-小王-大王 按权重连续"""
        cards = [c(Rank.JACK), c(Rank.QUEEN), c(Rank.KING), SMALL_JOKER, BIG_JOKER]
        hand = detect_hand(cards)
        assert hand.type == HandType.STRAIGHT
        assert hand.weight == 15

    def test_straight_longest(self):
        """A 到 K 共13张"""
        cards = [c(r) for r in range(Rank.ACE, Rank.KING + 1)]
        hand = detect_hand(cards)
        assert hand.type == HandType.STRAIGHT
        assert hand.size == 13
        assert hand.weight == 13

    def test_four_card_run_invalid(self):
        cards = [c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE), c(Rank.SIX)]
        assert detect_hand(cards) is None

    def test_straight_with_gap_invalid(self):
        cards = [c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE),
                 c(Rank.SIX), c(Rank.EIGHT)]
        assert detect_hand(cards) is None

    def test_straight_with_duplicate_invalid(self):
        cards = [c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE),
                 c(Rank.SIX), c(Rank.SIX, Suit.HEART)]
        assert detect_hand(cards) is None

    def test_consecutive_pairs_3(self):
        """3对连对: 33-44-55"""
        cards = (cards_of_rank(Rank.THREE, 2)
                 + cards_of_rank(Rank.FOUR, 2)
                 + cards_of_rank(Rank.FIVE, 2))
        hand = detect_hand(cards)
        assert hand.type == HandType.CONSECUTIVE_PAIRS
        assert hand.weight == 5

    def test_consecutive_pairs_with_gap_invalid(self):
        cards = (cards_of_rank(Rank.THREE, 2)
                 + cards_of_rank(Rank.FOUR, 2)
                 + cards_of_rank(Rank.SIX, 2))
        assert detect_hand(cards) is None

    def test_two_pairs_invalid(self):
        cards = cards_of_rank(Rank.THREE, 2) + cards_of_rank(Rank.FOUR, 2)
        assert detect_hand(cards) is None


# ============================================================
#  飞机类测试
# ============================================================

class TestAirplanes:
    """飞机不带"""

    def test_airplane_plain(self):
        """飞机: 333-444"""
        cards = cards_of_rank(Rank.THREE, 3) + cards_of_rank(Rank.FOUR, 3)
        hand = detect_hand(cards)
        assert hand.type == HandType.AIRPLANE
        assert hand.weight == 4

    def test_airplane_3_groups(self):
        """3组飞机: 333-444-555"""
        cards = (cards_of_rank(Rank.THREE, 3)
                 + cards_of_rank(Rank.FOUR, 3)
                 + cards_of_rank(Rank.FIVE, 3))
        hand = detect_hand(cards)
        assert hand.type == HandType.AIRPLANE
        assert hand.weight == 5

    def test_airplane_4_groups_not_pairs(self):
        """12张四组三张不会被误认为连对"""
        cards = []
        for r in (Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX):
            cards += cards_of_rank(r, 3)
        hand = detect_hand(cards)
        assert hand.type == HandType.AIRPLANE
        assert hand.weight == 6

    def test_airplane_with_gap_invalid(self):
        cards = cards_of_rank(Rank.THREE, 3) + cards_of_rank(Rank.FIVE, 3)
        assert detect_hand(cards) is None


# ============================================================
#  确定性与输入顺序
# ============================================================

class TestDeterminism:
    """同一组牌无论顺序如何，识别结果一致"""

    @pytest.mark.parametrize("cards", [
        [c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE), c(Rank.SIX), c(Rank.SEVEN)],
        cards_of_rank(Rank.THREE, 2) + cards_of_rank(Rank.FOUR, 2) + cards_of_rank(Rank.FIVE, 2),
        cards_of_rank(Rank.NINE, 3) + cards_of_rank(Rank.TEN, 3),
        [SMALL_JOKER, BIG_JOKER],
        cards_of_rank(Rank.QUEEN, 4),
    ])
    def test_order_independent(self, cards):
        expected = detect_hand(cards)
        rng = random.Random(7)
        for _ in range(10):
            shuffled = list(cards)
            rng.shuffle(shuffled)
            hand = detect_hand(shuffled)
            assert hand.type == expected.type
            assert hand.weight == expected.weight
            assert hand.cards == expected.cards

    def test_cards_sorted_descending(self):
        hand = detect_hand([c(Rank.FIVE), c(Rank.SEVEN), c(Rank.THREE),
                            c(Rank.SIX), c(Rank.FOUR)])
        weights = [card.weight for card in hand.cards]
        assert weights == sorted(weights, reverse=True)

    def test_input_not_mutated(self):
        cards = [c(Rank.THREE), c(Rank.SEVEN), c(Rank.FIVE), c(Rank.FOUR), c(Rank.SIX)]
        before = list(cards)
        detect_hand(cards)
        assert cards == before


# ============================================================
#  牌型比较测试
# ============================================================

class TestCanBeat:
    """can_beat 比较逻辑"""

    def test_bigger_single_beats(self):
        h1 = detect_hand([c(Rank.KING)])
        h2 = detect_hand([c(Rank.QUEEN)])
        assert can_beat(h1, h2) is True
        assert can_beat(h2, h1) is False

    def test_three_beats_ace_and_two(self):
        three = detect_hand([c(Rank.THREE)])
        assert can_beat(three, detect_hand([c(Rank.ACE)])) is True
        assert can_beat(three, detect_hand([c(Rank.TWO)])) is True

    @pytest.mark.parametrize("cards", [
        [c(Rank.NINE)],
        cards_of_rank(Rank.NINE, 2),
        cards_of_rank(Rank.NINE, 3),
        cards_of_rank(Rank.NINE, 4),
        [c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE), c(Rank.SIX), c(Rank.SEVEN)],
        cards_of_rank(Rank.THREE, 3) + cards_of_rank(Rank.FOUR, 3),
    ])
    def test_identical_play_cannot_beat(self, cards):
        hand = detect_hand(cards)
        assert can_beat(hand, detect_hand(cards)) is False

    def test_bomb_beats_single(self):
        bomb = detect_hand(cards_of_rank(Rank.THREE, 4))
        single = detect_hand([BIG_JOKER])
        assert can_beat(bomb, single) is True
        assert can_beat(single, bomb) is False

    def test_bomb_beats_long_straight(self):
        bomb = detect_hand(cards_of_rank(Rank.ACE, 4))
        straight = detect_hand([c(r) for r in range(Rank.TWO, Rank.KING + 1)])
        assert can_beat(bomb, straight) is True
        assert can_beat(straight, bomb) is False

    def test_bigger_bomb_beats_smaller(self):
        big = detect_hand(cards_of_rank(Rank.KING, 4))
        small = detect_hand(cards_of_rank(Rank.THREE, 4))
        assert can_beat(big, small) is True
        assert can_beat(small, big) is False

    def test_rocket_beats_bomb(self):
        rocket = detect_hand([SMALL_JOKER, BIG_JOKER])
        bomb = detect_hand(cards_of_rank(Rank.KING, 4))
        assert can_beat(rocket, bomb) is True
        assert can_beat(bomb, rocket) is False

    def test_rocket_beats_heaviest_bomb(self):
        """即使炸弹权重是15，火箭(999)照样压过"""
        rocket = detect_hand([SMALL_JOKER, BIG_JOKER])
        bomb = PlayedHand(HandType.BOMB, cards_of_rank(Rank.KING, 4), 15)
        assert can_beat(rocket, bomb) is True
        assert can_beat(bomb, rocket) is False

    def test_nothing_but_rocket_beats_rocket(self):
        rocket = detect_hand([SMALL_JOKER, BIG_JOKER])
        for cards in ([c(Rank.KING)], cards_of_rank(Rank.KING, 2), cards_of_rank(Rank.KING, 4)):
            assert can_beat(detect_hand(cards), rocket) is False

    def test_different_type_cannot_beat(self):
        single = detect_hand([c(Rank.KING)])
        pair = detect_hand(cards_of_rank(Rank.THREE, 2))
        assert can_beat(single, pair) is False
        assert can_beat(pair, single) is False

    def test_different_length_straight_cannot_beat(self):
        s5 = detect_hand([c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE),
                          c(Rank.SIX), c(Rank.SEVEN)])
        s6 = detect_hand([c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE),
                          c(Rank.SIX), c(Rank.SEVEN), c(Rank.EIGHT)])
        assert can_beat(s6, s5) is False
        assert can_beat(s5, s6) is False

    def test_same_length_straight_comparison(self):
        low = detect_hand([c(Rank.THREE), c(Rank.FOUR), c(Rank.FIVE),
                           c(Rank.SIX), c(Rank.SEVEN)])
        high = detect_hand([c(Rank.FOUR), c(Rank.FIVE), c(Rank.SIX),
                            c(Rank.SEVEN), c(Rank.EIGHT)])
        assert can_beat(high, low) is True
        assert can_beat(low, high) is False

    def test_consecutive_pairs_comparison(self):
        low = detect_hand(cards_of_rank(Rank.THREE, 2) + cards_of_rank(Rank.FOUR, 2)
                          + cards_of_rank(Rank.FIVE, 2))
        high = detect_hand(cards_of_rank(Rank.SIX, 2) + cards_of_rank(Rank.SEVEN, 2)
                           + cards_of_rank(Rank.EIGHT, 2))
        assert can_beat(high, low) is True
        assert can_beat(low, high) is False
