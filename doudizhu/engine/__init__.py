# 游戏引擎模块
from .card import (
    Card, Rank, Suit, create_deck, shuffle, shuffle_and_deal, sort_cards,
    DECK_SIZE, RESERVE_SIZE, NUM_SEATS,
)
from .hand_type import HandType, PlayedHand, ROCKET_WEIGHT
from .hand_detector import detect_hand, can_beat
