"""游戏控制器 - 斗地主一局游戏的状态机：发牌、叫地主、出牌、过牌、重置"""

import logging
import random
from typing import Any, Callable, Dict, List, Optional

from doudizhu.engine.card import Card, NUM_SEATS, create_deck, shuffle_and_deal
from doudizhu.engine.hand_detector import detect_hand, can_beat
from doudizhu.game.player import Player
from doudizhu.game.game_state import (
    GameState, GamePhase, GameEvent, ActionError, ActionResult,
)

logger = logging.getLogger(__name__)

# 连续两家不出，本轮结束
PASSES_TO_CLEAR = 2

EventCallback = Callable[[GameEvent], None]


class DouDiZhuGame:
    """
    一局斗地主的规则引擎。

    每个房间持有一个独立实例，所有操作都是同步、原子的：
    被拒绝的动作返回失败结果且不改变任何状态。
    座位号由调用方显式传入，引擎不关心连接身份。
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng
        self._callbacks: List[EventCallback] = []  # 事件回调（用于会话层通知）
        self._init_state()

    def _init_state(self) -> None:
        self.deck: List[Card] = create_deck()
        self.players = [Player(id=i) for i in range(NUM_SEATS)]
        self.state = GameState(players=self.players)

    def on_event(self, callback: EventCallback) -> None:
        """注册事件回调"""
        self._callbacks.append(callback)

    def _emit(self, event: GameEvent) -> None:
        """触发事件通知"""
        for cb in self._callbacks:
            cb(event)

    @staticmethod
    def _valid_seat(seat: int) -> bool:
        # bool 是 int 的子类，True/False 不算座位号
        return not isinstance(seat, bool) and isinstance(seat, int) and 0 <= seat < NUM_SEATS

    def _reject(self, action: str, seat: Optional[int], error: ActionError) -> ActionResult:
        logger.debug("拒绝 %s: seat=%s reason=%s phase=%s", action, seat, error.value, self.state.phase.value)
        return ActionResult.fail(error)

    # ============================================================
    #  发牌阶段
    # ============================================================

    def deal(self) -> ActionResult:
        """洗牌发牌，只能在等待或结束阶段进行"""
        s = self.state
        if s.phase not in (GamePhase.WAITING, GamePhase.FINISHED):
            return self._reject("deal", None, ActionError.PHASE_VIOLATION)
        self._deal_fresh()
        return ActionResult.ok()

    def _deal_fresh(self) -> None:
        """重建整副牌、洗牌、发牌，并清空上一局的出牌状态"""
        self.deck = create_deck()
        hands, reserve = shuffle_and_deal(self.deck, self._rng)

        for player, hand in zip(self.players, hands):
            player.hand = hand

        self.state = GameState(players=self.players)
        s = self.state
        s.landlord_cards = reserve
        s.phase = GamePhase.CALLING
        s.current_caller = 0

        logger.info("发牌完成: 手牌 %s, 底牌 %d 张", s.hand_counts, len(reserve))
        self._emit(GameEvent(GamePhase.CALLING, None, "deal"))

    # ============================================================
    #  叫地主阶段
    # ============================================================

    def call_landlord(self, seat: int, score: int) -> ActionResult:
        """
        叫分。只要求分数大于0，不要求高于别人已叫的分；
        三家都叫过一轮后取最高分者为地主（同分先叫者优先）。
        """
        s = self.state
        if s.phase != GamePhase.CALLING:
            return self._reject("call_landlord", seat, ActionError.PHASE_VIOLATION)
        if not self._valid_seat(seat) or seat != s.current_caller:
            return self._reject("call_landlord", seat, ActionError.TURN_VIOLATION)
        if score <= 0:
            return self._reject("call_landlord", seat, ActionError.INVALID_BID)

        s.bid_scores[seat] = score
        self._emit(GameEvent(GamePhase.CALLING, seat, "bid", score))

        s.current_caller = (seat + 1) % NUM_SEATS
        if s.current_caller == 0:
            self._determine_landlord()

        return ActionResult.ok()

    def _determine_landlord(self) -> None:
        """一轮叫分结束，确定地主并发底牌"""
        s = self.state
        max_score = 0
        landlord_id: Optional[int] = None
        for i in range(NUM_SEATS):
            if s.bid_scores[i] > max_score:
                max_score = s.bid_scores[i]
                landlord_id = i

        if landlord_id is None:
            logger.warning("一轮叫分无人叫地主，重新发牌")
            self._deal_fresh()
            return

        landlord = self.players[landlord_id]
        landlord.add_cards(s.landlord_cards)

        s.landlord = landlord_id
        s.current_player = landlord_id
        s.phase = GamePhase.PLAYING

        logger.info("座位 %d 以 %d 分成为地主，手牌 %d 张", landlord_id, max_score, landlord.hand_size)
        self._emit(GameEvent(GamePhase.PLAYING, landlord_id, "landlord", max_score))

    # ============================================================
    #  出牌阶段
    # ============================================================

    def play_cards(self, seat: int, cards: List[Card]) -> ActionResult:
        """出牌：校验阶段、回合、牌型、能否压过上家，成功后移除手牌"""
        s = self.state
        if s.phase != GamePhase.PLAYING:
            return self._reject("play_cards", seat, ActionError.PHASE_VIOLATION)
        if not self._valid_seat(seat) or seat != s.current_player:
            return self._reject("play_cards", seat, ActionError.TURN_VIOLATION)

        hand = detect_hand(cards)
        if hand is None:
            return self._reject("play_cards", seat, ActionError.INVALID_SHAPE)

        # 跟牌时验证能否压过
        if s.last_play is not None and not can_beat(hand, s.last_play):
            return self._reject("play_cards", seat, ActionError.ILLEGAL_BEAT)

        player = self.players[seat]
        if not player.has_cards(hand.cards):
            return self._reject("play_cards", seat, ActionError.CARDS_NOT_IN_HAND)

        # 合法出牌
        player.remove_cards(hand.cards)
        s.discarded.extend(hand.cards)
        s.last_play = hand
        s.last_player = seat
        s.pass_count = 0

        self._emit(GameEvent(GamePhase.PLAYING, seat, "play", hand))

        # 检查是否出完
        if player.hand_size == 0:
            self._finish_game(seat)
            return ActionResult.ok(game_over=True, winner=seat)

        s.current_player = (seat + 1) % NUM_SEATS
        return ActionResult.ok()

    def pass_turn(self, seat: int) -> ActionResult:
        """不出：首出的座位不能过；连续两家不出则清空上一手"""
        s = self.state
        if s.phase != GamePhase.PLAYING:
            return self._reject("pass", seat, ActionError.PHASE_VIOLATION)
        if not self._valid_seat(seat) or seat != s.current_player:
            return self._reject("pass", seat, ActionError.TURN_VIOLATION)
        if s.last_player is None:
            return self._reject("pass", seat, ActionError.OPENING_PASS_VIOLATION)

        s.pass_count += 1
        self._emit(GameEvent(GamePhase.PLAYING, seat, "pass"))

        if s.pass_count >= PASSES_TO_CLEAR:
            s.last_play = None
            s.last_player = None
            s.pass_count = 0
            self._emit(GameEvent(GamePhase.PLAYING, (seat + 1) % NUM_SEATS, "trick_cleared"))

        s.current_player = (seat + 1) % NUM_SEATS
        return ActionResult.ok()

    # ============================================================
    #  结算与查询
    # ============================================================

    def _finish_game(self, winner_id: int) -> None:
        """有人出完牌，游戏结束"""
        s = self.state
        s.phase = GamePhase.FINISHED
        s.winner = winner_id
        side = "地主" if winner_id == s.landlord else "农民"
        logger.info("游戏结束: 座位 %d (%s) 获胜", winner_id, side)
        self._emit(GameEvent(GamePhase.FINISHED, winner_id, "game_over", s.landlord))

    def get_game_state(self) -> Dict[str, Any]:
        """
        公开状态快照。只含各家手牌张数，不含具体手牌；
        发牌后底牌始终公开。
        """
        s = self.state
        return {
            "phase": s.phase,
            "current_player": s.current_player,
            "current_caller": s.current_caller,
            "landlord": s.landlord,
            "last_play": s.last_play,
            "last_player": s.last_player,
            "pass_count": s.pass_count,
            "bid_scores": list(s.bid_scores),
            "landlord_cards": list(s.landlord_cards),
            "hand_counts": s.hand_counts,
            "winner": s.winner,
        }

    def get_hand(self, seat: int) -> List[Card]:
        """某个座位的手牌副本，只应发给该座位本人"""
        if not self._valid_seat(seat):
            raise ValueError(f"座位号必须是 0-{NUM_SEATS - 1}: {seat!r}")
        return list(self.players[seat].hand)

    def reset(self) -> None:
        """丢弃全部状态，回到等待阶段"""
        self._init_state()
        logger.info("对局已重置")
