"""WebSocket 后端服务 - 房间会话层：把连接绑定到座位并转发对局动作与状态"""

import json
import logging
import uuid
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from doudizhu.engine.card import Card, Rank, Suit
from doudizhu.engine.hand_type import PlayedHand
from doudizhu.game.game_state import ActionResult, GameEvent
from doudizhu.web.rooms import Room, RoomError, RoomManager

logger = logging.getLogger(__name__)


# ============================================================
#  序列化工具
# ============================================================

def card_to_dict(c: Card) -> dict:
    """将 Card 序列化为前端可用的 dict"""
    return {
        "rank": int(c.rank),
        "suit": c.suit.value,
        "weight": c.weight,
        "display": c.display,
    }


def card_from_dict(d: Dict[str, Any]) -> Card:
    """由 dict 还原 Card，非法点数/花色抛 ValueError"""
    return Card(rank=Rank(int(d["rank"])), suit=Suit(d["suit"]))


def played_hand_to_dict(hand: Optional[PlayedHand]) -> Optional[dict]:
    if hand is None:
        return None
    return {
        "type": hand.type.value,
        "cards": [card_to_dict(c) for c in hand.cards],
        "weight": hand.weight,
    }


def state_to_dict(snapshot: Dict[str, Any]) -> dict:
    """将引擎的公开快照序列化"""
    data = dict(snapshot)
    data["phase"] = snapshot["phase"].value
    data["last_play"] = played_hand_to_dict(snapshot["last_play"])
    data["landlord_cards"] = [card_to_dict(c) for c in snapshot["landlord_cards"]]
    return data


def event_to_dict(event: GameEvent) -> dict:
    data = event.data
    if isinstance(data, PlayedHand):
        data = played_hand_to_dict(data)
    return {
        "phase": event.phase.value,
        "player_id": event.player_id,
        "action": event.action,
        "data": data,
    }


def result_to_dict(action: str, result: ActionResult) -> dict:
    return {
        "type": "action_result",
        "action": action,
        "success": result.success,
        "error": result.error.value if result.error else None,
        "game_over": result.game_over,
        "winner": result.winner,
    }


# ============================================================
#  客户端消息
# ============================================================

class CardPayload(BaseModel):
    rank: int
    suit: str


class ClientMessage(BaseModel):
    action: Literal[
        "create_room", "join_room", "call_landlord", "play_cards", "pass", "restart", "state",
    ]
    room_id: Optional[str] = None
    score: int = 0
    card_indices: List[int] = Field(default_factory=list)   # 自己手牌中的下标
    cards: Optional[List[CardPayload]] = None               # 或直接给出牌面


# ============================================================
#  会话中心
# ============================================================

class RoomHub:
    """持有房间注册表与连接池，负责把消息派发到对应房间的对局"""

    def __init__(self, rooms: Optional[RoomManager] = None):
        self.rooms = rooms or RoomManager()
        self.connections: Dict[str, WebSocket] = {}

    async def send(self, conn_id: str, msg: dict) -> None:
        """向单个连接发送消息，已断开的连接直接丢弃"""
        ws = self.connections.get(conn_id)
        if ws is None:
            return
        try:
            await ws.send_text(json.dumps(msg, ensure_ascii=False))
        except (WebSocketDisconnect, RuntimeError):
            self.connections.pop(conn_id, None)

    async def broadcast(self, room: Room, msg: dict) -> None:
        """向房间内所有座位广播"""
        for conn_id in room.connections:
            await self.send(conn_id, msg)

    async def sync_room(self, room: Room) -> None:
        """推送待发事件、公开状态，以及每个座位自己的手牌"""
        for event in room.drain_events():
            await self.broadcast(room, {"type": "event", **event_to_dict(event)})

        state = state_to_dict(room.game.get_game_state())
        for seat, conn_id in enumerate(room.seats):
            if conn_id is None:
                continue
            await self.send(conn_id, {"type": "game_state", "room_id": room.room_id, "state": state})
            await self.send(conn_id, {
                "type": "hand",
                "seat": seat,
                "cards": [card_to_dict(c) for c in room.game.get_hand(seat)],
            })

    async def error(self, conn_id: str, message: str) -> None:
        await self.send(conn_id, {"type": "error", "message": message})

    async def handle(self, conn_id: str, text: str) -> None:
        """处理一条客户端消息"""
        try:
            msg = ClientMessage(**json.loads(text))
        except (ValueError, TypeError) as e:
            await self.error(conn_id, f"消息格式错误: {e}")
            return

        try:
            if msg.action == "create_room":
                room, seat, left = self.rooms.create_room(conn_id)
                await self._left(left)
                await self._joined(conn_id, room, seat)
            elif msg.action == "join_room":
                room, seat, left = self.rooms.join_room((msg.room_id or "").upper(), conn_id)
                await self._left(left)
                await self._joined(conn_id, room, seat)
            else:
                room, seat = self.rooms.room_of(conn_id)
                async with room.lock:
                    await self._dispatch(conn_id, room, seat, msg)
        except RoomError as e:
            await self.error(conn_id, str(e))

    async def _left(self, room: Optional[Room]) -> None:
        """通知原房间剩下的玩家有人离开"""
        if room is None:
            return
        await self.broadcast(room, {"type": "player_disconnected", "players": room.player_count})

    async def _joined(self, conn_id: str, room: Room, seat: int) -> None:
        await self.send(conn_id, {
            "type": "room_joined",
            "room_id": room.room_id,
            "seat": seat,
            "players": room.player_count,
        })
        async with room.lock:
            await self.sync_room(room)

    async def _dispatch(self, conn_id: str, room: Room, seat: int, msg: ClientMessage) -> None:
        game = room.game
        if msg.action == "state":
            await self.send(conn_id, {
                "type": "game_state",
                "room_id": room.room_id,
                "state": state_to_dict(game.get_game_state()),
            })
            return

        if msg.action == "restart":
            game.reset()
            if room.is_full:
                game.deal()
            await self.broadcast(room, {"type": "game_restart"})
            await self.sync_room(room)
            return

        if msg.action == "call_landlord":
            result = game.call_landlord(seat, msg.score)
        elif msg.action == "play_cards":
            cards = self._resolve_cards(room, seat, msg)
            if cards is None:
                await self.error(conn_id, "牌索引或牌面无效")
                return
            result = game.play_cards(seat, cards)
        else:
            result = game.pass_turn(seat)

        await self.send(conn_id, result_to_dict(msg.action, result))
        if result:
            await self.sync_room(room)

    @staticmethod
    def _resolve_cards(room: Room, seat: int, msg: ClientMessage) -> Optional[List[Card]]:
        """把下标或牌面转换成 Card 列表"""
        if msg.cards is not None:
            try:
                return [card_from_dict({"rank": c.rank, "suit": c.suit}) for c in msg.cards]
            except ValueError:
                return None
        hand = room.game.get_hand(seat)
        if any(i < 0 or i >= len(hand) for i in msg.card_indices):
            return None
        return [hand[i] for i in msg.card_indices]

    async def disconnect(self, conn_id: str) -> None:
        self.connections.pop(conn_id, None)
        room = self.rooms.disconnect(conn_id)
        logger.info("连接断开: %s，在线 %d", conn_id, self.rooms.online)
        await self._left(room)


# ============================================================
#  FastAPI 应用
# ============================================================

def create_app(hub: Optional[RoomHub] = None) -> FastAPI:
    """创建应用，每个应用持有自己的房间注册表"""
    hub = hub or RoomHub()
    app = FastAPI(title="斗地主")
    app.state.hub = hub

    @app.get("/health")
    async def health():
        """在线人数与房间数"""
        return hub.rooms.stats()

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        """WebSocket 端点：每条消息是一个 JSON 动作"""
        await ws.accept()
        conn_id = uuid.uuid4().hex
        hub.connections[conn_id] = ws
        hub.rooms.connect()
        logger.info("新连接: %s，在线 %d", conn_id, hub.rooms.online)
        try:
            while True:
                text = await ws.receive_text()
                await hub.handle(conn_id, text)
        except (WebSocketDisconnect, RuntimeError):
            pass
        finally:
            await hub.disconnect(conn_id)

    return app


app = create_app()
