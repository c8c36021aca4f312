"""房间管理 - 房间号到对局实例的映射，以及连接到座位的绑定"""

import asyncio
import logging
import random
import string
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from doudizhu import config
from doudizhu.engine.card import NUM_SEATS
from doudizhu.game.controller import DouDiZhuGame
from doudizhu.game.game_state import GameEvent, GamePhase

logger = logging.getLogger(__name__)

_ROOM_ID_CHARS = string.ascii_uppercase + string.digits


class RoomError(Exception):
    """房间层面的错误（与对局规则无关）"""


class RoomNotFound(RoomError):
    def __init__(self, room_id: str):
        super().__init__(f"房间不存在: {room_id}")
        self.room_id = room_id


class RoomFull(RoomError):
    def __init__(self, room_id: str):
        super().__init__(f"房间已满: {room_id}")
        self.room_id = room_id


class NotInRoom(RoomError):
    def __init__(self, conn_id: str):
        super().__init__("尚未加入房间")
        self.conn_id = conn_id


@dataclass
class Room:
    """一个斗地主房间：一局对局 + 三个座位"""
    room_id: str
    game: DouDiZhuGame = field(default_factory=DouDiZhuGame)
    seats: List[Optional[str]] = field(default_factory=lambda: [None] * NUM_SEATS)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    pending_events: List[GameEvent] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.game.on_event(self.pending_events.append)

    @property
    def player_count(self) -> int:
        return sum(1 for s in self.seats if s is not None)

    @property
    def is_full(self) -> bool:
        return self.player_count == NUM_SEATS

    @property
    def connections(self) -> List[str]:
        return [s for s in self.seats if s is not None]

    def seat_of(self, conn_id: str) -> Optional[int]:
        for i, s in enumerate(self.seats):
            if s == conn_id:
                return i
        return None

    def take_seat(self, conn_id: str) -> int:
        """占第一个空座位"""
        for i, s in enumerate(self.seats):
            if s is None:
                self.seats[i] = conn_id
                return i
        raise RoomFull(self.room_id)

    def drain_events(self) -> List[GameEvent]:
        """取出并清空待推送的对局事件"""
        events = list(self.pending_events)
        self.pending_events.clear()
        return events


class RoomManager:
    """房间注册表。每个房间独立持有自己的对局实例"""

    def __init__(self, room_id_length: int = config.ROOM_ID_LENGTH):
        self.room_id_length = room_id_length
        self.rooms: Dict[str, Room] = {}
        self._conn_room: Dict[str, str] = {}
        self.online = 0

    def connect(self) -> None:
        self.online += 1

    def _new_room_id(self) -> str:
        while True:
            room_id = "".join(random.choices(_ROOM_ID_CHARS, k=self.room_id_length))
            if room_id not in self.rooms:
                return room_id

    def create_room(self, conn_id: str) -> Tuple[Room, int, Optional[Room]]:
        """
        创建房间，创建者坐 0 号位。
        返回 (新房间, 座位, 原来所在且仍存在的房间)。
        """
        left = self.leave(conn_id)
        room = Room(room_id=self._new_room_id())
        self.rooms[room.room_id] = room
        seat = room.take_seat(conn_id)
        self._conn_room[conn_id] = room.room_id
        logger.info("房间 %s 已创建，创建者: %s", room.room_id, conn_id)
        return room, seat, left

    def join_room(self, room_id: str, conn_id: str) -> Tuple[Room, int, Optional[Room]]:
        """加入房间；坐满三人且对局未开始时自动发牌。返回值同 create_room"""
        room = self.rooms.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        if room.seat_of(conn_id) is not None:
            return room, room.seat_of(conn_id), None
        if room.is_full:
            raise RoomFull(room_id)

        left = self.leave(conn_id)
        seat = room.take_seat(conn_id)
        self._conn_room[conn_id] = room_id
        logger.info("%s 加入房间 %s，座位 %d", conn_id, room_id, seat)

        if room.is_full and room.game.state.phase == GamePhase.WAITING:
            room.game.deal()
        return room, seat, left

    def room_of(self, conn_id: str) -> Tuple[Room, int]:
        """连接所在的房间和座位"""
        room_id = self._conn_room.get(conn_id)
        room = self.rooms.get(room_id) if room_id else None
        if room is None:
            raise NotInRoom(conn_id)
        return room, room.seat_of(conn_id)

    def leave(self, conn_id: str) -> Optional[Room]:
        """离开房间，空房间直接删除；返回离开的房间（若仍存在）"""
        room_id = self._conn_room.pop(conn_id, None)
        room = self.rooms.get(room_id) if room_id else None
        if room is None:
            return None

        seat = room.seat_of(conn_id)
        if seat is not None:
            room.seats[seat] = None
        if room.player_count == 0:
            del self.rooms[room.room_id]
            logger.info("房间 %s 已删除", room.room_id)
            return None
        return room

    def disconnect(self, conn_id: str) -> Optional[Room]:
        self.online = max(0, self.online - 1)
        return self.leave(conn_id)

    def stats(self) -> dict:
        return {"online_users": self.online, "active_rooms": len(self.rooms)}
