# 房间会话层
from .rooms import Room, RoomManager, RoomError, RoomNotFound, RoomFull, NotInRoom
